"""Jobs Controller — synchronized job cache with filter, selectors, payments, expenses.

Invariants:
    - filter only affects the filtered() selector, never the cache
    - record_payment and add_expense apply their change to the job as stored when
      the write happens, not to the copy read before the gateway or upload await,
      so concurrent payments and expenses on one job are all kept
    - Both fall back to creating a job known only to the cache
    - Declined payments are appended to the ledger only when keep_failed=True;
      they never count toward total_paid either way
"""

import logging
from dataclasses import dataclass

from jobbook.core import selectors
from jobbook.core.domain_types import JobFilter
from jobbook.core.financials import apply_payment
from jobbook.schemas.job import ExpenseDraft, Job
from jobbook.schemas.payment import PaymentRequest, PaymentResult
from jobbook.services.expense_service import ExpenseOutcome, ExpenseService
from jobbook.services.job_repository import JobRepository
from jobbook.services.payment_processor import PaymentProcessor
from jobbook.services.state_controller import (
    CacheOnlyActions, CollectionState, SyncedCollection,
)

logger = logging.getLogger(__name__)


@dataclass
class JobsState(CollectionState[Job]):
    filter: JobFilter = JobFilter.ALL


class JobsCacheOnlyActions(CacheOnlyActions[Job]):

    def set_filter(self, job_filter: JobFilter) -> None:
        self.state.filter = job_filter


class JobsController(SyncedCollection[Job]):

    def __init__(
        self,
        repository: JobRepository,
        payments: PaymentProcessor | None = None,
        expenses: ExpenseService | None = None,
    ):
        super().__init__(repository, JobsState())
        self.payments = payments
        self.expenses = expenses

    def _cache_actions(self) -> JobsCacheOnlyActions:
        return JobsCacheOnlyActions(self.state)

    # --- Selectors (pure, no IO) ----------------------------------------------

    def filtered(self) -> list[Job]:
        return selectors.filtered_jobs(self.entities, self.state.filter)

    def for_client(self, client_id: str) -> list[Job]:
        return selectors.jobs_by_client(self.entities, client_id)

    def stats(self) -> dict:
        jobs = self.entities
        return {
            "jobs_count": selectors.jobs_count(jobs),
            "active_jobs_count": selectors.active_jobs_count(jobs),
            "completed_jobs_count": selectors.completed_jobs_count(jobs),
            "total_quoted_value": selectors.total_quoted_value(jobs),
            "total_completed_value": selectors.total_completed_value(jobs),
        }

    # --- Composite intents ----------------------------------------------------

    async def _resolve(self, job_id: str) -> Job:
        return self.cached(job_id) or await self.persisted.fetch_by_id(job_id)

    async def record_payment(
        self, job_id: str, request: PaymentRequest, keep_failed: bool = True,
    ) -> PaymentResult:
        """Settle a payment, append it to the ledger and persist the job."""
        if self.payments is None:
            raise RuntimeError("JobsController has no PaymentProcessor")
        await self._resolve(job_id)  # unknown job: 404 before charging
        result = await self.payments.process_payment(
            request.model_copy(update={"job_id": job_id}),
        )
        if result.payment is None:
            return result
        if result.success or keep_failed:
            payment = result.payment
            await self.persisted.mutate(job_id, lambda job: apply_payment(job, payment))
            logger.info(
                f"Recorded {result.payment.status.value} payment",
                extra={"entity_id": job_id, "payment_method": request.method.value},
            )
        return result

    async def add_expense(self, job_id: str, draft: ExpenseDraft) -> ExpenseOutcome:
        if self.expenses is None:
            raise RuntimeError("JobsController has no ExpenseService")
        await self._resolve(job_id)
        outcome = await self.expenses.build_expense(draft)
        await self.persisted.mutate(
            job_id,
            lambda job: job.model_copy(
                update={"expenses": [*job.expenses, outcome.expense]},
            ),
        )
        return outcome
