"""Financial Derivation — pure money figures computed from a Job aggregate.

Invariants:
    - amount_owed(job) >= 0 always; overpayment is not modeled as credit
    - profit(job) == quote - total_expenses + reimbursable_total
    - Failed/cancelled payments never count toward total_paid
    - apply_payment forces status=Completed once amount_owed reaches 0,
      even for a Cancelled job (current product behaviour, pinned by tests)

Design Decisions:
    - Reimbursable expenses are excluded from profit: the client repays them
    - apply_payment returns a new Job (model_copy) — callers persist it explicitly
"""

from jobbook.core.domain_types import JobStatus, UNCOUNTED_PAYMENT_STATUSES
from jobbook.schemas.analytics import JobFinancials
from jobbook.schemas.job import Job
from jobbook.schemas.payment import Payment


def total_expenses(job: Job) -> float:
    return sum(e.amount for e in job.expenses)


def reimbursable_total(job: Job) -> float:
    return sum(e.amount for e in job.expenses if e.is_reimbursable)


def profit(job: Job) -> float:
    """Quote minus the costs the business actually bears."""
    return job.quote - sum(
        e.amount for e in job.expenses if not e.is_reimbursable
    )


def total_due(job: Job) -> float:
    return job.quote + reimbursable_total(job)


def total_paid(job: Job) -> float:
    return sum(
        p.amount for p in (job.payments or [])
        if p.status not in UNCOUNTED_PAYMENT_STATUSES
    )


def amount_owed(job: Job) -> float:
    return max(total_due(job) - total_paid(job), 0)


def apply_payment(job: Job, payment: Payment) -> Job:
    """Append payment to the ledger and auto-complete the job when paid off."""
    updated = job.model_copy(
        update={"payments": [*(job.payments or []), payment]},
    )
    if amount_owed(updated) <= 0:
        updated = updated.model_copy(update={"status": JobStatus.COMPLETED})
    return updated


def financial_summary(job: Job) -> JobFinancials:
    return JobFinancials(
        total_expenses=total_expenses(job),
        reimbursable_total=reimbursable_total(job),
        profit=profit(job),
        total_due=total_due(job),
        total_paid=total_paid(job),
        amount_owed=amount_owed(job),
    )
