"""Jobs Controller — verifies filtering, stats, payments and expenses end to end.

Invariants:
    - filter changes the filtered() view only
    - a full payment persists the ledger entry and completes the job
    - a declined payment is kept in the ledger only when keep_failed=True
    - payments and expenses recorded while another one is in flight are all kept
    - a failed receipt upload still saves the expense, with a warning
"""

import asyncio
import random

from jobbook.core.domain_types import (
    JobFilter, JobStatus, PaymentMethod, PaymentStatus,
)
from jobbook.core.financials import amount_owed, profit, total_due
from jobbook.schemas.job import ExpenseDraft
from jobbook.schemas.payment import PaymentRequest
from jobbook.services.expense_service import ExpenseService
from jobbook.services.jobs_controller import JobsController
from jobbook.services.payment_processor import PaymentProcessor
from tests.services.factories import gateway_settings, make_client, make_job


def _pay(amount: float, method=PaymentMethod.CASH) -> PaymentRequest:
    return PaymentRequest(job_id="job_1", amount=amount, method=method)


# --- selectors ---

def test_filter_only_changes_filtered_view(jobs_controller):
    jobs_controller.cache_only.set_all([
        make_job("job_1", status=JobStatus.QUOTED),
        make_job("job_2", status=JobStatus.COMPLETED),
        make_job("job_3", status=JobStatus.CANCELLED),
    ])
    jobs_controller.cache_only.set_filter(JobFilter.COMPLETED)

    assert [j.id for j in jobs_controller.filtered()] == ["job_2", "job_3"]
    assert len(jobs_controller.entities) == 3


def test_stats(jobs_controller):
    jobs_controller.cache_only.set_all([
        make_job("job_1", quote=100, status=JobStatus.QUOTED),
        make_job("job_2", quote=200, status=JobStatus.COMPLETED),
    ])
    assert jobs_controller.stats() == {
        "jobs_count": 2,
        "active_jobs_count": 1,
        "completed_jobs_count": 1,
        "total_quoted_value": 300,
        "total_completed_value": 200,
    }


# --- end-to-end scenario ---

async def test_client_job_expenses_and_cash_payoff(
    jobs_controller, clients_controller, job_repo,
):
    await clients_controller.persisted.create(make_client("C1"))
    await jobs_controller.persisted.create(make_job("job_1", client_id="C1"))

    await jobs_controller.add_expense("job_1", ExpenseDraft(description="Lumber", amount=50))
    assert profit(jobs_controller.cached("job_1")) == 450

    await jobs_controller.add_expense(
        "job_1", ExpenseDraft(description="Permit", amount=30, is_reimbursable=True),
    )
    job = jobs_controller.cached("job_1")
    assert profit(job) == 450
    assert total_due(job) == 530

    result = await jobs_controller.record_payment("job_1", _pay(530))

    assert result.success
    stored = await job_repo.get_by_id("job_1")
    assert amount_owed(stored) == 0
    assert stored.status == JobStatus.COMPLETED
    assert jobs_controller.cached("job_1").status == JobStatus.COMPLETED
    assert jobs_controller.for_client("C1")[0].id == "job_1"


async def test_payment_for_unpersisted_job_upserts(jobs_controller, job_repo):
    jobs_controller.cache_only.add(make_job("job_1"))

    await jobs_controller.record_payment("job_1", _pay(100))

    stored = await job_repo.get_by_id("job_1")
    assert [p.amount for p in stored.payments] == [100]


async def test_declined_payment_kept_in_ledger(job_repo, declining_processor, receipts):
    controller = JobsController(
        job_repo, payments=declining_processor, expenses=ExpenseService(receipts),
    )
    await controller.persisted.create(make_job("job_1"))

    result = await controller.record_payment("job_1", _pay(500, PaymentMethod.CARD))

    assert not result.success
    stored = await job_repo.get_by_id("job_1")
    assert [p.status for p in stored.payments] == [PaymentStatus.FAILED]
    assert stored.status == JobStatus.QUOTED
    assert amount_owed(stored) == 500


async def test_declined_payment_dropped_when_not_kept(
    job_repo, declining_processor, receipts,
):
    controller = JobsController(
        job_repo, payments=declining_processor, expenses=ExpenseService(receipts),
    )
    await controller.persisted.create(make_job("job_1"))

    await controller.record_payment(
        "job_1", _pay(500, PaymentMethod.CARD), keep_failed=False,
    )

    assert (await job_repo.get_by_id("job_1")).payments is None


async def test_missing_receipt_still_saves_expense(jobs_controller, job_repo, tmp_path):
    await jobs_controller.persisted.create(make_job("job_1"))

    outcome = await jobs_controller.add_expense("job_1", ExpenseDraft(
        description="Gas", amount=20,
        receipt_image_local_uri=str(tmp_path / "missing.jpg"),
    ))

    assert outcome.warning.startswith("Failed to upload receipt image")
    [expense] = (await job_repo.get_by_id("job_1")).expenses
    assert expense.receipt_image_url is None
    assert expense.receipt_image_local_uri.endswith("missing.jpg")


async def test_uploaded_receipt_url_is_stored(jobs_controller, job_repo, tmp_path):
    image = tmp_path / "r.jpg"
    image.write_bytes(b"img")
    await jobs_controller.persisted.create(make_job("job_1"))

    outcome = await jobs_controller.add_expense("job_1", ExpenseDraft(
        description="Gas", amount=20, receipt_image_local_uri=f"file://{image}",
    ))

    assert outcome.warning is None
    [expense] = (await job_repo.get_by_id("job_1")).expenses
    assert expense.id == outcome.expense.id
    assert expense.receipt_image_url.startswith("https://bucket.example/receipts/")


# --- overlapping writes ---

def _held_controller(job_repo, receipts, release: asyncio.Event) -> JobsController:
    """Card gateway calls block until `release` is set; cash settles at once."""

    async def wait_for_release(_seconds):
        await release.wait()

    processor = PaymentProcessor.from_settings(
        gateway_settings(1.0), rng=random.Random(7), sleep=wait_for_release,
    )
    return JobsController(
        job_repo, payments=processor, expenses=ExpenseService(receipts),
    )


async def test_payment_during_card_settlement_is_kept(job_repo, receipts):
    release = asyncio.Event()
    controller = _held_controller(job_repo, receipts, release)
    await controller.persisted.create(make_job("job_1", quote=500))

    card = asyncio.create_task(
        controller.record_payment("job_1", _pay(100, PaymentMethod.CARD)),
    )
    await asyncio.sleep(0)
    cash = await controller.record_payment("job_1", _pay(200))
    release.set()
    card_result = await card

    assert cash.success and card_result.success
    stored = await job_repo.get_by_id("job_1")
    assert [(p.method, p.amount) for p in stored.payments] == [
        (PaymentMethod.CASH, 200), (PaymentMethod.CARD, 100),
    ]
    assert controller.cached("job_1") == stored


async def test_expense_during_card_settlement_is_kept(job_repo, receipts):
    release = asyncio.Event()
    controller = _held_controller(job_repo, receipts, release)
    await controller.persisted.create(make_job("job_1", quote=500))

    card = asyncio.create_task(
        controller.record_payment("job_1", _pay(100, PaymentMethod.CARD)),
    )
    await asyncio.sleep(0)
    await controller.add_expense("job_1", ExpenseDraft(description="Lumber", amount=40))
    release.set()
    await card

    stored = await job_repo.get_by_id("job_1")
    assert [e.description for e in stored.expenses] == ["Lumber"]
    assert [p.amount for p in stored.payments] == [100]
