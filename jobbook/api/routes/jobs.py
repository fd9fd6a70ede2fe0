"""Jobs Routes — job CRUD, financial figures, payments and expenses.

Invariants:
    - Every mutation goes through JobsController.persisted (write-through)
    - PUT is an upsert (persisted.modify) and replaces the whole record
    - Payment outcomes are always 200 with a PaymentResult body; declines are data, not errors
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status

from jobbook.api.dependencies import AppContainer, get_container
from jobbook.core.domain_types import JobFilter
from jobbook.core.errors import DomainValidationError
from jobbook.core.financials import financial_summary
from jobbook.schemas.analytics import JobFinancials
from jobbook.schemas.job import ExpenseDraft, Job
from jobbook.schemas.payment import PaymentIntent, PaymentResult

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/jobs", tags=["jobs"])


@router.get("")
async def list_jobs(
    job_filter: JobFilter = Query(JobFilter.ALL, alias="filter"),
    app: AppContainer = Depends(get_container),
):
    """List jobs (refreshed from storage) with the requested filter applied."""
    await app.jobs.persisted.fetch()
    app.jobs.cache_only.set_filter(job_filter)
    return {"jobs": app.jobs.filtered(), "stats": app.jobs.stats()}


@router.post("", status_code=status.HTTP_201_CREATED, response_model=Job)
async def create_job(body: Job, app: AppContainer = Depends(get_container)):
    return await app.jobs.persisted.create(body)


@router.get("/{job_id}", response_model=Job)
async def get_job(job_id: str, app: AppContainer = Depends(get_container)):
    return await app.jobs.persisted.fetch_by_id(job_id)


@router.put("/{job_id}", response_model=Job)
async def put_job(
    job_id: str, body: Job, app: AppContainer = Depends(get_container),
):
    if body.id != job_id:
        raise DomainValidationError(
            f"Body id '{body.id}' does not match path id '{job_id}'", "id",
        )
    return await app.jobs.persisted.modify(body)


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_job(job_id: str, app: AppContainer = Depends(get_container)):
    await app.jobs.persisted.remove(job_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{job_id}/financials", response_model=JobFinancials)
async def get_job_financials(
    job_id: str, app: AppContainer = Depends(get_container),
):
    job = await app.jobs.persisted.fetch_by_id(job_id)
    return financial_summary(job)


@router.post("/{job_id}/payments", response_model=PaymentResult)
async def record_payment(
    job_id: str, body: PaymentIntent, app: AppContainer = Depends(get_container),
):
    return await app.jobs.record_payment(
        job_id, body.to_request(job_id), keep_failed=body.keep_failed,
    )


@router.post("/{job_id}/expenses", status_code=status.HTTP_201_CREATED)
async def add_expense(
    job_id: str, body: ExpenseDraft, app: AppContainer = Depends(get_container),
):
    outcome = await app.jobs.add_expense(job_id, body)
    return {"expense": outcome.expense, "warning": outcome.warning}
