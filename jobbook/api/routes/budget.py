"""Budget Routes — read-only analytics over the stored jobs collection.

Every endpoint takes ?period=all|week|month|year (default all) and only
aggregates jobs dated inside that window.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query

from jobbook.api.dependencies import AppContainer, get_container
from jobbook.core import budget_analytics
from jobbook.core.domain_types import BudgetPeriod
from jobbook.schemas.analytics import (
    BudgetSummary, ExpenseCategory, ExpenseEfficiency, MonthlyTrend,
)
from jobbook.schemas.job import Job

router = APIRouter(prefix="/api/v1/budget", tags=["budget"])


async def jobs_in_period(
    period: BudgetPeriod = Query(BudgetPeriod.ALL),
    app: AppContainer = Depends(get_container),
) -> list[Job]:
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return budget_analytics.filter_jobs_by_period(
        await app.jobs.repository.list_all(), period, now,
    )


@router.get("/summary", response_model=BudgetSummary)
async def get_summary(jobs: list[Job] = Depends(jobs_in_period)):
    return budget_analytics.calculate_summary(jobs)


@router.get("/categories", response_model=list[ExpenseCategory])
async def get_categories(jobs: list[Job] = Depends(jobs_in_period)):
    return budget_analytics.categorize_expenses(jobs)


@router.get("/monthly", response_model=list[MonthlyTrend])
async def get_monthly_trends(jobs: list[Job] = Depends(jobs_in_period)):
    return budget_analytics.calculate_monthly_trends(jobs)


@router.get("/efficiency", response_model=ExpenseEfficiency)
async def get_efficiency(jobs: list[Job] = Depends(jobs_in_period)):
    return budget_analytics.calculate_expense_efficiency(jobs)
