"""Analytics Schemas — read-side results of financial derivation and budget analytics."""

from jobbook.core.domain_types import Trend
from jobbook.schemas.base import CamelModel


class JobFinancials(CamelModel):
    total_expenses: float
    reimbursable_total: float
    profit: float
    total_due: float
    total_paid: float
    amount_owed: float


class BudgetSummary(CamelModel):
    total_earnings: float
    total_expenses: float
    net_profit: float
    profit_margin: float
    reimbursable_expenses: float
    tax_deductible_expenses: float


class ExpenseCategory(CamelModel):
    name: str
    amount: float
    percentage: float
    count: int
    average: float
    trend: Trend


class MonthlyTrend(CamelModel):
    month: str  # display label, e.g. "Jan 2024"
    month_key: str  # "YYYY-MM", sorts chronologically
    earnings: float
    expenses: float
    profit: float
    job_count: int


class ExpenseEfficiency(CamelModel):
    expense_per_job: float
    expense_per_dollar_earned: float
    most_efficient_job_type: str
    least_efficient_job_type: str
