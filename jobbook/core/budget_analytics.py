"""Budget Analytics — pure aggregation of earnings and expenses across jobs.

Invariants:
    - Every expense lands in exactly one category; first matching rule wins
    - Keyword matching is case-insensitive substring matching on the description
    - Trend needs >= 2 expenses; otherwise stable
    - profit_margin is 0 when total earnings are 0 (no division by zero)
    - Monthly trends are sorted by their display label, NOT chronologically:
      "Dec 2023" sorts after "Aug 2024". Known issue, kept as-is;
      callers needing time order sort on month_key

Design Decisions:
    - CATEGORY_RULES is an ordered table so rule precedence is data, not control flow
    - Tax-deductible share is a fixed 85% heuristic
    - Earnings are job quotes; monthly buckets and the period filter use
      start_date (quote_date fallback)
    - Period cutoffs step back whole calendar months, clamping to the last day
      (Mar 31 minus one month is Feb 29 in a leap year)
"""

import calendar
from collections import defaultdict
from datetime import datetime, timedelta, timezone

from jobbook.core.domain_types import BudgetPeriod, Trend
from jobbook.schemas.analytics import (
    BudgetSummary, ExpenseCategory, ExpenseEfficiency, MonthlyTrend,
)
from jobbook.schemas.job import Expense, Job

TAX_DEDUCTIBLE_RATIO = 0.85
TREND_THRESHOLD_PERCENT = 10.0
OTHER_CATEGORY = "Other"

# Ordered: earlier rules shadow later ones ("oil fee" is Parking & Tolls)
CATEGORY_RULES: list[tuple[str, tuple[str, ...]]] = [
    ("Fuel", ("gas", "fuel", "gasoline")),
    ("Meals", ("food", "meal", "lunch", "dinner")),
    ("Phone/Data", ("phone", "data", "cellular", "mobile")),
    ("Parking & Tolls", ("parking", "toll", "fee")),
    ("Vehicle Maintenance", ("maintenance", "repair", "oil", "tire")),
    ("Insurance & Licensing", ("insurance", "registration", "license")),
    ("Supplies & Equipment", ("supply", "equipment", "bag", "charger")),
]


def categorize(description: str) -> str:
    """Category name for one expense description."""
    lowered = description.lower()
    for name, keywords in CATEGORY_RULES:
        if any(k in lowered for k in keywords):
            return name
    return OTHER_CATEGORY


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO date or timestamp into a naive UTC datetime for ordering."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _months_back(when: datetime, months: int) -> datetime:
    year, month = divmod(when.year * 12 + when.month - 1 - months, 12)
    day = min(when.day, calendar.monthrange(year, month + 1)[1])
    return when.replace(year=year, month=month + 1, day=day)


def period_cutoff(period: BudgetPeriod, now: datetime) -> datetime | None:
    """Earliest job date inside the window; None means no lower bound."""
    if period == BudgetPeriod.WEEK:
        return now - timedelta(days=7)
    if period == BudgetPeriod.MONTH:
        return _months_back(now, 1)
    if period == BudgetPeriod.YEAR:
        return _months_back(now, 12)
    return None


def job_date(job: Job) -> datetime:
    return parse_timestamp(job.start_date or job.quote_date)


def filter_jobs_by_period(
    jobs: list[Job], period: BudgetPeriod, now: datetime,
) -> list[Job]:
    """Jobs dated on or after the period cutoff. `now` is naive UTC."""
    cutoff = period_cutoff(period, now)
    if cutoff is None:
        return list(jobs)
    return [j for j in jobs if job_date(j) >= cutoff]


def calculate_summary(jobs: list[Job]) -> BudgetSummary:
    total_earnings = sum(j.quote for j in jobs)
    expenses = [e for j in jobs for e in j.expenses]
    total_expenses = sum(e.amount for e in expenses)
    reimbursable = sum(e.amount for e in expenses if e.is_reimbursable)

    net_profit = total_earnings - total_expenses + reimbursable
    margin = (net_profit / total_earnings) * 100 if total_earnings > 0 else 0

    return BudgetSummary(
        total_earnings=total_earnings,
        total_expenses=total_expenses,
        net_profit=net_profit,
        profit_margin=margin,
        reimbursable_expenses=reimbursable,
        tax_deductible_expenses=total_expenses * TAX_DEDUCTIBLE_RATIO,
    )


def calculate_trend(expenses: list[Expense]) -> Trend:
    """Compare average amount of the later half against the earlier half."""
    if len(expenses) < 2:
        return Trend.STABLE

    ordered = sorted(expenses, key=lambda e: parse_timestamp(e.date))
    mid = len(ordered) // 2
    first, second = ordered[:mid], ordered[mid:]
    first_avg = sum(e.amount for e in first) / len(first)
    second_avg = sum(e.amount for e in second) / len(second)
    if first_avg == 0:
        return Trend.STABLE

    change = (second_avg - first_avg) / first_avg * 100
    if change > TREND_THRESHOLD_PERCENT:
        return Trend.UP
    if change < -TREND_THRESHOLD_PERCENT:
        return Trend.DOWN
    return Trend.STABLE


def categorize_expenses(jobs: list[Job]) -> list[ExpenseCategory]:
    grouped: dict[str, list[Expense]] = defaultdict(list)
    for job in jobs:
        for expense in job.expenses:
            grouped[categorize(expense.description)].append(expense)

    grand_total = sum(e.amount for group in grouped.values() for e in group)
    categories = []
    for name, group in grouped.items():
        amount = sum(e.amount for e in group)
        categories.append(ExpenseCategory(
            name=name,
            amount=amount,
            percentage=(amount / grand_total) * 100 if grand_total > 0 else 0,
            count=len(group),
            average=amount / len(group),
            trend=calculate_trend(group),
        ))
    return sorted(categories, key=lambda c: c.amount, reverse=True)


def calculate_monthly_trends(jobs: list[Job]) -> list[MonthlyTrend]:
    buckets: dict[str, dict] = {}
    for job in jobs:
        when = job_date(job)
        key = when.strftime("%Y-%m")
        bucket = buckets.setdefault(key, {
            "label": when.strftime("%b %Y"),
            "earnings": 0.0, "expenses": 0.0, "count": 0,
        })
        bucket["earnings"] += job.quote
        bucket["expenses"] += sum(e.amount for e in job.expenses)
        bucket["count"] += 1

    trends = [
        MonthlyTrend(
            month=b["label"],
            month_key=key,
            earnings=b["earnings"],
            expenses=b["expenses"],
            profit=b["earnings"] - b["expenses"],
            job_count=b["count"],
        )
        for key, b in buckets.items()
    ]
    return sorted(trends, key=lambda t: t.month)


def calculate_expense_efficiency(jobs: list[Job]) -> ExpenseEfficiency:
    """Expense ratios overall and per job name (names with >1 job only)."""
    if not jobs:
        return ExpenseEfficiency(
            expense_per_job=0,
            expense_per_dollar_earned=0,
            most_efficient_job_type="N/A",
            least_efficient_job_type="N/A",
        )

    total_expenses = sum(e.amount for j in jobs for e in j.expenses)
    total_earnings = sum(j.quote for j in jobs)

    by_name: dict[str, dict] = defaultdict(
        lambda: {"expenses": 0.0, "earnings": 0.0, "count": 0},
    )
    for job in jobs:
        entry = by_name[job.job_name]
        entry["expenses"] += sum(e.amount for e in job.expenses)
        entry["earnings"] += job.quote
        entry["count"] += 1

    most, least = "N/A", "N/A"
    best, worst = float("inf"), -1.0
    for name, entry in by_name.items():
        if entry["count"] <= 1:
            continue
        ratio = (
            entry["expenses"] / entry["earnings"]
            if entry["earnings"] > 0 else float("inf")
        )
        if ratio < best:
            best, most = ratio, name
        if ratio != float("inf") and ratio > worst:
            worst, least = ratio, name

    return ExpenseEfficiency(
        expense_per_job=total_expenses / len(jobs),
        expense_per_dollar_earned=(
            total_expenses / total_earnings if total_earnings > 0 else 0
        ),
        most_efficient_job_type=most,
        least_efficient_job_type=least,
    )
