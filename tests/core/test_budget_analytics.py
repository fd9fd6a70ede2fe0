"""Budget Analytics — verifies aggregation, categorization and trend rules.

Invariants:
    - First matching category rule wins; unmatched goes to Other
    - Trend compares later-half vs earlier-half averages with a 10% threshold
    - Monthly trends sort by display label (lexical), month_key is chronological
"""

from datetime import date, datetime

import pytest

from jobbook.core import budget_analytics
from jobbook.core.budget_analytics import (
    calculate_expense_efficiency, calculate_monthly_trends, calculate_summary,
    calculate_trend, categorize, categorize_expenses, filter_jobs_by_period,
    period_cutoff,
)
from jobbook.core.domain_types import BudgetPeriod, Trend
from jobbook.core.seed_data import build_full_workflow
from jobbook.schemas.job import Expense, Job


def _expense(description: str, amount: float, when: str, **kw) -> Expense:
    return Expense(description=description, amount=amount, date=when, **kw)


def _job(job_id: str, quote: float, start: str, expenses=(), name="Job") -> Job:
    return Job(
        id=job_id, job_name=name, client_id="c1", quote=quote,
        quote_date=start, start_date=start, end_date=start,
        expenses=list(expenses),
    )


# --- categorize ---

def test_keywords_match_case_insensitively():
    assert categorize("GAS station fill-up") == "Fuel"
    assert categorize("Team Lunch") == "Meals"
    assert categorize("New tire") == "Vehicle Maintenance"


def test_earlier_rule_shadows_later_rule():
    # "fee" (Parking & Tolls) is checked before "oil" (Vehicle Maintenance)
    assert categorize("oil change fee") == "Parking & Tolls"
    # "gas" (Fuel) wins over "data" (Phone/Data)
    assert categorize("gas for data trip") == "Fuel"


def test_unmatched_description_is_other():
    assert categorize("Lumber") == budget_analytics.OTHER_CATEGORY


# --- calculate_trend ---

def test_rising_later_half_is_up():
    expenses = [
        _expense("gas", 100, "2024-01-01"),
        _expense("gas", 100, "2024-01-02"),
        _expense("gas", 130, "2024-01-03"),
    ]
    assert calculate_trend(expenses) == Trend.UP


def test_small_change_is_stable():
    expenses = [
        _expense("gas", 100, "2024-01-01"),
        _expense("gas", 100, "2024-01-02"),
        _expense("gas", 95, "2024-01-03"),
    ]
    assert calculate_trend(expenses) == Trend.STABLE


def test_falling_later_half_is_down():
    expenses = [
        _expense("gas", 200, "2024-01-01"),
        _expense("gas", 100, "2024-01-02"),
    ]
    assert calculate_trend(expenses) == Trend.DOWN


def test_trend_orders_by_date_not_input_order():
    expenses = [
        _expense("gas", 130, "2024-03-01"),
        _expense("gas", 100, "2024-01-01"),
        _expense("gas", 100, "2024-02-01"),
    ]
    assert calculate_trend(expenses) == Trend.UP


def test_single_expense_is_stable():
    assert calculate_trend([_expense("gas", 10, "2024-01-01")]) == Trend.STABLE


def test_mixed_timestamp_formats_are_comparable():
    expenses = [
        _expense("gas", 100, "2024-01-01"),
        _expense("gas", 200, "2024-01-02T08:00:00+00:00"),
    ]
    assert calculate_trend(expenses) == Trend.UP


# --- calculate_summary ---

def test_summary_with_no_jobs_has_zero_margin():
    summary = calculate_summary([])
    assert summary.total_earnings == 0
    assert summary.profit_margin == 0


def test_summary_adds_back_reimbursable_expenses():
    job = _job("j1", 1000, "2024-01-05", [
        _expense("gas", 100, "2024-01-05"),
        _expense("permit", 50, "2024-01-05", is_reimbursable=True),
    ])
    summary = calculate_summary([job])
    assert summary.total_expenses == 150
    assert summary.reimbursable_expenses == 50
    assert summary.net_profit == 900
    assert summary.profit_margin == pytest.approx(90)
    assert summary.tax_deductible_expenses == 150 * 0.85


# --- categorize_expenses ---

def test_categories_sorted_by_amount_with_percentages():
    job = _job("j1", 1000, "2024-01-05", [
        _expense("gas", 30, "2024-01-05"),
        _expense("lunch", 60, "2024-01-05"),
        _expense("dinner", 10, "2024-01-06"),
    ])
    categories = categorize_expenses([job])

    assert [c.name for c in categories] == ["Meals", "Fuel"]
    meals = categories[0]
    assert meals.amount == 70
    assert meals.count == 2
    assert meals.average == 35
    assert meals.percentage == pytest.approx(70)


# --- calculate_monthly_trends ---

def test_monthly_trends_are_sorted_lexically_by_label():
    jobs = [
        _job("j1", 100, "2023-12-10"),
        _job("j2", 200, "2024-08-02"),
        _job("j3", 300, "2024-01-15"),
    ]
    trends = calculate_monthly_trends(jobs)
    assert [t.month for t in trends] == ["Aug 2024", "Dec 2023", "Jan 2024"]
    assert sorted(t.month_key for t in trends) == ["2023-12", "2024-01", "2024-08"]


def test_monthly_bucket_sums_jobs_in_same_month():
    jobs = [
        _job("j1", 100, "2024-02-01", [_expense("gas", 10, "2024-02-01")]),
        _job("j2", 200, "2024-02-20", [_expense("gas", 20, "2024-02-20")]),
    ]
    [feb] = calculate_monthly_trends(jobs)
    assert feb.month == "Feb 2024"
    assert feb.earnings == 300
    assert feb.expenses == 30
    assert feb.profit == 270
    assert feb.job_count == 2


def test_full_workflow_seed_spans_two_months():
    data = build_full_workflow(date(2024, 6, 1))
    trends = calculate_monthly_trends(data.jobs)
    assert {t.month_key for t in trends} == {"2024-04", "2024-05"}
    assert sum(t.job_count for t in trends) == 50


# --- calculate_expense_efficiency ---

def test_efficiency_with_no_jobs():
    result = calculate_expense_efficiency([])
    assert result.expense_per_job == 0
    assert result.most_efficient_job_type == "N/A"


def test_efficiency_ranks_repeated_job_names_only():
    jobs = [
        _job("a1", 100, "2024-01-01", [_expense("gas", 10, "2024-01-01")], "Mowing"),
        _job("a2", 100, "2024-01-02", [_expense("gas", 10, "2024-01-02")], "Mowing"),
        _job("b1", 100, "2024-01-01", [_expense("gas", 50, "2024-01-01")], "Roofing"),
        _job("b2", 100, "2024-01-02", [_expense("gas", 50, "2024-01-02")], "Roofing"),
        _job("c1", 100, "2024-01-03", [_expense("gas", 99, "2024-01-03")], "One-off"),
    ]
    result = calculate_expense_efficiency(jobs)
    assert result.most_efficient_job_type == "Mowing"
    assert result.least_efficient_job_type == "Roofing"
    assert result.expense_per_job == 219 / 5


# --- period filter ---

NOW = datetime(2024, 3, 31, 12, 0)


def test_all_period_keeps_every_job():
    jobs = [_job("j1", 100, "2001-01-01"), _job("j2", 100, "2024-03-30")]
    assert filter_jobs_by_period(jobs, BudgetPeriod.ALL, NOW) == jobs


def test_week_period_keeps_last_seven_days():
    jobs = [
        _job("old", 100, "2024-03-24"),
        _job("edge", 100, "2024-03-24T12:00:00"),
        _job("new", 100, "2024-03-30"),
    ]
    kept = filter_jobs_by_period(jobs, BudgetPeriod.WEEK, NOW)
    assert [j.id for j in kept] == ["edge", "new"]


def test_month_cutoff_clamps_to_shorter_month():
    assert period_cutoff(BudgetPeriod.MONTH, NOW) == datetime(2024, 2, 29, 12, 0)
    assert period_cutoff(BudgetPeriod.YEAR, datetime(2024, 2, 29)) == datetime(2023, 2, 28)


def test_month_cutoff_crosses_year_boundary():
    assert period_cutoff(BudgetPeriod.MONTH, datetime(2024, 1, 15)) == datetime(2023, 12, 15)


def test_period_uses_quote_date_when_start_missing():
    job = _job("j1", 100, "2024-03-30").model_copy(
        update={"start_date": "", "quote_date": "2020-01-01"},
    )
    assert filter_jobs_by_period([job], BudgetPeriod.YEAR, NOW) == []


def test_summary_over_period_ignores_older_jobs():
    jobs = [_job("j1", 100, "2023-01-01"), _job("j2", 250, "2024-03-20")]
    summary = calculate_summary(filter_jobs_by_period(jobs, BudgetPeriod.MONTH, NOW))
    assert summary.total_earnings == 250
