"""Seed Data — deterministic demo/test collections for the three seed profiles.

Invariants:
    - Same anchor date => identical output (ids, dates, amounts, timestamps)
    - full_workflow: 50 jobs for one client, statuses cycle through all 5 JobStatus values
    - Every job satisfies quote_date <= start_date <= end_date

Design Decisions:
    - Pure builders here, persistence in services/seed_service.py (functional core)
    - Timestamps derive from the anchor date, never from the wall clock
"""

from dataclasses import dataclass
from datetime import date, timedelta

from jobbook.core.domain_types import JobStatus, SeedProfile
from jobbook.schemas.client import Client
from jobbook.schemas.job import ChecklistItem, Expense, Job

_STATUS_CYCLE = [
    JobStatus.QUOTED, JobStatus.ACCEPTED, JobStatus.IN_PROGRESS,
    JobStatus.COMPLETED, JobStatus.CANCELLED,
]


@dataclass(frozen=True)
class SeedResult:
    clients: list[Client]
    jobs: list[Job]


def _stamp(anchor: date) -> str:
    return f"{anchor.isoformat()}T00:00:00+00:00"


def make_client(i: int, anchor: date) -> Client:
    return Client(
        id=f"client_{i}",
        full_name=f"Client {i}",
        address=f"{i} Main St, City, ST",
        phone_number=f"555-000-{str(1000 + i)[-4:]}",
        email_address=f"client{i}@example.com",
        created_date=_stamp(anchor),
    )


def make_checklist(count: int, anchor: date) -> list[ChecklistItem]:
    return [
        ChecklistItem(
            id=f"tool_{idx}",
            text=f"Tool/Supply {idx + 1}",
            completed=idx % 2 == 0,
            created_date=_stamp(anchor),
        )
        for idx in range(count)
    ]


def make_expense(
    expense_id: str, amount: float, anchor: date, reimbursable: bool = False,
) -> Expense:
    return Expense(
        id=expense_id,
        description=f"Expense {expense_id}",
        amount=amount,
        is_reimbursable=reimbursable,
        date=_stamp(anchor),
    )


def make_job(i: int, client: Client, status: JobStatus, anchor: date) -> Job:
    return Job(
        id=f"job_{i}",
        job_name=f"Job {i}",
        description=f"Job {i} description for {client.full_name}",
        client_id=client.id,
        client_name=client.full_name,
        quote=500 + i * 100,
        quote_date="2024-01-01",
        start_date="2024-01-05",
        end_date="2024-01-10",
        status=status,
        expenses=[make_expense(f"e_{i}_1", 50 + i * 10, anchor)],
        tools_and_supplies=make_checklist(3, anchor),
        notes=f"Notes for job {i}",
    )


def build_minimal(anchor: date) -> SeedResult:
    client = make_client(1, anchor)
    return SeedResult([client], [make_job(1, client, JobStatus.QUOTED, anchor)])


def build_full_workflow(anchor: date) -> SeedResult:
    """50 jobs, one every day going back from the anchor (newest first)."""
    client = make_client(1, anchor)
    jobs = []
    for i in range(1, 51):
        start = anchor - timedelta(days=i)
        job = make_job(i, client, _STATUS_CYCLE[(i - 1) % 5], anchor)
        expenses = list(job.expenses)
        if i % 3 == 0:
            expenses.append(make_expense(f"e_{i}_2", 75, anchor))
        if i % 5 == 0:
            expenses.append(
                make_expense(f"e_{i}_3", 120, anchor, reimbursable=True),
            )
        jobs.append(job.model_copy(update={
            "quote_date": (start - timedelta(days=4)).isoformat(),
            "start_date": start.isoformat(),
            "end_date": (start + timedelta(days=3)).isoformat(),
            "expenses": expenses,
        }))
    return SeedResult([client], jobs)


def build_edge_cases(anchor: date) -> SeedResult:
    """An over-budget in-progress job and a cancelled job with no expenses."""
    client = make_client(99, anchor)
    over_budget = make_job(99, client, JobStatus.IN_PROGRESS, anchor)
    over_budget = over_budget.model_copy(update={
        "expenses": [
            *over_budget.expenses, make_expense("over_1", 9999, anchor),
        ],
    })
    cancelled = make_job(100, client, JobStatus.CANCELLED, anchor)
    cancelled = cancelled.model_copy(update={"expenses": []})
    return SeedResult([client], [over_budget, cancelled])


SEED_BUILDERS = {
    SeedProfile.MINIMAL: build_minimal,
    SeedProfile.FULL_WORKFLOW: build_full_workflow,
    SeedProfile.EDGE_CASES: build_edge_cases,
}
