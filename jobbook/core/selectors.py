"""Selectors — pure derivations over the in-memory entity collections.

Invariants:
    - Never trigger IO; input lists are never mutated
    - active = Quoted/Accepted/In-Progress; the completed filter also includes Cancelled
    - completed_jobs_count and total_completed_value count status Completed only
"""

from jobbook.core.domain_types import (
    ACTIVE_STATUSES, CLOSED_STATUSES, JobFilter, JobStatus,
)
from jobbook.schemas.client import Client
from jobbook.schemas.job import Job


def filtered_jobs(jobs: list[Job], job_filter: JobFilter) -> list[Job]:
    if job_filter == JobFilter.ACTIVE:
        return [j for j in jobs if j.status in ACTIVE_STATUSES]
    if job_filter == JobFilter.COMPLETED:
        return [j for j in jobs if j.status in CLOSED_STATUSES]
    return list(jobs)


def job_by_id(jobs: list[Job], job_id: str) -> Job | None:
    return next((j for j in jobs if j.id == job_id), None)


def client_by_id(clients: list[Client], client_id: str) -> Client | None:
    return next((c for c in clients if c.id == client_id), None)


def jobs_by_client(jobs: list[Job], client_id: str) -> list[Job]:
    return [j for j in jobs if j.client_id == client_id]


def jobs_by_status(jobs: list[Job], status: JobStatus) -> list[Job]:
    return [j for j in jobs if j.status == status]


def jobs_count(jobs: list[Job]) -> int:
    return len(jobs)


def active_jobs_count(jobs: list[Job]) -> int:
    return sum(1 for j in jobs if j.status in ACTIVE_STATUSES)


def completed_jobs_count(jobs: list[Job]) -> int:
    return sum(1 for j in jobs if j.status == JobStatus.COMPLETED)


def total_quoted_value(jobs: list[Job]) -> float:
    return sum(j.quote for j in jobs)


def total_completed_value(jobs: list[Job]) -> float:
    return sum(j.quote for j in jobs if j.status == JobStatus.COMPLETED)
