"""Job Schemas — the Job aggregate and the records it owns.

Invariants:
    - Expense.amount > 0; Job.quote >= 0
    - Expenses, checklist items and payments are owned exclusively by their Job
    - Dates are ISO date or timestamp strings, checked on input;
      start >= quote and end >= start are enforced at the edges, not here

Design Decisions:
    - Update replaces the whole record: no partial-patch schema exists
    - client_name is a denormalized snapshot and may drift from the Client record
"""

from datetime import datetime, timezone

from pydantic import Field, field_validator

from jobbook.core.domain_types import JobStatus, new_id
from jobbook.schemas.base import CamelModel, require_iso_date
from jobbook.schemas.payment import Payment


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Expense(CamelModel):
    id: str = Field(default_factory=lambda: new_id("expense"))
    description: str
    amount: float = Field(gt=0)
    is_reimbursable: bool = False
    date: str = Field(default_factory=_now_iso)
    receipt_image_url: str | None = None
    receipt_image_local_uri: str | None = None

    @field_validator("date")
    @classmethod
    def date_is_iso(cls, v: str) -> str:
        return require_iso_date(v)


class ChecklistItem(CamelModel):
    """Tools-and-supplies checklist entry."""
    id: str = Field(default_factory=lambda: new_id("tool"))
    text: str
    completed: bool = False
    created_date: str = Field(default_factory=_now_iso)


class Job(CamelModel):
    """A unit of billable work for a client."""
    id: str = Field(default_factory=lambda: new_id("job"))
    job_name: str = ""
    description: str = ""
    client_id: str
    client_name: str = ""
    quote: float = Field(ge=0)
    quote_date: str
    start_date: str
    end_date: str
    status: JobStatus = JobStatus.QUOTED
    expenses: list[Expense] = Field(default_factory=list)
    tools_and_supplies: list[ChecklistItem] | None = None
    notes: str | None = None
    payments: list[Payment] | None = None

    @field_validator("quote_date", "start_date", "end_date")
    @classmethod
    def dates_are_iso(cls, v: str) -> str:
        return require_iso_date(v)


class ExpenseDraft(CamelModel):
    """Expense as entered by the user, before a receipt upload is attempted."""
    description: str = Field(min_length=1)
    amount: float = Field(gt=0)
    is_reimbursable: bool = False
    receipt_image_local_uri: str | None = None
