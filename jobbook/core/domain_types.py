"""Domain Types — enums and identity helpers shared across the codebase.

Invariants:
    - All valid states encoded as Enums — no raw string matching
    - ACTIVE_STATUSES and CLOSED_STATUSES partition JobStatus
    - Entity ids are opaque strings: prefix + uuid4 hex

Design Decisions:
    - str Enums: serialize to JSON without custom encoders (persisted layout is plain JSON)
"""

from enum import Enum
from uuid import uuid4


# ─── Identity ────────────────────────────────────────────────────

def new_id(prefix: str) -> str:
    """Process-unique entity id, e.g. ``job_3f2a...``."""
    return f"{prefix}_{uuid4().hex}"


# ─── Enums ───────────────────────────────────────────────────────

class JobStatus(str, Enum):
    """Job workflow states. Any transition is permitted by the core."""
    QUOTED = "Quoted"
    ACCEPTED = "Accepted"
    IN_PROGRESS = "In-Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class PaymentMethod(str, Enum):
    """Payment method identifiers — open but fixed enumeration."""
    PAYPAL = "paypal"
    GCASH = "gcash"
    CASH = "cash"
    CARD = "card"
    VENMO = "venmo"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class JobFilter(str, Enum):
    """Jobs list filter used only by the filtered_jobs selector."""
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


class BudgetPeriod(str, Enum):
    """Look-back window for budget analytics, measured from now."""
    ALL = "all"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class ActionPhase(str, Enum):
    """Lifecycle of a persisted (async) controller action."""
    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


class SeedProfile(str, Enum):
    MINIMAL = "minimal"
    FULL_WORKFLOW = "full_workflow"
    EDGE_CASES = "edge_cases"


class CollectionKey(str, Enum):
    """Storage keys — one JSON value per key in the durable store."""
    JOBS = "jobs"
    CLIENTS = "clients"
    SETTINGS = "settings"


ACTIVE_STATUSES = frozenset({
    JobStatus.QUOTED, JobStatus.ACCEPTED, JobStatus.IN_PROGRESS,
})
CLOSED_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.CANCELLED})

# Payments in these states stay in the ledger but never count as paid
UNCOUNTED_PAYMENT_STATUSES = frozenset({
    PaymentStatus.FAILED, PaymentStatus.CANCELLED,
})
