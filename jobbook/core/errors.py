"""Error Hierarchy — typed, categorized exceptions for all jobbook failure modes.

Invariants:
    - Each error carries a stable code plus an ErrorCategory and ErrorSeverity
    - Caller mistakes and conflicts map to 4xx; storage failures map to 503
    - to_response() produces the REST envelope
    - PaymentDeclinedError and UploadFailureError never cross a service boundary:
      they are converted into result objects by their owning service

Design Decisions:
    - Single hierarchy with JobBookError base: FastAPI global handler catches all
    - ErrorContext names the collection and entity involved, so log lines and
      responses point at the data rather than the code path
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ErrorSeverity(str, Enum):
    """How loudly an error is logged and reported."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """Coarse grouping used in the response envelope."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    STORAGE = "storage"
    EXTERNAL_API = "external_api"
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Which stored data an error concerns."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    collection: str | None = None
    entity_id: str | None = None


class JobBookError(Exception):
    """Base exception for all jobbook errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "collection": self.context.collection,
                    "entity_id": self.context.entity_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class DomainValidationError(JobBookError):
    """Domain input rejected (e.g. non-positive payment amount)."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class NotFoundError(JobBookError):
    """Update/delete/fetch target does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.entity_id = resource_id
        super().__init__(
            f"{resource_type} with ID {resource_id} not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class DuplicateIdError(JobBookError):
    """Create attempted with an id that is already stored."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.entity_id = resource_id
        super().__init__(
            f"{resource_type} with ID {resource_id} already exists",
            "DUPLICATE_ID", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.resource_id = resource_id


class ConcurrencyError(JobBookError):
    """Collection changed between read and write (stale version)."""
    def __init__(
        self, collection: str, expected: int, actual: int,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.collection = collection
        super().__init__(
            f"Collection '{collection}' was modified concurrently "
            f"(expected version {expected}, found {actual})",
            "CONCURRENCY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.expected = expected
        self.actual = actual


class PaymentDeclinedError(JobBookError):
    """Gateway declined the payment. Converted to PaymentResult, never raised out."""
    def __init__(self, message: str, method: str, context: ErrorContext | None = None):
        super().__init__(
            message, "PAYMENT_DECLINED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.WARNING, context, 402,
        )
        self.method = method


class UploadFailureError(JobBookError):
    """Receipt upload failed. Soft failure — the expense is still saved locally."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "UPLOAD_FAILED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.WARNING, context, 502,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageError(JobBookError):
    """Serialization or storage I/O failed. Never retried automatically."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Storage {operation} failed: {message}",
            "STORAGE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
