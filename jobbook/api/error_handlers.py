"""Error Handlers — map jobbook failures onto the JSON error envelope.

Invariants:
    - Every error response has the shape {"error": {code, message, category, severity, ...}}
    - JobBookError keeps its own http_status (400 validation, 404, 409 conflicts, 503 storage)
    - Request body/query/path validation failures are 400 with per-field details
    - Anything else is a 500 with a fixed message; internals are only logged

Design Decisions:
    - Log level follows ErrorSeverity, so declined input stays out of error dashboards
    - Lives outside main.py so the entry point only wires routers and middleware
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from jobbook.core.errors import (
    ConcurrencyError, DomainValidationError, ErrorCategory, ErrorSeverity,
    JobBookError,
)

logger = logging.getLogger(__name__)

_LOG_LEVEL = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.WARNING,
    ErrorSeverity.CRITICAL: logging.ERROR,
}


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(JobBookError, handle_jobbook_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)


def _envelope(
    code: str, message: str, category: ErrorCategory, severity: ErrorSeverity,
    **details,
) -> dict:
    body = {
        "code": code,
        "message": message,
        "category": category.value,
        "severity": severity.value,
    }
    body.update(details)
    return {"error": body}


async def handle_jobbook_error(request: Request, exc: JobBookError) -> JSONResponse:
    logger.log(
        _LOG_LEVEL[exc.severity],
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "collection": exc.context.collection,
            "entity_id": exc.context.entity_id,
        },
    )
    content = exc.to_response()
    if isinstance(exc, DomainValidationError):
        content["error"]["field"] = exc.field
    elif isinstance(exc, ConcurrencyError):
        content["error"]["expectedVersion"] = exc.expected
        content["error"]["actualVersion"] = exc.actual
    return JSONResponse(status_code=exc.http_status, content=content)


async def handle_request_validation(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    problems = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    logger.warning(
        f"Rejected {request.method} {request.url.path}: {len(problems)} invalid field(s)",
        extra={"path": request.url.path, "error_code": "VALIDATION_ERROR"},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR,
            details=problems,
        ),
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
        extra={"path": request.url.path},
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )
