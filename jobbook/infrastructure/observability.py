"""Structured Logging — JSON and text formatters carrying jobbook's contextual fields.

Invariants:
    - Every record carries timestamp, level, logger and message
    - Context passed via extra= (collection, entity_id, version, ...) is rendered
      by both formats; unknown extras are ignored
    - setup_logging is idempotent: calling it again replaces the jobbook handler

Design Decisions:
    - Plain logging.Formatter subclasses, no logging library: the app emits few records
    - Context keys listed once in CONTEXT_FIELDS so formatters and call sites agree
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_FIELDS = (
    "collection", "entity_id", "count", "version", "payment_method",
    "error_code", "action", "path",
)

_HANDLER_NAME = "jobbook"


def _context(record: logging.LogRecord) -> dict:
    return {
        name: record.__dict__[name]
        for name in CONTEXT_FIELDS
        if record.__dict__.get(name) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context(record),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ContextTextFormatter(logging.Formatter):
    """Human-readable lines with context appended as key=value pairs."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-7s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _context(record)
        if context:
            line += " [" + " ".join(f"{k}={v}" for k, v in context.items()) + "]"
        return line


def setup_logging(level: str = "INFO", fmt: str = "json", sql_echo: bool = False) -> None:
    """Install the jobbook handler on the root logger."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else ContextTextFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not sql_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
