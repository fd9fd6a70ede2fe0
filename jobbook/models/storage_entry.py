"""StorageEntry ORM — one row per durable-store key.

Invariants:
    - key is the primary key ("jobs", "clients", "settings", or any collaborator key)
    - value holds the full serialized JSON collection; it is replaced, never patched
    - version starts at 1 on first write and increments by 1 on every write

Design Decisions:
    - Text column instead of JSON: a corrupt payload must still be readable
      so the store can fall back to an empty collection instead of failing
    - version column backs compare-and-swap writes (lost-update protection)
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from jobbook.db.base import Base


class StorageEntry(Base):
    __tablename__ = "storage_entries"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
