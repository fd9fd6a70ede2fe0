"""Durable Store — versioned JSON key-value storage over async SQLAlchemy.

Invariants:
    - A write replaces the whole value for a key in one transaction, or fails
      leaving the previous value intact
    - Reading a missing or corrupt key never fails: collections read as [], documents as {}
    - write(expected_version=v) is compare-and-swap: a stale v raises ConcurrencyError
    - Two first writes racing on a missing key: the loser raises ConcurrencyError
    - clear_all() removes EVERY key, including ones written by other collaborators
    - No cross-key transactions: two collections are two independent writes

Design Decisions:
    - One table, one row per key (storage_entries): mirrors a mobile key-value store
      while giving transactional writes
    - Version check + conditional UPDATE: closes the lost-update race of
      read-all/mutate/write-all without per-entity locks
    - JsonCollection / JsonDocument wrap a key with the shape it must hold
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError

from jobbook.core.errors import ConcurrencyError, ErrorContext, StorageError
from jobbook.core.repository_protocols import KeyValueStore, Snapshot
from jobbook.infrastructure.database import DatabaseSessionManager
from jobbook.models.storage_entry import StorageEntry

logger = logging.getLogger(__name__)


class SqlKeyValueStore:
    """KeyValueStore backed by the storage_entries table."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def read(self, key: str) -> Snapshot:
        async with self._db.session() as session:
            row = await session.get(StorageEntry, key)
        if row is None:
            logger.debug(f"Key '{key}' not found", extra={"collection": key})
            return Snapshot(None, 0)
        try:
            value = json.loads(row.value)
        except json.JSONDecodeError as e:
            logger.warning(
                f"Corrupt payload under '{key}', treating as empty: {e}",
                extra={"collection": key, "version": row.version},
            )
            value = None
        return Snapshot(value, row.version)

    async def write(
        self, key: str, value: Any, expected_version: int | None = None,
    ) -> int:
        """Replace the value for key. Returns the new version."""
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageError(
                str(e), "serialize", ErrorContext(collection=key),
            )

        async with self._db.session() as session:
            row = await session.get(StorageEntry, key)
            current = row.version if row else 0
            if expected_version is not None and expected_version != current:
                raise ConcurrencyError(key, expected_version, current)

            if row is None:
                session.add(StorageEntry(key=key, value=payload, version=1))
                try:
                    await session.commit()
                except IntegrityError as e:
                    await session.rollback()
                    raise ConcurrencyError(key, current, current + 1) from e
            else:
                result = await session.execute(
                    update(StorageEntry)
                    .where(StorageEntry.key == key)
                    .where(StorageEntry.version == current)
                    .values(
                        value=payload,
                        version=current + 1,
                        updated_at=datetime.now(timezone.utc),
                    )
                )
                if result.rowcount == 0:
                    raise ConcurrencyError(key, current, current + 1)
                await session.commit()

        logger.debug(
            f"Wrote '{key}'",
            extra={"collection": key, "version": current + 1},
        )
        return current + 1

    async def clear_all(self) -> None:
        async with self._db.session() as session:
            await session.execute(delete(StorageEntry))
            await session.commit()
        logger.warning("Cleared ALL persisted data")

    async def keys(self) -> list[str]:
        async with self._db.session() as session:
            result = await session.execute(
                select(StorageEntry.key).order_by(StorageEntry.key),
            )
            return list(result.scalars().all())


class JsonCollection:
    """A storage key that holds a JSON array."""

    def __init__(self, store: KeyValueStore, key: str):
        self.store = store
        self.key = key

    async def snapshot(self) -> Snapshot:
        snap = await self.store.read(self.key)
        if not isinstance(snap.value, list):
            if snap.value is not None:
                logger.warning(
                    f"'{self.key}' does not hold a list, treating as empty",
                    extra={"collection": self.key},
                )
            return Snapshot([], snap.version)
        return snap

    async def read_all(self) -> list[dict]:
        return (await self.snapshot()).value

    async def write_all(
        self, items: list[dict], expected_version: int | None = None,
    ) -> int:
        return await self.store.write(self.key, list(items), expected_version)


class JsonDocument:
    """A storage key that holds a JSON object."""

    def __init__(self, store: KeyValueStore, key: str):
        self.store = store
        self.key = key

    async def read_object(self) -> dict:
        snap = await self.store.read(self.key)
        return snap.value if isinstance(snap.value, dict) else {}

    async def write_object(self, value: dict) -> int:
        return await self.store.write(self.key, dict(value))
