"""Database Session Manager — async engine, sessions and table bootstrap.

Invariants:
    - A session that raises is rolled back before the error propagates
    - SQLAlchemy failures leave this module only as StorageError
    - Tables are created by create_all() on startup; there are no migrations

Design Decisions:
    - Process-wide db_manager set by init_db() from the FastAPI lifespan
    - expire_on_commit=False: rows stay readable after commit without a refresh
    - Pool sizing only applies to server databases; SQLite keeps SQLAlchemy's default pool
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from jobbook.core.errors import StorageError
from jobbook.db.base import Base
import jobbook.models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError and OperationalError are DBAPIErrors
_STORAGE_FAILURES: list[tuple[type[SQLAlchemyError], str, str]] = [
    (IntegrityError, "commit", "Integrity constraint violated"),
    (OperationalError, "execute", "Connection or operational error"),
    (DBAPIError, "query", "Database driver error"),
    (SQLAlchemyError, "unknown", "Database operation failed"),
]


def _as_storage_error(exc: SQLAlchemyError) -> StorageError:
    for kind, operation, message in _STORAGE_FAILURES:
        if isinstance(exc, kind):
            return StorageError(message, operation)
    return StorageError(str(exc), "unknown")


class DatabaseSessionManager:
    """Owns the async engine and hands out rollback-safe sessions."""

    def __init__(
        self, database_url: str, pool_size: int = 5, max_overflow: int = 10,
        echo: bool = False,
    ):
        engine_kwargs: dict = {"echo": echo}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
                pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self._session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"{type(e).__name__} during storage operation: {e}")
                raise _as_storage_error(e) from e
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create missing tables. Idempotent."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

    async def health_check(self) -> bool:
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
        except (StorageError, OSError) as e:
            logger.error(f"Database health check failed: {e}")
            return False
        return True


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager
