"""Root conftest — shared test configuration and storage fixtures."""

import os

import pytest

# Never touch a developer's real database file
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

from jobbook.infrastructure.database import DatabaseSessionManager  # noqa: E402
from jobbook.infrastructure.durable_store import SqlKeyValueStore  # noqa: E402


@pytest.fixture
async def db():
    """Fresh in-memory SQLite database with tables created."""
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    await manager.create_all()
    yield manager
    await manager.dispose()


@pytest.fixture
def store(db):
    return SqlKeyValueStore(db)
