"""API test fixtures — FastAPI app wired to an in-memory store.

Invariants:
    - Lifespan is not run: the container is installed directly per test
    - Gateways always approve and never sleep
    - db_manager patched so the readiness probe sees the test database
"""

import random

import pytest
from httpx import ASGITransport, AsyncClient

import jobbook.infrastructure.database as db_module
from jobbook.api.dependencies import build_container, set_container
from jobbook.main import app
from jobbook.services.payment_processor import PaymentProcessor
from tests.services.factories import gateway_settings, no_sleep


@pytest.fixture
async def client(db):
    settings = gateway_settings(1.0)
    container = build_container(
        db, settings,
        payments=PaymentProcessor.from_settings(
            settings, rng=random.Random(3), sleep=no_sleep,
        ),
    )
    set_container(container)
    original_manager = db_module.db_manager
    db_module.db_manager = db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    set_container(None)
    db_module.db_manager = original_manager
