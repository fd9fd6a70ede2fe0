"""Service test fixtures — repositories, controllers and a deterministic processor.

Invariants:
    - Every test gets a fresh in-memory SQLite store (root conftest)
    - Gateways never sleep; outcomes are pinned by success_rate 1.0 / 0.0
"""

import random

import pytest

from jobbook.infrastructure.receipt_storage import ReceiptStorage
from jobbook.services.client_repository import ClientRepository
from jobbook.services.clients_controller import ClientsController
from jobbook.services.expense_service import ExpenseService
from jobbook.services.job_repository import JobRepository
from jobbook.services.jobs_controller import JobsController
from jobbook.services.payment_processor import PaymentProcessor
from tests.services.factories import gateway_settings, no_sleep


@pytest.fixture
def job_repo(store):
    return JobRepository.for_store(store)


@pytest.fixture
def client_repo(store):
    return ClientRepository.for_store(store)


@pytest.fixture
def approving_processor():
    return PaymentProcessor.from_settings(
        gateway_settings(1.0), rng=random.Random(7), sleep=no_sleep,
    )


@pytest.fixture
def declining_processor():
    return PaymentProcessor.from_settings(
        gateway_settings(0.0), rng=random.Random(7), sleep=no_sleep,
    )


@pytest.fixture
def receipts():
    return ReceiptStorage("https://bucket.example", sleep=no_sleep)


@pytest.fixture
def jobs_controller(job_repo, approving_processor, receipts):
    return JobsController(
        job_repo, payments=approving_processor, expenses=ExpenseService(receipts),
    )


@pytest.fixture
def clients_controller(client_repo):
    return ClientsController(client_repo)
