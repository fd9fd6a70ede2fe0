"""API Dependencies — process-wide container of store, repositories and controllers.

Invariants:
    - One container per process, built on startup from the DatabaseSessionManager
    - Controllers hold the in-memory mirror shared by every request

Design Decisions:
    - Module-level singleton: deliberate exception to no-global-state rule
      (single-process uvicorn; the cache is rebuilt by persisted.fetch on demand)
    - build_container accepts overrides so tests can inject a seeded PaymentProcessor
"""

from dataclasses import dataclass

from jobbook.config import Settings
from jobbook.infrastructure.database import DatabaseSessionManager
from jobbook.infrastructure.durable_store import SqlKeyValueStore
from jobbook.infrastructure.receipt_storage import ReceiptStorage
from jobbook.services.client_repository import ClientRepository
from jobbook.services.clients_controller import ClientsController
from jobbook.services.expense_service import ExpenseService
from jobbook.services.job_repository import JobRepository
from jobbook.services.jobs_controller import JobsController
from jobbook.services.payment_processor import PaymentProcessor
from jobbook.services.settings_repository import SettingsRepository


@dataclass
class AppContainer:
    settings: Settings
    store: SqlKeyValueStore
    jobs: JobsController
    clients: ClientsController
    preferences: SettingsRepository


def build_container(
    db: DatabaseSessionManager,
    settings: Settings,
    payments: PaymentProcessor | None = None,
    receipts: ReceiptStorage | None = None,
) -> AppContainer:
    store = SqlKeyValueStore(db)
    receipts = receipts or ReceiptStorage(
        settings.receipt_base_url, settings.receipt_upload_latency_ms,
    )
    return AppContainer(
        settings=settings,
        store=store,
        jobs=JobsController(
            JobRepository.for_store(store),
            payments=payments or PaymentProcessor.from_settings(settings),
            expenses=ExpenseService(receipts),
        ),
        clients=ClientsController(ClientRepository.for_store(store)),
        preferences=SettingsRepository.for_store(store),
    )


_container: AppContainer | None = None


def set_container(container: AppContainer | None) -> None:
    global _container
    _container = container


def current_container() -> AppContainer | None:
    return _container


def get_container() -> AppContainer:
    """FastAPI dependency."""
    if _container is None:
        raise RuntimeError("Application container not initialized")
    return _container
