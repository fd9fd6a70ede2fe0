"""Clients Controller — synchronized client cache."""

from jobbook.core import selectors
from jobbook.schemas.client import Client
from jobbook.services.state_controller import SyncedCollection


class ClientsController(SyncedCollection[Client]):

    def client(self, client_id: str) -> Client | None:
        return selectors.client_by_id(self.entities, client_id)
