"""Client Repository — clients collection.

Invariants:
    - create() silently drops any stored record sharing the new id (last write wins)
    - update() keeps the stored created_date
    - Deleting a client never touches the jobs collection
"""

from jobbook.core.domain_types import CollectionKey
from jobbook.core.repository_protocols import KeyValueStore
from jobbook.infrastructure.durable_store import JsonCollection
from jobbook.schemas.client import Client
from jobbook.services.entity_repository import JsonEntityRepository


class ClientRepository(JsonEntityRepository[Client]):
    resource_type = "Client"
    model = Client

    @classmethod
    def for_store(cls, store: KeyValueStore) -> "ClientRepository":
        return cls(JsonCollection(store, CollectionKey.CLIENTS.value))

    def _resolve_duplicate(
        self, entities: list[Client], entity: Client,
    ) -> list[Client]:
        return [c for c in entities if c.id != entity.id]

    def _merge_update(self, stored: Client, incoming: Client) -> Client:
        return incoming.model_copy(update={"created_date": stored.created_date})
