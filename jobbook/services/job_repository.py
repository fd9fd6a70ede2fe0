"""Job Repository — jobs collection; duplicate ids on create are an error."""

from jobbook.core.domain_types import CollectionKey
from jobbook.core.errors import DuplicateIdError
from jobbook.core.repository_protocols import KeyValueStore
from jobbook.infrastructure.durable_store import JsonCollection
from jobbook.schemas.job import Job
from jobbook.services.entity_repository import JsonEntityRepository


class JobRepository(JsonEntityRepository[Job]):
    resource_type = "Job"
    model = Job

    @classmethod
    def for_store(cls, store: KeyValueStore) -> "JobRepository":
        return cls(JsonCollection(store, CollectionKey.JOBS.value))

    def _resolve_duplicate(self, entities: list[Job], entity: Job) -> list[Job]:
        if any(e.id == entity.id for e in entities):
            raise DuplicateIdError(self.resource_type, entity.id)
        return entities

    async def jobs_for_client(self, client_id: str) -> list[Job]:
        return [j for j in await self.list_all() if j.client_id == client_id]
