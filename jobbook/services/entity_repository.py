"""Entity Repository — CRUD over one JSON collection in the durable store.

Invariants:
    - list_all() returns storage order; update() replaces in place and keeps that order
    - update()/delete()/mutate() raise NotFoundError when the id is absent, leaving storage untouched
    - Every read-modify-write passes the read version back to the store (compare-and-swap),
      so a concurrent writer surfaces as ConcurrencyError instead of a lost update
    - mutate() re-applies its change to the freshly read record on ConcurrencyError,
      so interleaved changes to the same entity compose
    - Records that fail validation are skipped on read and written back verbatim
      (after the valid ones), so no write path destroys data it could not parse
    - create()/update()/mutate() return the record as stored
    - replace_all() discards the prior collection; clear_all() wipes the whole store

Design Decisions:
    - One generic base, subclasses only decide duplicate handling on create
      and field preservation on update (Job and Client contracts are otherwise identical)
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from pydantic import ValidationError

from jobbook.core.errors import ConcurrencyError, NotFoundError
from jobbook.infrastructure.durable_store import JsonCollection
from jobbook.schemas.base import CamelModel

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=CamelModel)

MUTATE_ATTEMPTS = 3


@dataclass
class _Contents(Generic[M]):
    entities: list[M]
    unreadable: list[Any]
    version: int


class JsonEntityRepository(Generic[M]):
    """Repository for entities stored as one JSON array."""

    resource_type: str = "Entity"
    model: type[CamelModel]

    def __init__(self, collection: JsonCollection):
        self.collection = collection

    async def _load(self) -> _Contents[M]:
        snap = await self.collection.snapshot()
        contents = _Contents([], [], snap.version)
        for item in snap.value:
            try:
                contents.entities.append(self.model.model_validate(item))
            except ValidationError as e:
                contents.unreadable.append(item)
                logger.warning(
                    f"Skipping invalid {self.resource_type} record: {e}",
                    extra={"collection": self.collection.key},
                )
        return contents

    async def _save(self, contents: _Contents[M]) -> None:
        await self.collection.write_all(
            [*(e.to_json_dict() for e in contents.entities), *contents.unreadable],
            contents.version,
        )

    @staticmethod
    def _index_of(entities: list[M], entity_id: str) -> int | None:
        return next((i for i, e in enumerate(entities) if e.id == entity_id), None)

    def _resolve_duplicate(self, entities: list[M], entity: M) -> list[M]:
        """Return the collection to append `entity` to. Subclasses decide."""
        return entities

    def _merge_update(self, stored: M, incoming: M) -> M:
        return incoming

    async def list_all(self) -> list[M]:
        entities = (await self._load()).entities
        logger.debug(
            f"Fetched {len(entities)} {self.resource_type} records",
            extra={"collection": self.collection.key, "count": len(entities)},
        )
        return entities

    async def get_by_id(self, entity_id: str) -> M | None:
        entities = (await self._load()).entities
        index = self._index_of(entities, entity_id)
        if index is None:
            logger.debug(
                f"{self.resource_type} not found",
                extra={"collection": self.collection.key, "entity_id": entity_id},
            )
            return None
        return entities[index]

    async def create(self, entity: M) -> M:
        contents = await self._load()
        contents.entities = [*self._resolve_duplicate(contents.entities, entity), entity]
        await self._save(contents)
        logger.info(
            f"Saved {self.resource_type}",
            extra={
                "collection": self.collection.key,
                "entity_id": entity.id, "count": len(contents.entities),
            },
        )
        return entity

    async def update(self, entity: M) -> M:
        contents = await self._load()
        index = self._index_of(contents.entities, entity.id)
        if index is None:
            raise NotFoundError(self.resource_type, entity.id)
        stored = self._merge_update(contents.entities[index], entity)
        contents.entities[index] = stored
        await self._save(contents)
        logger.info(
            f"Updated {self.resource_type}",
            extra={"collection": self.collection.key, "entity_id": entity.id},
        )
        return stored

    async def mutate(self, entity_id: str, change: Callable[[M], M]) -> M:
        """Apply `change` to the stored record and write it back.

        `change` must be pure: it runs once per attempt against the record as
        read in that attempt.
        """
        attempt = 1
        while True:
            contents = await self._load()
            index = self._index_of(contents.entities, entity_id)
            if index is None:
                raise NotFoundError(self.resource_type, entity_id)
            stored = change(contents.entities[index])
            contents.entities[index] = stored
            try:
                await self._save(contents)
                break
            except ConcurrencyError:
                if attempt == MUTATE_ATTEMPTS:
                    raise
                attempt += 1
                logger.info(
                    f"{self.resource_type} changed underneath, re-reading",
                    extra={
                        "collection": self.collection.key,
                        "entity_id": entity_id, "version": contents.version,
                    },
                )
        logger.info(
            f"Mutated {self.resource_type}",
            extra={"collection": self.collection.key, "entity_id": entity_id},
        )
        return stored

    async def delete(self, entity_id: str) -> None:
        contents = await self._load()
        remaining = [e for e in contents.entities if e.id != entity_id]
        if len(remaining) == len(contents.entities):
            raise NotFoundError(self.resource_type, entity_id)
        contents.entities = remaining
        await self._save(contents)
        logger.info(
            f"Deleted {self.resource_type}",
            extra={
                "collection": self.collection.key,
                "entity_id": entity_id, "count": len(remaining),
            },
        )

    async def replace_all(self, entities: list[M]) -> None:
        await self.collection.write_all([e.to_json_dict() for e in entities])
        logger.info(
            f"Replaced {self.resource_type} collection",
            extra={"collection": self.collection.key, "count": len(entities)},
        )

    async def clear_all(self) -> None:
        """Wipe every key in the durable store, not just this collection."""
        await self.collection.store.clear_all()
