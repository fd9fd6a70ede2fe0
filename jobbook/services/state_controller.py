"""Synchronized State Controller — in-memory entity cache mirrored to a repository.

Invariants:
    - Two action families, never mixed for one entity:
        cache_only.*  sync, mutate entities only, no IO, loading/error untouched
                      (set_all is the exception: it also clears loading/error)
        persisted.*   async, write through the repository, full lifecycle
    - Persisted lifecycle: dispatch -> loading=True, error=None (pending);
      success -> entities mutated, loading=False, error=None (fulfilled);
      failure -> error=str(exc), loading=False, entities unchanged (rejected), exc re-raised
    - persisted.modify is an upsert: update, and on NotFoundError fall back to create
    - persisted.mutate changes the stored record in place; an id known only to the
      cache is created from the cached copy
    - Cache mutation happens only after the awaited repository call returns, and
      caches the record the repository stored, not the one passed in

Design Decisions:
    - Explicit CacheOnlyActions / PersistedActions objects instead of one reducer,
      so callers choose storage semantics by name
    - Errors re-raised after being recorded: the HTTP layer maps them to responses
    - No locks: concurrent persisted actions interleave at await points; the
      store's version check turns lost updates into ConcurrencyError, and
      mutate retries against the fresh record
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncGenerator, Callable, Generic, TypeVar

from jobbook.core.domain_types import ActionPhase
from jobbook.core.errors import NotFoundError
from jobbook.core.repository_protocols import EntityRepository
from jobbook.schemas.base import CamelModel

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=CamelModel)


@dataclass
class LastAction:
    name: str
    phase: ActionPhase


@dataclass
class CollectionState(Generic[M]):
    entities: list[M] = field(default_factory=list)
    loading: bool = False
    error: str | None = None
    last_action: LastAction | None = None


def _replace_or_append(entities: list[M], entity: M) -> list[M]:
    if any(e.id == entity.id for e in entities):
        return [entity if e.id == entity.id else e for e in entities]
    return [*entities, entity]


class CacheOnlyActions(Generic[M]):
    """In-memory mutations that never touch the durable store."""

    def __init__(self, state: CollectionState[M]):
        self.state = state

    def set_all(self, entities: list[M]) -> None:
        self.state.entities = list(entities)
        self.state.loading = False
        self.state.error = None

    def add(self, entity: M) -> None:
        self.state.entities = [*self.state.entities, entity]

    def update(self, entity: M) -> None:
        """Replace by id; silently ignored when the id is not cached."""
        self.state.entities = [
            entity if e.id == entity.id else e for e in self.state.entities
        ]

    def delete(self, entity_id: str) -> None:
        self.state.entities = [
            e for e in self.state.entities if e.id != entity_id
        ]

    def set_loading(self, loading: bool) -> None:
        self.state.loading = loading

    def set_error(self, error: str | None) -> None:
        self.state.error = error
        self.state.loading = False


class PersistedActions(Generic[M]):
    """Async write-through actions with pending/fulfilled/rejected lifecycle."""

    def __init__(
        self, state: CollectionState[M], repository: EntityRepository[M],
    ):
        self.state = state
        self.repository = repository

    @asynccontextmanager
    async def _lifecycle(self, name: str) -> AsyncGenerator[None, None]:
        self.state.loading = True
        self.state.error = None
        self.state.last_action = LastAction(name, ActionPhase.PENDING)
        try:
            yield
        except Exception as e:
            self.state.loading = False
            self.state.error = str(e) or f"Failed to {name}"
            self.state.last_action = LastAction(name, ActionPhase.REJECTED)
            logger.warning(
                f"{self.repository.resource_type} {name} rejected: {e}",
                extra={"action": name},
            )
            raise
        self.state.loading = False
        self.state.error = None
        self.state.last_action = LastAction(name, ActionPhase.FULFILLED)

    async def fetch(self) -> list[M]:
        async with self._lifecycle("fetch"):
            entities = await self.repository.list_all()
            self.state.entities = entities
        return entities

    async def fetch_by_id(self, entity_id: str) -> M:
        async with self._lifecycle("fetch_by_id"):
            entity = await self.repository.get_by_id(entity_id)
            if entity is None:
                raise NotFoundError(self.repository.resource_type, entity_id)
            self.state.entities = _replace_or_append(self.state.entities, entity)
        return entity

    async def create(self, entity: M) -> M:
        async with self._lifecycle("create"):
            stored = await self.repository.create(entity)
            self.state.entities = [*self.state.entities, stored]
        return stored

    async def modify(self, entity: M) -> M:
        """Update, or create when the record was never persisted."""
        async with self._lifecycle("modify"):
            try:
                stored = await self.repository.update(entity)
            except NotFoundError:
                logger.info(
                    f"{self.repository.resource_type} not persisted yet, upserting",
                    extra={"action": "modify", "entity_id": entity.id},
                )
                stored = await self.repository.create(entity)
            self.state.entities = _replace_or_append(self.state.entities, stored)
        return stored

    async def mutate(self, entity_id: str, change: Callable[[M], M]) -> M:
        """Apply a pure change to the stored record; upsert from cache if unsaved."""
        async with self._lifecycle("mutate"):
            try:
                stored = await self.repository.mutate(entity_id, change)
            except NotFoundError:
                cached = next(
                    (e for e in self.state.entities if e.id == entity_id), None,
                )
                if cached is None:
                    raise
                logger.info(
                    f"{self.repository.resource_type} not persisted yet, upserting",
                    extra={"action": "mutate", "entity_id": entity_id},
                )
                stored = await self.repository.create(change(cached))
            self.state.entities = _replace_or_append(self.state.entities, stored)
        return stored

    async def remove(self, entity_id: str) -> str:
        async with self._lifecycle("remove"):
            await self.repository.delete(entity_id)
            self.state.entities = [
                e for e in self.state.entities if e.id != entity_id
            ]
        return entity_id


class SyncedCollection(Generic[M]):
    """Cache + repository pair exposing both action families."""

    def __init__(
        self,
        repository: EntityRepository[M],
        state: CollectionState[M] | None = None,
    ):
        self.repository = repository
        self.state = state if state is not None else CollectionState()
        self.cache_only = self._cache_actions()
        self.persisted = PersistedActions(self.state, repository)

    def _cache_actions(self) -> CacheOnlyActions[M]:
        return CacheOnlyActions(self.state)

    @property
    def entities(self) -> list[M]:
        return self.state.entities

    def cached(self, entity_id: str) -> M | None:
        return next((e for e in self.state.entities if e.id == entity_id), None)
