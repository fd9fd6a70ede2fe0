"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, so a transactional KV backend
      or an in-memory double can stand in for the SQL store
    - Async in Protocol: boundary methods are async because implementations do IO
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Protocol, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Snapshot:
    """Decoded value of one storage key plus its version (0 = never written).

    value is None when the key is missing or its payload is not valid JSON.
    """
    value: Any
    version: int


class KeyValueStore(Protocol):
    """Contract for the durable key-value store — implemented by shell."""
    async def read(self, key: str) -> Snapshot: ...
    async def write(
        self, key: str, value: Any, expected_version: int | None = None,
    ) -> int: ...
    async def clear_all(self) -> None: ...
    async def keys(self) -> list[str]: ...


class EntityRepository(Protocol, Generic[T]):
    """CRUD contract shared by the Job and Client repositories."""
    resource_type: str

    async def list_all(self) -> list[T]: ...
    async def get_by_id(self, entity_id: str) -> T | None: ...
    async def create(self, entity: T) -> T: ...
    async def update(self, entity: T) -> T: ...
    async def mutate(self, entity_id: str, change: Callable[[T], T]) -> T: ...
    async def delete(self, entity_id: str) -> None: ...
    async def replace_all(self, entities: list[T]) -> None: ...
    async def clear_all(self) -> None: ...
