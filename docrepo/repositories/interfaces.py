"""
Repository base classes for data access abstraction.

These abstract base classes define the contract that ALL repository implementations must follow.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Iterable, Mapping
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

EntityT = TypeVar("EntityT", bound=BaseModel)
KeyT = TypeVar("KeyT")


class DocumentRepositoryBase(ABC, Generic[EntityT, KeyT]):
    """Abstract base class for entity CRUD against one collection."""

    @abstractmethod
    async def get_by_id(
        self,
        id: Any,
    ) -> EntityT | None:
        """Get entity by id."""
        pass

    @abstractmethod
    async def add(
        self,
        entity: EntityT,
    ) -> EntityT:
        """Add a new entity."""
        pass

    @abstractmethod
    async def add_many(
        self,
        entities: Iterable[EntityT],
    ) -> None:
        """Add new entities."""
        pass

    @abstractmethod
    def find(
        self,
        filter: Mapping[str, Any] | None = None,
    ) -> AsyncIterator[EntityT]:
        """Find entities matching a filter."""
        pass

    @abstractmethod
    async def list_all(self) -> list[EntityT]:
        """List all entities."""
        pass

    @abstractmethod
    async def update(
        self,
        entity: EntityT,
    ) -> EntityT:
        """Upsert an entity."""
        pass

    @abstractmethod
    async def update_many(
        self,
        entities: Iterable[EntityT],
    ) -> None:
        """Upsert entities."""
        pass

    @abstractmethod
    async def delete(
        self,
        id: Any,
    ) -> None:
        """Delete entity by id."""
        pass

    @abstractmethod
    async def delete_entity(
        self,
        entity: EntityT,
    ) -> None:
        """Delete the given entity."""
        pass

    @abstractmethod
    async def delete_many(
        self,
        filter: Mapping[str, Any],
    ) -> None:
        """Delete all entities matching a filter."""
        pass

    @abstractmethod
    async def delete_all(self) -> None:
        """Delete every entity."""
        pass

    @abstractmethod
    async def count(
        self,
        filter: Mapping[str, Any] | None = None,
    ) -> int:
        """Count entities."""
        pass

    @abstractmethod
    async def exists(
        self,
        filter: Mapping[str, Any],
    ) -> bool:
        """Check whether any entity matches a filter."""
        pass

    @abstractmethod
    async def aggregate(
        self,
        pipeline: list[Mapping[str, Any]],
    ) -> list[dict[str, Any]]:
        """Run an aggregation pipeline."""
        pass
