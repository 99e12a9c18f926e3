"""
Administrative operations on a repository's collection.

Index management, statistics and collection lifecycle live here so the
repository itself only deals with entities.
"""

import logging
from collections.abc import Sequence
from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING, DESCENDING

from .repository import DocumentRepository, document_field

logger = logging.getLogger(__name__)


def _normalize_keys(
    keys: str | Sequence[str],
    ascending: bool = True,
) -> list[tuple[str, int]]:
    if isinstance(keys, str):
        keys = [keys]
    direction = ASCENDING if ascending else DESCENDING
    return [(document_field(key), direction) for key in keys]


def _index_name(
    keys: list[tuple[str, int]],
) -> str:
    """Default index name, as generated by the server: ``field_1_other_-1``."""
    return "_".join(f"{field}_{direction}" for field, direction in keys)


class CollectionManager:
    """Index, statistics and lifecycle operations for one collection."""

    def __init__(
        self,
        collection: AsyncIOMotorCollection,
    ):
        self._collection = collection

    @classmethod
    def for_repository(
        cls,
        repository: DocumentRepository,
    ) -> "CollectionManager":
        """Build a manager for the collection a repository is bound to."""
        return cls(repository.collection)

    @property
    def name(self) -> str:
        return self._collection.name

    async def exists(self) -> bool:
        """Check whether the collection exists in its database."""
        names = await self._collection.database.list_collection_names(
            filter={"name": self._collection.name}
        )
        return self._collection.name in names

    async def drop(self) -> None:
        """Drop the collection with all documents and indexes."""
        await self._collection.drop()
        logger.info(f"Dropped collection: {self._collection.name}")

    async def ensure_index(
        self,
        keys: str | Sequence[str],
        ascending: bool = True,
        unique: bool = False,
        sparse: bool = False,
        name: str | None = None,
    ) -> str:
        """
        Create an index if it does not exist yet.

        Args:
            keys: Entity field name or names to index
            ascending: Sort direction for all keys
            unique: Reject documents with duplicate key values
            sparse: Only index documents that contain the keys
            name: Index name; generated from the keys if None

        Returns:
            Name of the index
        """
        index_keys = _normalize_keys(keys, ascending)
        options: dict[str, Any] = {"unique": unique, "sparse": sparse}
        if name is not None:
            options["name"] = name

        index_name = await self._collection.create_index(index_keys, **options)
        logger.info(f"Ensured index '{index_name}' on {self._collection.name}")
        return index_name

    async def drop_index(
        self,
        keys_or_name: str | Sequence[str],
    ) -> None:
        """Drop an index by name, or by the entity field names it covers."""
        await self._collection.drop_index(await self._resolve_index_name(keys_or_name))
        logger.info(f"Dropped index on {self._collection.name}: {keys_or_name}")

    async def drop_all_indexes(self) -> None:
        """Drop every index except the one on ``_id``."""
        await self._collection.drop_indexes()
        logger.info(f"Dropped all indexes on {self._collection.name}")

    async def index_exists(
        self,
        keys_or_name: str | Sequence[str],
    ) -> bool:
        """Check whether an index exists, by name or by the field names it covers."""
        index_name = await self._resolve_index_name(keys_or_name)
        info = await self._collection.index_information()
        return index_name in info

    async def get_indexes(self) -> list[dict[str, Any]]:
        """Get the index description documents of the collection."""
        cursor = self._collection.list_indexes()
        return await cursor.to_list(length=None)

    async def is_capped(self) -> bool:
        """Check whether the collection is capped."""
        options = await self._collection.options()
        return bool(options.get("capped", False))

    async def get_stats(self) -> dict[str, Any]:
        """Get collection statistics (``collStats``)."""
        return await self._collection.database.command("collStats", self._collection.name)

    async def _resolve_index_name(
        self,
        keys_or_name: str | Sequence[str],
    ) -> str:
        if not isinstance(keys_or_name, str):
            return _index_name(_normalize_keys(keys_or_name))

        # A single string is an index name when such an index exists
        info = await self._collection.index_information()
        if keys_or_name in info:
            return keys_or_name
        return _index_name(_normalize_keys(keys_or_name))
