"""
Generic MongoDB repository for pydantic entities.

One repository is bound to one collection for its whole lifetime. Entities
are stored with their ``id`` in the document ``_id``; all other fields are
stored as dumped by pydantic in JSON mode. Filters are MongoDB filter documents written
against entity field names (``id`` is translated to ``_id``).

Driver errors are not caught here; they propagate to the caller unchanged.
"""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeAlias

from motor.motor_asyncio import (
    AsyncIOMotorCollection,
    AsyncIOMotorCursor,
    AsyncIOMotorDatabase,
)

from ..interfaces import DocumentRepositoryBase, EntityT, KeyT
from ..keys import KeyCodec, ObjectIdKeyCodec, StringKeyCodec, key_codec_for
from ...schemas.entity import Entity
from .client import (
    get_collection_from_connection_string,
    get_collection_from_database,
)

logger = logging.getLogger(__name__)


ID_FIELD: str = "id"
DOCUMENT_ID_FIELD: str = "_id"

# Operators whose operand is a single value or a list of values
_VALUE_OPERATORS = frozenset({"$eq", "$ne", "$in", "$nin"})
_LOGICAL_OPERATORS = frozenset({"$and", "$or", "$nor"})


class EntityCursor(Generic[EntityT]):
    """
    Lazy async iterator over the entities matched by a find.

    A cursor can be consumed once. Call ``find`` again to restart.
    """

    def __init__(
        self,
        cursor: AsyncIOMotorCursor,
        repository: "DocumentRepository[EntityT, Any]",
    ):
        self._cursor = cursor
        self._repository = repository

    def sort(
        self,
        key_or_list: Any,
        direction: int | None = None,
    ) -> "EntityCursor[EntityT]":
        """Sort results; field names are entity field names."""
        if isinstance(key_or_list, str):
            key_or_list = document_field(key_or_list)
        else:
            key_or_list = [(document_field(key), value) for key, value in key_or_list]
        if direction is None:
            self._cursor.sort(key_or_list)
        else:
            self._cursor.sort(key_or_list, direction)
        return self

    def skip(
        self,
        count: int,
    ) -> "EntityCursor[EntityT]":
        """Skip the first ``count`` results."""
        self._cursor.skip(count)
        return self

    def limit(
        self,
        count: int,
    ) -> "EntityCursor[EntityT]":
        """Return at most ``count`` results."""
        self._cursor.limit(count)
        return self

    def __aiter__(self) -> "EntityCursor[EntityT]":
        return self

    async def __anext__(self) -> EntityT:
        doc = await self._cursor.next()
        return self._repository._to_entity(doc)

    async def to_list(
        self,
        length: int | None = None,
    ) -> list[EntityT]:
        """Materialize the remaining results (at most ``length`` if given)."""
        docs = await self._cursor.to_list(length=length)
        return [self._repository._to_entity(doc) for doc in docs]


def document_field(
    field: str,
) -> str:
    """Map an entity field name to its document field name."""
    return DOCUMENT_ID_FIELD if field == ID_FIELD else field


class DocumentRepository(DocumentRepositoryBase[EntityT, KeyT]):
    """MongoDB implementation of the document repository."""

    def __init__(
        self,
        entity_type: type[EntityT],
        collection: AsyncIOMotorCollection,
        key_codec: KeyCodec[KeyT] | None = None,
    ):
        if key_codec is None:
            key_codec = key_codec_for(entity_type)
        elif ID_FIELD not in entity_type.model_fields:
            raise TypeError(f"{entity_type.__name__} has no 'id' field")

        self._entity_type = entity_type
        self._collection = collection
        self._key_codec = key_codec
        logger.info(
            f"Initialized DocumentRepository for {entity_type.__name__} "
            f"with collection: {collection.name} ({key_codec!r})"
        )

    @classmethod
    def from_connection_string(
        cls,
        entity_type: type[EntityT],
        connection_string: str | None = None,
        collection_name: str | None = None,
        key_codec: KeyCodec[KeyT] | None = None,
    ) -> "DocumentRepository[EntityT, KeyT]":
        """Build a repository from a connection string (default connection if None)."""
        collection = get_collection_from_connection_string(
            entity_type,
            connection_string,
            collection_name,
        )
        return cls(entity_type, collection, key_codec)

    @classmethod
    def from_database(
        cls,
        entity_type: type[EntityT],
        database: AsyncIOMotorDatabase,
        collection_name: str | None = None,
        key_codec: KeyCodec[KeyT] | None = None,
    ) -> "DocumentRepository[EntityT, KeyT]":
        """Build a repository from an explicit database handle."""
        collection = get_collection_from_database(entity_type, database, collection_name)
        return cls(entity_type, collection, key_codec)

    @property
    def collection(self) -> AsyncIOMotorCollection:
        """The underlying collection, for operations this class does not cover."""
        return self._collection

    @property
    def entity_type(self) -> type[EntityT]:
        return self._entity_type

    @property
    def key_codec(self) -> KeyCodec[KeyT]:
        return self._key_codec

    def _to_document(
        self,
        entity: EntityT,
    ) -> dict[str, Any]:
        doc = entity.model_dump(mode="json", exclude={ID_FIELD})
        entity_id = getattr(entity, ID_FIELD)
        if entity_id is not None:
            doc[DOCUMENT_ID_FIELD] = self._key_codec.to_document(entity_id)
        return doc

    def _to_new_document(
        self,
        entity: EntityT,
    ) -> dict[str, Any]:
        """Document to insert; an entity without id gets a key from the codec."""
        doc = self._to_document(entity)
        if getattr(entity, ID_FIELD) is None:
            key = self._key_codec.new_key()
            if key is not None:
                doc[DOCUMENT_ID_FIELD] = self._key_codec.to_document(key)
        return doc

    def _to_entity(
        self,
        doc: Mapping[str, Any],
    ) -> EntityT:
        data = dict(doc)
        stored_id = data.pop(DOCUMENT_ID_FIELD, None)
        if stored_id is not None:
            data[ID_FIELD] = self._key_codec.from_document(stored_id)
        return self._entity_type.model_validate(data)

    def _id_filter(
        self,
        id: Any,
    ) -> dict[str, Any]:
        return {DOCUMENT_ID_FIELD: self._key_codec.to_document(id)}

    def _translate_id_value(
        self,
        value: Any,
    ) -> Any:
        if not isinstance(value, Mapping):
            return self._key_codec.to_document(value)

        translated: dict[str, Any] = {}
        for operator, operand in value.items():
            if operator in _VALUE_OPERATORS:
                if isinstance(operand, (list, tuple, set)):
                    operand = [self._key_codec.to_document(item) for item in operand]
                else:
                    operand = self._key_codec.to_document(operand)
            translated[operator] = operand
        return translated

    def _translate_filter(
        self,
        filter: Mapping[str, Any] | None,
    ) -> dict[str, Any]:
        """Rename ``id`` to ``_id`` and encode id values through the key codec."""
        if not filter:
            return {}

        translated: dict[str, Any] = {}
        for field, value in filter.items():
            if field in _LOGICAL_OPERATORS:
                translated[field] = [self._translate_filter(clause) for clause in value]
            elif field == ID_FIELD:
                translated[DOCUMENT_ID_FIELD] = self._translate_id_value(value)
            else:
                translated[field] = value
        return translated

    async def get_by_id(
        self,
        id: Any,
    ) -> EntityT | None:
        """Get entity by id; accepts the entity's key type or a native ObjectId."""
        doc = await self._collection.find_one(self._id_filter(id))

        if not doc:
            logger.debug(f"{self._entity_type.__name__} not found: {id}")
            return None

        return self._to_entity(doc)

    async def add(
        self,
        entity: EntityT,
    ) -> EntityT:
        """Add a new entity; returns it with any generated id populated."""
        result = await self._collection.insert_one(self._to_new_document(entity))

        if getattr(entity, ID_FIELD) is None:
            setattr(entity, ID_FIELD, self._key_codec.from_document(result.inserted_id))

        logger.debug(f"Added {self._entity_type.__name__}: {getattr(entity, ID_FIELD)}")
        return entity

    async def add_many(
        self,
        entities: Iterable[EntityT],
    ) -> None:
        """Add new entities in one bulk insert."""
        entities = list(entities)
        if not entities:
            return

        docs = [self._to_new_document(entity) for entity in entities]
        result = await self._collection.insert_many(docs)

        for entity, inserted_id in zip(entities, result.inserted_ids):
            if getattr(entity, ID_FIELD) is None:
                setattr(entity, ID_FIELD, self._key_codec.from_document(inserted_id))

        logger.debug(f"Added {len(entities)} {self._entity_type.__name__} entities")

    def find(
        self,
        filter: Mapping[str, Any] | None = None,
    ) -> EntityCursor[EntityT]:
        """Find entities matching a filter. Returns a single-pass lazy cursor."""
        cursor = self._collection.find(self._translate_filter(filter))
        return EntityCursor(cursor, self)

    async def list_all(self) -> list[EntityT]:
        """List all entities in the collection."""
        entities = await self.find().to_list()
        logger.debug(f"Listed {len(entities)} {self._entity_type.__name__} entities")
        return entities

    async def update(
        self,
        entity: EntityT,
    ) -> EntityT:
        """Upsert an entity by its id."""
        entity_id = getattr(entity, ID_FIELD)
        if entity_id is None:
            raise ValueError(f"Cannot update {self._entity_type.__name__} without an id")

        await self._collection.replace_one(
            self._id_filter(entity_id),
            self._to_document(entity),
            upsert=True,
        )

        logger.debug(f"Upserted {self._entity_type.__name__}: {entity_id}")
        return entity

    async def update_many(
        self,
        entities: Iterable[EntityT],
    ) -> None:
        """Upsert entities concurrently. Updates applied before a failure stay applied."""
        await asyncio.gather(*(self.update(entity) for entity in entities))

    async def delete(
        self,
        id: Any,
    ) -> None:
        """Delete entity by id; accepts the entity's key type or a native ObjectId."""
        result = await self._collection.delete_one(self._id_filter(id))
        logger.debug(
            f"Deleted {result.deleted_count} {self._entity_type.__name__} with id: {id}"
        )

    async def delete_entity(
        self,
        entity: EntityT,
    ) -> None:
        """Delete the given entity by its id."""
        await self.delete(getattr(entity, ID_FIELD))

    async def delete_many(
        self,
        filter: Mapping[str, Any],
    ) -> None:
        """Delete all entities matching a filter."""
        result = await self._collection.delete_many(self._translate_filter(filter))
        logger.debug(f"Deleted {result.deleted_count} {self._entity_type.__name__} entities")

    async def delete_all(self) -> None:
        """Delete every entity in the collection."""
        result = await self._collection.delete_many({})
        logger.info(
            f"Deleted all {result.deleted_count} documents from {self._collection.name}"
        )

    async def count(
        self,
        filter: Mapping[str, Any] | None = None,
    ) -> int:
        """Count entities, optionally only those matching a filter."""
        return await self._collection.count_documents(self._translate_filter(filter))

    async def exists(
        self,
        filter: Mapping[str, Any],
    ) -> bool:
        """Check whether any entity matches a filter."""
        count = await self._collection.count_documents(
            self._translate_filter(filter),
            limit=1,
        )
        return count > 0

    async def aggregate(
        self,
        pipeline: list[Mapping[str, Any]],
    ) -> list[dict[str, Any]]:
        """Run an aggregation pipeline and return the raw result documents."""
        cursor = self._collection.aggregate(pipeline)
        return await cursor.to_list(length=None)


StringKeyRepository: TypeAlias = DocumentRepository[EntityT, str]


def string_key_repository(
    entity_type: type[EntityT],
    collection: AsyncIOMotorCollection | None = None,
    connection_string: str | None = None,
    collection_name: str | None = None,
) -> StringKeyRepository[EntityT]:
    """
    Build a repository for an entity keyed by strings.

    Entity subclasses keep their ObjectId-backed string keys; other models
    store their string id unchanged.

    Args:
        entity_type: Model class with a string ``id``
        collection: Explicit collection handle; resolved from the connection string if None
        connection_string: Connection string; the default connection if None
        collection_name: Collection name override

    Returns:
        Repository bound to the collection
    """
    if issubclass(entity_type, Entity):
        key_codec: KeyCodec[str] = ObjectIdKeyCodec()
    else:
        key_codec = StringKeyCodec()

    if collection is None:
        return DocumentRepository.from_connection_string(
            entity_type,
            connection_string,
            collection_name,
            key_codec,
        )
    return DocumentRepository(entity_type, collection, key_codec)
