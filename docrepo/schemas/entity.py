"""
Entity base model and collection-name resolution.

Any pydantic model with an ``id`` field can be stored by a repository.
``Entity`` is the base for models keyed by the store's native ``ObjectId``:
the id is held as its 24-hex string form and stored as a real ``ObjectId``.
"""

import logging
from typing import ClassVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class Entity(BaseModel):
    """Base model for entities keyed by a native ObjectId."""

    collection_name: ClassVar[str | None] = None

    id: str | None = None


def _declared_collection_name(
    cls: type,
) -> str | None:
    """Return the collection name declared directly on cls, if any."""
    declared = vars(cls).get("collection_name")
    if declared is None:
        return None
    if not isinstance(declared, str) or not declared.strip():
        raise ValueError("Empty collection name not allowed")
    return declared


def _collection_root(
    entity_type: type[BaseModel],
) -> type[BaseModel]:
    """Return the class whose name a hierarchy of entities is stored under.

    Entity subclasses share the collection of the class that derives
    directly from Entity. Other models use their own class.
    """
    if not issubclass(entity_type, Entity) or entity_type is Entity:
        return entity_type

    root = entity_type
    while Entity not in root.__bases__:
        root = next(base for base in root.__bases__ if issubclass(base, Entity))
    return root


def resolve_collection_name(
    entity_type: type[BaseModel],
) -> str:
    """
    Resolve the collection name for an entity type.

    The most derived class declaring ``collection_name`` wins, searching up to
    the collection root; otherwise the root class name is used.

    Args:
        entity_type: Model class stored in the collection

    Returns:
        Collection name

    Raises:
        ValueError: If a declared collection name is empty
    """
    root = _collection_root(entity_type)

    for cls in entity_type.__mro__:
        declared = _declared_collection_name(cls)
        if declared is not None:
            return declared
        if cls is root:
            break

    return root.__name__
