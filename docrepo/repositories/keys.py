"""
Key codecs: how an entity's id maps to the document ``_id`` value.

The codec for a repository is chosen once, when the repository is built,
from the entity type's declaration. Individual operations never inspect the
entity type again.
"""

import logging
import types
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar, Union, get_args, get_origin

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel

from ..core.exceptions import NotSupportedKeyError
from ..schemas.entity import Entity

logger = logging.getLogger(__name__)


KeyT = TypeVar("KeyT")


class KeyCodec(ABC, Generic[KeyT]):
    """Converts between entity keys and stored ``_id`` values."""

    @abstractmethod
    def parse(
        self,
        value: str,
    ) -> KeyT:
        """Parse the string form of a key."""
        pass

    @abstractmethod
    def to_document(
        self,
        key: Any,
    ) -> Any:
        """Convert a key (or native ObjectId) to its stored ``_id`` value."""
        pass

    @abstractmethod
    def from_document(
        self,
        value: Any,
    ) -> KeyT:
        """Convert a stored ``_id`` value back to an entity key."""
        pass

    def new_key(self) -> KeyT | None:
        """Create a key for an entity added without one; None lets the store assign it."""
        raise ValueError(f"{type(self).__name__} cannot create keys; set the id before adding")

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class ObjectIdKeyCodec(KeyCodec[str]):
    """Keys are 24-hex strings stored as native ObjectIds."""

    def parse(
        self,
        value: str,
    ) -> str:
        return str(self._to_object_id(value))

    def to_document(
        self,
        key: Any,
    ) -> ObjectId:
        if isinstance(key, ObjectId):
            return key
        return self._to_object_id(key)

    def from_document(
        self,
        value: Any,
    ) -> str:
        return str(value)

    def new_key(self) -> str | None:
        return None

    @staticmethod
    def _to_object_id(
        value: Any,
    ) -> ObjectId:
        if not isinstance(value, str):
            raise NotSupportedKeyError(value, "expected a 24 character hex string")
        try:
            return ObjectId(value)
        except InvalidId as e:
            raise NotSupportedKeyError(value, str(e)) from e


class StringKeyCodec(KeyCodec[str]):
    """Keys are plain strings, stored unchanged."""

    def parse(
        self,
        value: str,
    ) -> str:
        return value

    def to_document(
        self,
        key: Any,
    ) -> Any:
        # ObjectId lookups on string-keyed collections match its string form
        if isinstance(key, ObjectId):
            return str(key)
        return key

    def from_document(
        self,
        value: Any,
    ) -> str:
        return str(value)

    def new_key(self) -> str:
        # Stored as a string so lookups by the returned key match
        return str(ObjectId())


class PassthroughKeyCodec(KeyCodec[Any]):
    """Keys of any BSON-encodable type, stored unchanged. Ids must be set before adding."""

    def parse(
        self,
        value: str,
    ) -> Any:
        return value

    def to_document(
        self,
        key: Any,
    ) -> Any:
        return key

    def from_document(
        self,
        value: Any,
    ) -> Any:
        return value


def _is_str_annotation(
    annotation: Any,
) -> bool:
    if annotation is str:
        return True
    if get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        return args == [str]
    return False


def key_codec_for(
    entity_type: type[BaseModel],
) -> KeyCodec:
    """
    Choose the key codec for an entity type.

    Args:
        entity_type: Model class with an ``id`` field

    Returns:
        ObjectIdKeyCodec for Entity subclasses, StringKeyCodec for models with
        a ``str`` id, PassthroughKeyCodec otherwise

    Raises:
        TypeError: If the model has no ``id`` field
    """
    if "id" not in entity_type.model_fields:
        raise TypeError(f"{entity_type.__name__} has no 'id' field")

    if issubclass(entity_type, Entity):
        return ObjectIdKeyCodec()

    if _is_str_annotation(entity_type.model_fields["id"].annotation):
        return StringKeyCodec()

    return PassthroughKeyCodec()
