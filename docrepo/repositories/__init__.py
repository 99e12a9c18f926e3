"""Repository contract, key codecs and the MongoDB implementation."""

from .factory import get_repository, reset_repositories
from .interfaces import DocumentRepositoryBase
from .keys import (
    KeyCodec,
    ObjectIdKeyCodec,
    PassthroughKeyCodec,
    StringKeyCodec,
    key_codec_for,
)
from .mongodb import (
    CollectionManager,
    DocumentRepository,
    EntityCursor,
    StringKeyRepository,
    string_key_repository,
)

__all__ = [
    "CollectionManager",
    "DocumentRepository",
    "DocumentRepositoryBase",
    "EntityCursor",
    "KeyCodec",
    "ObjectIdKeyCodec",
    "PassthroughKeyCodec",
    "StringKeyCodec",
    "StringKeyRepository",
    "get_repository",
    "key_codec_for",
    "reset_repositories",
    "string_key_repository",
]
