"""
Generic async repositories over MongoDB-compatible document stores.

Example:

    from docrepo import DocumentRepository, Entity

    class Customer(Entity):
        name: str

    repo = DocumentRepository.from_connection_string(
        Customer, "mongodb://localhost:27017/shop"
    )
    customer = await repo.add(Customer(name="Ada"))
    same = await repo.get_by_id(customer.id)
"""

from .core import (
    NotSupportedKeyError,
    RepositoryConfigurationError,
    RepositoryError,
    StoreError,
    settings,
)
from .repositories import (
    CollectionManager,
    DocumentRepository,
    DocumentRepositoryBase,
    EntityCursor,
    KeyCodec,
    ObjectIdKeyCodec,
    PassthroughKeyCodec,
    StringKeyCodec,
    StringKeyRepository,
    get_repository,
    key_codec_for,
    reset_repositories,
    string_key_repository,
)
from .schemas import Entity

__version__ = "0.1.0"

__all__ = [
    "CollectionManager",
    "DocumentRepository",
    "DocumentRepositoryBase",
    "Entity",
    "EntityCursor",
    "KeyCodec",
    "NotSupportedKeyError",
    "ObjectIdKeyCodec",
    "PassthroughKeyCodec",
    "RepositoryConfigurationError",
    "RepositoryError",
    "StoreError",
    "StringKeyCodec",
    "StringKeyRepository",
    "get_repository",
    "key_codec_for",
    "reset_repositories",
    "settings",
    "string_key_repository",
]
