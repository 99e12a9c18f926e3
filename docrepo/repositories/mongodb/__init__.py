"""MongoDB repository implementations using Motor (async MongoDB driver)."""

from .client import (
    check_connection,
    close_clients,
    get_client,
    get_collection_from_connection_string,
    get_collection_from_database,
    get_collection_name,
    get_database_from_connection_string,
    get_default_connection_string,
)
from .manager import CollectionManager
from .repository import (
    DocumentRepository,
    EntityCursor,
    StringKeyRepository,
    string_key_repository,
)

__all__ = [
    "CollectionManager",
    "DocumentRepository",
    "EntityCursor",
    "StringKeyRepository",
    "check_connection",
    "close_clients",
    "get_client",
    "get_collection_from_connection_string",
    "get_collection_from_database",
    "get_collection_name",
    "get_database_from_connection_string",
    "get_default_connection_string",
    "string_key_repository",
]
