"""MongoDB/DocumentDB client cache and collection lookup."""

import logging
from typing import Any

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pydantic import BaseModel
from pymongo.errors import PyMongoError

from ...core.config import settings
from ...core.exceptions import RepositoryConfigurationError
from ...schemas.entity import resolve_collection_name


logger = logging.getLogger(__name__)

_clients: dict[str, AsyncIOMotorClient] = {}


def get_default_connection_string() -> str:
    """Get the connection string named by ``settings.default_connection_name``."""
    name = settings.default_connection_name
    connection_string = settings.get_connection_string(name)
    if not connection_string:
        raise RepositoryConfigurationError(
            f"No connection string configured for '{name}'",
            details={"name": name},
        )
    return connection_string


def _sanitize_connection_string(
    url: str,
) -> str:
    """Hide password in a connection string for safe logging."""
    if "@" not in url or "://" not in url:
        return url

    protocol, rest = url.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    if ":" in credentials:
        username = credentials.split(":", 1)[0]
        return f"{protocol}://{username}:***@{host}"
    return url


def _build_client_options() -> dict[str, Any]:
    """Build keyword options for a new client from settings."""
    options: dict[str, Any] = {
        "retryWrites": settings.retry_writes,
        "serverSelectionTimeoutMS": settings.server_selection_timeout_ms,
    }

    if settings.documentdb_use_iam:
        # IAM authentication for DocumentDB
        import boto3

        session = boto3.Session()
        credentials = session.get_credentials()

        if not credentials:
            raise RepositoryConfigurationError(
                "AWS credentials not found for DocumentDB IAM auth"
            )

        options["username"] = credentials.access_key
        options["password"] = credentials.secret_key
        options["authSource"] = "$external"
        options["authMechanism"] = "MONGODB-AWS"
        if credentials.token:
            options["authMechanismProperties"] = f"AWS_SESSION_TOKEN:{credentials.token}"
        logger.info("Using AWS IAM authentication for DocumentDB")

    if settings.documentdb_use_tls:
        options["tls"] = True
        if settings.documentdb_tls_ca_file:
            options["tlsCAFile"] = settings.documentdb_tls_ca_file
            logger.info(f"Using TLS CA file: {settings.documentdb_tls_ca_file}")

    return options


def get_client(
    connection_string: str,
) -> AsyncIOMotorClient:
    """Get the cached client for a connection string, creating it on first use."""
    client = _clients.get(connection_string)
    if client is not None:
        return client

    client = AsyncIOMotorClient(connection_string, **_build_client_options())
    _clients[connection_string] = client
    logger.info(f"Created client for {_sanitize_connection_string(connection_string)}")
    return client


def get_database_from_connection_string(
    connection_string: str,
) -> AsyncIOMotorDatabase:
    """Get the database named in the connection string, or the configured default."""
    client = get_client(connection_string)
    return client.get_default_database(default=settings.mongodb_database)


def get_collection_name(
    entity_type: type[BaseModel],
    collection_name: str | None = None,
) -> str:
    """Get full collection name for an entity type, with namespace."""
    if collection_name is not None:
        if not collection_name.strip():
            raise ValueError("Empty collection name not allowed")
        base_name = collection_name
    else:
        base_name = resolve_collection_name(entity_type)

    if settings.collection_namespace:
        return f"{base_name}_{settings.collection_namespace}"
    return base_name


def get_collection_from_database(
    entity_type: type[BaseModel],
    database: AsyncIOMotorDatabase,
    collection_name: str | None = None,
) -> AsyncIOMotorCollection:
    """Get the collection for an entity type from an explicit database."""
    return database[get_collection_name(entity_type, collection_name)]


def get_collection_from_connection_string(
    entity_type: type[BaseModel],
    connection_string: str | None = None,
    collection_name: str | None = None,
) -> AsyncIOMotorCollection:
    """Get the collection for an entity type, using the default connection if none given."""
    if connection_string is None:
        connection_string = get_default_connection_string()

    database = get_database_from_connection_string(connection_string)
    return get_collection_from_database(entity_type, database, collection_name)


async def check_connection(
    connection_string: str | None = None,
) -> bool:
    """Check if the server behind a connection string answers a ping."""
    if connection_string is None:
        connection_string = get_default_connection_string()

    try:
        await get_client(connection_string).admin.command("ping")
        return True
    except PyMongoError as e:
        logger.warning(
            f"Ping failed for {_sanitize_connection_string(connection_string)}: {e}"
        )
        return False


def close_clients() -> None:
    """Close all cached clients."""
    for client in _clients.values():
        client.close()
    _clients.clear()
