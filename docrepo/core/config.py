"""
Process-wide settings for docrepo.

Settings are read from environment variables (and an optional ``.env`` file).
Named connection strings live in ``CONNECTION_STRINGS`` as a JSON object, e.g.

    CONNECTION_STRINGS='{"MongoServerSettings": "mongodb://localhost:27017/shop"}'
"""

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


DEFAULT_CONNECTION_NAME: str = "MongoServerSettings"


class Settings(BaseSettings):
    """Connection and client settings shared by all repositories."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Named connection strings
    connection_strings: dict[str, str] = Field(
        default_factory=dict,
        description="Connection strings keyed by name",
    )
    default_connection_name: str = Field(
        default=DEFAULT_CONNECTION_NAME,
        description="Entry of connection_strings used when no connection string is given",
    )
    mongodb_database: str = Field(
        default="default",
        description="Database used when the connection string names none",
    )
    collection_namespace: str | None = Field(
        default=None,
        description="Optional suffix appended to every collection name",
    )

    # Client options
    retry_writes: bool = Field(
        default=True,
        description="Retryable writes; must be False for AWS DocumentDB",
    )
    server_selection_timeout_ms: int = Field(
        default=30000,
        description="Server selection timeout in milliseconds",
    )
    documentdb_use_iam: bool = Field(
        default=False,
        description="Authenticate with AWS IAM credentials (MONGODB-AWS)",
    )
    documentdb_use_tls: bool = Field(
        default=False,
        description="Enable TLS on the client connection",
    )
    documentdb_tls_ca_file: str | None = Field(
        default=None,
        description="CA bundle used to verify the server certificate",
    )

    def get_connection_string(
        self,
        name: str,
    ) -> str | None:
        """Return the named connection string, or None if not configured."""
        return self.connection_strings.get(name)


settings = Settings()
