"""
Exceptions raised by docrepo.

Errors raised by the MongoDB driver are not wrapped: they reach the caller
as ``pymongo.errors.PyMongoError`` subclasses, exported here as ``StoreError``.
"""

from typing import Any

from pymongo.errors import PyMongoError

StoreError = PyMongoError


class RepositoryError(Exception):
    """Base exception for all docrepo errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class NotSupportedKeyError(RepositoryError):
    """Raised when a key cannot be resolved to the store's native id."""

    def __init__(
        self,
        key: Any,
        reason: str | None = None,
    ):
        message = f"Key not supported: {key!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(
            message=message,
            details={"key": key, "reason": reason},
        )
        self.key = key


class RepositoryConfigurationError(RepositoryError):
    """Raised when connection settings are missing or incomplete."""
