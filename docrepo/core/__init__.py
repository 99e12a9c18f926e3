"""Settings and error types shared across docrepo."""

from .config import Settings, settings
from .exceptions import (
    NotSupportedKeyError,
    RepositoryConfigurationError,
    RepositoryError,
    StoreError,
)

__all__ = [
    "NotSupportedKeyError",
    "RepositoryConfigurationError",
    "RepositoryError",
    "Settings",
    "StoreError",
    "settings",
]
