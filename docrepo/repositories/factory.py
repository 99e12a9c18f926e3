"""
Repository factory - cached repositories bound to the default connection.
"""

import logging

from pydantic import BaseModel

from .mongodb.repository import DocumentRepository

logger = logging.getLogger(__name__)

# Singleton instances keyed by (entity type, collection name override)
_repositories: dict[tuple[type[BaseModel], str | None], DocumentRepository] = {}


def get_repository(
    entity_type: type[BaseModel],
    collection_name: str | None = None,
) -> DocumentRepository:
    """Get repository singleton for an entity type."""
    key = (entity_type, collection_name)
    repository = _repositories.get(key)
    if repository is not None:
        return repository

    logger.info(f"Creating repository for {entity_type.__name__}")
    repository = DocumentRepository.from_connection_string(
        entity_type,
        collection_name=collection_name,
    )
    _repositories[key] = repository
    return repository


def reset_repositories() -> None:
    """Reset all repository singletons. USE ONLY IN TESTS."""
    _repositories.clear()
