"""
Conftest for unit tests.

Provides fixtures specific to unit tests.
"""

import logging

import pytest

from docrepo.core.config import settings
from docrepo.repositories.factory import reset_repositories
from docrepo.repositories.mongodb import client as client_module
from tests.fixtures.mocks.mock_mongo import MockAsyncCollection

logger = logging.getLogger(__name__)


TEST_CONNECTION_STRING: str = "mongodb://localhost:27017/test_db"


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """
    Give each test a known configuration and empty client/repository caches.

    Yields:
        The patched settings object
    """
    monkeypatch.setattr(
        settings,
        "connection_strings",
        {"MongoServerSettings": TEST_CONNECTION_STRING},
    )
    monkeypatch.setattr(settings, "default_connection_name", "MongoServerSettings")
    monkeypatch.setattr(settings, "mongodb_database", "default")
    monkeypatch.setattr(settings, "collection_namespace", None)
    monkeypatch.setattr(settings, "retry_writes", True)
    monkeypatch.setattr(settings, "documentdb_use_iam", False)
    monkeypatch.setattr(settings, "documentdb_use_tls", False)
    monkeypatch.setattr(settings, "documentdb_tls_ca_file", None)
    monkeypatch.setattr(client_module, "_clients", {})
    reset_repositories()

    yield settings

    reset_repositories()


@pytest.fixture
def mock_collection():
    """
    Create an in-memory collection for testing.

    Returns:
        MockAsyncCollection with no documents
    """
    return MockAsyncCollection(name="test_collection")
