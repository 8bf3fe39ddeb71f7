"""
Pytest configuration and shared fixtures.
"""

import os
import sys
from unittest.mock import patch
from uuid import uuid4

import pytest
from mongomock_motor import AsyncMongoMockClient

sys.path.append(os.path.join(os.getcwd(), "src"))

from docrepo.storage import MongoAdapter, MongoConfig, MongoRepository  # noqa: E402
from tests.models import Book  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> None:
    """Set up test environment variables."""
    os.environ.setdefault("APP_ENV", "test")
    os.environ.setdefault("LOG_LEVEL", "debug")


@pytest.fixture
def mongo_adapter():
    """Adapter backed by an in-memory Mongo, one fresh database per test."""
    with patch("docrepo.storage.mongo_adapter.AsyncIOMotorClient", AsyncMongoMockClient):
        adapter = MongoAdapter(MongoConfig(MONGO_DATABASE=f"test_{uuid4().hex}"))
        adapter.connect()
        yield adapter


@pytest.fixture
def book_repository(mongo_adapter) -> MongoRepository[Book]:
    return MongoRepository(Book, mongo_adapter)
