"""docrepo Storage Layer - Document contract, pagination, MongoDB adapter and repositories."""

from .base import StorageAdapter
from .documents import Document, resolve_collection_name
from .exceptions import (
    ConfigurationError,
    IntegrityError,
    NotFoundError,
    OperationCancelledError,
    RepositoryError,
    StoreConnectivityError,
)
from .mongo_adapter import MongoAdapter, MongoConfig
from .pagination import PaginationRequest, PaginationResult, SortDirection
from .repositories.base import DocumentRepository
from .repositories.mongo_repository import MongoRepository

__all__ = [
    "StorageAdapter",
    "MongoAdapter",
    "MongoConfig",
    "Document",
    "resolve_collection_name",
    "DocumentRepository",
    "MongoRepository",
    "PaginationRequest",
    "PaginationResult",
    "SortDirection",
    # Errors
    "RepositoryError",
    "ConfigurationError",
    "NotFoundError",
    "IntegrityError",
    "StoreConnectivityError",
    "OperationCancelledError",
]
