"""
Repository error taxonomy.

Every error carries the collection, operation and document id (when known)
so callers can diagnose a failure without a log line from this layer.
"""
from typing import Optional


class RepositoryError(Exception):
    """Base class for all repository errors."""

    def __init__(
        self,
        message: str,
        *,
        collection: Optional[str] = None,
        operation: Optional[str] = None,
        document_id: Optional[str] = None,
    ):
        self.message = message
        self.collection = collection
        self.operation = operation
        self.document_id = document_id
        super().__init__(self._render())

    def _render(self) -> str:
        context = [
            f"{key}={value}"
            for key, value in (
                ("collection", self.collection),
                ("operation", self.operation),
                ("id", self.document_id),
            )
            if value is not None
        ]
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class ConfigurationError(RepositoryError):
    """Unbound document type or invalid store configuration."""


class NotFoundError(RepositoryError):
    """The targeted document does not exist."""


class IntegrityError(RepositoryError):
    """More than one stored document shares an identifier."""


class StoreConnectivityError(RepositoryError):
    """Network, authentication or server selection failure talking to the store."""


class OperationCancelledError(RepositoryError):
    """The caller's timeout expired before the operation completed."""
