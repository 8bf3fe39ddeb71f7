from abc import ABC, abstractmethod
from typing import Any


class StorageAdapter(ABC):
    """Abstract base class for storage adapters."""

    @abstractmethod
    def connect(self) -> None:
        """Establish connection to the storage backend."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the connection."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the backend is reachable."""
        pass

    @abstractmethod
    def get_database(self) -> Any:
        """Provide the database handle collections are obtained from."""
        pass
