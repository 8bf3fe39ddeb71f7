from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

from docrepo.storage.documents import Document
from docrepo.storage.pagination import PaginationRequest, PaginationResult

D = TypeVar("D", bound=Document)


class DocumentRepository(Generic[D], ABC):
    """Abstract async repository defining CRUD and pagination contracts for one document type."""

    @abstractmethod
    async def get_all(self) -> List[D]:
        pass

    @abstractmethod
    async def find_by_id(self, id: str) -> Optional[D]:
        pass

    @abstractmethod
    async def get_by_id(self, id: str) -> D:
        pass

    @abstractmethod
    async def insert(self, document: D) -> D:
        pass

    @abstractmethod
    async def update(self, document: D) -> D:
        pass

    @abstractmethod
    async def delete_by_id(self, id: str) -> None:
        pass

    @abstractmethod
    async def count(self, filter: Optional[Dict[str, Any]] = None) -> int:
        pass

    @abstractmethod
    async def paginate_by(
        self,
        predicate: Optional[Dict[str, Any]],
        request: PaginationRequest,
        *,
        timeout: Optional[float] = None,
        count_unfiltered: bool = False,
    ) -> PaginationResult[D]:
        pass

    @abstractmethod
    async def paginate_by_filter(
        self,
        request: PaginationRequest,
        *,
        timeout: Optional[float] = None,
    ) -> PaginationResult[D]:
        pass
