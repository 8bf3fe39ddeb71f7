import asyncio
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type

import pymongo
from bson import ObjectId
from pymongo.errors import ConnectionFailure, OperationFailure

from docrepo.storage.documents import resolve_collection_name, to_store_id
from docrepo.storage.exceptions import (
    IntegrityError,
    NotFoundError,
    OperationCancelledError,
    StoreConnectivityError,
)
from docrepo.storage.mongo_adapter import MongoAdapter
from docrepo.storage.pagination import (
    PaginationRequest,
    PaginationResult,
    SortDirection,
    substring_filter,
)
from .base import D, DocumentRepository

# AuthenticationFailed, Unauthorized
AUTH_ERROR_CODES = frozenset({18, 13})


class MongoRepository(DocumentRepository[D]):
    """
    Generic repository over the collection bound to ``document_type``.

    The collection is resolved once at construction. Instances hold no mutable
    state and can be shared across concurrent callers.
    """

    def __init__(self, document_type: Type[D], adapter: MongoAdapter):
        # Fails fast with ConfigurationError for unbound types.
        self.collection_name = resolve_collection_name(document_type)
        self.document_type = document_type
        self.collection = adapter.get_collection(self.collection_name)

    @contextmanager
    def _store_errors(self, operation: str, document_id: Optional[str] = None) -> Iterator[None]:
        try:
            yield
        except ConnectionFailure as e:
            raise StoreConnectivityError(
                f"Store unavailable: {e}",
                collection=self.collection_name,
                operation=operation,
                document_id=document_id,
            ) from e
        except OperationFailure as e:
            if e.code not in AUTH_ERROR_CODES:
                raise
            raise StoreConnectivityError(
                f"Store rejected credentials: {e}",
                collection=self.collection_name,
                operation=operation,
                document_id=document_id,
            ) from e

    def _not_found(self, operation: str, document_id: str) -> NotFoundError:
        return NotFoundError(
            "Document not found",
            collection=self.collection_name,
            operation=operation,
            document_id=document_id,
        )

    def _to_model(self, raw: Dict[str, Any]) -> D:
        return self.document_type.model_validate(raw)

    # --- CRUD ---

    async def get_all(self) -> List[D]:
        with self._store_errors("get_all"):
            raw_documents = await self.collection.find({}).to_list(length=None)
        return [self._to_model(raw) for raw in raw_documents]

    async def find_by_id(self, id: str) -> Optional[D]:
        with self._store_errors("find_by_id", id):
            matches = await self.collection.find({"_id": to_store_id(id)}).limit(2).to_list(length=2)
        if len(matches) > 1:
            raise IntegrityError(
                f"{len(matches)} documents share one identifier",
                collection=self.collection_name,
                operation="find_by_id",
                document_id=id,
            )
        return self._to_model(matches[0]) if matches else None

    async def get_by_id(self, id: str) -> D:
        document = await self.find_by_id(id)
        if document is None:
            raise self._not_found("get_by_id", id)
        return document

    async def insert(self, document: D) -> D:
        if document.id is None:
            document = document.model_copy(update={"id": str(ObjectId())})
        with self._store_errors("insert", document.id):
            await self.collection.insert_one(document.to_document())
        return document

    async def update(self, document: D) -> D:
        if document.id is None:
            raise ValueError("Cannot update a document without an id")
        replacement = document.to_document()
        with self._store_errors("update", document.id):
            previous = await self.collection.find_one_and_replace(
                {"_id": replacement["_id"]}, replacement
            )
        if previous is None:
            raise self._not_found("update", document.id)
        return document

    async def delete_by_id(self, id: str) -> None:
        with self._store_errors("delete_by_id", id):
            deleted = await self.collection.find_one_and_delete({"_id": to_store_id(id)})
        if deleted is None:
            raise self._not_found("delete_by_id", id)

    async def count(self, filter: Optional[Dict[str, Any]] = None) -> int:
        with self._store_errors("count"):
            return await self.collection.count_documents(filter or {})

    # --- Pagination ---

    def _request_filter(self, request: PaginationRequest) -> Dict[str, Any]:
        field = self.document_type.storage_field(request.filter_field)
        if field == "_id":
            raise ValueError("Substring filtering on the document id is not supported")
        return substring_filter(field, request.filter_value)

    def _sort_spec(self, request: PaginationRequest) -> Optional[List[Tuple[str, int]]]:
        if not request.sort:
            return None
        direction = (
            pymongo.DESCENDING
            if request.direction is SortDirection.DESCENDING
            else pymongo.ASCENDING
        )
        return [(self.document_type.storage_field(request.sort), direction)]

    async def _fetch_page(self, filter: Dict[str, Any], request: PaginationRequest) -> List[D]:
        cursor = self.collection.find(filter)
        sort = self._sort_spec(request)
        if sort:
            cursor = cursor.sort(sort)
        cursor = cursor.skip(request.skip).limit(request.page_size)
        raw_documents = await cursor.to_list(length=request.page_size)
        return [self._to_model(raw) for raw in raw_documents]

    async def _paginate(
        self,
        operation: str,
        fetch_filter: Dict[str, Any],
        count_filter: Dict[str, Any],
        request: PaginationRequest,
        timeout: Optional[float],
    ) -> PaginationResult[D]:
        count_task = asyncio.ensure_future(self.collection.count_documents(count_filter))
        fetch_task = asyncio.ensure_future(self._fetch_page(fetch_filter, request))
        try:
            with self._store_errors(operation):
                async with asyncio.timeout(timeout):
                    total_rows, items = await asyncio.gather(count_task, fetch_task)
        except TimeoutError as e:
            raise OperationCancelledError(
                f"Timed out after {timeout}s",
                collection=self.collection_name,
                operation=operation,
            ) from e
        finally:
            # No partial results: a failure in one half cancels the other.
            for task in (count_task, fetch_task):
                if not task.done():
                    task.cancel()
            # Retrieve the outcome of both halves, including a second failure.
            await asyncio.gather(count_task, fetch_task, return_exceptions=True)

        return PaginationResult[self.document_type].build(request, items, total_rows)

    async def paginate_by(
        self,
        predicate: Optional[Dict[str, Any]],
        request: PaginationRequest,
        *,
        timeout: Optional[float] = None,
        count_unfiltered: bool = False,
    ) -> PaginationResult[D]:
        """Page through documents matching ``predicate``.

        A filter field/value on the request takes precedence over ``predicate``.
        The total is counted with the filter actually applied to the page unless
        ``count_unfiltered`` asks for the whole-collection total.
        """
        if request.has_filter:
            applied = self._request_filter(request)
        else:
            applied = dict(predicate or {})
        count_filter = {} if count_unfiltered else applied
        return await self._paginate("paginate_by", applied, count_filter, request, timeout)

    async def paginate_by_filter(
        self,
        request: PaginationRequest,
        *,
        timeout: Optional[float] = None,
    ) -> PaginationResult[D]:
        """Page through documents, substring-filtered when the request carries a filter."""
        applied = self._request_filter(request) if request.has_filter else {}
        return await self._paginate("paginate_by_filter", applied, applied, request, timeout)
