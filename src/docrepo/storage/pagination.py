"""
Pagination request/result models and page arithmetic.
"""
import math
import re
from enum import Enum
from fractions import Fraction
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class SortDirection(str, Enum):
    """Single-field sort direction."""

    ASCENDING = "asc"
    DESCENDING = "desc"

    @classmethod
    def parse(cls, value: Union["SortDirection", str, None]) -> "SortDirection":
        """Descending only for the exact ``"desc"`` marker; anything else sorts ascending."""
        if value == cls.DESCENDING or value == cls.DESCENDING.value:
            return cls.DESCENDING
        return cls.ASCENDING


def compute_skip(page: int, page_size: int) -> int:
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be > 0, got {page_size}")
    return (page - 1) * page_size


def compute_total_pages(total_rows: int, page_size: int) -> int:
    """ceil(total_rows / page_size), dividing exactly before rounding up."""
    if page_size < 1:
        raise ValueError(f"page_size must be > 0, got {page_size}")
    if total_rows < 0:
        raise ValueError(f"total_rows must be >= 0, got {total_rows}")
    return math.ceil(Fraction(total_rows, page_size))


def substring_filter(field: str, value: str) -> Dict[str, Any]:
    """Case-insensitive substring match of ``value`` anywhere in ``field``."""
    return {field: {"$regex": re.escape(value), "$options": "i"}}


class PaginationRequest(BaseModel):
    """Query parameters of one page request."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, gt=0)
    sort: Optional[str] = None
    sort_direction: str = SortDirection.ASCENDING.value
    filter_field: Optional[str] = None
    filter_value: Optional[str] = None

    @property
    def direction(self) -> SortDirection:
        return SortDirection.parse(self.sort_direction)

    @property
    def has_filter(self) -> bool:
        return bool(self.filter_field) and self.filter_value is not None

    @property
    def skip(self) -> int:
        return compute_skip(self.page, self.page_size)


class PaginationResult(BaseModel, Generic[T]):
    """One page of documents plus the totals of the query that produced it."""

    model_config = ConfigDict(frozen=True)

    items: List[T] = Field(default_factory=list)
    page: int
    page_size: int
    total_rows: int
    total_pages: int

    @classmethod
    def build(cls, request: PaginationRequest, items: List[T], total_rows: int) -> "PaginationResult[T]":
        return cls(
            items=items,
            page=request.page,
            page_size=request.page_size,
            total_rows=total_rows,
            total_pages=compute_total_pages(total_rows, request.page_size),
        )
