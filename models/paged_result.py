from __future__ import annotations

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel


T = TypeVar("T")


class PagedResult(BaseModel, Generic[T]):
    """One page of results plus pagination metadata derived from the total count."""

    items: List[T]
    page: int
    page_size: int
    total_count: int
    total_pages: int
    has_next: bool
    has_prev: bool
    next: Optional[int] = None
    prev: Optional[int] = None
