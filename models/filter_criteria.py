from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Tuple, Union


SortDirection = Literal["asc", "desc"]


@dataclass(frozen=True)
class NoFilter:
    """Field not filtered."""


@dataclass(frozen=True)
class One:
    value: str


@dataclass(frozen=True)
class Many:
    """Two or more distinct values, in request order."""

    values: Tuple[str, ...]


ValueFilter = Union[NoFilter, One, Many]

NO_FILTER = NoFilter()


def filter_values(f: ValueFilter) -> Tuple[str, ...]:
    if isinstance(f, One):
        return (f.value,)
    if isinstance(f, Many):
        return f.values
    return ()


@dataclass(frozen=True)
class EmployeeRange:
    """Inclusive bounds; None leaves that side open. Zero is a real bound."""

    min: Optional[int] = None
    max: Optional[int] = None

    def is_empty(self) -> bool:
        return self.min is None and self.max is None


@dataclass(frozen=True)
class SortSpec:
    key: str = "created_at"
    direction: SortDirection = "desc"

    @property
    def ascending(self) -> bool:
        return self.direction == "asc"


@dataclass(frozen=True)
class FilterCriteria:
    search_text: Optional[str] = None
    countries: ValueFilter = NO_FILTER
    regions: ValueFilter = NO_FILTER
    categories: ValueFilter = NO_FILTER
    technologies: ValueFilter = NO_FILTER
    employee_range: EmployeeRange = field(default_factory=EmployeeRange)
    list_id: Optional[str] = None
    sort: SortSpec = field(default_factory=SortSpec)
    page: int = 1
    page_size: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size
