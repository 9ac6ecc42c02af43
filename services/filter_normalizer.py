from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel

from models.filter_criteria import (
    NO_FILTER,
    EmployeeRange,
    FilterCriteria,
    Many,
    One,
    SortSpec,
    ValueFilter,
)
from utils.company_size import parse_size_range, union_size_ranges


logger = logging.getLogger(__name__)

DEFAULT_SORT_KEY = "created_at"
DEFAULT_SORT_DIRECTION = "desc"

RawParams = Union[Mapping[str, Any], BaseModel, None]


def _first_present(params: Mapping[str, Any], *keys: str) -> Any:
    """Value of the first key that is set to something other than None/blank."""
    for key in keys:
        value = params.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def to_value_filter(raw: Any) -> ValueFilter:
    """Resolve a scalar-or-array filter value once into NoFilter / One / Many."""
    if raw is None:
        return NO_FILTER
    if isinstance(raw, (list, tuple, set, frozenset)):
        items = sorted(raw, key=str) if isinstance(raw, (set, frozenset)) else list(raw)
        values: List[str] = []
        for item in items:
            if item is None:
                continue
            text = str(item).strip()
            if text and text not in values:
                values.append(text)
        if not values:
            return NO_FILTER
        if len(values) == 1:
            return One(values[0])
        return Many(tuple(values))
    text = str(raw).strip()
    return One(text) if text else NO_FILTER


def _positive_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _optional_int(value: Any, name: str) -> Optional[int]:
    # 0 is a valid bound; only None/blank/non-numeric count as unset
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        logger.debug("Ignoring non-numeric %s=%r", name, value)
        return None


def _employee_range(params: Mapping[str, Any]) -> EmployeeRange:
    low = _optional_int(params.get("min_employees"), "min_employees")
    high = _optional_int(params.get("max_employees"), "max_employees")

    # Legacy bucket labels only fill bounds that were not given explicitly
    buckets = params.get("employees")
    if isinstance(buckets, str):
        buckets = [buckets]
    if buckets and (low is None or high is None):
        combined = union_size_ranges(parse_size_range(b) for b in buckets if b)
        if combined is not None:
            if low is None and combined.min > 0:
                low = combined.min
            if high is None and combined.max is not None:
                high = combined.max
    return EmployeeRange(min=low, max=high)


def _sort_spec(params: Mapping[str, Any]) -> SortSpec:
    key = _first_present(params, "sortBy", "orderBy")
    direction = _first_present(params, "sortOrder", "orderDirection")
    key = str(key).strip() if key is not None else DEFAULT_SORT_KEY
    direction = str(direction).strip().lower() if direction is not None else DEFAULT_SORT_DIRECTION
    return SortSpec(key=key, direction="asc" if direction == "asc" else "desc")


def _as_mapping(raw_params: RawParams) -> Mapping[str, Any]:
    if raw_params is None:
        return {}
    if isinstance(raw_params, BaseModel):
        return raw_params.model_dump(by_alias=True, exclude_none=True)
    return raw_params


def normalize(
    raw_params: RawParams = None,
    *,
    default_page_size: Optional[int] = None,
    max_page_size: Optional[int] = None,
) -> FilterCriteria:
    """Turn UI-shaped request parameters into canonical FilterCriteria."""
    if default_page_size is None or max_page_size is None:
        from config.settings import get_settings
        settings = get_settings()
        default_page_size = default_page_size or settings.default_page_size
        max_page_size = max_page_size or settings.max_page_size

    params = _as_mapping(raw_params)

    search = params.get("search")
    search_text = str(search).strip() if search is not None else ""

    category_raw = params.get("category")
    if category_raw is None:
        category_raw = params.get("categories")

    page_size = _positive_int(
        _first_present(params, "limit", "perPage", "pageSize", "page_size"),
        default_page_size,
    )
    list_id = _first_present(params, "listId", "list_id")

    return FilterCriteria(
        search_text=search_text or None,
        countries=to_value_filter(params.get("country")),
        regions=to_value_filter(params.get("region")),
        categories=to_value_filter(category_raw),
        technologies=to_value_filter(params.get("technology")),
        employee_range=_employee_range(params),
        list_id=str(list_id).strip() if list_id is not None else None,
        sort=_sort_spec(params),
        page=_positive_int(params.get("page"), 1),
        page_size=min(page_size, max_page_size),
    )
