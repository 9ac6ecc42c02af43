from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, TypeVar

from models.company_item import CompanyItem, CompanyItemList, ScoringResults
from models.company_record import CompanyRecord, CustomerCompanyRecord, ListRecord
from models.filter_criteria import FilterCriteria
from models.paged_result import PagedResult


T = TypeVar("T")

_NON_HEX = re.compile(r"[^0-9a-fA-F]")


def derive_numeric_id(identifier: Optional[str]) -> int:
    """Legacy numeric surrogate: first 10 hex digits of the id, base 16.

    Lossy and not collision-free. Absent or hex-less ids map to 0.
    """
    if not identifier:
        return 0
    digits = _NON_HEX.sub("", str(identifier))[:10]
    if not digits:
        return 0
    return int(digits, 16)


def parse_last_scoring_results(raw: Any) -> Optional[ScoringResults]:
    if not isinstance(raw, Mapping) or not raw:
        return None
    score = raw.get("score")
    short = raw.get("short_description")
    full = raw.get("full_description")
    return ScoringResults(
        score=score if isinstance(score, (int, float)) and not isinstance(score, bool) else 0,
        short_description=short if isinstance(short, str) else "",
        full_description=full if isinstance(full, str) else "",
    )


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def to_company_item_list(record: ListRecord) -> CompanyItemList:
    return CompanyItemList(
        id=derive_numeric_id(record.list_id),
        list_id=record.list_id,
        name=record.name or "Unknown",
        description=record.description or None,
        is_attached=True,
    )


def to_company_item(
    company: CompanyRecord,
    overlay: Optional[CustomerCompanyRecord] = None,
    lists: Optional[List[CompanyItemList]] = None,
    now: Optional[str] = None,
) -> CompanyItem:
    """Build the external item from a catalog row and the tenant's optional overlay row."""
    now = now or _now_iso()
    base_name = company.display_name or company.legal_name or "Unknown"
    name = overlay.name if overlay and overlay.name and overlay.name.strip() else base_name

    def _pick(field: str) -> Any:
        if overlay is not None and getattr(overlay, field) is not None:
            return getattr(overlay, field)
        return getattr(company, field)

    categories = overlay.categories if overlay and overlay.categories else company.categories

    return CompanyItem(
        id=derive_numeric_id(company.company_id),
        company_id=company.company_id or None,
        name=name,
        type=company.type,
        description=company.description,
        website=company.website_url,
        homepage_uri=company.website_url,
        logo=company.logo,
        country=_pick("country"),
        region=_pick("region"),
        address=company.address,
        latitude=company.latitude,
        longitude=company.longitude,
        revenue=_pick("revenue"),
        currency_code=company.currency_code,
        employees=_pick("employees"),
        siccodes=company.siccodes,
        categories=categories,
        technologies=company.technologies,
        phone=company.phone,
        email=company.email,
        last_scoring_results=parse_last_scoring_results(overlay.last_scoring_results) if overlay else None,
        social_links=company.social_links,
        fetched_at=company.fetched_at,
        created_at=company.created_at or now,
        updated_at=company.updated_at or now,
        lists=lists or None,
    )


def build_paged_result(items: Sequence[T], total_count: int, page: int, page_size: int) -> PagedResult[T]:
    """Pagination metadata comes from the authoritative total, not len(items)."""
    total_pages = math.ceil(total_count / page_size) if page_size > 0 else 0
    has_next = page < total_pages
    has_prev = page > 1
    return PagedResult(
        items=list(items),
        page=page,
        page_size=page_size,
        total_count=total_count,
        total_pages=total_pages,
        has_next=has_next,
        has_prev=has_prev,
        next=page + 1 if has_next else None,
        prev=page - 1 if has_prev else None,
    )


def map_to_items(
    rows: Sequence[CompanyRecord],
    total_count: int,
    criteria: FilterCriteria,
    overlays: Optional[Dict[str, CustomerCompanyRecord]] = None,
) -> PagedResult[CompanyItem]:
    now = _now_iso()
    overlays = overlays or {}
    items = [to_company_item(r, overlays.get(r.company_id or ""), now=now) for r in rows]
    return build_paged_result(items, total_count, criteria.page, criteria.page_size)
