from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from models.filter_criteria import EmployeeRange, FilterCriteria, Many, One, SortSpec, ValueFilter
from services.predicates import And, Contains, Eq, Gte, ILike, In, InList, InTenant, Lte, Or, Predicate


SEARCH_FIELDS: Tuple[str, ...] = ("display_name", "legal_name", "domain")


@dataclass(frozen=True)
class CompanyQuery:
    """Storage-independent description of one page request.

    Filters and sort keys are read against the tenant's effective values
    (its own overrides first, catalog values otherwise).
    """

    tenant_id: str
    where: And
    sort: SortSpec
    offset: int
    limit: int

    @property
    def window(self) -> Tuple[int, int]:
        """Inclusive zero-based row range of the page."""
        return self.offset, self.offset + self.limit - 1


def search_predicate(text: Optional[str]) -> Optional[Predicate]:
    if not text:
        return None
    return Or(tuple(ILike(f, text) for f in SEARCH_FIELDS))


def equality_predicate(field: str, f: ValueFilter) -> Optional[Predicate]:
    if isinstance(f, One):
        return Eq(field, f.value)
    if isinstance(f, Many):
        return In(field, f.values)
    return None


def membership_predicate(field: str, f: ValueFilter) -> Optional[Predicate]:
    # Row passes when its tag array intersects the requested values
    if isinstance(f, One):
        return Contains(field, f.value)
    if isinstance(f, Many):
        return Or(tuple(Contains(field, v) for v in f.values))
    return None


def employee_predicates(bounds: EmployeeRange) -> List[Predicate]:
    preds: List[Predicate] = []
    if bounds.min is not None:
        preds.append(Gte("employees", bounds.min))
    if bounds.max is not None:
        preds.append(Lte("employees", bounds.max))
    return preds


def build_predicates(criteria: FilterCriteria, tenant_id: str) -> And:
    """Conjunction of all active filters; tenant scope always comes first."""
    preds: List[Optional[Predicate]] = [
        InTenant(tenant_id),
        search_predicate(criteria.search_text),
        equality_predicate("country", criteria.countries),
        equality_predicate("region", criteria.regions),
        *employee_predicates(criteria.employee_range),
        membership_predicate("categories", criteria.categories),
        membership_predicate("technologies", criteria.technologies),
    ]
    if criteria.list_id:
        preds.append(InList(criteria.list_id, tenant_id))
    return And(tuple(p for p in preds if p is not None))


def build_company_query(criteria: FilterCriteria, tenant_id: str) -> CompanyQuery:
    return CompanyQuery(
        tenant_id=tenant_id,
        where=build_predicates(criteria, tenant_id),
        sort=criteria.sort,
        offset=criteria.offset,
        limit=criteria.page_size,
    )
