from __future__ import annotations

import logging
import sqlite3
import time
from typing import Any, Dict, List, Optional, Tuple

from models.company_item import CompanyItem, CompanyItemList
from models.company_record import CompanyRecord, CustomerCompanyRecord
from models.filter_criteria import FilterCriteria
from models.paged_result import PagedResult
from models.update_payload import UpdateCompanyPayload
from models.user import User
from ports.auth import SessionProviderPort, TenantResolverPort
from ports.repos import (
    CompaniesRepoPort,
    CompanyMetadataRepoPort,
    CustomerCompaniesRepoPort,
    ListsRepoPort,
)
from services.errors import NotAuthenticatedError, NotFoundError, QueryExecutionError
from services.filter_normalizer import RawParams, normalize
from services.mapping import build_paged_result, map_to_items, to_company_item, to_company_item_list
from services.predicates import describe
from services.query_builder import build_company_query
from utils.logging_setup import op_extra
from utils.query_logger import log_query


logger = logging.getLogger(__name__)

# Written to the tenant overlay; everything else goes to the shared catalog row
CUSTOMER_SCOPED_FIELDS = ("revenue", "employees", "categories", "country", "region")

# Payload name -> companies column; tenant-scoped fields never reach the shared row
GLOBAL_FIELD_COLUMNS = {
    "name": "display_name",
    "description": "description",
    "website": "website_url",
    "logo": "logo",
    "address": "address",
    "postal_code": "postal_code",
    "latitude": "latitude",
    "longitude": "longitude",
    "capitalization": "capitalization",
    "currency_code": "currency_code",
    "siccodes": "siccodes",
    "technologies": "technologies",
    "phone": "phone",
    "email": "email",
    "social_links": "social_links",
}


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


class CompaniesService:
    """Tenant-scoped read (and update) operations over the company catalog.

    Every operation authenticates and resolves the tenant from scratch; nothing
    is cached between calls.
    """

    def __init__(
        self,
        session: SessionProviderPort,
        tenants: TenantResolverPort,
        companies: CompaniesRepoPort,
        customer_companies: CustomerCompaniesRepoPort,
        lists: ListsRepoPort,
        metadata: CompanyMetadataRepoPort,
    ) -> None:
        self.session = session
        self.tenants = tenants
        self.companies = companies
        self.customer_companies = customer_companies
        self.lists = lists
        self.metadata = metadata

    # --- Context ---
    def _require_user(self) -> User:
        user = self.session.get_current_user()
        if user is None:
            raise NotAuthenticatedError()
        return user

    def _resolve_context(self) -> Tuple[User, str]:
        user = self._require_user()
        return user, self.tenants.resolve_current_tenant_id(user)

    # --- Queries ---
    def execute(self, criteria: FilterCriteria, tenant_id: str) -> Tuple[List[CompanyRecord], int]:
        """Run the catalog query for one page; all-or-nothing."""
        query = build_company_query(criteria, tenant_id)
        summary = describe(query.where)
        started = time.monotonic()
        try:
            rows, total = self.companies.search(query)
        except Exception as e:
            duration_ms = _elapsed_ms(started)
            logger.error(
                "Company query failed",
                extra=op_extra("get_companies", tenant_id, "error", duration_ms, str(e)),
            )
            log_query(operation="get_companies", tenant_id=tenant_id, duration_ms=duration_ms, status="error", error=str(e), predicates=summary)
            raise QueryExecutionError(f"Failed to fetch companies: {e}") from e
        duration_ms = _elapsed_ms(started)
        logger.debug(
            "Company query returned %d of %d rows",
            len(rows),
            total,
            extra=op_extra("get_companies", tenant_id, duration_ms=duration_ms),
        )
        log_query(
            operation="get_companies",
            tenant_id=tenant_id,
            duration_ms=duration_ms,
            total_count=total,
            predicates=summary,
            extras={"sort": f"{query.sort.key} {query.sort.direction}", "offset": query.offset, "limit": query.limit},
        )
        return rows, total

    def _load_overlays(self, tenant_id: str, company_ids: List[str]) -> Dict[str, CustomerCompanyRecord]:
        try:
            return self.customer_companies.get_for_companies(tenant_id, company_ids)
        except Exception as e:
            logger.warning(
                "Failed to fetch scoring data; returning companies without overlays",
                extra=op_extra("get_companies", tenant_id, "degraded", error=str(e)),
            )
            return {}

    def get_companies(self, params: RawParams = None) -> PagedResult[CompanyItem]:
        """Filtered, sorted page of the tenant's companies."""
        _user, tenant_id = self._resolve_context()
        criteria = normalize(params)
        rows, total = self.execute(criteria, tenant_id)
        if not rows:
            return build_paged_result([], total, criteria.page, criteria.page_size)
        overlays = self._load_overlays(tenant_id, [r.company_id for r in rows if r.company_id])
        return map_to_items(rows, total, criteria, overlays)

    def _get_company_record(self, company_id: str, tenant_id: str) -> CompanyRecord:
        """Catalog row of a company in the tenant's catalog; other tenants' companies are not found."""
        try:
            company = self.companies.get_for_tenant(company_id, tenant_id)
        except Exception as e:
            raise QueryExecutionError(f"Failed to fetch company: {e}") from e
        if company is None:
            raise NotFoundError(f"Company not found: {company_id}")
        return company

    def _fetch_lists(self, company_id: str, tenant_id: str) -> List[CompanyItemList]:
        return [to_company_item_list(r) for r in self.lists.lists_for_company(company_id, tenant_id)]

    def get_company_by_id(self, company_id: str) -> CompanyItem:
        """Single company with the tenant's scoring overlay and list memberships."""
        _user, tenant_id = self._resolve_context()
        company = self._get_company_record(company_id, tenant_id)

        overlay: Optional[CustomerCompanyRecord] = None
        try:
            overlay = self.customer_companies.get(tenant_id, company_id)
        except Exception as e:
            logger.warning(
                "Failed to fetch scoring data",
                extra=op_extra("get_company_by_id", tenant_id, "degraded", error=str(e)),
            )

        lists: Optional[List[CompanyItemList]] = None
        try:
            lists = self._fetch_lists(company_id, tenant_id)
        except Exception as e:
            logger.warning(
                "Failed to fetch lists",
                extra=op_extra("get_company_by_id", tenant_id, "degraded", error=str(e)),
            )

        return to_company_item(company, overlay, lists)

    def get_company_lists(self, company_id: str) -> List[CompanyItemList]:
        _user, tenant_id = self._resolve_context()
        try:
            return self._fetch_lists(company_id, tenant_id)
        except Exception as e:
            raise QueryExecutionError(f"Failed to fetch lists: {e}") from e

    def get_company_metadata(self, company_id: str) -> Dict[str, Any]:
        """Newest provider (Diffbot) payload stored for the company."""
        _user, tenant_id = self._resolve_context()
        self._get_company_record(company_id, tenant_id)
        try:
            payload = self.metadata.latest_diffbot_json(company_id)
        except Exception as e:
            raise QueryExecutionError(f"Failed to fetch diffbot JSON: {e}") from e
        if not payload:
            raise NotFoundError("Diffbot JSON not found for this company")
        return payload

    def update_company(self, company_id: str, payload: UpdateCompanyPayload) -> CompanyItem:
        """Write tenant-scoped fields to the overlay and global fields to the catalog row.

        A rename goes to the overlay when the tenant already shows its own name,
        otherwise to the catalog display name.
        """
        _user, tenant_id = self._resolve_context()
        changes = payload.model_dump(exclude_unset=True)
        self._get_company_record(company_id, tenant_id)

        scoped = {k: v for k, v in changes.items() if k in CUSTOMER_SCOPED_FIELDS}
        global_fields = {GLOBAL_FIELD_COLUMNS[k]: v for k, v in changes.items() if k in GLOBAL_FIELD_COLUMNS}
        try:
            if "name" in changes:
                overlay = self.customer_companies.get(tenant_id, company_id)
                if overlay is not None and (overlay.name or "").strip():
                    scoped["name"] = global_fields.pop("display_name")
            if scoped:
                self.customer_companies.update(tenant_id, company_id, scoped)
            if global_fields:
                self.companies.update_fields(company_id, global_fields)
        except Exception as e:
            raise QueryExecutionError(f"Failed to update company: {e}") from e
        logger.info(
            "Updated company %s (%d overlay, %d catalog fields)",
            company_id,
            len(scoped),
            len(global_fields),
            extra=op_extra("update_company", tenant_id),
        )
        return self.get_company_by_id(company_id)

    def get_company_people(
        self,
        company_id: str,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Contacts of a company. Not backed by storage yet: always an empty page."""
        page = page or 1
        per_page = per_page or 25
        return {
            "data": [],
            "meta": {"total": 0, "page": page, "perPage": per_page, "lastPage": 1},
        }


def build_companies_service(conn: sqlite3.Connection, session: SessionProviderPort) -> CompaniesService:
    """Wire the service to the SQLite-backed repositories on one connection."""
    from db.repos.companies_repo import CompaniesRepo
    from db.repos.customer_companies_repo import CustomerCompaniesRepo
    from db.repos.lists_repo import ListsRepo
    from db.repos.metadata_repo import CompanyMetadataRepo
    from db.repos.tenants_repo import TenantsRepo
    from services.auth import TenantResolver

    return CompaniesService(
        session=session,
        tenants=TenantResolver(TenantsRepo(conn)),
        companies=CompaniesRepo(conn),
        customer_companies=CustomerCompaniesRepo(conn),
        lists=ListsRepo(conn),
        metadata=CompanyMetadataRepo(conn),
    )
