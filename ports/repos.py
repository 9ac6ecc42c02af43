from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple

from models.company_record import CompanyRecord, CustomerCompanyRecord, ListRecord
from services.query_builder import CompanyQuery


class CompaniesRepoPort(Protocol):
    def search(self, query: CompanyQuery) -> Tuple[List[CompanyRecord], int]:
        ...

    def get_for_tenant(self, company_id: str, tenant_id: str) -> Optional[CompanyRecord]:
        ...

    def update_fields(self, company_id: str, fields: Dict[str, Any]) -> int:
        ...


class CustomerCompaniesRepoPort(Protocol):
    def get(self, customer_id: str, company_id: str) -> Optional[CustomerCompanyRecord]:
        ...

    def get_for_companies(self, customer_id: str, company_ids: Iterable[str]) -> Dict[str, CustomerCompanyRecord]:
        ...

    def update(self, customer_id: str, company_id: str, fields: Dict[str, Any]) -> int:
        ...


class ListsRepoPort(Protocol):
    def lists_for_company(self, company_id: str, customer_id: str) -> List[ListRecord]:
        ...


class CompanyMetadataRepoPort(Protocol):
    def latest_diffbot_json(self, company_id: str) -> Optional[Dict[str, Any]]:
        ...


class TenantsRepoPort(Protocol):
    def customer_for_user(self, user_id: str) -> Optional[str]:
        ...
