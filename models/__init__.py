from .company_record import CompanyRecord, CustomerCompanyRecord, ListRecord
from .company_item import CompanyItem, CompanyItemList, ScoringResults
from .companies_params import GetCompaniesParams
from .filter_criteria import EmployeeRange, FilterCriteria, Many, NoFilter, One, SortSpec
from .paged_result import PagedResult
from .size_range import SizeRange
from .update_payload import UpdateCompanyPayload
from .user import User

__all__ = [
    "CompanyRecord",
    "CustomerCompanyRecord",
    "ListRecord",
    "CompanyItem",
    "CompanyItemList",
    "ScoringResults",
    "GetCompaniesParams",
    "EmployeeRange",
    "FilterCriteria",
    "Many",
    "NoFilter",
    "One",
    "SortSpec",
    "PagedResult",
    "SizeRange",
    "UpdateCompanyPayload",
    "User",
]
