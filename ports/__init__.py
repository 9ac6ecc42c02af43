from .auth import SessionProviderPort, TenantResolverPort
from .repos import (
    CompaniesRepoPort,
    CompanyMetadataRepoPort,
    CustomerCompaniesRepoPort,
    ListsRepoPort,
    TenantsRepoPort,
)

__all__ = [
    "SessionProviderPort",
    "TenantResolverPort",
    "CompaniesRepoPort",
    "CompanyMetadataRepoPort",
    "CustomerCompaniesRepoPort",
    "ListsRepoPort",
    "TenantsRepoPort",
]
