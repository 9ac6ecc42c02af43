from __future__ import annotations


class CompaniesError(Exception):
    """Base class for errors raised by the companies catalog."""


class NotAuthenticatedError(CompaniesError):
    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class TenantResolutionError(CompaniesError):
    pass


class QueryExecutionError(CompaniesError):
    """Storage call failed; the original exception is chained as __cause__."""


class NotFoundError(CompaniesError):
    pass
