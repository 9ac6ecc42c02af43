from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GetCompaniesParams(BaseModel):
    """Request parameters for the companies list, including legacy aliases.

    Values are normalized by services.filter_normalizer; this model only types them.
    """

    page: int | None = None
    limit: int | None = None
    search: str | None = None
    sort_by: str | None = Field(default=None, alias="sortBy")
    sort_order: str | None = Field(default=None, alias="sortOrder")
    country: str | list[str] | None = None
    region: str | list[str] | None = None
    min_employees: int | None = None
    max_employees: int | None = None
    category: str | list[str] | None = None
    technology: str | list[str] | None = None
    list_id: str | None = Field(default=None, alias="listId")
    # Legacy params for compatibility
    per_page: int | None = Field(default=None, alias="perPage")
    order_by: str | None = Field(default=None, alias="orderBy")
    order_direction: str | None = Field(default=None, alias="orderDirection")
    categories: list[str] | None = None
    employees: list[str] | None = None

    model_config = ConfigDict(extra="forbid", populate_by_name=True)
