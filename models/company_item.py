from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class ScoringResults(BaseModel):
    score: float = 0
    short_description: str = ""
    full_description: str = ""


class CompanyItemList(BaseModel):
    id: int
    list_id: str | None = None
    name: str
    description: str | None = None
    is_attached: bool = True


class CompanyItem(BaseModel):
    """External item shape consumed by the dashboard.

    `id` is a lossy numeric surrogate of `company_id`; use `company_id` for lookups.
    """

    id: int
    company_id: str | None = None
    name: str
    type: str | None = None
    description: str | None = None
    website: str | None = None
    homepage_uri: str | None = None
    logo: str | None = None
    country: str | None = None
    region: str | None = None
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    revenue: float | None = None
    currency_code: str | None = None
    employees: int | None = None
    siccodes: list[str] | None = None
    categories: list[str] | None = None
    technologies: list[str] | None = None
    phone: str | None = None
    email: str | None = None
    last_scoring_results: ScoringResults | None = None
    social_links: dict[str, Any] | None = None
    fetched_at: str | None = None
    created_at: str
    updated_at: str
    lists: list[CompanyItemList] | None = None

    model_config = ConfigDict(extra="forbid")
