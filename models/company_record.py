from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CompanyRecord(BaseModel):
    """Storage row shape for the shared `companies` catalog."""

    company_id: str | None = None
    display_name: str | None = None
    legal_name: str | None = None
    domain: str | None = None
    website_url: str | None = None
    type: str | None = None
    description: str | None = None
    logo: str | None = None
    country: str | None = None
    region: str | None = None
    address: str | None = None
    postal_code: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    revenue: float | None = None
    capitalization: float | None = None
    currency_code: str | None = None
    employees: int | None = None
    siccodes: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)
    phone: str | None = None
    email: str | None = None
    social_links: dict[str, Any] | None = None
    fetched_at: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    model_config = ConfigDict(extra="ignore")


class CustomerCompanyRecord(BaseModel):
    """Per-tenant overlay row from `customer_companies`."""

    customer_id: str
    company_id: str
    name: str | None = None
    categories: list[str] | None = None
    revenue: float | None = None
    country: str | None = None
    region: str | None = None
    employees: int | None = None
    last_scoring_results: Any = None

    model_config = ConfigDict(extra="ignore")


class ListRecord(BaseModel):
    list_id: str
    name: str | None = None
    description: str | None = None

    model_config = ConfigDict(extra="ignore")
