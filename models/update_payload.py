from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class UpdateCompanyPayload(BaseModel):
    """Partial company update. Only explicitly set fields are written."""

    name: str | None = None
    description: str | None = None
    website: str | None = None
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
    siccodes: list[str] | None = None
    categories: list[str] | None = None
    technologies: list[str] | None = None
    phone: str | None = None
    email: str | None = None
    social_links: dict[str, Any] | None = None

    model_config = ConfigDict(extra="forbid")
