from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from models.company_record import CompanyRecord
from pipelines.runner import RunContext
from services.domain_utils import extract_apex_domain


logger = logging.getLogger(__name__)

# Import keys accepted for the catalog's own column names
_ALIASES = {
    "name": "display_name",
    "website": "website_url",
    "homepageUri": "website_url",
}


def _as_list(value: Any) -> Any:
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    return value


def _clean_company(raw: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(raw)
    for alias, column in _ALIASES.items():
        if alias in data and not data.get(column):
            data[column] = data.pop(alias)
    for key in ("categories", "technologies", "siccodes"):
        if key in data:
            data[key] = _as_list(data[key]) or []
    if not data.get("domain") and data.get("website_url"):
        data["domain"] = extract_apex_domain(data["website_url"])
    elif data.get("domain"):
        data["domain"] = extract_apex_domain(data["domain"]) or str(data["domain"]).strip().lower()
    return data


def _dedupe_key(company: CompanyRecord) -> Optional[str]:
    if company.domain:
        return f"domain:{company.domain}"
    name = (company.display_name or company.legal_name or "").strip().lower()
    if name:
        return f"name:{name}|{(company.country or '').strip().lower()}"
    return None


class ValidateCompanies:
    """Validate raw import records, derive domains and drop duplicates."""

    def run(self, ctx: RunContext) -> RunContext:
        raw_companies: List[Dict[str, Any]] = ctx.companies or []
        valid: List[CompanyRecord] = []
        seen = set()
        invalid = 0
        duplicates = 0
        for idx, raw in enumerate(raw_companies, start=1):
            if not isinstance(raw, dict):
                invalid += 1
                continue
            try:
                company = CompanyRecord.model_validate(_clean_company(raw))
            except ValidationError as e:
                logger.warning(f"Company {idx} validation failed: {e.error_count()} error(s)")
                invalid += 1
                continue
            key = _dedupe_key(company)
            if key is None:
                invalid += 1
                continue
            if key in seen:
                duplicates += 1
                continue
            seen.add(key)
            valid.append(company)

        logger.info(f"Validation completed. Valid: {len(valid)}, Invalid: {invalid}, Duplicates: {duplicates}")
        ctx.companies = valid
        ctx.meta["invalid_companies"] = invalid
        ctx.meta["duplicate_companies"] = duplicates
        return ctx
