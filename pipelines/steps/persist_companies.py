from __future__ import annotations

import logging
import sqlite3
from typing import List

from db.repos.companies_repo import CompaniesRepo
from db.repos.customer_companies_repo import CustomerCompaniesRepo
from db.repos.lists_repo import ListsRepo
from models.company_record import CompanyRecord
from pipelines.runner import RunContext


logger = logging.getLogger(__name__)


class PersistCompanies:
    """Upsert validated companies into the catalog and attach them to the tenant."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def run(self, ctx: RunContext) -> RunContext:
        if not ctx.tenant_id:
            raise RuntimeError("PersistCompanies requires a tenant_id on the run context")
        companies: List[CompanyRecord] = ctx.companies or []
        repo = CompaniesRepo(self.conn)
        overlays = CustomerCompaniesRepo(self.conn)
        lists = ListsRepo(self.conn)
        processed = 0
        ids: List[str] = []
        for c in companies:
            try:
                # One transaction per company: catalog row, tenant row and list entry land together
                with self.conn:
                    company_id = repo.upsert_by_domain(c.model_dump(exclude_none=True), commit=False)
                    overlays.upsert(ctx.tenant_id, company_id, commit=False)
                    if ctx.list_id:
                        lists.add_company(ctx.list_id, company_id, commit=False)
            except sqlite3.Error as e:
                # Best-effort persistence; skip faulty entries
                logger.warning(f"Skipping company {c.display_name or c.domain}: {e}")
                continue
            ids.append(company_id)
            processed += 1
        ctx.meta["processed_companies"] = processed
        ctx.meta["company_ids"] = ids
        return ctx
