from __future__ import annotations

import sqlite3
from typing import Any, Dict, Iterable, Optional

from db.rows import dump_json, fetch_dicts, fetch_one_dict, load_json
from models.company_record import CustomerCompanyRecord


OVERLAY_COLUMNS = ("name", "categories", "revenue", "country", "region", "employees", "last_scoring_results")
_JSON_OVERLAY_COLUMNS = ("categories", "last_scoring_results")


def _row_to_overlay(row: Dict[str, Any]) -> CustomerCompanyRecord:
    data = dict(row)
    for key in _JSON_OVERLAY_COLUMNS:
        data[key] = load_json(data.get(key))
    return CustomerCompanyRecord.model_validate(data)


class CustomerCompaniesRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def get(self, customer_id: str, company_id: str) -> Optional[CustomerCompanyRecord]:
        cur = self.conn.cursor()
        cur.execute(
            "SELECT * FROM customer_companies WHERE customer_id = ? AND company_id = ?",
            (customer_id, company_id),
        )
        row = fetch_one_dict(cur)
        return _row_to_overlay(row) if row else None

    def get_for_companies(self, customer_id: str, company_ids: Iterable[str]) -> Dict[str, CustomerCompanyRecord]:
        """Overlay rows of one tenant keyed by company id."""
        ids = [c for c in company_ids if c]
        if not ids:
            return {}
        marks = ", ".join("?" for _ in ids)
        cur = self.conn.cursor()
        cur.execute(
            f"SELECT * FROM customer_companies WHERE customer_id = ? AND company_id IN ({marks})",
            (customer_id, *ids),
        )
        return {r["company_id"]: _row_to_overlay(r) for r in fetch_dicts(cur)}

    def _write(self, customer_id: str, company_id: str, fields: Optional[Dict[str, Any]]) -> int:
        values = {k: v for k, v in (fields or {}).items() if k in OVERLAY_COLUMNS}
        if not values:
            return 0
        encoded = [dump_json(v) if k in _JSON_OVERLAY_COLUMNS else v for k, v in values.items()]
        sets = ", ".join(f"{k} = ?" for k in values)
        cur = self.conn.execute(
            f"UPDATE customer_companies SET {sets}, updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now') "
            "WHERE customer_id = ? AND company_id = ?",
            (*encoded, customer_id, company_id),
        )
        return cur.rowcount

    def upsert(
        self,
        customer_id: str,
        company_id: str,
        fields: Optional[Dict[str, Any]] = None,
        commit: bool = True,
    ) -> None:
        """Create the tenant's overlay row if missing and write the given overlay fields.

        Adding a company to a tenant catalog goes through here; edits use update().
        """
        self.conn.execute(
            "INSERT OR IGNORE INTO customer_companies (customer_id, company_id) VALUES (?, ?)",
            (customer_id, company_id),
        )
        self._write(customer_id, company_id, fields)
        if commit:
            self.conn.commit()

    def update(self, customer_id: str, company_id: str, fields: Dict[str, Any]) -> int:
        """Write overlay fields of an existing row; never creates one. Returns the affected row count."""
        count = self._write(customer_id, company_id, fields)
        self.conn.commit()
        return count
