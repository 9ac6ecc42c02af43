from __future__ import annotations

import sqlite3
import uuid
from typing import Any, Dict, List, Optional, Tuple

from db.rows import dump_json, fetch_dicts, fetch_one_dict, load_json
from models.company_record import CompanyRecord
from services.predicates import And, Contains, Eq, Gte, ILike, In, InList, InTenant, Lte, Or, Predicate
from services.query_builder import CompanyQuery


FILTERABLE_COLUMNS = frozenset({
    "company_id", "display_name", "legal_name", "domain", "type",
    "country", "region", "employees", "revenue", "currency_code",
})
ARRAY_COLUMNS = frozenset({"categories", "technologies", "siccodes"})
SORTABLE_COLUMNS = frozenset({
    "created_at", "updated_at", "fetched_at", "display_name", "legal_name",
    "domain", "country", "region", "employees", "revenue",
})
JSON_COLUMNS = ARRAY_COLUMNS | {"social_links"}

# Values a tenant's customer_companies row can override; filters and sorting
# read the same effective value the result mapper shows.
TENANT_COLUMN_EXPRESSIONS = {
    "display_name": "COALESCE(NULLIF(TRIM(tc.name), ''), companies.display_name)",
    "country": "COALESCE(tc.country, companies.country)",
    "region": "COALESCE(tc.region, companies.region)",
    "employees": "COALESCE(tc.employees, companies.employees)",
    "revenue": "COALESCE(tc.revenue, companies.revenue)",
    "categories": (
        "CASE WHEN json_array_length(COALESCE(tc.categories, '[]')) > 0 "
        "THEN tc.categories ELSE companies.categories END"
    ),
}
_TENANT_JOIN = "LEFT JOIN customer_companies tc ON tc.company_id = companies.company_id AND tc.customer_id = ?"
WRITABLE_COLUMNS = (
    "legal_name", "display_name", "domain", "website_url", "type", "description", "logo",
    "country", "region", "address", "postal_code", "email", "phone", "latitude", "longitude",
    "revenue", "capitalization", "currency_code", "employees", "siccodes", "categories",
    "technologies", "social_links",
)


def _column(field: str, allowed: frozenset) -> str:
    if field not in allowed:
        raise ValueError(f"Unknown or unsupported column: {field}")
    return TENANT_COLUMN_EXPRESSIONS.get(field, f"companies.{field}")


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def compile_predicate(pred: Predicate) -> Tuple[str, List[Any]]:
    """Translate a predicate tree into a WHERE fragment plus bound parameters."""
    if isinstance(pred, Eq):
        return f"{_column(pred.field, FILTERABLE_COLUMNS)} = ?", [pred.value]
    if isinstance(pred, In):
        if not pred.values:
            return "0", []
        marks = ", ".join("?" for _ in pred.values)
        return f"{_column(pred.field, FILTERABLE_COLUMNS)} IN ({marks})", list(pred.values)
    if isinstance(pred, Gte):
        return f"{_column(pred.field, FILTERABLE_COLUMNS)} >= ?", [pred.value]
    if isinstance(pred, Lte):
        return f"{_column(pred.field, FILTERABLE_COLUMNS)} <= ?", [pred.value]
    if isinstance(pred, ILike):
        col = _column(pred.field, FILTERABLE_COLUMNS)
        return (
            f"LOWER(COALESCE({col}, '')) LIKE ? ESCAPE '\\'",
            [f"%{_escape_like(pred.text.lower())}%"],
        )
    if isinstance(pred, Contains):
        col = _column(pred.field, ARRAY_COLUMNS)
        return (
            f"EXISTS (SELECT 1 FROM json_each(COALESCE({col}, '[]')) WHERE json_each.value = ?)",
            [pred.value],
        )
    if isinstance(pred, InTenant):
        return (
            "companies.company_id IN (SELECT cc.company_id FROM customer_companies cc WHERE cc.customer_id = ?)",
            [pred.tenant_id],
        )
    if isinstance(pred, InList):
        return (
            "companies.company_id IN ("
            "SELECT lc.company_id FROM list_companies lc JOIN lists l ON l.list_id = lc.list_id "
            "WHERE lc.list_id = ? AND l.customer_id = ? AND l.deleted_at IS NULL)",
            [pred.list_id, pred.tenant_id],
        )
    if isinstance(pred, (Or, And)):
        if not pred.items:
            return ("0" if isinstance(pred, Or) else "1"), []
        joiner = " OR " if isinstance(pred, Or) else " AND "
        parts: List[str] = []
        params: List[Any] = []
        for item in pred.items:
            sql, item_params = compile_predicate(item)
            parts.append(sql)
            params.extend(item_params)
        return "(" + joiner.join(parts) + ")", params
    raise ValueError(f"Unsupported predicate: {pred!r}")


def _row_to_record(row: Dict[str, Any]) -> CompanyRecord:
    data = dict(row)
    for key in ARRAY_COLUMNS:
        data[key] = load_json(data.get(key), default=[]) or []
    data["social_links"] = load_json(data.get("social_links"))
    return CompanyRecord.model_validate(data)


def _encode(column: str, value: Any) -> Any:
    if column in JSON_COLUMNS:
        return dump_json(value)
    return value


class CompaniesRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def search(self, query: CompanyQuery) -> Tuple[List[CompanyRecord], int]:
        """Return one page of companies matching the query and the exact total count.

        The count ignores the page window.
        """
        where_sql, params = compile_predicate(query.where)
        sort_col = _column(query.sort.key, SORTABLE_COLUMNS)
        direction = "ASC" if query.sort.ascending else "DESC"

        # The join parameter precedes the WHERE parameters
        from_sql = f"FROM companies {_TENANT_JOIN} WHERE {where_sql}"
        bound = (query.tenant_id, *params)

        cur = self.conn.cursor()
        cur.execute(f"SELECT COUNT(*) {from_sql}", bound)
        total = int(cur.fetchone()[0])

        cur.execute(
            (
                f"SELECT companies.* {from_sql} "
                f"ORDER BY {sort_col} {direction}, companies.company_id {direction} "
                "LIMIT ? OFFSET ?"
            ),
            (*bound, query.limit, query.offset),
        )
        return [_row_to_record(r) for r in fetch_dicts(cur)], total

    def get_by_id(self, company_id: str) -> Optional[CompanyRecord]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM companies WHERE company_id = ?", (company_id,))
        row = fetch_one_dict(cur)
        return _row_to_record(row) if row else None

    def get_for_tenant(self, company_id: str, tenant_id: str) -> Optional[CompanyRecord]:
        """Return the company only when the tenant has it in its catalog."""
        cur = self.conn.cursor()
        cur.execute(
            (
                "SELECT companies.* FROM companies "
                "JOIN customer_companies cc ON cc.company_id = companies.company_id "
                "WHERE companies.company_id = ? AND cc.customer_id = ?"
            ),
            (company_id, tenant_id),
        )
        row = fetch_one_dict(cur)
        return _row_to_record(row) if row else None

    def upsert_by_domain(self, fields: Dict[str, Any], commit: bool = True) -> str:
        """Insert or update a company using its domain as the stable key.

        Returns the company id. Rows without a domain are always inserted.
        With commit=False the caller owns the transaction.
        """
        values = {k: fields[k] for k in WRITABLE_COLUMNS if fields.get(k) is not None}
        cur = self.conn.cursor()
        domain = values.get("domain")
        if domain:
            cur.execute("SELECT company_id FROM companies WHERE domain = ?", (domain,))
            row = cur.fetchone()
            if row:
                company_id = str(row[0])
                if values:
                    # Keep existing values where the new record has none
                    sets = ", ".join(f"{k} = COALESCE(?, {k})" for k in values)
                    cur.execute(
                        f"UPDATE companies SET {sets}, updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now') WHERE company_id = ?",
                        (*[_encode(k, v) for k, v in values.items()], company_id),
                    )
                if commit:
                    self.conn.commit()
                return company_id
        company_id = str(fields.get("company_id") or uuid.uuid4())
        columns = ["company_id", *values.keys()]
        marks = ", ".join("?" for _ in columns)
        cur.execute(
            f"INSERT INTO companies ({', '.join(columns)}) VALUES ({marks})",
            (company_id, *[_encode(k, v) for k, v in values.items()]),
        )
        if commit:
            self.conn.commit()
        return company_id

    def update_fields(self, company_id: str, fields: Dict[str, Any]) -> int:
        """Write the given columns for one company; returns the affected row count."""
        columns: List[str] = []
        values: List[Any] = []
        for key in WRITABLE_COLUMNS:
            if key in fields:
                columns.append(f"{key} = ?")
                values.append(_encode(key, fields[key]))
        columns.append("updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now')")
        sql = f"UPDATE companies SET {', '.join(columns)} WHERE company_id = ?;"
        values.append(company_id)
        cur = self.conn.execute(sql, tuple(values))
        self.conn.commit()
        return cur.rowcount
