from __future__ import annotations

import sqlite3
import uuid
from typing import List, Optional

from db.rows import fetch_dicts
from models.company_record import ListRecord


class ListsRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def create_list(self, customer_id: str, name: str, description: Optional[str] = None, is_static: bool = True) -> str:
        list_id = str(uuid.uuid4())
        self.conn.execute(
            "INSERT INTO lists (list_id, customer_id, name, description, is_static) VALUES (?, ?, ?, ?, ?)",
            (list_id, customer_id, name, description, 1 if is_static else 0),
        )
        self.conn.commit()
        return list_id

    def add_company(self, list_id: str, company_id: str, commit: bool = True) -> None:
        self.conn.execute(
            "INSERT OR IGNORE INTO list_companies (list_id, company_id) VALUES (?, ?)",
            (list_id, company_id),
        )
        if commit:
            self.conn.commit()

    def lists_for_company(self, company_id: str, customer_id: str) -> List[ListRecord]:
        """Live lists of the tenant that contain the company, oldest first."""
        cur = self.conn.cursor()
        cur.execute(
            (
                "SELECT l.list_id, l.name, l.description FROM list_companies lc "
                "JOIN lists l ON l.list_id = lc.list_id "
                "WHERE lc.company_id = ? AND l.customer_id = ? AND l.deleted_at IS NULL "
                "ORDER BY lc.created_at, l.name"
            ),
            (company_id, customer_id),
        )
        return [ListRecord.model_validate(r) for r in fetch_dicts(cur)]
