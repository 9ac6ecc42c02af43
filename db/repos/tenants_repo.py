from __future__ import annotations

import sqlite3
import uuid
from typing import Optional


class TenantsRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def create_customer(self, name: str, customer_id: Optional[str] = None) -> str:
        """Insert a tenant (customer account); an existing id is left untouched."""
        customer_id = customer_id or str(uuid.uuid4())
        self.conn.execute(
            "INSERT OR IGNORE INTO customers (customer_id, name) VALUES (?, ?)",
            (customer_id, name),
        )
        self.conn.commit()
        return customer_id

    def add_member(self, user_id: str, customer_id: str) -> None:
        self.conn.execute(
            (
                "INSERT INTO tenant_members (user_id, customer_id) VALUES (?, ?) "
                "ON CONFLICT(user_id) DO UPDATE SET customer_id = excluded.customer_id"
            ),
            (user_id, customer_id),
        )
        self.conn.commit()

    def customer_for_user(self, user_id: str) -> Optional[str]:
        cur = self.conn.cursor()
        cur.execute("SELECT customer_id FROM tenant_members WHERE user_id = ?", (user_id,))
        row = cur.fetchone()
        return str(row[0]) if row and row[0] else None
