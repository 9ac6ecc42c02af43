from __future__ import annotations

import sqlite3
from typing import Any, Dict, Optional

from db.rows import dump_json, load_json


class CompanyMetadataRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def save_diffbot_json(self, company_id: str, payload: Dict[str, Any]) -> int:
        cur = self.conn.cursor()
        cur.execute(
            "INSERT INTO company_metadata (company_id, diffbot_json) VALUES (?, ?)",
            (company_id, dump_json(payload)),
        )
        self.conn.commit()
        return int(cur.lastrowid)

    def latest_diffbot_json(self, company_id: str) -> Optional[Dict[str, Any]]:
        """Most recently updated provider payload for the company, if any."""
        cur = self.conn.cursor()
        cur.execute(
            (
                "SELECT diffbot_json FROM company_metadata WHERE company_id = ? "
                "ORDER BY updated_at DESC, id DESC LIMIT 1"
            ),
            (company_id,),
        )
        row = cur.fetchone()
        if not row:
            return None
        data = load_json(row[0])
        return data if isinstance(data, dict) and data else None
