from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Iterator, Optional

from db import schema


def get_connection(db_path: str, timeout: Optional[float] = 30.0) -> sqlite3.Connection:
    """Open the catalog database.

    Rows come back as sqlite3.Row; foreign keys are enforced so overlay and
    list rows cannot point at a missing tenant or company.
    """
    conn = sqlite3.connect(db_path, timeout=timeout or 30.0)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    conn.execute("PRAGMA foreign_keys=ON;")
    return conn


@contextmanager
def open_catalog(db_path: Optional[str] = None, timeout: Optional[float] = None) -> Iterator[sqlite3.Connection]:
    """Connection with the schema in place, closed on exit. Defaults come from settings."""
    if db_path is None or timeout is None:
        from config.settings import get_settings
        settings = get_settings()
        db_path = db_path or settings.db_path
        timeout = timeout or settings.db_timeout_seconds
    conn = get_connection(db_path, timeout=timeout)
    try:
        schema.bootstrap(conn)
        yield conn
    finally:
        conn.close()
