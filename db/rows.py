from __future__ import annotations

import json
import sqlite3
from typing import Any, Dict, List, Optional


def fetch_dicts(cur: sqlite3.Cursor) -> List[Dict[str, Any]]:
    """All remaining rows as dicts, independent of the connection's row_factory."""
    names = [d[0] for d in cur.description or ()]
    return [dict(zip(names, tuple(row))) for row in cur.fetchall()]


def fetch_one_dict(cur: sqlite3.Cursor) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    if row is None:
        return None
    names = [d[0] for d in cur.description or ()]
    return dict(zip(names, tuple(row)))


def dump_json(value: Any) -> Optional[str]:
    if value is None:
        return None
    # Preserve non-ASCII characters (e.g., umlauts) in stored JSON text
    return json.dumps(value, ensure_ascii=False)


def load_json(text: Any, default: Any = None) -> Any:
    if text is None or text == "":
        return default
    if not isinstance(text, str):
        return text
    try:
        return json.loads(text)
    except ValueError:
        return default
