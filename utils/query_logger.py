from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)


def _ensure_parent_dir(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        pass


def log_query(
    *,
    operation: str,
    tenant_id: Optional[str],
    duration_ms: Optional[int] = None,
    status: str = "ok",
    error: Optional[str] = None,
    total_count: Optional[int] = None,
    predicates: Optional[str] = None,
    extras: Optional[Dict[str, Any]] = None,
) -> None:
    """Append a single JSON line describing a catalog query if tracing is enabled.

    Controlled by QUERY_TRACE / QUERY_LOG_PATH in config/settings.py
    """
    from config.settings import get_settings
    # Tests monkeypatch env between calls
    get_settings.cache_clear()
    settings = get_settings()
    if not settings.query_trace:
        return

    log_path = Path(settings.query_log_path)
    _ensure_parent_dir(log_path)

    payload: Dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "operation": operation,
        "tenant_id": tenant_id,
        "duration_ms": duration_ms,
        "status": status,
        "error": error,
        "total_count": total_count,
        "predicates": predicates,
    }
    if extras:
        payload["extras"] = extras

    try:
        with log_path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload, ensure_ascii=False) + "\n")
    except OSError as e:
        # Never break a request on trace failures
        logger.warning("Failed to write query trace: %s", e)
