from __future__ import annotations

import logging
import sys
from typing import Any, Optional, TextIO

from config.settings import get_settings


LOG_FORMAT = (
    "%(asctime)s %(levelname)s %(name)s %(message)s "
    "op=%(op)s tenant_id=%(tenant_id)s status=%(status)s "
    "duration_ms=%(duration_ms)s error=%(error)s"
)

_INITIALIZED: bool = False


class SafeExtraFormatter(logging.Formatter):
    """Formatter that tolerates missing extra fields by injecting defaults."""

    DEFAULTS: dict[str, Any] = {
        "op": "-",
        "tenant_id": "-",
        "status": "-",
        "duration_ms": "-",
        "error": "-",
    }

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        for key, value in self.DEFAULTS.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return super().format(record)


def op_extra(
    op: str,
    tenant_id: Optional[str] = None,
    status: str = "ok",
    duration_ms: Optional[int] = None,
    error: Optional[str] = None,
) -> dict[str, Any]:
    """`extra=` mapping for catalog operation log lines; unset fields are left to the formatter."""
    extra: dict[str, Any] = {"op": op, "status": status}
    if tenant_id is not None:
        extra["tenant_id"] = tenant_id
    if duration_ms is not None:
        extra["duration_ms"] = duration_ms
    if error is not None:
        extra["error"] = error
    return extra


def init_logging(level: str | None = None, stream: Optional[TextIO] = None) -> None:
    """Install one stdout handler on the root logger (once per process).

    Existing root handlers (e.g. pytest's capture) are left alone.
    """
    global _INITIALIZED
    if _INITIALIZED:
        return

    log_level_str = (level or get_settings().log_level).upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if not root_logger.handlers:
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setLevel(log_level)
        handler.setFormatter(SafeExtraFormatter(fmt=LOG_FORMAT))
        root_logger.addHandler(handler)

    _INITIALIZED = True
