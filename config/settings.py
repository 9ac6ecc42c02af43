from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _as_bool(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Core/runtime
    db_path: str
    run_env: str
    db_timeout_seconds: float

    log_level: str

    # Acting user for the CLI (session provider)
    current_user_id: str | None

    # Pagination
    default_page_size: int
    max_page_size: int

    # Logging/tracing
    query_trace: bool = False
    query_log_path: str = "logs/queries.jsonl"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    default_page_size = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
    max_page_size = int(os.getenv("MAX_PAGE_SIZE", "100"))
    if default_page_size <= 0 or max_page_size <= 0:
        raise RuntimeError("DEFAULT_PAGE_SIZE and MAX_PAGE_SIZE must be positive integers")
    if default_page_size > max_page_size:
        raise RuntimeError("DEFAULT_PAGE_SIZE must not exceed MAX_PAGE_SIZE")
    return Settings(
        db_path=os.getenv("DB_PATH", "companies.db"),
        run_env=os.getenv("RUN_ENV", "local"),
        db_timeout_seconds=float(os.getenv("DB_TIMEOUT_SECONDS", "30")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        current_user_id=os.getenv("CURRENT_USER_ID") or None,
        default_page_size=default_page_size,
        max_page_size=max_page_size,
        query_trace=_as_bool(os.getenv("QUERY_TRACE")),
        query_log_path=os.getenv("QUERY_LOG_PATH", "logs/queries.jsonl"),
    )
