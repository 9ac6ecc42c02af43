from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'services.companies_service'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    # Set test environment knobs
    os.environ.setdefault("RUN_ENV", "test")


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Each test starts from default catalog settings, regardless of the caller's shell."""
    from config.settings import get_settings

    for key in ("CURRENT_USER_ID", "QUERY_TRACE", "QUERY_LOG_PATH", "DEFAULT_PAGE_SIZE", "MAX_PAGE_SIZE"):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
