# tests/conftest.py
"""
Global test bootstrap
- Makes SlowAPI rate-limiting test-friendly (disabled + bypassed)
- Keeps logging on the console only
- Exposes an isolated in-memory catalog backend per test
"""

from __future__ import annotations

import os

import pytest

# ──────────────────────────────────────────────────────────────────────────────
# 🌱 Test env (set BEFORE importing the app so import-time reads see it)
# ──────────────────────────────────────────────────────────────────────────────
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("RATE_LIMIT_TEST_BYPASS", "1")
os.environ.setdefault("RATELIMIT_STORAGE_URI", "memory://")
os.environ.setdefault("LOG_TO_FILE", "0")
os.environ.setdefault("CATALOG_BACKEND", "memory")

from app.repositories.backend import MemoryCatalogBackend, reset_catalog_backend  # noqa: E402
from app.schemas.enums import UserRole  # noqa: E402
from tests.utils.factory import ADMIN, MASTER  # noqa: E402


@pytest.fixture()
def backend() -> MemoryCatalogBackend:
    """Fresh in-memory backend with one master admin and one admin."""
    b = MemoryCatalogBackend(master_admin=MASTER)
    b.promote(MASTER, ADMIN, UserRole.admin)
    return b


@pytest.fixture(autouse=True)
def _reset_singleton():
    """Never leak the process-wide backend between tests."""
    reset_catalog_backend()
    yield
    reset_catalog_backend()


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"
