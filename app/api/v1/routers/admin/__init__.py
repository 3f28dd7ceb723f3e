"""
Admin router package (v1)
=========================

Provides a consistent structure for admin endpoints by domain:
- assets, series, live (channels & slots), brands, ads, analytics, staff

Design
------
• Each submodule defines its own `APIRouter` (role gate, rate limits, tags).
• This package aggregates them into a single `router` export.
• Mount with a base path in your app:
    v1.include_router(admin_router, prefix="/admin")

Notes
-----
• Common 401/403/409/429 response docs are added at include-time for a
  uniform OpenAPI.
"""

from typing import Any, Dict

from fastapi import APIRouter, status

from .ads import router as ads_router
from .analytics import router as analytics_router
from .assets import router as assets_router
from .brands import router as brands_router
from .live import router as live_router
from .series import router as series_router
from .staff import router as staff_router


# ─────────────────────────────────────────────────────────────────────────────
# 📋 Common OpenAPI responses (docs-only; behavior unchanged)
# ─────────────────────────────────────────────────────────────────────────────
COMMON_ADMIN_RESPONSES: Dict[int, Dict[str, Any]] = {
    status.HTTP_401_UNAUTHORIZED: {"description": "No principal supplied"},
    status.HTTP_403_FORBIDDEN: {"description": "Role too low"},
    status.HTTP_409_CONFLICT: {"description": "Edited from a stale revision"},
    status.HTTP_429_TOO_MANY_REQUESTS: {"description": "Rate limit exceeded"},
}


router = APIRouter()  # callers mount with prefix="/admin"

for _sub in (assets_router, series_router, live_router, brands_router, ads_router, analytics_router, staff_router):
    router.include_router(_sub, responses=COMMON_ADMIN_RESPONSES)


__all__ = [
    "router",
    "assets_router",
    "series_router",
    "live_router",
    "brands_router",
    "ads_router",
    "analytics_router",
    "staff_router",
]
