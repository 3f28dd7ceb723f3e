"""
🧭 API v1 Router Aggregator
===========================

Exports both the **combined `router`** (ready to include) and each **individual
sub-router** so callers can mount them as needed.

Layout
------
- Public catalog, search, brands, live TV, playback and billing (no extra prefix)
- Signed-in profile under `/user`
- Staff tooling under `/admin`

Quick usage
-----------
    from app.api.v1.routers import build_v1_router
    app.include_router(build_v1_router(), prefix="/api/v1")

Security notes
--------------
- This layer is a pure aggregator; role gates & rate limits live in child routers.
- Child handlers are plain `def`: the backend boundary is blocking (the remote
  backend uses `httpx.Client`), so FastAPI must run them in its threadpool.
"""

from fastapi import APIRouter

from .public import (
    billing_router,
    brands_router,
    catalog_router,
    live_router,
    search_router,
    watch_router,
)
from .user import me_router
from .admin import router as admin_router


# ─────────────────────────────────────────────────────────────────────────────
# 🧩 Factory: build a combined v1 router with stable path layout
# ─────────────────────────────────────────────────────────────────────────────
def build_v1_router() -> APIRouter:
    """
    Compose the API v1 surface into a single `APIRouter`.

    Returns
    -------
    fastapi.APIRouter
        Public routers as-is, `me` under `/user`, admin under `/admin`.
    """
    r = APIRouter()

    r.include_router(catalog_router)
    r.include_router(search_router)
    r.include_router(brands_router)
    r.include_router(live_router)
    r.include_router(watch_router)
    r.include_router(billing_router)
    r.include_router(me_router, prefix="/user")
    r.include_router(admin_router, prefix="/admin")

    return r


router = build_v1_router()


__all__ = [
    "router",
    "build_v1_router",
    "catalog_router",
    "search_router",
    "brands_router",
    "live_router",
    "watch_router",
    "billing_router",
    "me_router",
    "admin_router",
]
