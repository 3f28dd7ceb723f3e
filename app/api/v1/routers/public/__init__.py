"""Public (viewer-facing) routers."""

from .brands import router as brands_router
from .billing import router as billing_router
from .catalog import router as catalog_router
from .live import router as live_router
from .search import router as search_router
from .watch import router as watch_router

__all__ = [
    "brands_router",
    "billing_router",
    "catalog_router",
    "live_router",
    "search_router",
    "watch_router",
]
