# app/main.py
from __future__ import annotations

"""
# Catalog & Live Programming API — Application Entrypoint (FastAPI)

ASGI application factory and lifecycle for the streaming catalog service:
films, series, clips, brands, live TV schedules, ads and entitlements.

## Design Goals
- Deterministic, testable **app factory** (`create_app`) with explicit lifespan.
- Safe, explicit **middleware order**:
  1) request id → 2) security headers (+ optional HTTPS redirect) →
  3) CORS → 4) gzip → 5) rate limits → 6) strip `Server` header.
- Centralized problem+JSON exception handling.
- The catalog backend (in-memory or remote) is built once and closed on shutdown.

## Health checks
- `/healthz` — liveness (process up).
- `/readyz` — readiness (one cheap read against the catalog backend).
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable
import logging
import os

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.gzip import GZipMiddleware
from starlette.responses import JSONResponse, Response

# -- Logging bootstrap (Loguru + stdlib intercept) ----------------------------
from app.core import logger as _logsetup  # noqa: F401

from app.core.config import settings
from app.core.exception_handlers import (
    app_exception_handler,
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.core.exceptions import AppException
from app.core.limiter import install_rate_limiter, rate_limit_exempt
from app.api.http_utils import get_backend
from app.middleware.request_id import RequestIDMiddleware
from app.repositories.backend import CatalogBackendProtocol, get_catalog_backend, reset_catalog_backend
from app.security_headers import configure_cors, install_security

logger = logging.getLogger("app.main")


# ─────────────────────────────────────────────────────────────────────────────
# 🔄 Lifespan: startup & shutdown
# ─────────────────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifecycle manager.

    Startup:
        - Build the catalog backend so configuration errors surface early.

    Shutdown:
        - Close the backend's transport (remote backend) and drop the instance.
    """
    backend = get_catalog_backend()
    logger.info("✅ %s starting up | backend=%s", settings.PROJECT_NAME, type(backend).__name__)
    try:
        yield
    finally:
        close = getattr(backend, "close", None)
        if callable(close):
            close()
        reset_catalog_backend()
        logger.info("🛑 %s shutting down", settings.PROJECT_NAME)


# ─────────────────────────────────────────────────────────────────────────────
# 🏗️ App factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app() -> FastAPI:
    """
    Build and configure the FastAPI app instance.

    Returns:
        FastAPI: fully wired application with middleware, exception handlers,
        routers, and health/readiness endpoints.
    """
    docs_url = "/docs" if settings.ENABLE_DOCS else None
    redoc_url = "/redoc" if settings.ENABLE_DOCS else None
    openapi_url = "/openapi.json" if settings.ENABLE_DOCS else None

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        docs_url=docs_url,
        redoc_url=redoc_url,
        openapi_url=openapi_url,
        lifespan=lifespan,
    )

    # ── Middlewares (order matters) ─────────────────────────────────────────
    app.add_middleware(RequestIDMiddleware)  # 1) Correlation ID
    install_security(app)                    # 2) Security headers (+ HTTPS redirect when enabled)
    configure_cors(app)                      # 3) CORS allow-list
    app.add_middleware(GZipMiddleware, minimum_size=1024)  # 4) GZip

    # 5) Rate limiter (SlowAPI middleware + 429 handler)
    install_rate_limiter(app)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # 6) Strip the `Server` header at the end of the chain
    @app.middleware("http")
    async def _strip_server_header(request: Request, call_next: Callable) -> Response:
        response: Response = await call_next(request)
        if "server" in response.headers:
            del response.headers["server"]
        return response

    # ── Exception handlers (problem+json) ───────────────────────────────────
    app.add_exception_handler(AppException, app_exception_handler)                  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)       # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, http_exception_handler)                # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, global_exception_handler)                  # type: ignore[arg-type]

    # ── Routers (versioned API) ─────────────────────────────────────────────
    from app.api.v1.routers import build_v1_router

    app.include_router(build_v1_router(), prefix=settings.API_V1_STR)

    # ── Meta endpoints ──────────────────────────────────────────────────────
    @app.get("/healthz", tags=["meta"])
    @rate_limit_exempt()
    async def healthz() -> dict[str, bool]:
        """Liveness check. No external calls."""
        return {"ok": True}

    @app.get("/readyz", tags=["meta"])
    @rate_limit_exempt()
    def readyz(backend: CatalogBackendProtocol = Depends(get_backend)) -> JSONResponse:
        """
        Readiness check.

        Returns 200 with `ready: true` when the catalog backend answers a
        channel listing, 503 otherwise.
        """
        try:
            backend.list_channels()
            backend_ok = True
        except AppException as exc:
            logger.warning("Readiness check failed: %s", exc.message)
            backend_ok = False

        return JSONResponse(
            {"ready": backend_ok, "checks": {"catalog_backend": backend_ok}},
            status_code=200 if backend_ok else 503,
        )

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Minimal root that points to docs (when enabled)."""
        return JSONResponse(
            {
                "name": settings.PROJECT_NAME,
                "docs": app.docs_url or "",
                "version": settings.VERSION,
            }
        )

    return app


# ─────────────────────────────────────────────────────────────────────────────
# 🚀 Module-level ASGI app for Uvicorn/Gunicorn
# ─────────────────────────────────────────────────────────────────────────────
app = create_app()
__all__ = ["create_app", "app"]


# Local dev runner (prefer: `uvicorn app.main:app --reload`)
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "1") == "1",
        workers=int(os.getenv("WORKERS", "1")),
        log_level=os.getenv("LOG_LEVEL", "info"),
    )
