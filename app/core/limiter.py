from __future__ import annotations

"""
HTTP Rate Limiting (SlowAPI)
============================

Highlights
----------
- **Principal/IP aware** keying: per-principal when the identity header is
  present, else per-client-IP (XFF/X-Real-IP/client.host).
- **Exemptions**: health/docs paths and trusted IPs.
- **Test/CI friendly**: `RATE_LIMIT_TEST_BYPASS` disables limits when truthy
  and is re-read on every request so tests can toggle it.

Environment
-----------
RATE_LIMIT_ENABLED           default: "true"
DEFAULT_RATE_LIMIT           default: "100/minute"
RATELIMIT_STORAGE_URI        default: "" (falls back to "memory://")
RATE_LIMIT_SKIP_PATHS        default: "/healthz,/readyz,/docs,/openapi.json"
RATE_LIMIT_TRUSTED_IPS       default: "" (comma separated)
RATE_LIMIT_TEST_BYPASS       default: "" (truthy to bypass in tests/CI)

Usage
-----
    from app.core.limiter import install_rate_limiter, rate_limit, rate_limit_exempt

    @router.post("/admin/assets")
    @rate_limit("30/minute")
    async def create_asset(request: Request, ...): ...
"""

import os
from typing import Callable, List, Optional, Set

from dotenv import load_dotenv
from loguru import logger
from slowapi import Limiter
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.requests import Request

load_dotenv()

RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
DEFAULT_LIMIT = os.getenv("DEFAULT_RATE_LIMIT", "100/minute").strip()
STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "").strip()
PRINCIPAL_HEADER = os.getenv("PRINCIPAL_HEADER", "X-Principal")

SKIP_PATHS: List[str] = [
    p.strip()
    for p in os.getenv("RATE_LIMIT_SKIP_PATHS", "/healthz,/readyz,/docs,/openapi.json").split(",")
    if p.strip()
]
TRUSTED_IPS: Set[str] = {ip.strip() for ip in os.getenv("RATE_LIMIT_TRUSTED_IPS", "").split(",") if ip.strip()}


# ──────────────────────────────────────────────────────────────
# 🧠 Keying & exemptions
# ──────────────────────────────────────────────────────────────
def _client_ip(request: Request) -> str:
    xff = request.headers.get("x-forwarded-for")
    if xff:
        ip = xff.split(",")[0].strip()
        if ip:
            return ip
    xri = request.headers.get("x-real-ip")
    if xri:
        return xri.strip()
    return get_remote_address(request) or "unknown"


def rate_limit_key(request: Request) -> str:
    principal = (request.headers.get(PRINCIPAL_HEADER) or "").strip()
    if principal:
        return f"principal:{principal}"
    return f"ip:{_client_ip(request)}"


def should_exempt_request(request: Optional[Request]) -> bool:
    if os.getenv("RATE_LIMIT_ENABLED", "true").strip().lower() != "true":
        return True
    if os.getenv("RATE_LIMIT_TEST_BYPASS", "").strip().lower() in {"1", "true", "yes", "on"}:
        return True
    if request is None:
        return False
    path = request.url.path
    if any(path == p or path.startswith(p) for p in SKIP_PATHS):
        return True
    return _client_ip(request) in TRUSTED_IPS


# ──────────────────────────────────────────────────────────────
# 🧰 Limiter instance
# ──────────────────────────────────────────────────────────────
def _default_limits() -> List[str]:
    return [chunk.strip() for chunk in DEFAULT_LIMIT.split(",") if chunk.strip()]


limiter = Limiter(
    key_func=rate_limit_key,
    enabled=RATE_LIMIT_ENABLED,
    default_limits=_default_limits(),
    headers_enabled=False,
    storage_uri=STORAGE_URI or "memory://",
)


def _exempt_when(request: Optional[Request] = None) -> bool:
    req = request
    if req is None:
        try:
            req = limiter._request_context.get()  # type: ignore[attr-defined]
        except (AttributeError, LookupError):
            req = None
    return should_exempt_request(req)


def rate_limit(*limits: str) -> Callable:
    """
    Apply per-route limits with the standard exemptions.

    Examples
    --------
    @rate_limit("10/minute")
    @rate_limit("5/second", "100/minute")
    """
    selected = list(limits) if limits else _default_limits()
    decorators = [limiter.limit(value, exempt_when=_exempt_when) for value in selected]

    def _apply(fn: Callable) -> Callable:
        for deco in reversed(decorators):
            fn = deco(fn)
        return fn

    return _apply


def rate_limit_exempt() -> Callable:
    """Explicitly exempt a route from limiting."""
    return limiter.exempt


def install_rate_limiter(app) -> None:
    """Attach SlowAPI middleware (no-op when RATE_LIMIT_ENABLED is false)."""
    if not RATE_LIMIT_ENABLED:
        logger.info("RateLimiter disabled by env; middleware not installed")
        return
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    logger.info("SlowAPI middleware installed | default={} | storage={}", _default_limits(), STORAGE_URI or "memory://")


__all__ = ["limiter", "rate_limit", "rate_limit_exempt", "install_rate_limiter", "should_exempt_request"]
