# app/security_headers.py
from __future__ import annotations

"""
# Security Headers & CORS

Security headers and CORS wiring for the JSON API.

## What you get
- **Headers**: a locked-down CSP for an API (no documents served), HSTS,
  X-Content-Type-Options, X-Frame-Options, Referrer-Policy, CORP.
- **CORS installer**: allow-list from `settings.BACKEND_CORS_ORIGINS`; the
  identity header is allowed so browser callers can pass it through.
- **Cache helper**: `set_sensitive_cache()` for per-principal responses
  (profile, admin listings, playback decisions).

## Env knobs
- ENABLE_HTTPS_REDIRECT (default "false")
- SECURITY_SKIP_PATHS (CSV; default "/docs,/redoc,/openapi.json")
- HSTS_MAX_AGE (31536000)
- REFERRER_POLICY (default "no-referrer")
"""

import os
from dataclasses import dataclass
from typing import List, Tuple

from fastapi import Response
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.core.config import settings


# ─────────────────────────────────────────────────────────────
# ⚙️ Configuration
# ─────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class SecurityHeadersConfig:
    hsts_max_age: int = int(os.getenv("HSTS_MAX_AGE", "31536000"))
    referrer_policy: str = os.getenv("REFERRER_POLICY", "no-referrer")
    csp: str = "default-src 'none'; frame-ancestors 'none'"
    skip_paths_csv: str = os.getenv("SECURITY_SKIP_PATHS", "/docs,/redoc,/openapi.json")

    @property
    def skip_paths(self) -> Tuple[str, ...]:
        return tuple(p.strip() for p in self.skip_paths_csv.split(",") if p.strip())

    def headers(self) -> List[Tuple[str, str]]:
        return [
            ("Strict-Transport-Security", f"max-age={self.hsts_max_age}; includeSubDomains"),
            ("X-Content-Type-Options", "nosniff"),
            ("X-Frame-Options", "DENY"),
            ("Referrer-Policy", self.referrer_policy),
            ("Cross-Origin-Resource-Policy", "same-origin"),
            ("Content-Security-Policy", self.csp),
        ]


_CFG = SecurityHeadersConfig()


# ─────────────────────────────────────────────────────────────
# 🛡️ Middleware (pure ASGI)
# ─────────────────────────────────────────────────────────────
class SecurityHeadersMiddleware:
    """Append security headers to every HTTP response unless already present."""

    def __init__(self, app: ASGIApp, cfg: SecurityHeadersConfig = _CFG) -> None:
        self.app = app
        self.cfg = cfg

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http" or scope.get("path", "").startswith(self.cfg.skip_paths):
            return await self.app(scope, receive, send)

        async def send_wrapper(message: Message) -> None:
            if message.get("type") == "http.response.start":
                raw = message.setdefault("headers", [])
                present = {k.lower() for k, _ in raw}
                for name, value in self.cfg.headers():
                    key = name.lower().encode("latin-1")
                    if key not in present:
                        raw.append((key, value.encode("latin-1")))
            await send(message)

        await self.app(scope, receive, send_wrapper)


# ─────────────────────────────────────────────────────────────
# 🔓 Public helpers
# ─────────────────────────────────────────────────────────────
def set_sensitive_cache(response: Response) -> None:
    """Mark a per-caller response as non-cacheable (idempotent)."""
    response.headers.setdefault("Cache-Control", "no-store")
    response.headers.setdefault("Pragma", "no-cache")
    response.headers.setdefault("Expires", "0")


def configure_cors(app) -> None:
    """Install CORS from the configured allow-list (no wildcard)."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID", settings.PRINCIPAL_HEADER],
        expose_headers=["Location", "Retry-After", "X-Request-ID"],
        max_age=3600,
    )


def install_security(app) -> None:
    """Add HTTPS redirect (opt-in) and the security headers middleware."""
    if os.getenv("ENABLE_HTTPS_REDIRECT", "false").lower() == "true":
        app.add_middleware(HTTPSRedirectMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, cfg=_CFG)


__all__ = [
    "SecurityHeadersConfig",
    "SecurityHeadersMiddleware",
    "install_security",
    "configure_cors",
    "set_sensitive_cache",
]
