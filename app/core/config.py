# app/core/config.py
from __future__ import annotations

"""
# Catalog Service — Centralized Configuration (Pydantic v2)

Single `settings` object with strongly-typed, environment-driven config.

## Goals
- Safe defaults for local/dev: the in-memory backend needs no secrets.
- Robust URL normalization and CSV → list helpers.
- Remote backend, rate limiting and checkout links are opt-in via env.

## Usage
    from app.core.config import settings
"""

import logging
from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic import AnyHttpUrl, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)
load_dotenv()  # harmless in prod; convenient in dev


# ─────────────────────────────────────────────────────────────
# Small helpers
# ─────────────────────────────────────────────────────────────
def _split_csv(v: str | None) -> list[str]:
    """Split a comma-separated string into a trimmed list (empty-safe)."""
    if not v:
        return []
    return [s.strip() for s in str(v).split(",") if s and s.strip()]


def _normalize_url_like(v: str | None, *, require_scheme: bool = True) -> str:
    """Normalize to a string URL without trailing slash."""
    s = (v or "").strip()
    if not s:
        return ""
    if require_scheme and not (s.startswith("http://") or s.startswith("https://")):
        s = "https://" + s
    return s.rstrip("/")


# ─────────────────────────────────────────────────────────────
# Settings
# ─────────────────────────────────────────────────────────────
class Settings(BaseSettings):
    """
    Global application settings sourced from environment.

    Backend boundary:
        - `CATALOG_BACKEND=memory` (default) keeps everything in-process,
          optionally seeded from `CATALOG_SEED_PATH`.
        - `CATALOG_BACKEND=http` talks to `CATALOG_BACKEND_URL`.
        - `CATALOG_BACKEND_IMPL=module:Class` overrides both.

    Live TV:
        - `SCHEDULE_REJECT_OVERLAP` rejects slots overlapping existing ones.

    Analytics:
        - `WATCH_HISTORY_LIMIT` caps each viewer's history (memory backend).
        - `ANALYTICS_TRENDING_LIMIT` caps the trending list on the admin dashboard.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # don't crash on unknown keys
    )

    # ── App meta ──────────────────────────────────────────────
    PROJECT_NAME: str = "Catalog & Live Programming API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    ENV: Literal["development", "staging", "production"] = "development"
    ENABLE_DOCS: bool = True

    # ── CORS ──────────────────────────────────────────────────
    BACKEND_CORS_ORIGINS: str = "http://localhost:8000,http://localhost:5173"  # CSV

    # ── Backend boundary ──────────────────────────────────────
    CATALOG_BACKEND: Literal["memory", "http"] = "memory"
    CATALOG_BACKEND_IMPL: Optional[str] = None
    CATALOG_BACKEND_URL: Optional[str] = None
    CATALOG_BACKEND_TOKEN: Optional[SecretStr] = None
    CATALOG_BACKEND_TIMEOUT_SECONDS: float = Field(10.0, gt=0, le=120)
    CATALOG_SEED_PATH: Optional[str] = None

    # ── Identity (external) ───────────────────────────────────
    PRINCIPAL_HEADER: str = "X-Principal"
    BOOTSTRAP_MASTER_ADMIN: Optional[str] = None  # memory backend only

    # ── Live TV ───────────────────────────────────────────────
    SCHEDULE_REJECT_OVERLAP: bool = True
    GUIDE_DEFAULT_HOURS: int = Field(3, ge=1, le=24)

    # ── Viewing / analytics ──────────────────────────────────
    WATCH_HISTORY_LIMIT: int = Field(100, ge=1, le=1000)  # memory backend only
    ANALYTICS_TRENDING_LIMIT: int = Field(10, ge=1, le=100)

    # ── Payments (opaque) ─────────────────────────────────────
    CHECKOUT_BASE_URL: AnyHttpUrl = "http://localhost:8000"

    # ── Rate limiting ─────────────────────────────────────────
    DEFAULT_RATE_LIMIT: Optional[str] = None  # e.g., "200/minute"
    RATELIMIT_STORAGE_URI: Optional[str] = None

    # ── Validators / normalizers ──────────────────────────────
    @field_validator("CATALOG_BACKEND_URL", mode="before")
    @classmethod
    def _normalize_backend_url(cls, v: str | None) -> str | None:
        return _normalize_url_like(v) or None

    # ── Derived / convenience properties ─────────────────────
    @property
    def is_production(self) -> bool:
        return self.ENV.lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.ENV.lower() == "development"

    @property
    def cors_origins_list(self) -> List[str]:
        return _split_csv(self.BACKEND_CORS_ORIGINS)

    @property
    def checkout_base_url_str(self) -> str:
        """`CHECKOUT_BASE_URL` as a plain string without trailing slash."""
        return str(self.CHECKOUT_BASE_URL).rstrip("/")

    @property
    def catalog_backend_token(self) -> Optional[str]:
        if self.CATALOG_BACKEND_TOKEN is None:
            return None
        return self.CATALOG_BACKEND_TOKEN.get_secret_value() or None


# Singleton instance
settings = Settings()
