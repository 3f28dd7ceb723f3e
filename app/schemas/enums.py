from __future__ import annotations

"""
Central enum definitions used across the catalog service.

Design notes
------------
• All enums subclass `str, PyEnum` for JSON-friendly serialization.
• VALUE STRINGS are **stable** once deployed (the backend boundary stores them).
• Grouped by domain for clarity; keep `__all__` in sync when adding new enums.
"""

from enum import Enum as PyEnum
from typing import Optional


# ──────────────────────────────────────────────────────────────
# Catalog
# ──────────────────────────────────────────────────────────────
class ContentType(str, PyEnum):
    """Editorial content type of an asset, series or episode."""
    movie = "movie"
    film = "film"
    tvSeriesStandalone = "tvSeriesStandalone"
    series = "series"
    documentary = "documentary"
    faithBased = "faithBased"
    educational = "educational"
    news = "news"
    music = "music"
    podcast = "podcast"

    @classmethod
    def _missing_(cls, value: object) -> Optional["ContentType"]:
        # Older records were written with the `tvSeries` spelling.
        if value == "tvSeries":
            return cls.tvSeriesStandalone
        return None


class ClipOrigin(str, PyEnum):
    """How a clip came to exist."""
    manual = "manual"
    autoGenerated = "autoGenerated"


class CatalogBucket(str, PyEnum):
    """Display bucket an asset is listed under."""
    movies = "movies"
    videos = "videos"
    podcasts = "podcasts"
    clips = "clips"


# ──────────────────────────────────────────────────────────────
# Advertising
# ──────────────────────────────────────────────────────────────
class AdScope(str, PyEnum):
    """Where an ad assignment applies."""
    global_ = "global"
    video = "video"


# ──────────────────────────────────────────────────────────────
# Identity
# ──────────────────────────────────────────────────────────────
class UserRole(str, PyEnum):
    """Platform role, ordered from least to most privileged."""
    guest = "guest"
    user = "user"
    admin = "admin"
    masterAdmin = "masterAdmin"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]

    def at_least(self, other: "UserRole") -> bool:
        return self.rank >= other.rank


_ROLE_RANK = {
    UserRole.guest: 0,
    UserRole.user: 1,
    UserRole.admin: 2,
    UserRole.masterAdmin: 3,
}


# ──────────────────────────────────────────────────────────────
# Search
# ──────────────────────────────────────────────────────────────
class ResultType(str, PyEnum):
    """Entity kind of a flattened search hit."""
    video = "video"
    film = "film"
    series = "series"
    clip = "clip"
    brand = "brand"


__all__ = [
    "ContentType",
    "ClipOrigin",
    "CatalogBucket",
    "AdScope",
    "UserRole",
    "ResultType",
]
