from __future__ import annotations

"""
Catalog schemas
===============

Media assets (films, standalone videos, podcasts, clips) and the
Series → Season → Episode tree.

Conventions
-----------
- Records are replaced whole at the backend boundary; there are no patch
  models for stored entities.
- Required-on-create fields (title, thumbnail, video) are *optional* on the
  model so that missing values reach `services.catalog.validate_new_asset`
  and surface as a domain validation error instead of a schema error.
- `revision` on `Series` is the optimistic-concurrency counter checked by
  the backend on replace.
"""

import uuid
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from app.schemas.enums import CatalogBucket, ClipOrigin, ContentType


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex}"


# ─────────────────────────────────────────────────────────────
# Assets
# ─────────────────────────────────────────────────────────────
class MediaAsset(BaseModel):
    """A single playable item (film, standalone video, podcast or clip)."""
    id: str = Field(default_factory=lambda: _new_id("video"))
    title: Optional[str] = None
    description: str = ""
    content_type: ContentType = ContentType.movie
    is_premium: bool = False
    is_original: bool = False
    is_clip: bool = False
    eligible_for_live: bool = False
    available_as_vod: bool = True
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    trailer_url: Optional[str] = None
    preview_clip_url: Optional[str] = None
    genre: Optional[str] = None
    release_year: Optional[int] = None
    roles: Optional[str] = Field(None, description="Free-form cast/roles line")
    source_asset_id: Optional[str] = Field(None, description="Asset this clip was cut from")
    clip_caption: Optional[str] = None
    clip_origin: Optional[ClipOrigin] = Field(
        None, description="Explicit clip origin; legacy clips may leave it unset"
    )

    @model_validator(mode="after")
    def _clips_never_air_live(self) -> "MediaAsset":
        if self.is_clip and self.eligible_for_live:
            self.eligible_for_live = False
        return self


# ─────────────────────────────────────────────────────────────
# Series tree
# ─────────────────────────────────────────────────────────────
class Episode(BaseModel):
    id: str = Field(default_factory=lambda: _new_id("episode"))
    season_id: str = ""
    episode_number: int
    title: str
    description: str = ""
    runtime_minutes: int
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    is_premium: bool = False
    is_first_episode: bool = False
    is_original: bool = False
    content_type: ContentType = ContentType.tvSeriesStandalone


class Season(BaseModel):
    id: str = Field(default_factory=lambda: _new_id("season"))
    season_number: int
    title: str = ""
    is_original: bool = False
    episodes: List[Episode] = Field(default_factory=list)


class Series(BaseModel):
    id: str = Field(default_factory=lambda: _new_id("series"))
    title: Optional[str] = None
    description: str = ""
    content_type: ContentType = ContentType.series
    thumbnail_url: Optional[str] = None
    trailer_url: Optional[str] = None
    preview_clip_url: Optional[str] = None
    is_original: bool = False
    seasons: List[Season] = Field(default_factory=list)
    revision: int = Field(0, ge=0, description="Bumped by the backend on every replace")


# ─────────────────────────────────────────────────────────────
# Editing payloads (series sub-resources)
# ─────────────────────────────────────────────────────────────
class SeasonIn(BaseModel):
    season_number: int
    title: str = ""
    is_original: bool = False


class EpisodeIn(BaseModel):
    episode_number: int
    title: str
    description: str = ""
    runtime_minutes: int
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    is_premium: bool = False
    is_first_episode: bool = False
    is_original: bool = False
    content_type: ContentType = ContentType.tvSeriesStandalone


class EpisodeUpdateIn(EpisodeIn):
    """Full episode replacement; `target_season_number` moves it across seasons."""
    target_season_number: Optional[int] = None


# ─────────────────────────────────────────────────────────────
# Views
# ─────────────────────────────────────────────────────────────
class AssetItem(BaseModel):
    kind: Literal["asset"] = "asset"
    asset: MediaAsset


class SeriesItem(BaseModel):
    kind: Literal["series"] = "series"
    series: Series


ContentItem = Annotated[Union[AssetItem, SeriesItem], Field(discriminator="kind")]


class CatalogFacets(BaseModel):
    buckets: dict[CatalogBucket, int]
    genres: List[str]
    originals: int
    premium: int
    auto_clips: int
    manual_clips: int


class ClipGenerationResult(BaseModel):
    """Outcome of auto-clip generation; `created < requested` means partial failure."""
    source_asset_id: str
    requested: int
    created: int
    clip_ids: List[str] = Field(default_factory=list)
    failures: List[str] = Field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return self.created < self.requested


__all__ = [
    "MediaAsset",
    "Episode",
    "Season",
    "Series",
    "SeasonIn",
    "EpisodeIn",
    "EpisodeUpdateIn",
    "AssetItem",
    "SeriesItem",
    "ContentItem",
    "CatalogFacets",
    "ClipGenerationResult",
]
