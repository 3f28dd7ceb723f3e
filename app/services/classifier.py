from __future__ import annotations

"""
Content classification
======================

Pure facet derivation over `MediaAsset` values. Every catalog view, the
schedule builder and search use these predicates, so they must stay free of
I/O and side effects.

Buckets
-------
- movies   : not a clip, content type movie/film
- videos   : not a clip, content type neither movie/film nor podcast
- podcasts : not a clip, content type podcast
- clips    : any asset with `is_clip=True`
"""

from typing import Optional

from app.schemas.catalog import MediaAsset
from app.schemas.enums import CatalogBucket, ClipOrigin, ContentType

MOVIE_TYPES = frozenset({ContentType.movie, ContentType.film})

LIVE_ELIGIBLE_TYPES = frozenset({
    ContentType.movie,
    ContentType.film,
    ContentType.tvSeriesStandalone,
    ContentType.series,
    ContentType.documentary,
    ContentType.faithBased,
    ContentType.educational,
    ContentType.news,
    ContentType.music,
})

# Order matters: the clip generator emits them in this order.
AUTO_CLIP_SUFFIXES = (" - Short", " - Highlight", " - Quick View")

_LABELS = {
    ContentType.movie: "Movie",
    ContentType.film: "Film",
    ContentType.tvSeriesStandalone: "TV Series",
    ContentType.series: "Series",
    ContentType.documentary: "Documentary",
    ContentType.faithBased: "Faith-Based",
    ContentType.educational: "Educational",
    ContentType.news: "News",
    ContentType.music: "Music",
    ContentType.podcast: "Podcast",
}


def is_movie_like(asset: MediaAsset) -> bool:
    return asset.content_type in MOVIE_TYPES


def is_podcast(asset: MediaAsset) -> bool:
    return asset.content_type == ContentType.podcast


def is_live_eligible(asset: MediaAsset) -> bool:
    """Whether the asset may be placed in a channel schedule.

    Classification only: the editorial `eligible_for_live` flag is a
    separate listing hint and is not consulted here.
    """
    if asset.is_clip or is_podcast(asset):
        return False
    return asset.content_type in LIVE_ELIGIBLE_TYPES


def is_standalone(asset: MediaAsset) -> bool:
    """The "Videos" bucket: everything that is not a clip, a movie or a podcast."""
    if asset.is_clip:
        return False
    return asset.content_type not in MOVIE_TYPES and not is_podcast(asset)


def clip_origin(asset: MediaAsset) -> Optional[ClipOrigin]:
    """Origin of a clip, or None for non-clips.

    A stored `clip_origin` is authoritative. Legacy clips without the tag
    fall back to the caption convention: a caption ending in one of
    `AUTO_CLIP_SUFFIXES` marks an auto-generated clip.
    """
    if not asset.is_clip:
        return None
    if asset.clip_origin is not None:
        return asset.clip_origin
    caption = asset.clip_caption or ""
    if caption.endswith(AUTO_CLIP_SUFFIXES):
        return ClipOrigin.autoGenerated
    return ClipOrigin.manual


def is_auto_generated_clip(asset: MediaAsset) -> bool:
    return clip_origin(asset) == ClipOrigin.autoGenerated


def bucket_of(asset: MediaAsset) -> CatalogBucket:
    if asset.is_clip:
        return CatalogBucket.clips
    if is_movie_like(asset):
        return CatalogBucket.movies
    if is_podcast(asset):
        return CatalogBucket.podcasts
    return CatalogBucket.videos


def content_type_label(content_type: ContentType) -> str:
    return _LABELS.get(content_type, content_type.value)


__all__ = [
    "MOVIE_TYPES",
    "LIVE_ELIGIBLE_TYPES",
    "AUTO_CLIP_SUFFIXES",
    "is_movie_like",
    "is_podcast",
    "is_live_eligible",
    "is_standalone",
    "clip_origin",
    "is_auto_generated_clip",
    "bucket_of",
    "content_type_label",
]
