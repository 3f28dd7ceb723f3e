from __future__ import annotations

"""
Catalog views and create-time validation.

- `validate_new_asset` / `validate_new_series`: required fields on create.
- `filter_assets`: bucket / genre / original / premium listing filter.
- `catalog_facets`: counts for browse navigation.
- `originals`: the mixed "Originals" shelf as a tagged `ContentItem` list.
"""

from collections import Counter
from typing import Iterable, List, Optional

from app.core.exceptions import ValidationFailedException
from app.schemas.catalog import AssetItem, CatalogFacets, ContentItem, MediaAsset, Series, SeriesItem
from app.schemas.enums import CatalogBucket, ClipOrigin
from app.services.classifier import bucket_of, clip_origin


def _blank(value: Optional[str]) -> bool:
    return not (value or "").strip()


def validate_new_asset(asset: MediaAsset) -> MediaAsset:
    missing = []
    if _blank(asset.title):
        missing.append("title")
    if _blank(asset.thumbnail_url):
        missing.append("thumbnail_url")
    if not asset.is_clip and _blank(asset.video_url):
        missing.append("video_url")
    if missing:
        raise ValidationFailedException("Missing required fields", details={"missing": missing})
    if asset.is_clip and asset.clip_origin is None:
        # new clips are tagged explicitly; only legacy rows rely on captions
        asset = asset.model_copy(update={"clip_origin": ClipOrigin.manual})
    return asset


def validate_new_series(series: Series) -> Series:
    missing = [f for f in ("title", "thumbnail_url") if _blank(getattr(series, f))]
    if missing:
        raise ValidationFailedException("Missing required fields", details={"missing": missing})

    numbers = [s.season_number for s in series.seasons]
    if any(n < 1 for n in numbers) or len(set(numbers)) != len(numbers):
        raise ValidationFailedException("Season numbers must be positive and unique", details={"season_numbers": numbers})
    for season in series.seasons:
        eps = [e.episode_number for e in season.episodes]
        if any(n < 1 for n in eps) or len(set(eps)) != len(eps):
            raise ValidationFailedException(
                "Episode numbers must be positive and unique within a season",
                details={"season_number": season.season_number, "episode_numbers": eps},
            )
        if any(e.runtime_minutes < 1 for e in season.episodes):
            raise ValidationFailedException("runtime_minutes must be a positive integer", details={"season_number": season.season_number})

    # back-references follow the containing season
    seasons = [
        s.model_copy(update={"episodes": [e.model_copy(update={"season_id": s.id}) for e in s.episodes]})
        for s in series.seasons
    ]
    return series.model_copy(update={"seasons": seasons})


def filter_assets(
    assets: Iterable[MediaAsset],
    bucket: Optional[CatalogBucket] = None,
    genre: Optional[str] = None,
    original: Optional[bool] = None,
    premium: Optional[bool] = None,
) -> List[MediaAsset]:
    wanted_genre = genre.strip().lower() if genre else None
    out: List[MediaAsset] = []
    for a in assets:
        if bucket is not None and bucket_of(a) != bucket:
            continue
        if wanted_genre and (a.genre or "").strip().lower() != wanted_genre:
            continue
        if original is not None and a.is_original != original:
            continue
        if premium is not None and a.is_premium != premium:
            continue
        out.append(a)
    return out


def catalog_facets(assets: Iterable[MediaAsset]) -> CatalogFacets:
    assets = list(assets)
    buckets = Counter(bucket_of(a) for a in assets)
    origins = Counter(clip_origin(a) for a in assets if a.is_clip)
    genres = sorted({a.genre.strip() for a in assets if a.genre and a.genre.strip()}, key=str.lower)
    return CatalogFacets(
        buckets={b: buckets.get(b, 0) for b in CatalogBucket},
        genres=genres,
        originals=sum(1 for a in assets if a.is_original),
        premium=sum(1 for a in assets if a.is_premium),
        auto_clips=origins.get(ClipOrigin.autoGenerated, 0),
        manual_clips=origins.get(ClipOrigin.manual, 0),
    )


def originals(assets: Iterable[MediaAsset], series: Iterable[Series]) -> List[ContentItem]:
    items: List[ContentItem] = [AssetItem(asset=a) for a in assets if a.is_original and not a.is_clip]
    items.extend(SeriesItem(series=s) for s in series if s.is_original)
    return items


__all__ = [
    "validate_new_asset",
    "validate_new_series",
    "filter_assets",
    "catalog_facets",
    "originals",
]
