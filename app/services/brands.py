from __future__ import annotations

"""Brand rails: a brand's assigned films, series, clips and live channels resolved against catalog snapshots."""

from typing import Iterable, List

from app.schemas.brands import Brand, BrandRail
from app.schemas.catalog import MediaAsset, Series
from app.schemas.live import LiveChannel
from app.services.schedule import sorted_slots


def brand_channels(brand: Brand, channels: Iterable[LiveChannel]) -> List[LiveChannel]:
    """Assigned live channels in assignment order, slots in start order."""
    by_id = {c.id: c for c in channels}
    return [
        by_id[i].model_copy(update={"schedule": sorted_slots(by_id[i])})
        for i in brand.assigned_live_channels
        if i in by_id
    ]


def resolve_brand_rail(
    brand: Brand,
    assets: Iterable[MediaAsset],
    series: Iterable[Series],
    channels: Iterable[LiveChannel] = (),
) -> BrandRail:
    """Ids that no longer resolve are left out; an orphaned reference is not an error."""
    assets_by_id = {a.id: a for a in assets}
    series_by_id = {s.id: s for s in series}
    return BrandRail(
        brand_id=brand.id,
        name=brand.name,
        logo_url=brand.logo_url,
        films=[assets_by_id[i] for i in brand.assigned_films if i in assets_by_id],
        series=[series_by_id[i] for i in brand.assigned_series if i in series_by_id],
        clips=[assets_by_id[i] for i in brand.assigned_clips if i in assets_by_id],
        live_channels=brand_channels(brand, channels),
    )


def build_brand_rails(
    brands: Iterable[Brand],
    assets: Iterable[MediaAsset],
    series: Iterable[Series],
    channels: Iterable[LiveChannel] = (),
) -> List[BrandRail]:
    assets, series, channels = list(assets), list(series), list(channels)
    rails = (resolve_brand_rail(b, assets, series, channels) for b in brands)
    return [r for r in rails if not r.is_empty]


__all__ = ["brand_channels", "resolve_brand_rail", "build_brand_rails"]
