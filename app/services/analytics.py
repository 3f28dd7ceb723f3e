from __future__ import annotations

"""
Viewing analytics
=================

Counting happens at playback time: a decision the viewer may play counts one
view (and one premium view for premium viewers) and lands in a signed-in
viewer's watch history; every ad the decision returns counts one impression.

The dashboard view is computed from the backend's raw per-content counters
and a catalog snapshot:

- totals: views, ad impressions, premium users (profiles with `is_premium`)
- trending: most viewed content that still resolves to an asset or episode
- per-category breakdown keyed by the content type label; counters whose
  content no longer resolves fall under `Other`
"""

import logging
from collections import Counter
from typing import Dict, Iterable, Tuple

from app.repositories.backend import CatalogBackendProtocol
from app.schemas.ads import PlaybackDecision
from app.schemas.analytics import Analytics, CategoryStats, ContentStats, TrendingContent
from app.schemas.catalog import MediaAsset, Series
from app.schemas.user import StaffMember, Viewer
from app.services.classifier import content_type_label

log = logging.getLogger(__name__)

UNRESOLVED_CATEGORY = "Other"


def record_playback(backend: CatalogBackendProtocol, decision: PlaybackDecision, viewer: Viewer) -> None:
    if not decision.can_watch:
        return
    backend.increment_views(decision.content_id, premium=viewer.is_premium)
    if viewer.authenticated and viewer.principal:
        backend.add_to_watch_history(viewer.principal, decision.content_id)
    if decision.ads:
        backend.increment_ad_impressions(decision.content_id, len(decision.ads))
    log.debug("Playback recorded | content=%s premium=%s ads=%d",
              decision.content_id, viewer.is_premium, len(decision.ads))


def _content_index(assets: Iterable[MediaAsset], series: Iterable[Series]) -> Dict[str, Tuple[str, str]]:
    """content id → (title, category label) for assets and episodes."""
    index = {a.id: (a.title or "", content_type_label(a.content_type)) for a in assets}
    for s in series:
        for season in s.seasons:
            for ep in season.episodes:
                index[ep.id] = (ep.title, content_type_label(ep.content_type))
    return index


def build_analytics(
    stats: Iterable[ContentStats],
    assets: Iterable[MediaAsset],
    series: Iterable[Series],
    users: Iterable[StaffMember],
    trending_limit: int = 10,
) -> Analytics:
    stats = list(stats)
    index = _content_index(assets, series)

    views: Counter = Counter()
    premium_views: Counter = Counter()
    impressions: Counter = Counter()
    for row in stats:
        category = index.get(row.content_id, ("", UNRESOLVED_CATEGORY))[1]
        views[category] += row.views
        premium_views[category] += row.premium_views
        impressions[category] += row.ad_impressions

    ranked = sorted(
        (row for row in stats if row.views > 0 and row.content_id in index),
        key=lambda row: (-row.views, row.content_id),
    )
    trending = [
        TrendingContent(
            id=row.content_id,
            title=index[row.content_id][0],
            view_count=row.views,
            category=index[row.content_id][1],
        )
        for row in ranked[:trending_limit]
    ]

    categories = sorted(set(views) | set(impressions), key=lambda c: (-views[c], c))
    return Analytics(
        total_views=sum(row.views for row in stats),
        ad_impressions=sum(row.ad_impressions for row in stats),
        premium_user_count=sum(1 for u in users if u.profile is not None and u.profile.is_premium),
        trending_content=trending,
        category_stats=[
            CategoryStats(
                category=c,
                view_count=views[c],
                premium_views=premium_views[c],
                ad_impressions=impressions[c],
            )
            for c in categories
        ],
    )


def get_analytics(backend: CatalogBackendProtocol, trending_limit: int = 10) -> Analytics:
    return build_analytics(
        backend.list_content_stats(),
        backend.list_assets(),
        backend.list_series(),
        backend.list_users(),
        trending_limit=trending_limit,
    )


__all__ = ["UNRESOLVED_CATEGORY", "record_playback", "build_analytics", "get_analytics"]
