from __future__ import annotations

"""
Entitlements & ad resolution
============================

Per-viewing decisions:

- `can_watch`: free content, first-episode previews, premium viewers and
  admins always pass.
- `should_see_ads`: everyone except premium viewers and admins.
- `resolve_ads`: video-scoped assignments for the target win; otherwise the
  global pool. Order follows assignment order, then id order within each
  assignment. Ids missing from the ad catalog are dropped.

The viewer's role is an input resolved by the identity boundary; nothing
here grants or checks roles on its own.
"""

from typing import Iterable, List, Optional, Sequence, Union

from app.schemas.ads import AdAssignment, AdMedia, PlaybackDecision
from app.schemas.catalog import Episode, MediaAsset
from app.schemas.enums import AdScope, UserRole
from app.schemas.user import UserProfile, Viewer

Playable = Union[MediaAsset, Episode]


def build_viewer(principal: Optional[str], role: UserRole, profile: Optional[UserProfile]) -> Viewer:
    if not principal:
        return Viewer.anonymous()
    return Viewer(
        principal=principal,
        authenticated=True,
        is_premium=bool(profile and profile.is_premium),
        is_admin=role.at_least(UserRole.admin),
        role=role,
    )


def can_watch(target: Playable, viewer: Viewer) -> bool:
    if not target.is_premium:
        return True
    if isinstance(target, Episode) and target.is_first_episode:
        return True
    return viewer.is_premium or viewer.is_admin


def should_see_ads(viewer: Viewer) -> bool:
    return not (viewer.is_premium or viewer.is_admin)


def _flatten(assignments: Iterable[AdAssignment], catalog: dict) -> List[AdMedia]:
    return [catalog[ad_id] for a in assignments for ad_id in a.ad_ids if ad_id in catalog]


def resolve_ads(
    target_id: str,
    assignments: Sequence[AdAssignment],
    ad_catalog: Iterable[AdMedia],
    viewer: Viewer,
) -> List[AdMedia]:
    if not should_see_ads(viewer):
        return []
    catalog = {ad.id: ad for ad in ad_catalog}
    targeted = _flatten(
        (a for a in assignments if a.scope == AdScope.video and a.target_id == target_id), catalog
    )
    if targeted:
        return targeted
    return _flatten((a for a in assignments if a.scope == AdScope.global_), catalog)


def playback_decision(
    target: Playable,
    assignments: Sequence[AdAssignment],
    ad_catalog: Iterable[AdMedia],
    viewer: Viewer,
) -> PlaybackDecision:
    if not can_watch(target, viewer):
        return PlaybackDecision(content_id=target.id, can_watch=False, show_ads=False)
    ads = resolve_ads(target.id, assignments, ad_catalog, viewer)
    return PlaybackDecision(content_id=target.id, can_watch=True, show_ads=should_see_ads(viewer), ads=ads)


__all__ = ["build_viewer", "can_watch", "should_see_ads", "resolve_ads", "playback_decision"]
