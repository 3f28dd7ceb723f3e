# tests/test_services/test_entitlements.py

import itertools

import pytest

from app.schemas.ads import AdAssignment, AdMedia
from app.schemas.enums import AdScope, UserRole
from app.schemas.user import UserProfile, Viewer
from app.services import entitlements as ent
from tests.utils.factory import make_asset, make_episode

VIEWERS = [
    Viewer.anonymous(),
    Viewer(principal="u", authenticated=True, role=UserRole.user),
    Viewer(principal="p", authenticated=True, is_premium=True, role=UserRole.user),
    Viewer(principal="a", authenticated=True, is_admin=True, role=UserRole.admin),
    Viewer(principal="pa", authenticated=True, is_premium=True, is_admin=True, role=UserRole.masterAdmin),
]

ADS = [
    AdMedia(id="ad-1", ad_file_url="https://ads.example.com/1.mp4", duration_seconds=15),
    AdMedia(id="ad-2", ad_file_url="https://ads.example.com/2.mp4", duration_seconds=30),
    AdMedia(id="ad-3", ad_file_url="https://ads.example.com/3.mp4", duration_seconds=10),
]


# ─────────────────────────────────────────────────────────────────────────────
# can_watch / should_see_ads
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("viewer,first", itertools.product(VIEWERS, [True, False]))
def test_free_episode_always_watchable(viewer, first):
    assert ent.can_watch(make_episode(1, is_premium=False, is_first_episode=first), viewer)


@pytest.mark.parametrize("viewer,premium", itertools.product(VIEWERS, [True, False]))
def test_first_episode_always_watchable(viewer, premium):
    assert ent.can_watch(make_episode(1, is_premium=premium, is_first_episode=True), viewer)


def test_premium_content_needs_premium_or_admin():
    ep = make_episode(2, is_premium=True)
    film = make_asset(is_premium=True)
    assert [ent.can_watch(ep, v) for v in VIEWERS] == [False, False, True, True, True]
    assert [ent.can_watch(film, v) for v in VIEWERS] == [False, False, True, True, True]


@pytest.mark.parametrize("viewer", VIEWERS)
def test_should_see_ads_exactly_when_neither_premium_nor_admin(viewer):
    assert ent.should_see_ads(viewer) == (not viewer.is_premium and not viewer.is_admin)


def test_build_viewer_from_role_and_profile():
    assert ent.build_viewer(None, UserRole.admin, None) == Viewer.anonymous()
    v = ent.build_viewer("x", UserRole.admin, UserProfile(name="X", email="x@example.com", is_premium=True))
    assert v.authenticated and v.is_admin and v.is_premium


# ─────────────────────────────────────────────────────────────────────────────
# resolve_ads
# ─────────────────────────────────────────────────────────────────────────────

def test_resolve_ads_never_returns_unknown_ids():
    assignments = [
        AdAssignment(scope=AdScope.video, target_id="film-1", ad_ids=["ghost", "ad-2", "ad-1"]),
        AdAssignment(scope=AdScope.global_, ad_ids=["ad-3", "ghost-2"]),
    ]
    ads = ent.resolve_ads("film-1", assignments, ADS, VIEWERS[0])
    known = {a.id for a in ADS}
    assert [a.id for a in ads] == ["ad-2", "ad-1"]
    assert all(a.id in known for a in ads)


def test_video_scope_wins_then_global_fallback():
    assignments = [
        AdAssignment(scope=AdScope.global_, ad_ids=["ad-3"]),
        AdAssignment(scope=AdScope.video, target_id="film-1", ad_ids=["ad-1"]),
    ]
    assert [a.id for a in ent.resolve_ads("film-1", assignments, ADS, VIEWERS[1])] == ["ad-1"]
    assert [a.id for a in ent.resolve_ads("film-2", assignments, ADS, VIEWERS[1])] == ["ad-3"]


def test_targeted_assignment_with_only_unknown_ids_falls_back_to_global():
    assignments = [
        AdAssignment(scope=AdScope.video, target_id="film-1", ad_ids=["ghost"]),
        AdAssignment(scope=AdScope.global_, ad_ids=["ad-3"]),
    ]
    assert [a.id for a in ent.resolve_ads("film-1", assignments, ADS, VIEWERS[0])] == ["ad-3"]


def test_premium_viewer_gets_no_ads():
    assignments = [AdAssignment(scope=AdScope.global_, ad_ids=["ad-1"])]
    assert ent.resolve_ads("film-1", assignments, ADS, VIEWERS[2]) == []


def test_video_scope_requires_target():
    with pytest.raises(ValueError):
        AdAssignment(scope=AdScope.video, ad_ids=["ad-1"])


def test_playback_decision_blocks_premium_for_free_viewer():
    film = make_asset("film-1", is_premium=True)
    d = ent.playback_decision(film, [AdAssignment(ad_ids=["ad-1"])], ADS, VIEWERS[1])
    assert d.can_watch is False and d.ads == []
    d = ent.playback_decision(make_asset("film-2"), [AdAssignment(ad_ids=["ad-1"])], ADS, VIEWERS[1])
    assert d.can_watch and d.show_ads and [a.id for a in d.ads] == ["ad-1"]
