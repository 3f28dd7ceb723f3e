# tests/test_repositories/test_memory_backend.py

import json

import pytest

from app.core.exceptions import (
    NotFoundException,
    PermissionDeniedException,
    StaleWriteException,
    ValidationFailedException,
)
from app.repositories import backend as backend_mod
from app.repositories.backend import MemoryCatalogBackend, get_catalog_backend, reset_catalog_backend
from app.schemas.brands import Brand
from app.schemas.enums import UserRole
from app.schemas.user import ShoppingItem, UserProfile
from tests.utils.factory import ADMIN, MASTER, VIEWER, make_asset, make_channel, make_series


# ─────────────────────────────────────────────────────────────────────────────
# Records
# ─────────────────────────────────────────────────────────────────────────────

def test_reads_are_copies(backend):
    backend.create_asset(make_asset("a1", title="Original"))
    got = backend.get_asset("a1")
    got.title = "Mutated"
    assert backend.get_asset("a1").title == "Original"


def test_duplicate_create_and_missing_replace(backend):
    backend.create_asset(make_asset("a1"))
    with pytest.raises(ValidationFailedException):
        backend.create_asset(make_asset("a1"))
    with pytest.raises(NotFoundException):
        backend.replace_asset("nope", make_asset("nope"))
    with pytest.raises(NotFoundException):
        backend.delete_brand("nope")
    assert backend.get_series("nope") is None


def test_series_replace_is_revision_checked(backend):
    created = backend.create_series(make_series(revision=7))
    assert created.revision == 0

    first = backend.replace_series("series-1", created.model_copy(update={"title": "v1"}))
    assert first.revision == 1

    with pytest.raises(StaleWriteException):
        backend.replace_series("series-1", created.model_copy(update={"title": "lost update"}))
    assert backend.get_series("series-1").title == "v1"


def test_channel_replace_is_revision_checked(backend):
    ch = backend.create_channel(make_channel("ch"))
    backend.replace_channel("ch", ch)
    with pytest.raises(StaleWriteException):
        backend.replace_channel("ch", ch)


# ─────────────────────────────────────────────────────────────────────────────
# Identity
# ─────────────────────────────────────────────────────────────────────────────

def test_role_resolution(backend):
    assert backend.current_role(None) == UserRole.guest
    assert backend.current_role("stranger@example.com") == UserRole.user
    assert backend.current_role(ADMIN) == UserRole.admin
    assert backend.current_role(MASTER) == UserRole.masterAdmin


def test_admin_cannot_grant_admin(backend):
    with pytest.raises(PermissionDeniedException):
        backend.promote(ADMIN, VIEWER, UserRole.admin)
    assert backend.current_role(VIEWER) == UserRole.user


def test_plain_user_cannot_change_roles(backend):
    with pytest.raises(PermissionDeniedException):
        backend.promote(VIEWER, VIEWER, UserRole.user)


def test_demote_requires_held_role(backend):
    with pytest.raises(ValidationFailedException):
        backend.demote(MASTER, VIEWER, UserRole.admin)
    member = backend.demote(MASTER, ADMIN, UserRole.admin)
    assert member.role == UserRole.user
    assert backend.current_role(ADMIN) == UserRole.user


def test_last_master_admin_cannot_be_demoted(backend):
    with pytest.raises(ValidationFailedException):
        backend.demote(MASTER, MASTER, UserRole.masterAdmin)
    backend.promote(MASTER, "second@example.com", UserRole.masterAdmin)
    backend.demote("second@example.com", MASTER, UserRole.masterAdmin)
    assert backend.current_role(MASTER) == UserRole.user


def test_profiles_and_staff_listing(backend):
    assert backend.get_profile(VIEWER) is None
    backend.save_profile(VIEWER, UserProfile(name="Vee", email="viewer@example.com", is_premium=True))
    assert backend.get_profile(VIEWER).is_premium is True
    staff = {m.principal: m for m in backend.list_users()}
    assert staff[VIEWER].role == UserRole.user and staff[VIEWER].profile.name == "Vee"
    assert staff[MASTER].role == UserRole.masterAdmin


def test_checkout_session_shape():
    b = MemoryCatalogBackend(checkout_base_url="https://pay.example.com/")
    session = b.create_checkout_session(
        [ShoppingItem(product_name="Premium", price_in_cents=999)],
        success_url="https://app.example.com/ok",
        cancel_url="https://app.example.com/cancel",
    )
    assert session.id.startswith("cs_")
    assert session.url == f"https://pay.example.com/checkout/{session.id}"


# ─────────────────────────────────────────────────────────────────────────────
# Seed file & factory
# ─────────────────────────────────────────────────────────────────────────────

def test_seed_file_loads_everything(tmp_path):
    seed = {
        "assets": [make_asset("a1").model_dump(mode="json")],
        "series": [make_series().model_dump(mode="json")],
        "channels": [make_channel("ch").model_dump(mode="json")],
        "brands": [{"id": "b1", "name": "North"}],
        "ad_media": [{"id": "ad-1", "ad_file_url": "https://ads.example.com/1.mp4", "duration_seconds": 15}],
        "ad_assignments": [{"id": "asg-1", "ad_ids": ["ad-1"]}],
        "users": [{"principal": "boss@example.com", "role": "masterAdmin"}],
    }
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(seed), encoding="utf-8")

    b = MemoryCatalogBackend(str(path))

    assert b.get_asset("a1") is not None
    assert b.get_series("series-1") is not None
    assert b.get_channel("ch") is not None
    assert [x.id for x in b.list_ad_assignments()] == ["asg-1"]
    assert b.current_role("boss@example.com") == UserRole.masterAdmin


def test_bad_seed_leaves_backend_empty(tmp_path):
    path = tmp_path / "seed.json"
    path.write_text(json.dumps({"assets": [make_asset("a1").model_dump(mode="json")], "brands": [{"id": "b"}]}))
    b = MemoryCatalogBackend(str(path))
    assert b.list_assets() == [] and b.list_brands() == []


def test_missing_seed_file_is_not_fatal(tmp_path):
    assert MemoryCatalogBackend(str(tmp_path / "absent.json")).list_assets() == []


def test_factory_returns_singleton_and_custom_impl(monkeypatch):
    reset_catalog_backend()
    first = get_catalog_backend()
    assert isinstance(first, MemoryCatalogBackend)
    assert get_catalog_backend() is first

    monkeypatch.setattr(backend_mod, "_build_backend", lambda: "custom")
    reset_catalog_backend()
    assert get_catalog_backend() == "custom"


def test_import_string_validates_format():
    with pytest.raises(ValueError):
        backend_mod._import_string("no_colon_here")
    assert backend_mod._import_string("app.repositories.backend:MemoryCatalogBackend") is MemoryCatalogBackend


# ─────────────────────────────────────────────────────────────────────────────
# Watch history, counters & brand channels
# ─────────────────────────────────────────────────────────────────────────────

def test_watch_history_most_recent_first_without_duplicates(backend):
    assert backend.get_watch_history(VIEWER) == []
    backend.add_to_watch_history(VIEWER, "a1")
    backend.add_to_watch_history(VIEWER, "a2")
    assert backend.add_to_watch_history(VIEWER, "a1") == ["a1", "a2"]
    assert backend.get_watch_history(VIEWER) == ["a1", "a2"]
    assert backend.get_watch_history(ADMIN) == []


def test_watch_history_is_capped():
    b = MemoryCatalogBackend(history_limit=3)
    for i in range(5):
        b.add_to_watch_history(VIEWER, f"a{i}")
    assert b.get_watch_history(VIEWER) == ["a4", "a3", "a2"]


def test_counters_accumulate(backend):
    backend.increment_views("a1")
    backend.increment_views("a1", premium=True)
    backend.increment_ad_impressions("a1", 2)
    backend.increment_ad_impressions("a1", 0)
    backend.increment_ad_impressions("a2")

    stats = {s.content_id: s for s in backend.list_content_stats()}
    assert (stats["a1"].views, stats["a1"].premium_views, stats["a1"].ad_impressions) == (2, 1, 2)
    assert (stats["a2"].views, stats["a2"].ad_impressions) == (0, 1)

    stats["a1"].views = 99
    assert {s.content_id: s.views for s in backend.list_content_stats()}["a1"] == 2


def test_channels_by_brand_keep_assignment_order(backend):
    backend.create_channel(make_channel("c1"))
    backend.create_channel(make_channel("c2"))
    backend.create_brand(Brand(id="b1", name="North", assigned_live_channels=["c2", "gone", "c1"]))
    assert [c.id for c in backend.list_channels_by_brand("b1")] == ["c2", "c1"]
    with pytest.raises(NotFoundException):
        backend.list_channels_by_brand("nope")
