# tests/test_repositories/test_remote_backend.py

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from app.core.exceptions import (
    BackendUnavailableException,
    NotFoundException,
    PermissionDeniedException,
    StaleWriteException,
    ValidationFailedException,
)
from app.repositories.remote import HttpCatalogBackend
from app.schemas.enums import UserRole
from app.schemas.user import ShoppingItem
from tests.utils.factory import make_asset, make_series


# ─────────────────────────────────────────────────────────────────────────────
# Fakes / doubles
# ─────────────────────────────────────────────────────────────────────────────

def _mk_backend(handler: Callable[[httpx.Request], httpx.Response]):
    seen: List[httpx.Request] = []

    def _record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    b = HttpCatalogBackend("https://catalog.internal/api/", token="s3cret", transport=httpx.MockTransport(_record))
    return b, seen


def _json(status: int, body: Any) -> httpx.Response:
    return httpx.Response(status, json=body)


# ─────────────────────────────────────────────────────────────────────────────
# Tests
# ─────────────────────────────────────────────────────────────────────────────

def test_list_and_get_assets_with_auth_header():
    asset = make_asset("a1").model_dump(mode="json")

    def handler(req: httpx.Request) -> httpx.Response:
        if req.url.path == "/api/assets":
            return _json(200, [asset])
        if req.url.path == "/api/assets/a1":
            return _json(200, asset)
        return _json(404, {})

    b, seen = _mk_backend(handler)
    assert [a.id for a in b.list_assets()] == ["a1"]
    assert b.get_asset("a1").id == "a1"
    assert b.get_asset("nope") is None
    assert seen[0].headers["Authorization"] == "Bearer s3cret"


def test_replace_sends_whole_document():
    bodies: List[Dict[str, Any]] = []

    def handler(req: httpx.Request) -> httpx.Response:
        body = json.loads(req.content)
        bodies.append(body)
        body["revision"] = body["revision"] + 1
        return _json(200, body)

    b, seen = _mk_backend(handler)
    out = b.replace_series("series-1", make_series())
    assert seen[0].method == "PUT" and seen[0].url.path == "/api/series/series-1"
    assert len(bodies[0]["seasons"]) == 2
    assert out.revision == 1


@pytest.mark.parametrize(
    "status,body,exc",
    [
        (404, {}, NotFoundException),
        (403, {"permission": "catalog:manage", "role": "user"}, PermissionDeniedException),
        (409, {"details": {"expected_revision": 1, "actual_revision": 2}}, StaleWriteException),
        (422, {"message": "title required"}, ValidationFailedException),
        (400, {"detail": "bad"}, ValidationFailedException),
        (500, {}, BackendUnavailableException),
        (502, {}, BackendUnavailableException),
    ],
)
def test_status_mapping(status, body, exc):
    b, _ = _mk_backend(lambda req: _json(status, body))
    with pytest.raises(exc):
        b.replace_asset("a1", make_asset("a1"))


def test_stale_write_carries_revisions():
    b, _ = _mk_backend(lambda req: _json(409, {"details": {"expected_revision": 3, "actual_revision": 4}}))
    with pytest.raises(StaleWriteException) as ei:
        b.replace_series("series-1", make_series(revision=3))
    assert ei.value.details["actual_revision"] == 4


def test_transport_error_is_backend_unavailable():
    def handler(req: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=req)

    b, _ = _mk_backend(handler)
    with pytest.raises(BackendUnavailableException) as ei:
        b.list_channels()
    assert ei.value.status_code == 503


def test_identity_calls():
    def handler(req: httpx.Request) -> httpx.Response:
        path = req.url.path
        if path == "/api/principals/ann%40example.com/role" or path == "/api/principals/ann@example.com/role":
            return _json(200, {"role": "admin"})
        if path.endswith("/promote"):
            payload = json.loads(req.content)
            return _json(200, {"principal": "bob@example.com", "role": payload["role"]})
        return _json(404, {})

    b, seen = _mk_backend(handler)
    assert b.current_role(None) == UserRole.guest
    assert b.current_role("ann@example.com") == UserRole.admin
    assert b.current_role("nobody@example.com") == UserRole.user
    assert b.get_profile("nobody@example.com") is None

    member = b.promote("ann@example.com", "bob@example.com", UserRole.admin)
    assert member.role == UserRole.admin
    assert json.loads(seen[-1].content) == {"caller": "ann@example.com", "role": "admin"}


def test_search_and_checkout():
    def handler(req: httpx.Request) -> httpx.Response:
        if req.url.path == "/api/search":
            assert req.url.params["q"] == "grace"
            return _json(200, [{"id": "v1", "title": "Grace Street", "result_type": "film"}])
        if req.url.path == "/api/checkout/sessions":
            return _json(201, {"id": "cs_1", "url": "https://pay.example.com/cs_1"})
        return _json(404, {})

    b, _ = _mk_backend(handler)
    assert [r.id for r in b.search("grace")] == ["v1"]
    session = b.create_checkout_session([ShoppingItem(product_name="Premium", price_in_cents=999)], "https://ok", "https://no")
    assert session.id == "cs_1"


def test_from_settings_requires_url():
    class _S:
        CATALOG_BACKEND_URL = None

    with pytest.raises(ValueError):
        HttpCatalogBackend.from_settings(_S())


def test_watch_history_and_counters():
    def handler(req: httpx.Request) -> httpx.Response:
        path = req.url.path
        if path.endswith("/history") and req.method == "POST":
            return _json(201, [json.loads(req.content)["content_id"], "older"])
        if path.endswith("/history"):
            return _json(404, {})
        if path == "/api/stats":
            return _json(200, [{"content_id": "a1", "views": 3, "premium_views": 1, "ad_impressions": 4}])
        if path.startswith("/api/stats/"):
            return httpx.Response(204)
        return _json(500, {})

    b, seen = _mk_backend(handler)
    assert b.add_to_watch_history("ann@example.com", "a1") == ["a1", "older"]
    assert b.get_watch_history("ghost@example.com") == []

    b.increment_views("a1", premium=True)
    assert (seen[-1].method, seen[-1].url.path) == ("POST", "/api/stats/a1/views")
    assert json.loads(seen[-1].content) == {"premium": True}

    b.increment_ad_impressions("a1", 2)
    assert seen[-1].url.path == "/api/stats/a1/ad-impressions"
    assert json.loads(seen[-1].content) == {"count": 2}
    calls = len(seen)
    b.increment_ad_impressions("a1", 0)
    assert len(seen) == calls

    [row] = b.list_content_stats()
    assert (row.content_id, row.views, row.ad_impressions) == ("a1", 3, 4)


def test_channels_by_brand():
    channel = {"id": "c1", "name": "Prime One", "schedule": [], "revision": 2}

    def handler(req: httpx.Request) -> httpx.Response:
        if req.url.path == "/api/brands/b1/channels":
            return _json(200, [channel])
        return _json(404, {})

    b, _ = _mk_backend(handler)
    assert [c.id for c in b.list_channels_by_brand("b1")] == ["c1"]
    with pytest.raises(NotFoundException):
        b.list_channels_by_brand("nope")
