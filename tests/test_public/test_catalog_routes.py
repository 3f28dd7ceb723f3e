# tests/test_public/test_catalog_routes.py

from datetime import timedelta

import pytest

from app.api.v1.routers.public import brands_router, catalog_router, search_router
from app.schemas.brands import Brand
from app.schemas.enums import ContentType
from tests.utils.factory import T0, make_asset, make_channel, make_series, make_slot, mk_client


@pytest.fixture()
def client(backend):
    backend.create_asset(make_asset("m1", title="Grace Street", genre="Drama", is_original=True))
    backend.create_asset(make_asset("p1", title="Talk Hour", content_type=ContentType.podcast))
    backend.create_asset(make_asset("c1", title="Grace Street - Short", is_clip=True, clip_caption="Grace Street - Short"))
    backend.create_series(make_series("s1", title="Amazing Grace", is_original=True))
    backend.create_brand(Brand(id="b1", name="North", assigned_films=["m1"]))
    backend.create_brand(Brand(id="b0", name="Ghost", assigned_films=["gone"]))
    _, c = mk_client(backend, (catalog_router, ""), (search_router, ""), (brands_router, ""))
    return c


def test_list_assets_filters_by_bucket(client):
    r = client.get("/api/v1/catalog/assets", params={"bucket": "podcasts"})
    assert r.status_code == 200, r.text
    assert [a["id"] for a in r.json()] == ["p1"]

    r = client.get("/api/v1/catalog/assets", params={"bucket": "nope"})
    assert r.status_code == 422


def test_get_asset_404_is_problem_json(client):
    r = client.get("/api/v1/catalog/assets/missing")
    assert r.status_code == 404
    assert r.headers["content-type"].startswith("application/problem+json")
    assert r.json()["details"] == {"entity": "asset", "id": "missing"}


def test_facets_and_originals(client):
    facets = client.get("/api/v1/catalog/facets").json()
    assert facets["buckets"] == {"movies": 1, "videos": 0, "podcasts": 1, "clips": 1}
    assert facets["manual_clips"] == 0 and facets["auto_clips"] == 1

    originals = client.get("/api/v1/catalog/originals").json()
    assert [(i["kind"], (i.get("asset") or i.get("series"))["id"]) for i in originals] == [
        ("asset", "m1"),
        ("series", "s1"),
    ]


def test_series_routes(client):
    assert [s["id"] for s in client.get("/api/v1/catalog/series").json()] == ["s1"]
    assert client.get("/api/v1/catalog/series/s1").json()["title"] == "Amazing Grace"
    assert client.get("/api/v1/catalog/series/zzz").status_code == 404


def test_search_buckets(client):
    body = client.get("/api/v1/search", params={"q": "grace"}).json()
    assert [i["id"] for i in body["films"]] == ["m1"]
    assert [i["id"] for i in body["series"]] == ["s1"]
    assert [i["id"] for i in body["clips"]] == ["c1"]
    assert body["brands"] == []
    assert all(i["playable"] is False for i in body["films"])


def test_blank_search(client):
    body = client.get("/api/v1/search").json()
    assert body["films"] == [] and body["series"] == []


def test_brand_rails_skip_orphans(client):
    rails = client.get("/api/v1/brands/rails").json()
    assert [r["brand_id"] for r in rails] == ["b1"]
    ghost = client.get("/api/v1/brands/b0/rail").json()
    assert ghost["films"] == [] and ghost["series"] == [] and ghost["clips"] == []
    assert client.get("/api/v1/brands/zzz/rail").status_code == 404


def test_brand_channels_and_live_only_rail(client, backend):
    late, early = make_slot("m1", T0 + timedelta(hours=2), 60), make_slot("m1", T0, 60)
    backend.create_channel(make_channel("ch1", slots=[late, early]))
    backend.create_brand(Brand(id="b2", name="Live Only", assigned_live_channels=["ch1", "gone"]))

    r = client.get("/api/v1/brands/b2/channels")
    assert r.status_code == 200, r.text
    [channel] = r.json()
    assert channel["id"] == "ch1"
    starts = [s["start_time"] for s in channel["schedule"]]
    assert starts == sorted(starts)

    rails = {r["brand_id"]: r for r in client.get("/api/v1/brands/rails").json()}
    assert set(rails) == {"b1", "b2"}
    assert [c["id"] for c in rails["b2"]["live_channels"]] == ["ch1"]
    assert client.get("/api/v1/brands/zzz/channels").status_code == 404
