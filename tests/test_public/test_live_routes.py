# tests/test_public/test_live_routes.py

from datetime import timedelta

import pytest

from app.api.v1.routers.public import live_router
from tests.utils.factory import T0, make_asset, make_channel, make_slot, mk_client


@pytest.fixture()
def seeded(backend):
    backend.create_asset(make_asset("A", title="Alpha"))
    backend.create_asset(make_asset("B", title="Bravo"))
    backend.create_channel(make_channel("ch", slots=[
        make_slot("B", T0 + timedelta(hours=1), 30, "slot-b"),
        make_slot("A", T0, 60, "slot-a"),
    ]))
    return backend


def test_channels_listed_with_slots_in_start_order(seeded):
    _, client = mk_client(seeded, (live_router, ""))
    body = client.get("/api/v1/live/channels").json()
    assert [s["id"] for s in body[0]["schedule"]] == ["slot-a", "slot-b"]


def test_now_playing_uses_injected_clock(seeded):
    _, client = mk_client(seeded, (live_router, ""), now=T0 + timedelta(minutes=75))
    body = client.get("/api/v1/live/channels/ch/now").json()
    assert body["asset"]["id"] == "B"
    assert body["offset_seconds"] == 15 * 60


def test_nothing_on_before_first_slot(seeded):
    _, client = mk_client(seeded, (live_router, ""), now=T0 - timedelta(days=1))
    r = client.get("/api/v1/live/channels/ch/now")
    assert r.status_code == 200 and r.json() is None


def test_guide_window_and_blocks(seeded):
    _, client = mk_client(seeded, (live_router, ""), now=T0)
    body = client.get("/api/v1/live/channels/ch/guide", params={"hours": 2}).json()
    assert body["channel_id"] == "ch"
    assert body["now_playing"]["asset"]["id"] == "A"
    assert body["up_next"]["id"] == "B"
    assert [b["asset"]["id"] for b in body["blocks"]][:3] == ["A", "B", "A"]


def test_guide_hours_validated_and_unknown_channel(seeded):
    _, client = mk_client(seeded, (live_router, ""), now=T0)
    assert client.get("/api/v1/live/channels/ch/guide", params={"hours": 0}).status_code == 422
    assert client.get("/api/v1/live/channels/zzz/guide").status_code == 404
