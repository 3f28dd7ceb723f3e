# tests/test_admin/test_admin_live_and_staff.py

from datetime import timedelta

import pytest

from app.api.v1.routers.admin import router as admin_router
from app.core.config import settings
from app.schemas.enums import ContentType, UserRole
from tests.utils.factory import ADMIN, MASTER, T0, VIEWER, as_principal, make_asset, make_channel, make_slot, mk_client

H = as_principal(ADMIN)


@pytest.fixture()
def client(backend):
    backend.create_asset(make_asset("A", content_type=ContentType.movie, eligible_for_live=True))
    backend.create_asset(make_asset("P", content_type=ContentType.podcast))
    backend.create_asset(make_asset("C", is_clip=True))
    _, c = mk_client(backend, (admin_router, "/admin"))
    return c


def _slot(content_id, start, minutes=60, **extra):
    return {"content_id": content_id, "start_time": start.isoformat(), "duration_minutes": minutes, **extra}


# ─────────────────────────────────────────────────────────────────────────────
# Channels & slots
# ─────────────────────────────────────────────────────────────────────────────

def test_create_channel_validates_schedule(client):
    bad = make_channel("ch", slots=[make_slot("P", T0, 30)]).model_dump(mode="json")
    assert client.post("/api/v1/admin/channels", json=bad, headers=H).status_code == 422

    ok = make_channel("ch", slots=[make_slot("A", T0, 60)]).model_dump(mode="json")
    r = client.post("/api/v1/admin/channels", json=ok, headers=H)
    assert r.status_code == 201, r.text
    assert r.json()["revision"] == 0


def test_podcast_slot_rejected_next_to_movie(client, backend):
    client.post("/api/v1/admin/channels", json=make_channel("ch").model_dump(mode="json"), headers=H)
    assert client.post("/api/v1/admin/channels/ch/slots", json=_slot("A", T0), headers=H).status_code == 201

    r = client.post("/api/v1/admin/channels/ch/slots", json=_slot("P", T0 + timedelta(hours=1), 30), headers=H)
    assert r.status_code == 422
    r = client.post("/api/v1/admin/channels/ch/slots", json=_slot("C", T0 + timedelta(hours=1), 5), headers=H)
    assert r.status_code == 422
    assert len(backend.get_channel("ch").schedule) == 1


def test_overlapping_slot_rejected(client):
    client.post("/api/v1/admin/channels", json=make_channel("ch").model_dump(mode="json"), headers=H)
    client.post("/api/v1/admin/channels/ch/slots", json=_slot("A", T0), headers=H)
    r = client.post("/api/v1/admin/channels/ch/slots", json=_slot("A", T0 + timedelta(minutes=30)), headers=H)
    assert r.status_code == 422
    assert client.get("/api/v1/admin/channels/ch/overlaps", headers=H).json() == []


@pytest.mark.parametrize("minutes", [0, 7 * 24 * 60 + 1, 10**12])
def test_slot_duration_out_of_range_is_422(client, minutes):
    client.post("/api/v1/admin/channels", json=make_channel("ch").model_dump(mode="json"), headers=H)
    r = client.post("/api/v1/admin/channels/ch/slots", json=_slot("A", T0, minutes), headers=H)
    assert r.status_code == 422
    assert r.headers["content-type"].startswith("application/problem+json")


def test_overlap_allowed_when_permissive(client, monkeypatch):
    monkeypatch.setattr(settings, "SCHEDULE_REJECT_OVERLAP", False)
    client.post("/api/v1/admin/channels", json=make_channel("ch").model_dump(mode="json"), headers=H)
    client.post("/api/v1/admin/channels/ch/slots", json=_slot("A", T0), headers=H)
    r = client.post("/api/v1/admin/channels/ch/slots", json=_slot("A", T0 + timedelta(minutes=30)), headers=H)
    assert r.status_code == 201
    pairs = client.get("/api/v1/admin/channels/ch/overlaps", headers=H).json()
    assert len(pairs) == 1 and len(pairs[0]) == 2


def test_remove_slot_by_id_with_revision_pin(client):
    client.post("/api/v1/admin/channels", json=make_channel("ch").model_dump(mode="json"), headers=H)
    body = client.post("/api/v1/admin/channels/ch/slots", json=_slot("A", T0), headers=H).json()
    slot_id = body["schedule"][0]["id"]

    r = client.delete(f"/api/v1/admin/channels/ch/slots/{slot_id}", params={"revision": 0}, headers=H)
    assert r.status_code == 409

    r = client.delete(f"/api/v1/admin/channels/ch/slots/{slot_id}", params={"revision": body["revision"]}, headers=H)
    assert r.status_code == 200 and r.json()["schedule"] == []
    assert client.delete(f"/api/v1/admin/channels/ch/slots/{slot_id}", headers=H).status_code == 404


def test_slot_with_stale_revision_in_body(client):
    client.post("/api/v1/admin/channels", json=make_channel("ch").model_dump(mode="json"), headers=H)
    client.post("/api/v1/admin/channels/ch/slots", json=_slot("A", T0), headers=H)
    r = client.post("/api/v1/admin/channels/ch/slots", json=_slot("A", T0 + timedelta(hours=3), revision=0), headers=H)
    assert r.status_code == 409


def test_channel_replace_and_delete(client):
    created = client.post("/api/v1/admin/channels", json=make_channel("ch").model_dump(mode="json"), headers=H).json()
    r = client.put("/api/v1/admin/channels/ch", json={**created, "name": "Prime Two"}, headers=H)
    assert r.status_code == 200 and r.json()["revision"] == 1
    assert client.put("/api/v1/admin/channels/ch", json={**created, "name": "Stale"}, headers=H).status_code == 409
    assert client.delete("/api/v1/admin/channels/ch", headers=H).status_code == 204


# ─────────────────────────────────────────────────────────────────────────────
# Staff
# ─────────────────────────────────────────────────────────────────────────────

def test_staff_routes_need_master_admin(client):
    assert client.get("/api/v1/admin/staff", headers=H).status_code == 403
    r = client.get("/api/v1/admin/staff", headers=as_principal(MASTER))
    assert r.status_code == 200
    assert r.headers["cache-control"] == "no-store"
    assert {m["principal"]: m["role"] for m in r.json()}[ADMIN] == "admin"


def test_promote_and_demote(client, backend):
    m = as_principal(MASTER)
    r = client.post(f"/api/v1/admin/staff/{VIEWER}/promote", json={"role": "admin"}, headers=m)
    assert r.status_code == 200, r.text
    assert backend.current_role(VIEWER) == UserRole.admin

    r = client.post(f"/api/v1/admin/staff/{VIEWER}/demote", json={"role": "masterAdmin"}, headers=m)
    assert r.status_code == 422

    r = client.post(f"/api/v1/admin/staff/{VIEWER}/demote", json={"role": "admin"}, headers=m)
    assert r.status_code == 200 and r.json()["role"] == "user"


def test_last_master_admin_stays(client):
    r = client.post(f"/api/v1/admin/staff/{MASTER}/demote", json={"role": "masterAdmin"}, headers=as_principal(MASTER))
    assert r.status_code == 422
