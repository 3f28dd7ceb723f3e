# tests/test_services/test_schedule.py

from datetime import datetime, timedelta, timezone

import pytest

from app.core.exceptions import NotFoundException, StaleWriteException, ValidationFailedException
from app.schemas.enums import ContentType
from app.schemas.live import MAX_SLOT_MINUTES, AdLocation
from app.services import schedule
from app.services.classifier import is_live_eligible
from tests.utils.factory import T0, make_asset, make_channel, make_slot


# ─────────────────────────────────────────────────────────────────────────────
# Pure builder
# ─────────────────────────────────────────────────────────────────────────────

def test_podcast_slot_rejected_on_classification():
    movie = make_asset("A", content_type=ContentType.movie, eligible_for_live=True)
    podcast = make_asset("P", content_type=ContentType.podcast)
    channel = make_channel(slots=[make_slot(movie.id, T0, 60)])

    assert is_live_eligible(podcast) is False
    with pytest.raises(ValidationFailedException):
        schedule.add_slot(channel, podcast, T0 + timedelta(hours=1), 30)
    assert len(channel.schedule) == 1


def test_clip_slot_rejected():
    clip = make_asset("C", is_clip=True)
    with pytest.raises(ValidationFailedException):
        schedule.add_slot(make_channel(), clip, T0, 10)


def test_add_slot_appends_and_computes_end():
    movie = make_asset("A")
    channel = schedule.add_slot(make_channel(), movie, T0, 90)
    slot = channel.schedule[0]
    assert slot.end_time - slot.start_time == timedelta(minutes=90)
    assert slot.id.startswith("slot-")


def test_default_duration_comes_from_content_type():
    channel = schedule.add_slot(make_channel(), make_asset("A", content_type=ContentType.film), T0)
    assert channel.schedule[0].duration_seconds == 120 * 60
    channel = schedule.add_slot(make_channel(), make_asset("N", content_type=ContentType.news), T0)
    assert channel.schedule[0].duration_seconds == 60 * 60


def test_non_positive_duration_rejected():
    with pytest.raises(ValidationFailedException):
        schedule.add_slot(make_channel(), make_asset("A"), T0, 0)


def test_huge_duration_is_a_validation_error():
    with pytest.raises(ValidationFailedException) as exc:
        schedule.add_slot(make_channel(), make_asset("A"), T0, 10**12)
    assert exc.value.details == {"duration_minutes": 10**12}

    channel = schedule.add_slot(make_channel(), make_asset("A"), T0, MAX_SLOT_MINUTES)
    assert channel.schedule[0].duration_seconds == MAX_SLOT_MINUTES * 60


def test_slot_ending_past_the_calendar_is_a_validation_error():
    far_future = datetime(9999, 12, 31, 23, 0, tzinfo=timezone.utc)
    with pytest.raises(ValidationFailedException):
        schedule.add_slot(make_channel(), make_asset("A"), far_future, 120)


def test_ad_location_outside_slot_rejected():
    with pytest.raises(ValidationFailedException):
        schedule.add_slot(
            make_channel(), make_asset("A"), T0, 30,
            ad_locations=[AdLocation(position_seconds=30 * 60, ad_ids=["ad-1"])],
        )


def test_overlap_rejected_by_default_and_allowed_when_permissive():
    movie = make_asset("A")
    channel = make_channel(slots=[make_slot("A", T0, 60)])
    with pytest.raises(ValidationFailedException) as ei:
        schedule.add_slot(channel, movie, T0 + timedelta(minutes=30), 60)
    assert ei.value.status_code == 422

    permissive = schedule.add_slot(channel, movie, T0 + timedelta(minutes=30), 60, reject_overlap=False)
    assert len(schedule.find_overlaps(permissive)) == 1


def test_back_to_back_slots_do_not_overlap():
    channel = make_channel(slots=[make_slot("A", T0, 60)])
    channel = schedule.add_slot(channel, make_asset("A"), T0 + timedelta(minutes=60), 60)
    assert schedule.find_overlaps(channel) == []


def test_sorted_slots_orders_by_start_not_storage():
    late, early = make_slot("A", T0 + timedelta(hours=2), 60), make_slot("B", T0, 60)
    channel = make_channel(slots=[late, early])
    assert [s.content_id for s in schedule.sorted_slots(channel)] == ["B", "A"]


def test_remove_slot_by_id_and_position():
    a, b = make_slot("A", T0, 60, "slot-a"), make_slot("B", T0 + timedelta(hours=1), 60, "slot-b")
    channel = make_channel(slots=[a, b])
    assert [s.id for s in schedule.remove_slot(channel, "slot-a").schedule] == ["slot-b"]
    assert [s.id for s in schedule.remove_slot_at(channel, 1).schedule] == ["slot-a"]
    with pytest.raises(NotFoundException):
        schedule.remove_slot(channel, "slot-zzz")
    with pytest.raises(NotFoundException):
        schedule.remove_slot_at(channel, 5)


def test_validate_schedule_unknown_and_ineligible_content():
    movie, podcast = make_asset("A"), make_asset("P", content_type=ContentType.podcast)
    with pytest.raises(ValidationFailedException):
        schedule.validate_schedule(make_channel(slots=[make_slot("ghost", T0, 30)]), [movie])
    with pytest.raises(ValidationFailedException):
        schedule.validate_schedule(make_channel(slots=[make_slot("P", T0, 30)]), [movie, podcast])
    ok = make_channel(slots=[make_slot("A", T0, 30)])
    assert schedule.validate_schedule(ok, [movie]) is ok


# ─────────────────────────────────────────────────────────────────────────────
# Backend round-trips
# ─────────────────────────────────────────────────────────────────────────────

def test_schedule_slot_persists_and_bumps_revision(backend):
    backend.create_asset(make_asset("A"))
    backend.create_channel(make_channel("ch"))

    stored = schedule.schedule_slot(backend, "ch", "A", T0, duration_minutes=60)

    assert stored.revision == 1
    assert len(backend.get_channel("ch").schedule) == 1


def test_schedule_slot_with_stale_revision_is_rejected(backend):
    backend.create_asset(make_asset("A"))
    backend.create_channel(make_channel("ch"))
    schedule.schedule_slot(backend, "ch", "A", T0, duration_minutes=60)

    with pytest.raises(StaleWriteException):
        schedule.schedule_slot(backend, "ch", "A", T0 + timedelta(hours=2), duration_minutes=60, revision=0)


def test_unschedule_slot_by_stable_id(backend):
    backend.create_asset(make_asset("A"))
    backend.create_channel(make_channel("ch", slots=[make_slot("A", T0, 60, "slot-1"), make_slot("A", T0 + timedelta(hours=1), 60, "slot-2")]))

    stored = schedule.unschedule_slot(backend, "ch", "slot-1", revision=0)

    assert [s.id for s in stored.schedule] == ["slot-2"]


def test_schedule_slot_unknown_channel_or_asset(backend):
    with pytest.raises(NotFoundException):
        schedule.schedule_slot(backend, "nope", "A", T0)
    backend.create_channel(make_channel("ch"))
    with pytest.raises(NotFoundException):
        schedule.schedule_slot(backend, "ch", "nope", T0)
