from __future__ import annotations

"""
Live schedule builder
=====================

Pure functions that compute a new `LiveChannel` from an existing one, plus
two fetch → compute → replace helpers that go through the backend.

Rules
-----
- Only live-eligible assets can be scheduled (see `classifier.is_live_eligible`).
- `end_time = start_time + duration`; duration must be 1..MAX_SLOT_MINUTES.
- New slots are appended; display order comes from `sorted_slots`.
- Overlapping `[start, end)` intervals are rejected unless the caller turns
  `reject_overlap` off (`SCHEDULE_REJECT_OVERLAP=false`).
- Slots are addressed by their stable `id`. `remove_slot_at` exists for
  positional callers working on a snapshot they just fetched.
- Backend replaces are revision-checked, so a stale snapshot yields 409.
"""

import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from app.core.exceptions import NotFoundException, StaleWriteException, ValidationFailedException
from app.repositories.backend import CatalogBackendProtocol
from app.schemas.catalog import MediaAsset
from app.schemas.enums import ContentType
from app.schemas.live import MAX_SLOT_MINUTES, AdLocation, LiveChannel, ScheduledContent
from app.services.classifier import is_live_eligible

log = logging.getLogger(__name__)

MOVIE_MINUTES = 120
EPISODIC_MINUTES = 45
FALLBACK_MINUTES = 60


# ─────────────────────────────────────────────────────────────
# 🧮 Pure helpers
# ─────────────────────────────────────────────────────────────
def default_duration_minutes(content_type: ContentType) -> int:
    if content_type in (ContentType.movie, ContentType.film):
        return MOVIE_MINUTES
    if content_type in (ContentType.series, ContentType.tvSeriesStandalone):
        return EPISODIC_MINUTES
    return FALLBACK_MINUTES


def sorted_slots(channel: LiveChannel) -> List[ScheduledContent]:
    return sorted(channel.schedule, key=lambda s: s.start_time)


def _overlaps(a: ScheduledContent, b: ScheduledContent) -> bool:
    return a.start_time < b.end_time and b.start_time < a.end_time


def find_overlaps(channel: LiveChannel) -> List[Tuple[ScheduledContent, ScheduledContent]]:
    """Every pair of slots whose half-open intervals intersect, in start order."""
    ordered = sorted_slots(channel)
    pairs: List[Tuple[ScheduledContent, ScheduledContent]] = []
    for i, current in enumerate(ordered):
        for later in ordered[i + 1:]:
            if later.start_time >= current.end_time:
                break
            pairs.append((current, later))
    return pairs


def validate_schedule(
    channel: LiveChannel,
    assets: Iterable[MediaAsset],
    reject_overlap: bool = True,
) -> LiveChannel:
    """Check a whole submitted schedule: known, live-eligible content and (optionally) no overlaps."""
    by_id = {a.id: a for a in assets}
    unknown = [s.content_id for s in channel.schedule if s.content_id not in by_id]
    if unknown:
        raise ValidationFailedException("Schedule references unknown content", details={"content_ids": unknown})
    ineligible = [s.content_id for s in channel.schedule if not is_live_eligible(by_id[s.content_id])]
    if ineligible:
        raise ValidationFailedException(
            "Schedule contains content that cannot air live", details={"content_ids": ineligible}
        )
    if reject_overlap:
        clashes = find_overlaps(channel)
        if clashes:
            raise ValidationFailedException(
                "Schedule contains overlapping slots",
                details={"overlapping_slot_ids": [[a.id, b.id] for a, b in clashes]},
            )
    return channel


def add_slot(
    channel: LiveChannel,
    asset: MediaAsset,
    start_time: datetime,
    duration_minutes: Optional[int] = None,
    is_original: bool = False,
    ad_locations: Optional[Sequence[AdLocation]] = None,
    reject_overlap: bool = True,
) -> LiveChannel:
    if not is_live_eligible(asset):
        raise ValidationFailedException(
            f"Asset '{asset.id}' cannot be scheduled on a live channel",
            details={"content_id": asset.id, "content_type": asset.content_type.value, "is_clip": asset.is_clip},
        )

    minutes = duration_minutes if duration_minutes is not None else default_duration_minutes(asset.content_type)
    if minutes <= 0 or minutes > MAX_SLOT_MINUTES:
        raise ValidationFailedException(
            f"Slot duration must be between 1 and {MAX_SLOT_MINUTES} minutes",
            details={"duration_minutes": minutes},
        )
    try:
        end_time = start_time + timedelta(minutes=minutes)
    except OverflowError as e:
        raise ValidationFailedException(
            "Slot ends outside the supported date range",
            details={"start_time": start_time.isoformat(), "duration_minutes": minutes},
        ) from e

    slot = ScheduledContent(
        content_id=asset.id,
        start_time=start_time,
        end_time=end_time,
        ad_locations=list(ad_locations or []),
        is_original=is_original,
    )

    outside = [loc.position_seconds for loc in slot.ad_locations if loc.position_seconds >= slot.duration_seconds]
    if outside:
        raise ValidationFailedException(
            "Ad locations must fall inside the slot",
            details={"positions": outside, "duration_seconds": slot.duration_seconds},
        )

    if reject_overlap:
        clashes = [s.id for s in channel.schedule if _overlaps(s, slot)]
        if clashes:
            raise ValidationFailedException(
                "Slot overlaps existing programming",
                details={"channel_id": channel.id, "overlapping_slot_ids": clashes},
            )

    return channel.model_copy(update={"schedule": [*channel.schedule, slot]})


def remove_slot(channel: LiveChannel, slot_id: str) -> LiveChannel:
    remaining = [s for s in channel.schedule if s.id != slot_id]
    if len(remaining) == len(channel.schedule):
        raise NotFoundException(entity="slot", entity_id=slot_id)
    return channel.model_copy(update={"schedule": remaining})


def remove_slot_at(channel: LiveChannel, index: int) -> LiveChannel:
    """Remove by storage position. Only safe on a freshly fetched snapshot."""
    if index < 0 or index >= len(channel.schedule):
        raise NotFoundException(entity="slot", entity_id=str(index))
    remaining = channel.schedule[:index] + channel.schedule[index + 1:]
    return channel.model_copy(update={"schedule": remaining})


# ─────────────────────────────────────────────────────────────
# 🔁 Backend round-trips
# ─────────────────────────────────────────────────────────────
def _fetch_channel(backend: CatalogBackendProtocol, channel_id: str, revision: Optional[int]) -> LiveChannel:
    channel = backend.get_channel(channel_id)
    if channel is None:
        raise NotFoundException(entity="channel", entity_id=channel_id)
    if revision is not None and revision != channel.revision:
        raise StaleWriteException(entity="channel", entity_id=channel_id, expected=revision, actual=channel.revision)
    return channel


def schedule_slot(
    backend: CatalogBackendProtocol,
    channel_id: str,
    content_id: str,
    start_time: datetime,
    *,
    duration_minutes: Optional[int] = None,
    is_original: bool = False,
    ad_locations: Optional[Sequence[AdLocation]] = None,
    revision: Optional[int] = None,
    reject_overlap: bool = True,
) -> LiveChannel:
    channel = _fetch_channel(backend, channel_id, revision)
    asset = backend.get_asset(content_id)
    if asset is None:
        raise NotFoundException(entity="asset", entity_id=content_id)

    updated = add_slot(
        channel, asset, start_time,
        duration_minutes=duration_minutes,
        is_original=is_original,
        ad_locations=ad_locations,
        reject_overlap=reject_overlap,
    )
    stored = backend.replace_channel(channel_id, updated)
    log.info("Slot scheduled | channel=%s content=%s start=%s", channel_id, content_id, start_time.isoformat())
    return stored


def unschedule_slot(
    backend: CatalogBackendProtocol,
    channel_id: str,
    slot_id: str,
    *,
    revision: Optional[int] = None,
) -> LiveChannel:
    channel = _fetch_channel(backend, channel_id, revision)
    stored = backend.replace_channel(channel_id, remove_slot(channel, slot_id))
    log.info("Slot removed | channel=%s slot=%s", channel_id, slot_id)
    return stored


__all__ = [
    "default_duration_minutes",
    "sorted_slots",
    "find_overlaps",
    "validate_schedule",
    "add_slot",
    "remove_slot",
    "remove_slot_at",
    "schedule_slot",
    "unschedule_slot",
]
