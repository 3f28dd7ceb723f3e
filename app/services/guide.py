from __future__ import annotations

"""
Program guide (EPG)
===================

A channel airs its slots back to back, in start-time order, starting at the
earliest slot's `start_time`, and loops forever once the last slot ends. The
loop length is the sum of the slot durations, so gaps between stored slots
are closed up on air.

Nothing airs before the first slot starts. Slots whose content no longer
resolves are skipped (their airtime shows as empty guide space).
"""

from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from app.schemas.catalog import MediaAsset
from app.schemas.live import ChannelGuide, CurrentProgram, LiveChannel, ProgramBlock, ScheduledContent
from app.services.schedule import sorted_slots


class _Loop:
    def __init__(self, slots: List[ScheduledContent]) -> None:
        self.slots = slots
        self.start = slots[0].start_time
        self.length = sum(s.duration_seconds for s in slots)

    def locate(self, at: datetime) -> Optional[Tuple[int, datetime]]:
        """Index of the slot on air at `at` and the instant that airing began."""
        elapsed = (at - self.start).total_seconds()
        if elapsed < 0:
            return None
        loop_no, position = divmod(elapsed, self.length)
        offset = 0.0
        for i, slot in enumerate(self.slots):
            if offset <= position < offset + slot.duration_seconds:
                return i, self.start + timedelta(seconds=loop_no * self.length + offset)
            offset += slot.duration_seconds
        return None


def _loop_for(channel: LiveChannel) -> Optional[_Loop]:
    slots = sorted_slots(channel)
    if not slots:
        return None
    loop = _Loop(slots)
    return loop if loop.length > 0 else None


def _index(assets: Iterable[MediaAsset]) -> Dict[str, MediaAsset]:
    return {a.id: a for a in assets}


def current_program(channel: LiveChannel, assets: Iterable[MediaAsset], now: datetime) -> Optional[CurrentProgram]:
    loop = _loop_for(channel)
    if loop is None:
        return None
    hit = loop.locate(now)
    if hit is None:
        return None
    i, program_start = hit
    slot = loop.slots[i]
    asset = _index(assets).get(slot.content_id)
    if asset is None:
        return None
    return CurrentProgram(
        slot=slot,
        asset=asset,
        program_start=program_start,
        offset_seconds=max(0.0, (now - program_start).total_seconds()),
    )


def next_program(channel: LiveChannel, assets: Iterable[MediaAsset], now: datetime) -> Optional[MediaAsset]:
    """Asset of the slot after the one on air (wrapping to the first slot)."""
    loop = _loop_for(channel)
    if loop is None:
        return None
    hit = loop.locate(now)
    if hit is None:
        return None
    following = loop.slots[(hit[0] + 1) % len(loop.slots)]
    return _index(assets).get(following.content_id)


def program_blocks(
    channel: LiveChannel,
    assets: Iterable[MediaAsset],
    window_start: datetime,
    window_end: datetime,
    now: datetime,
) -> List[ProgramBlock]:
    """Guide blocks for every airing that intersects `[window_start, window_end)`.

    `left_percent` / `width_percent` position the visible part of each airing
    relative to the window.
    """
    window = (window_end - window_start).total_seconds()
    loop = _loop_for(channel)
    if loop is None or window <= 0:
        return []

    by_id = _index(assets)
    blocks: List[ProgramBlock] = []
    cursor = max(window_start, loop.start)
    while cursor < window_end:
        hit = loop.locate(cursor)
        if hit is None:
            # float rounding at a loop boundary; nudge past it
            cursor += timedelta(seconds=1)
            continue
        i, program_start = hit
        slot = loop.slots[i]
        program_end = program_start + timedelta(seconds=slot.duration_seconds)
        asset = by_id.get(slot.content_id)
        if asset is not None:
            visible_start = max(program_start, window_start)
            visible_end = min(program_end, window_end)
            blocks.append(ProgramBlock(
                slot=slot,
                asset=asset,
                program_start=program_start,
                program_end=program_end,
                left_percent=(visible_start - window_start).total_seconds() / window * 100,
                width_percent=(visible_end - visible_start).total_seconds() / window * 100,
                is_current=program_start <= now < program_end,
            ))
        cursor = max(cursor + timedelta(seconds=1), program_end)
    return blocks


def build_guide(channel: LiveChannel, assets: Iterable[MediaAsset], now: datetime, hours: int) -> ChannelGuide:
    assets = list(assets)
    window_end = now + timedelta(hours=hours)
    return ChannelGuide(
        channel_id=channel.id,
        channel_name=channel.name,
        window_start=now,
        window_end=window_end,
        blocks=program_blocks(channel, assets, now, window_end, now),
        now_playing=current_program(channel, assets, now),
        up_next=next_program(channel, assets, now),
    )


__all__ = ["current_program", "next_program", "program_blocks", "build_guide"]
