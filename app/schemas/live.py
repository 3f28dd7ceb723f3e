from __future__ import annotations

"""Live TV schemas: channels, scheduled slots and program-guide views."""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.schemas.catalog import MediaAsset

# Upper bound for a single slot (one week).
MAX_SLOT_MINUTES = 7 * 24 * 60


def _as_utc(value: datetime) -> datetime:
    """Naive instants are read as UTC so aware and naive values never mix."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AdLocation(BaseModel):
    """An ad break reserved inside a slot, `position_seconds` from slot start."""
    position_seconds: int = Field(..., ge=0)
    ad_ids: List[str] = Field(default_factory=list)


class ScheduledContent(BaseModel):
    id: str = Field(default_factory=lambda: f"slot-{uuid.uuid4().hex}")
    content_id: str
    start_time: datetime
    end_time: datetime
    ad_locations: List[AdLocation] = Field(default_factory=list)
    is_original: bool = False

    @field_validator("start_time", "end_time")
    @classmethod
    def _aware(cls, v: datetime) -> datetime:
        return _as_utc(v)

    @model_validator(mode="after")
    def _end_after_start(self) -> "ScheduledContent":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self

    @property
    def duration_seconds(self) -> float:
        return (self.end_time - self.start_time).total_seconds()


class LiveChannel(BaseModel):
    id: str = Field(default_factory=lambda: f"channel-{uuid.uuid4().hex}")
    name: str
    is_original: bool = False
    logo_url: Optional[str] = None
    schedule: List[ScheduledContent] = Field(default_factory=list)
    revision: int = Field(0, ge=0, description="Bumped by the backend on every replace")


class SlotIn(BaseModel):
    """Request to schedule an asset on a channel."""
    content_id: str
    start_time: datetime
    duration_minutes: Optional[int] = Field(
        None, ge=1, le=MAX_SLOT_MINUTES,
        description="Defaults from the asset's content type when omitted",
    )
    is_original: bool = False
    ad_locations: List[AdLocation] = Field(default_factory=list)
    revision: Optional[int] = Field(
        None, description="Channel revision the caller edited; checked when provided"
    )

    @field_validator("start_time")
    @classmethod
    def _aware(cls, v: datetime) -> datetime:
        return _as_utc(v)


class CurrentProgram(BaseModel):
    slot: ScheduledContent
    asset: MediaAsset
    program_start: datetime
    offset_seconds: float


class ProgramBlock(BaseModel):
    slot: ScheduledContent
    asset: MediaAsset
    program_start: datetime
    program_end: datetime
    left_percent: float
    width_percent: float
    is_current: bool


class ChannelGuide(BaseModel):
    channel_id: str
    channel_name: str
    window_start: datetime
    window_end: datetime
    blocks: List[ProgramBlock]
    now_playing: Optional[CurrentProgram] = None
    up_next: Optional[MediaAsset] = None


__all__ = [
    "MAX_SLOT_MINUTES",
    "AdLocation",
    "ScheduledContent",
    "LiveChannel",
    "SlotIn",
    "CurrentProgram",
    "ProgramBlock",
    "ChannelGuide",
]
