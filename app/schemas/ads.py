from __future__ import annotations

"""
Advertising schemas
===================

- `AdMedia`: a creative (payload reference + metadata).
- `AdAssignment`: which ads run where. `scope=video` targets one asset or
  episode via `target_id`; `scope=global` is the fallback pool.
- `PlaybackDecision`: the per-viewing answer (may the viewer play it, and
  which ads run before it).
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from app.schemas.enums import AdScope


class AdMedia(BaseModel):
    id: str = Field(default_factory=lambda: f"ad-{uuid.uuid4().hex}")
    ad_file_url: str
    duration_seconds: int = Field(..., ge=1)
    media_type: str = "video"
    description: str = ""
    tags: Optional[List[str]] = None
    language: Optional[str] = None
    regions: Optional[List[str]] = None


class AdAssignment(BaseModel):
    id: str = Field(default_factory=lambda: f"assignment-{uuid.uuid4().hex}")
    scope: AdScope = AdScope.global_
    target_id: Optional[str] = None
    ad_ids: List[str] = Field(default_factory=list)
    position: int = Field(0, ge=0, description="Seconds into playback (0 = pre-roll)")
    skip_after_seconds: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def _video_scope_needs_target(self) -> "AdAssignment":
        if self.scope == AdScope.video and not self.target_id:
            raise ValueError("target_id is required when scope is 'video'")
        return self


class PlaybackDecision(BaseModel):
    content_id: str
    can_watch: bool
    show_ads: bool
    ads: List[AdMedia] = Field(default_factory=list)


__all__ = ["AdMedia", "AdAssignment", "PlaybackDecision"]
