from __future__ import annotations

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field

from app.schemas.catalog import MediaAsset, Series
from app.schemas.live import LiveChannel


class Brand(BaseModel):
    """A network/brand. Assignments are references; the brand owns no assets."""
    id: str = Field(default_factory=lambda: f"brand-{uuid.uuid4().hex}")
    name: str
    description: str = ""
    logo_url: Optional[str] = None
    assigned_films: List[str] = Field(default_factory=list)
    assigned_series: List[str] = Field(default_factory=list)
    assigned_clips: List[str] = Field(default_factory=list)
    assigned_live_channels: List[str] = Field(default_factory=list)


class BrandRail(BaseModel):
    brand_id: str
    name: str
    logo_url: Optional[str] = None
    films: List[MediaAsset] = Field(default_factory=list)
    series: List[Series] = Field(default_factory=list)
    clips: List[MediaAsset] = Field(default_factory=list)
    live_channels: List[LiveChannel] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.films or self.series or self.clips or self.live_channels)


__all__ = ["Brand", "BrandRail"]
