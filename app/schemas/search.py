from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from app.schemas.enums import ResultType


class SearchResult(BaseModel):
    """Flattened search hit returned by the backend (display-only projection)."""
    id: str
    title: str
    description: str = ""
    thumbnail_url: Optional[str] = None
    is_premium: bool = False
    is_original: bool = False
    result_type: ResultType


class SearchDisplayItem(BaseModel):
    """
    Minimal card rebuilt from a `SearchResult`.

    A hit does not carry a video reference or content type, so `video_url`
    and `content_type` are always absent and `playable` is always False;
    detail views must fetch the real entity before playback.
    """
    id: str
    title: str
    description: str = ""
    thumbnail_url: Optional[str] = None
    is_premium: bool = False
    is_original: bool = False
    result_type: ResultType
    video_url: None = None
    content_type: None = None
    playable: bool = False


class SearchBuckets(BaseModel):
    query: str = ""
    films: List[SearchDisplayItem] = Field(default_factory=list)
    series: List[SearchDisplayItem] = Field(default_factory=list)
    clips: List[SearchDisplayItem] = Field(default_factory=list)
    brands: List[SearchDisplayItem] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.films) + len(self.series) + len(self.clips) + len(self.brands)


__all__ = ["SearchResult", "SearchDisplayItem", "SearchBuckets"]
