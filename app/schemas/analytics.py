from __future__ import annotations

"""
Analytics schemas
=================

- `ContentStats`: raw per-content counters kept by the backend boundary.
- `Analytics`: the admin dashboard view built from those counters and a
  catalog snapshot (totals, trending content, per-category breakdown).
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class ContentStats(BaseModel):
    content_id: str
    views: int = Field(0, ge=0)
    premium_views: int = Field(0, ge=0)
    ad_impressions: int = Field(0, ge=0)


class TrendingContent(BaseModel):
    id: str
    title: str
    view_count: int
    category: str


class CategoryStats(BaseModel):
    category: str
    view_count: int = 0
    premium_views: int = 0
    ad_impressions: int = 0


class Analytics(BaseModel):
    total_views: int = 0
    premium_user_count: int = 0
    ad_impressions: int = 0
    subscription_revenue: Optional[float] = None
    trending_content: List[TrendingContent] = Field(default_factory=list)
    category_stats: List[CategoryStats] = Field(default_factory=list)


__all__ = ["ContentStats", "TrendingContent", "CategoryStats", "Analytics"]
