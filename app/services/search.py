from __future__ import annotations

"""
Search aggregation.

Text matching belongs to the backend; this module makes one backend call
and sorts the flat hit list into display buckets:

    films  ← video | film
    series ← series
    clips  ← clip
    brands ← brand

Hits become `SearchDisplayItem` cards that never carry a playable reference.
"""

import logging
from typing import Iterable

from app.repositories.backend import CatalogBackendProtocol
from app.schemas.enums import ResultType
from app.schemas.search import SearchBuckets, SearchDisplayItem, SearchResult

log = logging.getLogger(__name__)

_BUCKET_FOR = {
    ResultType.video: "films",
    ResultType.film: "films",
    ResultType.series: "series",
    ResultType.clip: "clips",
    ResultType.brand: "brands",
}


def to_display_item(result: SearchResult) -> SearchDisplayItem:
    return SearchDisplayItem(**result.model_dump())


def partition_results(results: Iterable[SearchResult], query: str = "") -> SearchBuckets:
    buckets = SearchBuckets(query=query)
    for r in results:
        getattr(buckets, _BUCKET_FOR[r.result_type]).append(to_display_item(r))
    return buckets


def search(backend: CatalogBackendProtocol, query: str) -> SearchBuckets:
    text = (query or "").strip()
    if not text:
        return SearchBuckets(query=text)
    buckets = partition_results(backend.search(text), query=text)
    log.debug("Search | q=%r total=%d", text, buckets.total)
    return buckets


__all__ = ["to_display_item", "partition_results", "search"]
