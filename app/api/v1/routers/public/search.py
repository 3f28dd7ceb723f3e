"""
Public Search API

- GET /search?q=  -> hits partitioned into films / series / clips / brands

Matching happens in the backend; cards returned here are display-only and
must be resolved through the catalog endpoints before playback.
"""

from fastapi import APIRouter, Depends, Query, Request

from app.api.http_utils import get_backend
from app.core.limiter import rate_limit
from app.repositories.backend import CatalogBackendProtocol
from app.schemas.search import SearchBuckets
from app.services.search import search

router = APIRouter(tags=["Public Search"])


@router.get("/search", response_model=SearchBuckets, summary="Search the catalog")
@rate_limit("60/minute")
def search_catalog(
    request: Request,
    q: str = Query("", max_length=200, description="Free-text query"),
    backend: CatalogBackendProtocol = Depends(get_backend),
) -> SearchBuckets:
    return search(backend, q)


__all__ = ["router"]
