"""
Public Catalog API
------------------
Browse endpoints over the catalog snapshot held by the backend boundary.

Routes
- GET /catalog/assets            -> filtered asset listing (?bucket=&genre=&original=&premium=)
- GET /catalog/assets/{id}       -> single asset
- GET /catalog/facets            -> bucket counts, genres, clip origins
- GET /catalog/originals         -> mixed originals shelf (assets + series, tagged by `kind`)
- GET /catalog/series            -> all series
- GET /catalog/series/{id}       -> one series with seasons/episodes
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.http_utils import get_backend
from app.core.exceptions import NotFoundException
from app.repositories.backend import CatalogBackendProtocol
from app.schemas.catalog import CatalogFacets, ContentItem, MediaAsset, Series
from app.schemas.enums import CatalogBucket
from app.services.catalog import catalog_facets, filter_assets, originals

log = logging.getLogger(__name__)
router = APIRouter(prefix="/catalog", tags=["Public Catalog"])


@router.get("/assets", response_model=List[MediaAsset], summary="List catalog assets")
def list_assets(
    bucket: Optional[CatalogBucket] = Query(None, description="movies | videos | podcasts | clips"),
    genre: Optional[str] = Query(None, max_length=64),
    original: Optional[bool] = Query(None),
    premium: Optional[bool] = Query(None),
    backend: CatalogBackendProtocol = Depends(get_backend),
) -> List[MediaAsset]:
    return filter_assets(backend.list_assets(), bucket=bucket, genre=genre, original=original, premium=premium)


@router.get("/assets/{asset_id}", response_model=MediaAsset, summary="Get one asset")
def get_asset(asset_id: str, backend: CatalogBackendProtocol = Depends(get_backend)) -> MediaAsset:
    asset = backend.get_asset(asset_id)
    if asset is None:
        raise NotFoundException(entity="asset", entity_id=asset_id)
    return asset


@router.get("/facets", response_model=CatalogFacets, summary="Catalog facet counts")
def get_facets(backend: CatalogBackendProtocol = Depends(get_backend)) -> CatalogFacets:
    return catalog_facets(backend.list_assets())


@router.get("/originals", response_model=List[ContentItem], summary="Originals shelf")
def list_originals(backend: CatalogBackendProtocol = Depends(get_backend)) -> List[ContentItem]:
    return originals(backend.list_assets(), backend.list_series())


@router.get("/series", response_model=List[Series], summary="List series")
def list_series(backend: CatalogBackendProtocol = Depends(get_backend)) -> List[Series]:
    return backend.list_series()


@router.get("/series/{series_id}", response_model=Series, summary="Get one series")
def get_series(series_id: str, backend: CatalogBackendProtocol = Depends(get_backend)) -> Series:
    series = backend.get_series(series_id)
    if series is None:
        raise NotFoundException(entity="series", entity_id=series_id)
    return series


__all__ = ["router"]
