"""
Admin: Media assets
===================

Create / replace / delete catalog assets and trigger auto-clip generation.
All routes require role `admin` or `masterAdmin`.

Routes
- POST   /assets                   -> create (title, thumbnail and, for non-clips, a video are required)
- PUT    /assets/{id}              -> whole-record replace
- DELETE /assets/{id}
- POST   /assets/{id}/auto-clips   -> derive Short / Highlight / Quick View clips
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status

from app.api.http_utils import get_backend, require_admin
from app.core.limiter import rate_limit
from app.repositories.backend import CatalogBackendProtocol
from app.schemas.catalog import ClipGenerationResult, MediaAsset
from app.schemas.user import Viewer
from app.services.catalog import validate_new_asset
from app.services.clips import generate_auto_clips

log = logging.getLogger(__name__)
router = APIRouter(tags=["Admin Assets"])


@router.post("/assets", response_model=MediaAsset, status_code=status.HTTP_201_CREATED, summary="Create asset")
@rate_limit("30/minute")
def create_asset(
    request: Request,
    payload: MediaAsset,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> MediaAsset:
    created = backend.create_asset(validate_new_asset(payload))
    log.info("Asset created | id=%s by=%s", created.id, admin.principal)
    return created


@router.put("/assets/{asset_id}", response_model=MediaAsset, summary="Replace asset")
@rate_limit("30/minute")
def replace_asset(
    asset_id: str,
    request: Request,
    payload: MediaAsset,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> MediaAsset:
    stored = backend.replace_asset(asset_id, payload)
    log.info("Asset replaced | id=%s by=%s", asset_id, admin.principal)
    return stored


@router.delete("/assets/{asset_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete asset")
@rate_limit("30/minute")
def delete_asset(
    asset_id: str,
    request: Request,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> Response:
    backend.delete_asset(asset_id)
    log.info("Asset deleted | id=%s by=%s", asset_id, admin.principal)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/assets/{asset_id}/auto-clips",
    response_model=ClipGenerationResult,
    status_code=status.HTTP_201_CREATED,
    summary="Generate auto clips",
)
@rate_limit("10/minute")
def create_auto_clips(
    asset_id: str,
    request: Request,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> ClipGenerationResult:
    # partial success is still 201; callers read `created` vs `requested`
    return generate_auto_clips(backend, asset_id)


__all__ = ["router"]
