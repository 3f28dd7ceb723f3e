"""
Admin: Brands

Brands hold references to films, series, clips and live channels; deleting a brand never
touches the referenced entities, and stale references are tolerated.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request, Response, status

from app.api.http_utils import get_backend, require_admin
from app.core.limiter import rate_limit
from app.repositories.backend import CatalogBackendProtocol
from app.schemas.brands import Brand
from app.schemas.user import Viewer

log = logging.getLogger(__name__)
router = APIRouter(tags=["Admin Brands"])


@router.get("/brands", response_model=List[Brand], summary="List brands")
def list_brands(
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> List[Brand]:
    return backend.list_brands()


@router.post("/brands", response_model=Brand, status_code=status.HTTP_201_CREATED, summary="Create brand")
@rate_limit("30/minute")
def create_brand(
    request: Request,
    payload: Brand,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> Brand:
    created = backend.create_brand(payload)
    log.info("Brand created | id=%s by=%s", created.id, admin.principal)
    return created


@router.put("/brands/{brand_id}", response_model=Brand, summary="Replace brand")
@rate_limit("30/minute")
def replace_brand(
    brand_id: str,
    request: Request,
    payload: Brand,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> Brand:
    return backend.replace_brand(brand_id, payload)


@router.delete("/brands/{brand_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete brand")
@rate_limit("30/minute")
def delete_brand(
    brand_id: str,
    request: Request,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> Response:
    backend.delete_brand(brand_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
