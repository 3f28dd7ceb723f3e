"""
Admin: Ad media & ad assignments

Routes
- GET/POST        /ads                      PUT/DELETE /ads/{id}
- GET/POST        /ad-assignments           PUT/DELETE /ad-assignments/{id}

Assignments may reference ad ids that do not exist (yet); playback simply
skips them.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request, Response, status

from app.api.http_utils import get_backend, require_admin
from app.core.limiter import rate_limit
from app.repositories.backend import CatalogBackendProtocol
from app.schemas.ads import AdAssignment, AdMedia
from app.schemas.user import Viewer

log = logging.getLogger(__name__)
router = APIRouter(tags=["Admin Ads"])


# ─────────────────────────────────────────────────────────────
# 🎬 Ad media
# ─────────────────────────────────────────────────────────────
@router.get("/ads", response_model=List[AdMedia], summary="List ad media")
def list_ad_media(
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> List[AdMedia]:
    return backend.list_ad_media()


@router.post("/ads", response_model=AdMedia, status_code=status.HTTP_201_CREATED, summary="Create ad media")
@rate_limit("30/minute")
def create_ad_media(
    request: Request,
    payload: AdMedia,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> AdMedia:
    created = backend.create_ad_media(payload)
    log.info("Ad media created | id=%s by=%s", created.id, admin.principal)
    return created


@router.put("/ads/{ad_id}", response_model=AdMedia, summary="Replace ad media")
@rate_limit("30/minute")
def replace_ad_media(
    ad_id: str,
    request: Request,
    payload: AdMedia,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> AdMedia:
    return backend.replace_ad_media(ad_id, payload)


@router.delete("/ads/{ad_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete ad media")
@rate_limit("30/minute")
def delete_ad_media(
    ad_id: str,
    request: Request,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> Response:
    backend.delete_ad_media(ad_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ─────────────────────────────────────────────────────────────
# 📌 Assignments
# ─────────────────────────────────────────────────────────────
@router.get("/ad-assignments", response_model=List[AdAssignment], summary="List ad assignments")
def list_ad_assignments(
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> List[AdAssignment]:
    return backend.list_ad_assignments()


@router.post(
    "/ad-assignments",
    response_model=AdAssignment,
    status_code=status.HTTP_201_CREATED,
    summary="Create ad assignment",
)
@rate_limit("30/minute")
def create_ad_assignment(
    request: Request,
    payload: AdAssignment,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> AdAssignment:
    created = backend.create_ad_assignment(payload)
    log.info("Ad assignment created | id=%s scope=%s by=%s", created.id, created.scope.value, admin.principal)
    return created


@router.put("/ad-assignments/{assignment_id}", response_model=AdAssignment, summary="Replace ad assignment")
@rate_limit("30/minute")
def replace_ad_assignment(
    assignment_id: str,
    request: Request,
    payload: AdAssignment,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> AdAssignment:
    return backend.replace_ad_assignment(assignment_id, payload)


@router.delete("/ad-assignments/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete ad assignment")
@rate_limit("30/minute")
def delete_ad_assignment(
    assignment_id: str,
    request: Request,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> Response:
    backend.delete_ad_assignment(assignment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
