"""
User profile endpoints.

- GET  /me          -> caller's profile (404 until one is saved)
- PUT  /me          -> replace the caller's profile
- GET  /me/history  -> watched content ids, most recent first
- POST /me/history  -> record a watch (the id must be an asset or an episode)

The principal comes from the identity header; responses are `no-store`.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request, Response, status

from app.api.http_utils import get_backend, require_authenticated
from app.core.exceptions import NotFoundException
from app.core.limiter import rate_limit
from app.repositories.backend import CatalogBackendProtocol
from app.schemas.user import UserProfile, Viewer, WatchHistoryIn
from app.security_headers import set_sensitive_cache
from app.services.series import find_episode

logger = logging.getLogger(__name__)
router = APIRouter(tags=["User"])


@router.get("/me", response_model=UserProfile, summary="Current profile")
def get_me(
    response: Response,
    backend: CatalogBackendProtocol = Depends(get_backend),
    viewer: Viewer = Depends(require_authenticated),
) -> UserProfile:
    set_sensitive_cache(response)
    profile = backend.get_profile(viewer.principal)
    if profile is None:
        raise NotFoundException(entity="profile", entity_id=viewer.principal)
    return profile


@router.put("/me", response_model=UserProfile, summary="Save profile")
@rate_limit("20/minute")
def put_me(
    request: Request,
    payload: UserProfile,
    response: Response,
    backend: CatalogBackendProtocol = Depends(get_backend),
    viewer: Viewer = Depends(require_authenticated),
) -> UserProfile:
    set_sensitive_cache(response)
    saved = backend.save_profile(viewer.principal, payload)
    logger.info("Profile saved | principal=%s", viewer.principal)
    return saved


@router.get("/me/history", response_model=List[str], summary="Watch history")
def get_history(
    response: Response,
    backend: CatalogBackendProtocol = Depends(get_backend),
    viewer: Viewer = Depends(require_authenticated),
) -> List[str]:
    set_sensitive_cache(response)
    return backend.get_watch_history(viewer.principal)


@router.post(
    "/me/history",
    response_model=List[str],
    status_code=status.HTTP_201_CREATED,
    summary="Record a watch",
)
@rate_limit("60/minute")
def add_history(
    request: Request,
    payload: WatchHistoryIn,
    response: Response,
    backend: CatalogBackendProtocol = Depends(get_backend),
    viewer: Viewer = Depends(require_authenticated),
) -> List[str]:
    set_sensitive_cache(response)
    content_id = payload.content_id
    if backend.get_asset(content_id) is None and find_episode(backend.list_series(), content_id) is None:
        raise NotFoundException(entity="content", entity_id=content_id)
    history = backend.add_to_watch_history(viewer.principal, content_id)
    logger.info("Watch recorded | principal=%s content=%s", viewer.principal, content_id)
    return history


__all__ = ["router"]
