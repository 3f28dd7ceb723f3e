"""
Admin: Series, seasons and episodes
===================================

Series are stored as one document (seasons and episodes nested). Sub-resource
routes fetch the document, apply one change and replace it; the backend
rejects the replace with 409 if the series changed in between. Passing
`?revision=` pins the revision the caller was looking at.

Routes
- POST   /series
- PUT    /series/{id}                                 (body carries `revision`)
- DELETE /series/{id}
- POST   /series/{id}/seasons
- PUT    /series/{id}/seasons/{season_id}
- DELETE /series/{id}/seasons/{season_id}
- POST   /series/{id}/seasons/{season_id}/episodes
- PUT    /series/{id}/episodes/{episode_id}           (`target_season_number` moves it)
- DELETE /series/{id}/episodes/{episode_id}
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from app.api.http_utils import get_backend, require_admin
from app.core.limiter import rate_limit
from app.repositories.backend import CatalogBackendProtocol
from app.schemas.catalog import EpisodeIn, EpisodeUpdateIn, SeasonIn, Series
from app.schemas.user import Viewer
from app.services import series as series_svc
from app.services.catalog import validate_new_series

log = logging.getLogger(__name__)
router = APIRouter(tags=["Admin Series"])


# ─────────────────────────────────────────────────────────────
# 📺 Series documents
# ─────────────────────────────────────────────────────────────
@router.post("/series", response_model=Series, status_code=status.HTTP_201_CREATED, summary="Create series")
@rate_limit("30/minute")
def create_series(
    request: Request,
    payload: Series,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> Series:
    created = backend.create_series(validate_new_series(payload))
    log.info("Series created | id=%s by=%s", created.id, admin.principal)
    return created


@router.put("/series/{series_id}", response_model=Series, summary="Replace series")
@rate_limit("30/minute")
def replace_series(
    series_id: str,
    request: Request,
    payload: Series,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> Series:
    return backend.replace_series(series_id, validate_new_series(payload))


@router.delete("/series/{series_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete series")
@rate_limit("30/minute")
def delete_series(
    series_id: str,
    request: Request,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> Response:
    backend.delete_series(series_id)
    log.info("Series deleted | id=%s by=%s", series_id, admin.principal)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ─────────────────────────────────────────────────────────────
# 🗂️ Seasons
# ─────────────────────────────────────────────────────────────
@router.post("/series/{series_id}/seasons", response_model=Series, status_code=status.HTTP_201_CREATED)
@rate_limit("30/minute")
def add_season(
    series_id: str,
    request: Request,
    payload: SeasonIn,
    revision: Optional[int] = Query(None, ge=0, description="Series revision the edit was based on"),
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> Series:
    return series_svc.edit_series(
        backend, series_id, lambda s: series_svc.add_season(s, payload), revision=revision
    )


@router.put("/series/{series_id}/seasons/{season_id}", response_model=Series)
@rate_limit("30/minute")
def update_season(
    series_id: str,
    season_id: str,
    request: Request,
    payload: SeasonIn,
    revision: Optional[int] = Query(None, ge=0, description="Series revision the edit was based on"),
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> Series:
    return series_svc.edit_series(
        backend, series_id, lambda s: series_svc.update_season(s, season_id, payload), revision=revision
    )


@router.delete("/series/{series_id}/seasons/{season_id}", response_model=Series)
@rate_limit("30/minute")
def remove_season(
    series_id: str,
    season_id: str,
    request: Request,
    revision: Optional[int] = Query(None, ge=0, description="Series revision the edit was based on"),
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> Series:
    return series_svc.edit_series(
        backend, series_id, lambda s: series_svc.remove_season(s, season_id), revision=revision
    )


# ─────────────────────────────────────────────────────────────
# 🎞️ Episodes
# ─────────────────────────────────────────────────────────────
@router.post(
    "/series/{series_id}/seasons/{season_id}/episodes",
    response_model=Series,
    status_code=status.HTTP_201_CREATED,
)
@rate_limit("30/minute")
def add_episode(
    series_id: str,
    season_id: str,
    request: Request,
    payload: EpisodeIn,
    revision: Optional[int] = Query(None, ge=0, description="Series revision the edit was based on"),
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> Series:
    return series_svc.edit_series(
        backend, series_id, lambda s: series_svc.add_episode(s, season_id, payload), revision=revision
    )


@router.put("/series/{series_id}/episodes/{episode_id}", response_model=Series)
@rate_limit("30/minute")
def update_episode(
    series_id: str,
    episode_id: str,
    request: Request,
    payload: EpisodeUpdateIn,
    revision: Optional[int] = Query(None, ge=0, description="Series revision the edit was based on"),
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> Series:
    return series_svc.edit_series(
        backend, series_id, lambda s: series_svc.update_episode(s, episode_id, payload), revision=revision
    )


@router.delete("/series/{series_id}/episodes/{episode_id}", response_model=Series)
@rate_limit("30/minute")
def remove_episode(
    series_id: str,
    episode_id: str,
    request: Request,
    revision: Optional[int] = Query(None, ge=0, description="Series revision the edit was based on"),
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> Series:
    return series_svc.edit_series(
        backend, series_id, lambda s: series_svc.remove_episode(s, episode_id), revision=revision
    )


__all__ = ["router"]
