"""
Playback decisions
------------------
Answers "may this viewer play it, and which ads run first?" for an asset or
an episode. The response is per-viewer and never cached. A playable decision
is counted (views, ad impressions, watch history) before it is returned.

Routes
- GET /watch/assets/{id}
- GET /watch/episodes/{id}
"""

import logging

from fastapi import APIRouter, Depends, Response

from app.api.http_utils import get_backend, get_viewer
from app.core.exceptions import NotFoundException
from app.repositories.backend import CatalogBackendProtocol
from app.schemas.ads import PlaybackDecision
from app.schemas.user import Viewer
from app.security_headers import set_sensitive_cache
from app.services.analytics import record_playback
from app.services.entitlements import playback_decision
from app.services.series import find_episode

log = logging.getLogger(__name__)
router = APIRouter(prefix="/watch", tags=["Playback"])


@router.get("/assets/{asset_id}", response_model=PlaybackDecision, summary="Playback decision for an asset")
def watch_asset(
    asset_id: str,
    response: Response,
    backend: CatalogBackendProtocol = Depends(get_backend),
    viewer: Viewer = Depends(get_viewer),
) -> PlaybackDecision:
    set_sensitive_cache(response)
    asset = backend.get_asset(asset_id)
    if asset is None:
        raise NotFoundException(entity="asset", entity_id=asset_id)
    decision = playback_decision(asset, backend.list_ad_assignments(), backend.list_ad_media(), viewer)
    log.debug("Playback decision | asset=%s principal=%s can_watch=%s ads=%d",
              asset_id, viewer.principal, decision.can_watch, len(decision.ads))
    record_playback(backend, decision, viewer)
    return decision


@router.get("/episodes/{episode_id}", response_model=PlaybackDecision, summary="Playback decision for an episode")
def watch_episode(
    episode_id: str,
    response: Response,
    backend: CatalogBackendProtocol = Depends(get_backend),
    viewer: Viewer = Depends(get_viewer),
) -> PlaybackDecision:
    set_sensitive_cache(response)
    found = find_episode(backend.list_series(), episode_id)
    if found is None:
        raise NotFoundException(entity="episode", entity_id=episode_id)
    _, _, episode = found
    decision = playback_decision(episode, backend.list_ad_assignments(), backend.list_ad_media(), viewer)
    record_playback(backend, decision, viewer)
    return decision


__all__ = ["router"]
