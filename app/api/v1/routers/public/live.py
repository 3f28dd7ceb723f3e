"""
Public Live TV API
------------------
Channels and their looping program guide.

Routes
- GET /live/channels                     -> channels, slots in display (start-time) order
- GET /live/channels/{id}/guide?hours=   -> guide window starting now
- GET /live/channels/{id}/now            -> what is on air (or null) with the playback offset

"Now" comes from the `utc_now` dependency so tests can pin the clock.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.http_utils import get_backend, utc_now
from app.core.config import settings
from app.core.exceptions import NotFoundException
from app.repositories.backend import CatalogBackendProtocol
from app.schemas.live import ChannelGuide, CurrentProgram, LiveChannel
from app.services.guide import build_guide, current_program
from app.services.schedule import sorted_slots

router = APIRouter(prefix="/live", tags=["Public Live TV"])


def _channel_or_404(backend: CatalogBackendProtocol, channel_id: str) -> LiveChannel:
    channel = backend.get_channel(channel_id)
    if channel is None:
        raise NotFoundException(entity="channel", entity_id=channel_id)
    return channel


@router.get("/channels", response_model=List[LiveChannel], summary="List live channels")
def list_channels(backend: CatalogBackendProtocol = Depends(get_backend)) -> List[LiveChannel]:
    return [c.model_copy(update={"schedule": sorted_slots(c)}) for c in backend.list_channels()]


@router.get("/channels/{channel_id}/guide", response_model=ChannelGuide, summary="Program guide")
def get_guide(
    channel_id: str,
    hours: Optional[int] = Query(None, ge=1, le=24, description="Window length; defaults to GUIDE_DEFAULT_HOURS"),
    backend: CatalogBackendProtocol = Depends(get_backend),
    now: datetime = Depends(utc_now),
) -> ChannelGuide:
    channel = _channel_or_404(backend, channel_id)
    return build_guide(channel, backend.list_assets(), now, hours or settings.GUIDE_DEFAULT_HOURS)


@router.get("/channels/{channel_id}/now", response_model=Optional[CurrentProgram], summary="Now playing")
def now_playing(
    channel_id: str,
    backend: CatalogBackendProtocol = Depends(get_backend),
    now: datetime = Depends(utc_now),
) -> Optional[CurrentProgram]:
    channel = _channel_or_404(backend, channel_id)
    return current_program(channel, backend.list_assets(), now)


__all__ = ["router"]
