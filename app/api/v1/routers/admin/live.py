"""
Admin: Live channels and schedules
==================================

Routes
- POST   /channels                        -> create a channel (schedule validated)
- PUT    /channels/{id}                   -> whole-document replace (body carries `revision`)
- DELETE /channels/{id}
- POST   /channels/{id}/slots             -> schedule one asset (eligibility + overlap checks)
- DELETE /channels/{id}/slots/{slot_id}   -> remove a slot by its stable id
- GET    /channels/{id}/overlaps          -> overlapping slot pairs (useful in permissive mode)

Overlap handling follows `SCHEDULE_REJECT_OVERLAP`.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from app.api.http_utils import get_backend, require_admin
from app.core.config import settings
from app.core.exceptions import NotFoundException
from app.core.limiter import rate_limit
from app.repositories.backend import CatalogBackendProtocol
from app.schemas.live import LiveChannel, ScheduledContent, SlotIn
from app.schemas.user import Viewer
from app.services.schedule import find_overlaps, schedule_slot, unschedule_slot, validate_schedule

log = logging.getLogger(__name__)
router = APIRouter(tags=["Admin Live TV"])


@router.post("/channels", response_model=LiveChannel, status_code=status.HTTP_201_CREATED, summary="Create channel")
@rate_limit("30/minute")
def create_channel(
    request: Request,
    payload: LiveChannel,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> LiveChannel:
    validate_schedule(payload, backend.list_assets(), reject_overlap=settings.SCHEDULE_REJECT_OVERLAP)
    created = backend.create_channel(payload)
    log.info("Channel created | id=%s by=%s", created.id, admin.principal)
    return created


@router.put("/channels/{channel_id}", response_model=LiveChannel, summary="Replace channel")
@rate_limit("30/minute")
def replace_channel(
    channel_id: str,
    request: Request,
    payload: LiveChannel,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> LiveChannel:
    validate_schedule(payload, backend.list_assets(), reject_overlap=settings.SCHEDULE_REJECT_OVERLAP)
    return backend.replace_channel(channel_id, payload)


@router.delete("/channels/{channel_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete channel")
@rate_limit("30/minute")
def delete_channel(
    channel_id: str,
    request: Request,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> Response:
    backend.delete_channel(channel_id)
    log.info("Channel deleted | id=%s by=%s", channel_id, admin.principal)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/channels/{channel_id}/slots",
    response_model=LiveChannel,
    status_code=status.HTTP_201_CREATED,
    summary="Schedule content",
)
@rate_limit("60/minute")
def add_slot(
    channel_id: str,
    request: Request,
    payload: SlotIn,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> LiveChannel:
    return schedule_slot(
        backend,
        channel_id,
        payload.content_id,
        payload.start_time,
        duration_minutes=payload.duration_minutes,
        is_original=payload.is_original,
        ad_locations=payload.ad_locations,
        revision=payload.revision,
        reject_overlap=settings.SCHEDULE_REJECT_OVERLAP,
    )


@router.delete("/channels/{channel_id}/slots/{slot_id}", response_model=LiveChannel, summary="Remove a slot")
@rate_limit("60/minute")
def remove_slot(
    channel_id: str,
    slot_id: str,
    request: Request,
    revision: Optional[int] = Query(None, ge=0, description="Channel revision the edit was based on"),
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> LiveChannel:
    return unschedule_slot(backend, channel_id, slot_id, revision=revision)


@router.get("/channels/{channel_id}/overlaps", response_model=List[List[ScheduledContent]], summary="Overlapping slots")
def list_overlaps(
    channel_id: str,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> List[List[ScheduledContent]]:
    channel = backend.get_channel(channel_id)
    if channel is None:
        raise NotFoundException(entity="channel", entity_id=channel_id)
    return [[a, b] for a, b in find_overlaps(channel)]


__all__ = ["router"]
