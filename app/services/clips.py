from __future__ import annotations

"""
Auto-clip generation.

Derives the three promotional clips (Short, Highlight, Quick View) from a
source asset. Each clip is persisted with its own create call; the run is
not transactional, so a failure part-way leaves the earlier clips in place
and is reported through `ClipGenerationResult.created` / `failures`.
"""

import logging
import uuid
from typing import List

from app.core.exceptions import AppException, NotFoundException
from app.repositories.backend import CatalogBackendProtocol
from app.schemas.catalog import ClipGenerationResult, MediaAsset
from app.schemas.enums import ClipOrigin
from app.services.classifier import AUTO_CLIP_SUFFIXES

log = logging.getLogger(__name__)


def build_auto_clips(source: MediaAsset) -> List[MediaAsset]:
    """Clip records for `source`, one per suffix, not yet persisted."""
    clips: List[MediaAsset] = []
    for suffix in AUTO_CLIP_SUFFIXES:
        caption = f"{source.title or ''}{suffix}"
        clips.append(source.model_copy(update={
            "id": f"video-{uuid.uuid4().hex}",
            "title": caption,
            "clip_caption": caption,
            "is_clip": True,
            "source_asset_id": source.id,
            "available_as_vod": True,
            "eligible_for_live": False,
            "clip_origin": ClipOrigin.autoGenerated,
        }))
    return clips


def generate_auto_clips(backend: CatalogBackendProtocol, source_asset_id: str) -> ClipGenerationResult:
    source = backend.get_asset(source_asset_id)
    if source is None:
        raise NotFoundException(entity="asset", entity_id=source_asset_id)

    planned = build_auto_clips(source)
    result = ClipGenerationResult(source_asset_id=source_asset_id, requested=len(planned), created=0)
    for clip in planned:
        try:
            stored = backend.create_asset(clip)
        except AppException as e:
            log.warning("Auto-clip create failed | source=%s caption=%r | %s", source_asset_id, clip.clip_caption, e.message)
            result.failures.append(f"{clip.clip_caption}: {e.message}")
            continue
        result.clip_ids.append(stored.id)
        result.created += 1

    if result.is_partial:
        log.warning("Auto-clip generation partial | source=%s created=%d/%d", source_asset_id, result.created, result.requested)
    else:
        log.info("Auto-clips generated | source=%s count=%d", source_asset_id, result.created)
    return result


__all__ = ["build_auto_clips", "generate_auto_clips"]
