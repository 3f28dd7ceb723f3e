# tests/test_services/test_clips.py

import pytest

from app.core.exceptions import NotFoundException, ValidationFailedException
from app.schemas.enums import ClipOrigin
from app.services.clips import build_auto_clips, generate_auto_clips
from tests.utils.factory import make_asset


def test_generate_auto_clips_creates_exactly_three(backend):
    source = backend.create_asset(make_asset("film-1", title="Grace Street", eligible_for_live=True))

    result = generate_auto_clips(backend, source.id)

    assert result.requested == 3 and result.created == 3
    assert not result.is_partial and result.failures == []
    clips = [a for a in backend.list_assets() if a.is_clip]
    assert len(clips) == 3
    assert sorted(c.id for c in clips) == sorted(result.clip_ids)
    for clip in clips:
        assert clip.source_asset_id == "film-1"
        assert clip.eligible_for_live is False
        assert clip.title == clip.clip_caption
        assert clip.clip_origin == ClipOrigin.autoGenerated
    assert [c.clip_caption for c in build_auto_clips(source)] == [
        "Grace Street - Short",
        "Grace Street - Highlight",
        "Grace Street - Quick View",
    ]


def test_generate_auto_clips_unknown_source(backend):
    with pytest.raises(NotFoundException):
        generate_auto_clips(backend, "missing")


def test_partial_failure_keeps_earlier_clips(backend, monkeypatch):
    backend.create_asset(make_asset("film-1"))
    real_create = backend.create_asset
    calls = {"n": 0}

    def flaky_create(asset):
        if asset.is_clip:
            calls["n"] += 1
            if calls["n"] == 2:
                raise ValidationFailedException("storage rejected clip")
        return real_create(asset)

    monkeypatch.setattr(backend, "create_asset", flaky_create)

    result = generate_auto_clips(backend, "film-1")

    assert result.requested == 3
    assert result.created == 2
    assert result.is_partial
    assert len(result.failures) == 1 and "Highlight" in result.failures[0]
    assert len([a for a in backend.list_assets() if a.is_clip]) == 2
