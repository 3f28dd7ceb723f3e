from __future__ import annotations

"""
Series editing
==============

Seasons and episodes live inside the `Series` document. Every edit here is a
pure function `Series -> Series`; `edit_series` wraps one of them in a
fetch → compute → revision-checked replace against the backend.

Rules
-----
- Season numbers, episode numbers and runtimes are positive.
- Season numbers are unique within a series; episode numbers are unique
  within a season.
- Seasons are kept ordered by `season_number`, episodes by `episode_number`.
- Moving an episode to another season removes it from the source and inserts
  it into the target in the same computed document, so it is never in zero
  or two seasons.
"""

import logging
from typing import Callable, Iterable, List, Optional, Tuple

from app.core.exceptions import NotFoundException, StaleWriteException, ValidationFailedException
from app.repositories.backend import CatalogBackendProtocol
from app.schemas.catalog import Episode, EpisodeIn, EpisodeUpdateIn, Season, SeasonIn, Series

log = logging.getLogger(__name__)

SeriesChange = Callable[[Series], Series]


# ─────────────────────────────────────────────────────────────
# 🧩 Helpers
# ─────────────────────────────────────────────────────────────
def _require_positive(field: str, value: int) -> None:
    if value < 1:
        raise ValidationFailedException(f"{field} must be a positive integer", details={field: value})


def _season_index(series: Series, season_id: str) -> int:
    for i, season in enumerate(series.seasons):
        if season.id == season_id:
            return i
    raise NotFoundException(entity="season", entity_id=season_id)


def _locate_episode(series: Series, episode_id: str) -> Tuple[int, int]:
    for si, season in enumerate(series.seasons):
        for ei, episode in enumerate(season.episodes):
            if episode.id == episode_id:
                return si, ei
    raise NotFoundException(entity="episode", entity_id=episode_id)


def _check_season_number(series: Series, number: int, *, ignore_id: Optional[str] = None) -> None:
    _require_positive("season_number", number)
    if any(s.season_number == number and s.id != ignore_id for s in series.seasons):
        raise ValidationFailedException(
            f"Season {number} already exists in series '{series.id}'",
            details={"series_id": series.id, "season_number": number},
        )


def _check_episode(season: Season, data: EpisodeIn, *, ignore_id: Optional[str] = None) -> None:
    _require_positive("episode_number", data.episode_number)
    _require_positive("runtime_minutes", data.runtime_minutes)
    if any(e.episode_number == data.episode_number and e.id != ignore_id for e in season.episodes):
        raise ValidationFailedException(
            f"Episode {data.episode_number} already exists in season {season.season_number}",
            details={"season_id": season.id, "episode_number": data.episode_number},
        )


def _with_seasons(series: Series, seasons: List[Season]) -> Series:
    return series.model_copy(update={"seasons": sorted(seasons, key=lambda s: s.season_number)})


def _with_episodes(season: Season, episodes: List[Episode]) -> Season:
    return season.model_copy(update={"episodes": sorted(episodes, key=lambda e: e.episode_number)})


# ─────────────────────────────────────────────────────────────
# 📺 Seasons
# ─────────────────────────────────────────────────────────────
def add_season(series: Series, data: SeasonIn) -> Series:
    _check_season_number(series, data.season_number)
    season = Season(**data.model_dump())
    return _with_seasons(series, [*series.seasons, season])


def update_season(series: Series, season_id: str, data: SeasonIn) -> Series:
    idx = _season_index(series, season_id)
    _check_season_number(series, data.season_number, ignore_id=season_id)
    seasons = list(series.seasons)
    seasons[idx] = seasons[idx].model_copy(update=data.model_dump())
    return _with_seasons(series, seasons)


def remove_season(series: Series, season_id: str) -> Series:
    idx = _season_index(series, season_id)
    return _with_seasons(series, series.seasons[:idx] + series.seasons[idx + 1:])


# ─────────────────────────────────────────────────────────────
# 🎞️ Episodes
# ─────────────────────────────────────────────────────────────
def add_episode(series: Series, season_id: str, data: EpisodeIn) -> Series:
    idx = _season_index(series, season_id)
    season = series.seasons[idx]
    _check_episode(season, data)
    episode = Episode(season_id=season.id, **data.model_dump())
    seasons = list(series.seasons)
    seasons[idx] = _with_episodes(season, [*season.episodes, episode])
    return _with_seasons(series, seasons)


def update_episode(series: Series, episode_id: str, data: EpisodeUpdateIn) -> Series:
    """Replace an episode, moving it when `target_season_number` names another season."""
    src_idx, ep_idx = _locate_episode(series, episode_id)
    source = series.seasons[src_idx]

    dst_idx = src_idx
    if data.target_season_number is not None and data.target_season_number != source.season_number:
        matches = [i for i, s in enumerate(series.seasons) if s.season_number == data.target_season_number]
        if not matches:
            raise NotFoundException(
                entity="season",
                entity_id=str(data.target_season_number),
                details={"series_id": series.id, "season_number": data.target_season_number},
            )
        dst_idx = matches[0]

    target = series.seasons[dst_idx]
    _check_episode(target, data, ignore_id=episode_id)
    episode = Episode(
        id=episode_id,
        season_id=target.id,
        **data.model_dump(exclude={"target_season_number"}),
    )

    seasons = list(series.seasons)
    kept = [e for e in source.episodes if e.id != episode_id]
    if dst_idx == src_idx:
        seasons[src_idx] = _with_episodes(source, kept + [episode])
    else:
        seasons[src_idx] = _with_episodes(source, kept)
        seasons[dst_idx] = _with_episodes(target, [*target.episodes, episode])
        log.info("Episode moved | series=%s episode=%s from=%s to=%s",
                 series.id, episode_id, source.season_number, target.season_number)
    return _with_seasons(series, seasons)


def remove_episode(series: Series, episode_id: str) -> Series:
    src_idx, _ = _locate_episode(series, episode_id)
    season = series.seasons[src_idx]
    seasons = list(series.seasons)
    seasons[src_idx] = _with_episodes(season, [e for e in season.episodes if e.id != episode_id])
    return _with_seasons(series, seasons)


def find_episode(series_list: Iterable[Series], episode_id: str) -> Optional[Tuple[Series, Season, Episode]]:
    for series in series_list:
        for season in series.seasons:
            for episode in season.episodes:
                if episode.id == episode_id:
                    return series, season, episode
    return None


# ─────────────────────────────────────────────────────────────
# 🔁 Backend round-trip
# ─────────────────────────────────────────────────────────────
def edit_series(
    backend: CatalogBackendProtocol,
    series_id: str,
    change: SeriesChange,
    *,
    revision: Optional[int] = None,
) -> Series:
    """Fetch, apply `change`, and replace. `revision` pins the snapshot the caller edited."""
    series = backend.get_series(series_id)
    if series is None:
        raise NotFoundException(entity="series", entity_id=series_id)
    if revision is not None and revision != series.revision:
        raise StaleWriteException(entity="series", entity_id=series_id, expected=revision, actual=series.revision)
    return backend.replace_series(series_id, change(series))


__all__ = [
    "add_season",
    "update_season",
    "remove_season",
    "add_episode",
    "update_episode",
    "remove_episode",
    "find_episode",
    "edit_series",
]
