from __future__ import annotations

"""Catalog backend boundary.

Everything the core needs from the outside world (persistence, identity,
search matching, payments) goes through `CatalogBackendProtocol`. Two
implementations ship with the service:

- `MemoryCatalogBackend` (this module): dict-backed, optionally seeded from a
  JSON file. Default for local runs and tests.
- `HttpCatalogBackend` (`app.repositories.remote`): REST client for a remote
  persistence/identity service.

All mutations are whole-record replacements. Series and LiveChannel replaces
are revision-checked so a writer working from a stale snapshot gets a
`StaleWriteException` instead of silently overwriting someone else's edit.
"""

import json
import logging
import os
import threading
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, TypeVar

from pydantic import BaseModel

from app.core.exceptions import (
    NotFoundException,
    PermissionDeniedException,
    StaleWriteException,
    ValidationFailedException,
)
from app.schemas.ads import AdAssignment, AdMedia
from app.schemas.analytics import ContentStats
from app.schemas.brands import Brand
from app.schemas.catalog import MediaAsset, Series
from app.schemas.enums import ResultType, UserRole
from app.schemas.live import LiveChannel
from app.schemas.search import SearchResult
from app.schemas.user import CheckoutSession, ShoppingItem, StaffMember, UserProfile
from app.services.classifier import is_movie_like

log = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


# Protocol-like documentation for the expected interface.
# Implementations return pydantic models from `app.schemas` and raise the
# domain exceptions from `app.core.exceptions`.


class CatalogBackendProtocol:
    # ── Catalog: assets ─────────────────────────────────────
    def list_assets(self) -> List[MediaAsset]:
        raise NotImplementedError

    def get_asset(self, asset_id: str) -> Optional[MediaAsset]:
        raise NotImplementedError

    def create_asset(self, asset: MediaAsset) -> MediaAsset:
        raise NotImplementedError

    def replace_asset(self, asset_id: str, asset: MediaAsset) -> MediaAsset:
        raise NotImplementedError

    def delete_asset(self, asset_id: str) -> None:
        raise NotImplementedError

    # ── Catalog: series ─────────────────────────────────────
    def list_series(self) -> List[Series]:
        raise NotImplementedError

    def get_series(self, series_id: str) -> Optional[Series]:
        raise NotImplementedError

    def create_series(self, series: Series) -> Series:
        raise NotImplementedError

    def replace_series(self, series_id: str, series: Series) -> Series:
        raise NotImplementedError

    def delete_series(self, series_id: str) -> None:
        raise NotImplementedError

    # ── Live TV ─────────────────────────────────────────────
    def list_channels(self) -> List[LiveChannel]:
        raise NotImplementedError

    def get_channel(self, channel_id: str) -> Optional[LiveChannel]:
        raise NotImplementedError

    def create_channel(self, channel: LiveChannel) -> LiveChannel:
        raise NotImplementedError

    def replace_channel(self, channel_id: str, channel: LiveChannel) -> LiveChannel:
        raise NotImplementedError

    def delete_channel(self, channel_id: str) -> None:
        raise NotImplementedError

    def list_channels_by_brand(self, brand_id: str) -> List[LiveChannel]:
        """Channels assigned to a brand, in assignment order; unknown ids are skipped."""
        raise NotImplementedError

    # ── Brands ──────────────────────────────────────────────
    def list_brands(self) -> List[Brand]:
        raise NotImplementedError

    def get_brand(self, brand_id: str) -> Optional[Brand]:
        raise NotImplementedError

    def create_brand(self, brand: Brand) -> Brand:
        raise NotImplementedError

    def replace_brand(self, brand_id: str, brand: Brand) -> Brand:
        raise NotImplementedError

    def delete_brand(self, brand_id: str) -> None:
        raise NotImplementedError

    # ── Ads ─────────────────────────────────────────────────
    def list_ad_media(self) -> List[AdMedia]:
        raise NotImplementedError

    def create_ad_media(self, ad: AdMedia) -> AdMedia:
        raise NotImplementedError

    def replace_ad_media(self, ad_id: str, ad: AdMedia) -> AdMedia:
        raise NotImplementedError

    def delete_ad_media(self, ad_id: str) -> None:
        raise NotImplementedError

    def list_ad_assignments(self) -> List[AdAssignment]:
        raise NotImplementedError

    def create_ad_assignment(self, assignment: AdAssignment) -> AdAssignment:
        raise NotImplementedError

    def replace_ad_assignment(self, assignment_id: str, assignment: AdAssignment) -> AdAssignment:
        raise NotImplementedError

    def delete_ad_assignment(self, assignment_id: str) -> None:
        raise NotImplementedError

    # ── Identity / roles ────────────────────────────────────
    def current_role(self, principal: Optional[str]) -> UserRole:
        raise NotImplementedError

    def get_profile(self, principal: str) -> Optional[UserProfile]:
        raise NotImplementedError

    def save_profile(self, principal: str, profile: UserProfile) -> UserProfile:
        raise NotImplementedError

    def promote(self, caller: str, principal: str, role: UserRole) -> StaffMember:
        raise NotImplementedError

    def demote(self, caller: str, principal: str, role: UserRole) -> StaffMember:
        raise NotImplementedError

    def list_users(self) -> List[StaffMember]:
        raise NotImplementedError

    # ── Watch history / analytics ───────────────────────────
    def add_to_watch_history(self, principal: str, content_id: str) -> List[str]:
        raise NotImplementedError

    def get_watch_history(self, principal: str) -> List[str]:
        """Most recent first."""
        raise NotImplementedError

    def increment_views(self, content_id: str, *, premium: bool = False) -> None:
        raise NotImplementedError

    def increment_ad_impressions(self, content_id: str, count: int = 1) -> None:
        raise NotImplementedError

    def list_content_stats(self) -> List[ContentStats]:
        raise NotImplementedError

    # ── Search / payments ───────────────────────────────────
    def search(self, text: str) -> List[SearchResult]:
        raise NotImplementedError

    def create_checkout_session(
        self, items: List[ShoppingItem], success_url: str, cancel_url: str
    ) -> CheckoutSession:
        raise NotImplementedError


@dataclass
class _UserRecord:
    role: UserRole
    profile: Optional[UserProfile] = None


class _Table:
    """Insertion-ordered id → model map with copy-on-read semantics."""

    def __init__(self, entity: str) -> None:
        self.entity = entity
        self._rows: Dict[str, BaseModel] = {}

    def all(self) -> List[Any]:
        return [row.model_copy(deep=True) for row in self._rows.values()]

    def get(self, row_id: str) -> Optional[Any]:
        row = self._rows.get(row_id)
        return row.model_copy(deep=True) if row is not None else None

    def require(self, row_id: str) -> Any:
        row = self._rows.get(row_id)
        if row is None:
            raise NotFoundException(entity=self.entity, entity_id=row_id)
        return row

    def insert(self, row: M) -> M:
        row_id = getattr(row, "id")
        if row_id in self._rows:
            raise ValidationFailedException(
                f"{self.entity.capitalize()} '{row_id}' already exists",
                details={"entity": self.entity, "id": row_id},
            )
        self._rows[row_id] = row.model_copy(deep=True)
        return row.model_copy(deep=True)

    def replace(self, row_id: str, row: M) -> M:
        self.require(row_id)
        stored = row.model_copy(update={"id": row_id}, deep=True)
        self._rows[row_id] = stored
        return stored.model_copy(deep=True)

    def delete(self, row_id: str) -> None:
        self.require(row_id)
        del self._rows[row_id]


class MemoryCatalogBackend(CatalogBackendProtocol):
    """
    Simple in-memory backend, optionally seeded from a JSON file.

    Seed file shape (all keys optional):
      {"assets": [...], "series": [...], "channels": [...], "brands": [...],
       "ad_media": [...], "ad_assignments": [...],
       "users": [{"principal": "...", "role": "admin", "profile": {...}}]}

    Identity rules enforced here (the boundary owns authorization):
      - no principal → guest; known principal → stored role; unknown → user
      - granting or revoking admin/masterAdmin requires masterAdmin
      - granting or revoking user requires at least admin

    Watch history keeps the last `history_limit` distinct ids per principal;
    a re-watch moves the id to the front. View and ad-impression counters
    live in process memory only.
    """

    def __init__(
        self,
        data_path: Optional[str] = None,
        *,
        master_admin: Optional[str] = None,
        checkout_base_url: str = "http://localhost:8000",
        history_limit: int = 100,
    ) -> None:
        self._lock = threading.RLock()
        self._assets = _Table("asset")
        self._series = _Table("series")
        self._channels = _Table("channel")
        self._brands = _Table("brand")
        self._ad_media = _Table("ad")
        self._ad_assignments = _Table("ad assignment")
        self._users: Dict[str, _UserRecord] = {}
        self._history: Dict[str, List[str]] = {}
        self._history_limit = history_limit
        self._stats: Dict[str, ContentStats] = {}
        self._checkout_base_url = checkout_base_url.rstrip("/")

        if master_admin:
            self._users[master_admin] = _UserRecord(role=UserRole.masterAdmin)
        if data_path:
            self._load_seed(data_path)

    def _load_seed(self, data_path: str) -> None:
        if not os.path.exists(data_path):
            log.warning("Catalog seed file %s not found; starting empty", data_path)
            return
        try:
            with open(data_path, "r", encoding="utf-8") as f:
                raw = json.load(f) or {}
            tables = [
                (self._assets, [MediaAsset(**a) for a in raw.get("assets", [])]),
                (self._series, [Series(**s) for s in raw.get("series", [])]),
                (self._channels, [LiveChannel(**c) for c in raw.get("channels", [])]),
                (self._brands, [Brand(**b) for b in raw.get("brands", [])]),
                (self._ad_media, [AdMedia(**ad) for ad in raw.get("ad_media", [])]),
                (self._ad_assignments, [AdAssignment(**asg) for asg in raw.get("ad_assignments", [])]),
            ]
            users = {
                u["principal"]: _UserRecord(
                    role=UserRole(u.get("role", "user")),
                    profile=UserProfile(**u["profile"]) if u.get("profile") else None,
                )
                for u in raw.get("users", [])
            }
        except (OSError, ValueError, KeyError, TypeError) as e:
            # pydantic.ValidationError subclasses ValueError
            log.warning("Catalog seed %s could not be loaded (%s); starting empty", data_path, e)
            return

        for table, rows in tables:
            for row in rows:
                table.insert(row)
        self._users.update(users)
        log.info(
            "Catalog seeded from %s | assets=%d series=%d channels=%d brands=%d",
            data_path, len(self._assets.all()), len(self._series.all()),
            len(self._channels.all()), len(self._brands.all()),
        )

    # ── Catalog: assets ─────────────────────────────────────
    def list_assets(self) -> List[MediaAsset]:
        with self._lock:
            return self._assets.all()

    def get_asset(self, asset_id: str) -> Optional[MediaAsset]:
        with self._lock:
            return self._assets.get(asset_id)

    def create_asset(self, asset: MediaAsset) -> MediaAsset:
        with self._lock:
            return self._assets.insert(asset)

    def replace_asset(self, asset_id: str, asset: MediaAsset) -> MediaAsset:
        with self._lock:
            return self._assets.replace(asset_id, asset)

    def delete_asset(self, asset_id: str) -> None:
        with self._lock:
            self._assets.delete(asset_id)

    # ── Catalog: series ─────────────────────────────────────
    def list_series(self) -> List[Series]:
        with self._lock:
            return self._series.all()

    def get_series(self, series_id: str) -> Optional[Series]:
        with self._lock:
            return self._series.get(series_id)

    def create_series(self, series: Series) -> Series:
        with self._lock:
            return self._series.insert(series.model_copy(update={"revision": 0}))

    def replace_series(self, series_id: str, series: Series) -> Series:
        with self._lock:
            stored = self._series.require(series_id)
            self._check_revision("series", series_id, series.revision, stored.revision)
            return self._series.replace(series_id, series.model_copy(update={"revision": stored.revision + 1}))

    def delete_series(self, series_id: str) -> None:
        with self._lock:
            self._series.delete(series_id)

    # ── Live TV ─────────────────────────────────────────────
    def list_channels(self) -> List[LiveChannel]:
        with self._lock:
            return self._channels.all()

    def get_channel(self, channel_id: str) -> Optional[LiveChannel]:
        with self._lock:
            return self._channels.get(channel_id)

    def create_channel(self, channel: LiveChannel) -> LiveChannel:
        with self._lock:
            return self._channels.insert(channel.model_copy(update={"revision": 0}))

    def replace_channel(self, channel_id: str, channel: LiveChannel) -> LiveChannel:
        with self._lock:
            stored = self._channels.require(channel_id)
            self._check_revision("channel", channel_id, channel.revision, stored.revision)
            return self._channels.replace(channel_id, channel.model_copy(update={"revision": stored.revision + 1}))

    def delete_channel(self, channel_id: str) -> None:
        with self._lock:
            self._channels.delete(channel_id)

    def list_channels_by_brand(self, brand_id: str) -> List[LiveChannel]:
        with self._lock:
            brand = self._brands.require(brand_id)
            found = (self._channels.get(cid) for cid in brand.assigned_live_channels)
            return [c for c in found if c is not None]

    @staticmethod
    def _check_revision(entity: str, entity_id: str, submitted: int, stored: int) -> None:
        if submitted != stored:
            log.info("Rejected stale %s write | id=%s submitted=%d stored=%d", entity, entity_id, submitted, stored)
            raise StaleWriteException(entity=entity, entity_id=entity_id, expected=submitted, actual=stored)

    # ── Brands ──────────────────────────────────────────────
    def list_brands(self) -> List[Brand]:
        with self._lock:
            return self._brands.all()

    def get_brand(self, brand_id: str) -> Optional[Brand]:
        with self._lock:
            return self._brands.get(brand_id)

    def create_brand(self, brand: Brand) -> Brand:
        with self._lock:
            return self._brands.insert(brand)

    def replace_brand(self, brand_id: str, brand: Brand) -> Brand:
        with self._lock:
            return self._brands.replace(brand_id, brand)

    def delete_brand(self, brand_id: str) -> None:
        with self._lock:
            self._brands.delete(brand_id)

    # ── Ads ─────────────────────────────────────────────────
    def list_ad_media(self) -> List[AdMedia]:
        with self._lock:
            return self._ad_media.all()

    def create_ad_media(self, ad: AdMedia) -> AdMedia:
        with self._lock:
            return self._ad_media.insert(ad)

    def replace_ad_media(self, ad_id: str, ad: AdMedia) -> AdMedia:
        with self._lock:
            return self._ad_media.replace(ad_id, ad)

    def delete_ad_media(self, ad_id: str) -> None:
        with self._lock:
            self._ad_media.delete(ad_id)

    def list_ad_assignments(self) -> List[AdAssignment]:
        with self._lock:
            return self._ad_assignments.all()

    def create_ad_assignment(self, assignment: AdAssignment) -> AdAssignment:
        with self._lock:
            return self._ad_assignments.insert(assignment)

    def replace_ad_assignment(self, assignment_id: str, assignment: AdAssignment) -> AdAssignment:
        with self._lock:
            return self._ad_assignments.replace(assignment_id, assignment)

    def delete_ad_assignment(self, assignment_id: str) -> None:
        with self._lock:
            self._ad_assignments.delete(assignment_id)

    # ── Identity / roles ────────────────────────────────────
    def current_role(self, principal: Optional[str]) -> UserRole:
        if not principal:
            return UserRole.guest
        with self._lock:
            rec = self._users.get(principal)
            return rec.role if rec else UserRole.user

    def get_profile(self, principal: str) -> Optional[UserProfile]:
        with self._lock:
            rec = self._users.get(principal)
            return rec.profile.model_copy() if rec and rec.profile else None

    def save_profile(self, principal: str, profile: UserProfile) -> UserProfile:
        with self._lock:
            rec = self._users.setdefault(principal, _UserRecord(role=UserRole.user))
            rec.profile = profile.model_copy()
            return profile

    def promote(self, caller: str, principal: str, role: UserRole) -> StaffMember:
        with self._lock:
            self._authorize_role_change(caller, role, "roles:promote")
            rec = self._users.setdefault(principal, _UserRecord(role=UserRole.user))
            rec.role = role
            log.info("Role granted | principal=%s role=%s by=%s", principal, role.value, caller)
            return StaffMember(principal=principal, role=rec.role, profile=rec.profile)

    def demote(self, caller: str, principal: str, role: UserRole) -> StaffMember:
        with self._lock:
            self._authorize_role_change(caller, role, "roles:demote")
            rec = self._users.get(principal)
            if rec is None or rec.role != role:
                raise ValidationFailedException(
                    f"Principal '{principal}' does not hold role '{role.value}'",
                    details={"principal": principal, "role": role.value},
                )
            if role == UserRole.masterAdmin and self._count_role(UserRole.masterAdmin) <= 1:
                raise ValidationFailedException("Cannot demote the last master admin")
            rec.role = UserRole.user
            log.info("Role revoked | principal=%s role=%s by=%s", principal, role.value, caller)
            return StaffMember(principal=principal, role=rec.role, profile=rec.profile)

    def list_users(self) -> List[StaffMember]:
        with self._lock:
            return [
                StaffMember(principal=p, role=r.role, profile=r.profile)
                for p, r in self._users.items()
            ]

    def _authorize_role_change(self, caller: str, role: UserRole, permission: str) -> None:
        caller_role = self.current_role(caller)
        required = UserRole.masterAdmin if role.at_least(UserRole.admin) else UserRole.admin
        if not caller_role.at_least(required):
            raise PermissionDeniedException(permission=permission, role=caller_role.value)

    def _count_role(self, role: UserRole) -> int:
        return sum(1 for r in self._users.values() if r.role == role)

    # ── Watch history / analytics ───────────────────────────
    def add_to_watch_history(self, principal: str, content_id: str) -> List[str]:
        with self._lock:
            history = [c for c in self._history.get(principal, []) if c != content_id]
            history.append(content_id)
            self._history[principal] = history[-self._history_limit:]
            return list(reversed(self._history[principal]))

    def get_watch_history(self, principal: str) -> List[str]:
        with self._lock:
            return list(reversed(self._history.get(principal, [])))

    def _stats_for(self, content_id: str) -> ContentStats:
        return self._stats.setdefault(content_id, ContentStats(content_id=content_id))

    def increment_views(self, content_id: str, *, premium: bool = False) -> None:
        with self._lock:
            stats = self._stats_for(content_id)
            stats.views += 1
            if premium:
                stats.premium_views += 1

    def increment_ad_impressions(self, content_id: str, count: int = 1) -> None:
        if count <= 0:
            return
        with self._lock:
            self._stats_for(content_id).ad_impressions += count

    def list_content_stats(self) -> List[ContentStats]:
        with self._lock:
            return [s.model_copy() for s in self._stats.values()]

    # ── Search / payments ───────────────────────────────────
    def search(self, text: str) -> List[SearchResult]:
        q = (text or "").strip().lower()
        if not q:
            return []

        def hit(*fields: Optional[str]) -> bool:
            return any(q in (f or "").lower() for f in fields)

        results: List[SearchResult] = []
        with self._lock:
            for a in self._assets.all():
                if not hit(a.title, a.description, a.genre, a.clip_caption):
                    continue
                if a.is_clip:
                    kind = ResultType.clip
                elif is_movie_like(a):
                    kind = ResultType.film
                else:
                    kind = ResultType.video
                results.append(SearchResult(
                    id=a.id, title=a.title or "", description=a.description,
                    thumbnail_url=a.thumbnail_url, is_premium=a.is_premium,
                    is_original=a.is_original, result_type=kind,
                ))
            for s in self._series.all():
                if hit(s.title, s.description):
                    results.append(SearchResult(
                        id=s.id, title=s.title or "", description=s.description,
                        thumbnail_url=s.thumbnail_url, is_original=s.is_original,
                        result_type=ResultType.series,
                    ))
            for b in self._brands.all():
                if hit(b.name, b.description):
                    results.append(SearchResult(
                        id=b.id, title=b.name, description=b.description,
                        thumbnail_url=b.logo_url, result_type=ResultType.brand,
                    ))
        return results

    def create_checkout_session(
        self, items: List[ShoppingItem], success_url: str, cancel_url: str
    ) -> CheckoutSession:
        session_id = f"cs_{uuid.uuid4().hex}"
        log.info("Checkout session created | id=%s items=%d", session_id, len(items))
        return CheckoutSession(id=session_id, url=f"{self._checkout_base_url}/checkout/{session_id}")


# ──────────────────────────────────────────────────────────────
# 🏭 Factory
# ──────────────────────────────────────────────────────────────
_HTTP_IMPL = "app.repositories.remote:HttpCatalogBackend"
_backend: Optional[CatalogBackendProtocol] = None
_backend_lock = threading.Lock()


def _import_string(path: str):
    module_path, _, class_name = path.partition(":")
    if not module_path or not class_name:
        raise ValueError("CATALOG_BACKEND_IMPL must be 'module.sub:ClassName'")
    module = __import__(module_path, fromlist=[class_name])
    return getattr(module, class_name)


def _build_backend() -> CatalogBackendProtocol:
    from app.core.config import settings

    if settings.CATALOG_BACKEND_IMPL:
        cls = _import_string(settings.CATALOG_BACKEND_IMPL)
        return cls()  # type: ignore
    if settings.CATALOG_BACKEND == "http":
        return _import_string(_HTTP_IMPL).from_settings(settings)
    return MemoryCatalogBackend(
        settings.CATALOG_SEED_PATH,
        master_admin=settings.BOOTSTRAP_MASTER_ADMIN,
        checkout_base_url=settings.checkout_base_url_str,
        history_limit=settings.WATCH_HISTORY_LIMIT,
    )


def get_catalog_backend() -> CatalogBackendProtocol:
    """
    Process-wide backend instance (FastAPI dependency).

    Selection order: `CATALOG_BACKEND_IMPL` (custom class), then
    `CATALOG_BACKEND=http`, then the in-memory default.
    """
    global _backend
    if _backend is None:
        with _backend_lock:
            if _backend is None:
                _backend = _build_backend()
                log.info("Catalog backend ready | impl=%s", type(_backend).__name__)
    return _backend


def reset_catalog_backend() -> None:
    """Drop the cached instance (next call rebuilds it from settings)."""
    global _backend
    with _backend_lock:
        _backend = None


__all__ = [
    "CatalogBackendProtocol",
    "MemoryCatalogBackend",
    "get_catalog_backend",
    "reset_catalog_backend",
]
