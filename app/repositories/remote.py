from __future__ import annotations

"""
Remote catalog backend (httpx)
==============================

`HttpCatalogBackend` implements `CatalogBackendProtocol` against a REST
persistence/identity service. Resource layout on the remote side:

    /assets, /series, /channels, /brands, /ads, /ad-assignments
        GET (list) · POST (create) · GET|PUT|DELETE /{id}
    /principals                      GET (staff listing)
    /principals/{p}/role             GET → {"role": "..."}
    /principals/{p}/profile          GET | PUT
    /principals/{p}/promote|demote   POST {"caller": "...", "role": "..."}
    /principals/{p}/history          GET → [content_id] (most recent first) · POST {"content_id": "..."}
    /brands/{id}/channels            GET → [LiveChannel]
    /stats                           GET → [ContentStats]
    /stats/{id}/views                POST {"premium": bool}
    /stats/{id}/ad-impressions       POST {"count": n}
    /search?q=...                    GET → [SearchResult]
    /checkout/sessions               POST → {"id": "...", "url": "..."}

Status mapping: 404 → NotFoundException (or `None` for single-record reads),
403 → PermissionDeniedException, 409 → StaleWriteException,
400/422 → ValidationFailedException, 5xx and transport errors →
BackendUnavailableException.
"""

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from app.core.exceptions import (
    BackendUnavailableException,
    NotFoundException,
    PermissionDeniedException,
    StaleWriteException,
    ValidationFailedException,
)
from app.repositories.backend import CatalogBackendProtocol
from app.schemas.ads import AdAssignment, AdMedia
from app.schemas.analytics import ContentStats
from app.schemas.brands import Brand
from app.schemas.catalog import MediaAsset, Series
from app.schemas.enums import UserRole
from app.schemas.live import LiveChannel
from app.schemas.search import SearchResult
from app.schemas.user import CheckoutSession, ShoppingItem, StaffMember, UserProfile

log = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _seg(value: str) -> str:
    return quote(value, safe="")


class HttpCatalogBackend(CatalogBackendProtocol):
    """REST client for the remote catalog backend."""

    def __init__(
        self,
        base_url: str,
        *,
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings) -> "HttpCatalogBackend":
        if not settings.CATALOG_BACKEND_URL:
            raise ValueError("CATALOG_BACKEND_URL is required when CATALOG_BACKEND=http")
        return cls(
            settings.CATALOG_BACKEND_URL,
            token=settings.catalog_backend_token,
            timeout=settings.CATALOG_BACKEND_TIMEOUT_SECONDS,
        )

    def close(self) -> None:
        self._client.close()

    # ─────────────────────────────────────────────────────────
    # 🧩 Transport helpers
    # ─────────────────────────────────────────────────────────
    def _request(
        self,
        method: str,
        path: str,
        *,
        entity: str = "resource",
        entity_id: str = "",
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        try:
            resp = self._client.request(method, path, json=json, params=params)
        except httpx.RequestError as e:
            log.warning("Catalog backend unreachable | %s %s | %s", method, path, e)
            raise BackendUnavailableException(details={"method": method, "path": path}) from e

        if resp.status_code < 400:
            return resp
        self._raise_for_status(resp, entity=entity, entity_id=entity_id)
        return resp  # pragma: no cover

    @staticmethod
    def _body(resp: httpx.Response) -> Dict[str, Any]:
        try:
            data = resp.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    def _raise_for_status(self, resp: httpx.Response, *, entity: str, entity_id: str) -> None:
        body = self._body(resp)
        message = body.get("message") or body.get("detail") or resp.text or resp.reason_phrase
        code = resp.status_code

        if code == 404:
            raise NotFoundException(entity=entity, entity_id=entity_id)
        if code == 403:
            raise PermissionDeniedException(
                permission=str(body.get("permission", "unknown")),
                role=str(body.get("role", "unknown")),
            )
        if code == 409:
            details = body.get("details") or {}
            raise StaleWriteException(
                entity=entity,
                entity_id=entity_id,
                expected=int(details.get("expected_revision", -1)),
                actual=int(details.get("actual_revision", -1)),
            )
        if code in (400, 422):
            raise ValidationFailedException(str(message), details=body.get("details"))
        log.warning("Catalog backend error | status=%s entity=%s id=%s", code, entity, entity_id)
        raise BackendUnavailableException(
            f"Catalog backend error ({code})",
            details={"status": code, "entity": entity, "id": entity_id},
        )

    def _list(self, path: str, model: Type[M], *, params: Optional[Dict[str, Any]] = None) -> List[M]:
        resp = self._request("GET", path, params=params)
        return [model.model_validate(row) for row in resp.json()]

    def _get(self, collection: str, row_id: str, model: Type[M], entity: str) -> Optional[M]:
        try:
            resp = self._request("GET", f"{collection}/{_seg(row_id)}", entity=entity, entity_id=row_id)
        except NotFoundException:
            return None
        return model.model_validate(resp.json())

    def _create(self, collection: str, row: M, entity: str) -> M:
        resp = self._request(
            "POST", collection, entity=entity, entity_id=getattr(row, "id", ""),
            json=row.model_dump(mode="json"),
        )
        return type(row).model_validate(resp.json())

    def _replace(self, collection: str, row_id: str, row: M, entity: str) -> M:
        resp = self._request(
            "PUT", f"{collection}/{_seg(row_id)}", entity=entity, entity_id=row_id,
            json=row.model_dump(mode="json"),
        )
        return type(row).model_validate(resp.json())

    def _delete(self, collection: str, row_id: str, entity: str) -> None:
        self._request("DELETE", f"{collection}/{_seg(row_id)}", entity=entity, entity_id=row_id)

    # ── Catalog: assets ─────────────────────────────────────
    def list_assets(self) -> List[MediaAsset]:
        return self._list("/assets", MediaAsset)

    def get_asset(self, asset_id: str) -> Optional[MediaAsset]:
        return self._get("/assets", asset_id, MediaAsset, "asset")

    def create_asset(self, asset: MediaAsset) -> MediaAsset:
        return self._create("/assets", asset, "asset")

    def replace_asset(self, asset_id: str, asset: MediaAsset) -> MediaAsset:
        return self._replace("/assets", asset_id, asset, "asset")

    def delete_asset(self, asset_id: str) -> None:
        self._delete("/assets", asset_id, "asset")

    # ── Catalog: series ─────────────────────────────────────
    def list_series(self) -> List[Series]:
        return self._list("/series", Series)

    def get_series(self, series_id: str) -> Optional[Series]:
        return self._get("/series", series_id, Series, "series")

    def create_series(self, series: Series) -> Series:
        return self._create("/series", series, "series")

    def replace_series(self, series_id: str, series: Series) -> Series:
        return self._replace("/series", series_id, series, "series")

    def delete_series(self, series_id: str) -> None:
        self._delete("/series", series_id, "series")

    # ── Live TV ─────────────────────────────────────────────
    def list_channels(self) -> List[LiveChannel]:
        return self._list("/channels", LiveChannel)

    def get_channel(self, channel_id: str) -> Optional[LiveChannel]:
        return self._get("/channels", channel_id, LiveChannel, "channel")

    def create_channel(self, channel: LiveChannel) -> LiveChannel:
        return self._create("/channels", channel, "channel")

    def replace_channel(self, channel_id: str, channel: LiveChannel) -> LiveChannel:
        return self._replace("/channels", channel_id, channel, "channel")

    def delete_channel(self, channel_id: str) -> None:
        self._delete("/channels", channel_id, "channel")

    def list_channels_by_brand(self, brand_id: str) -> List[LiveChannel]:
        resp = self._request("GET", f"/brands/{_seg(brand_id)}/channels", entity="brand", entity_id=brand_id)
        return [LiveChannel.model_validate(row) for row in resp.json()]

    # ── Brands ──────────────────────────────────────────────
    def list_brands(self) -> List[Brand]:
        return self._list("/brands", Brand)

    def get_brand(self, brand_id: str) -> Optional[Brand]:
        return self._get("/brands", brand_id, Brand, "brand")

    def create_brand(self, brand: Brand) -> Brand:
        return self._create("/brands", brand, "brand")

    def replace_brand(self, brand_id: str, brand: Brand) -> Brand:
        return self._replace("/brands", brand_id, brand, "brand")

    def delete_brand(self, brand_id: str) -> None:
        self._delete("/brands", brand_id, "brand")

    # ── Ads ─────────────────────────────────────────────────
    def list_ad_media(self) -> List[AdMedia]:
        return self._list("/ads", AdMedia)

    def create_ad_media(self, ad: AdMedia) -> AdMedia:
        return self._create("/ads", ad, "ad")

    def replace_ad_media(self, ad_id: str, ad: AdMedia) -> AdMedia:
        return self._replace("/ads", ad_id, ad, "ad")

    def delete_ad_media(self, ad_id: str) -> None:
        self._delete("/ads", ad_id, "ad")

    def list_ad_assignments(self) -> List[AdAssignment]:
        return self._list("/ad-assignments", AdAssignment)

    def create_ad_assignment(self, assignment: AdAssignment) -> AdAssignment:
        return self._create("/ad-assignments", assignment, "ad assignment")

    def replace_ad_assignment(self, assignment_id: str, assignment: AdAssignment) -> AdAssignment:
        return self._replace("/ad-assignments", assignment_id, assignment, "ad assignment")

    def delete_ad_assignment(self, assignment_id: str) -> None:
        self._delete("/ad-assignments", assignment_id, "ad assignment")

    # ── Identity / roles ────────────────────────────────────
    def current_role(self, principal: Optional[str]) -> UserRole:
        if not principal:
            return UserRole.guest
        try:
            resp = self._request("GET", f"/principals/{_seg(principal)}/role", entity="principal", entity_id=principal)
        except NotFoundException:
            return UserRole.user
        return UserRole(self._body(resp).get("role", UserRole.user.value))

    def get_profile(self, principal: str) -> Optional[UserProfile]:
        try:
            resp = self._request("GET", f"/principals/{_seg(principal)}/profile", entity="profile", entity_id=principal)
        except NotFoundException:
            return None
        return UserProfile.model_validate(resp.json())

    def save_profile(self, principal: str, profile: UserProfile) -> UserProfile:
        resp = self._request(
            "PUT", f"/principals/{_seg(principal)}/profile", entity="profile", entity_id=principal,
            json=profile.model_dump(mode="json"),
        )
        return UserProfile.model_validate(resp.json())

    def _role_change(self, action: str, caller: str, principal: str, role: UserRole) -> StaffMember:
        resp = self._request(
            "POST", f"/principals/{_seg(principal)}/{action}", entity="principal", entity_id=principal,
            json={"caller": caller, "role": role.value},
        )
        return StaffMember.model_validate(resp.json())

    def promote(self, caller: str, principal: str, role: UserRole) -> StaffMember:
        return self._role_change("promote", caller, principal, role)

    def demote(self, caller: str, principal: str, role: UserRole) -> StaffMember:
        return self._role_change("demote", caller, principal, role)

    def list_users(self) -> List[StaffMember]:
        return self._list("/principals", StaffMember)

    # ── Watch history / analytics ───────────────────────────
    def add_to_watch_history(self, principal: str, content_id: str) -> List[str]:
        resp = self._request(
            "POST", f"/principals/{_seg(principal)}/history", entity="principal", entity_id=principal,
            json={"content_id": content_id},
        )
        return [str(c) for c in resp.json()]

    def get_watch_history(self, principal: str) -> List[str]:
        try:
            resp = self._request("GET", f"/principals/{_seg(principal)}/history", entity="principal", entity_id=principal)
        except NotFoundException:
            return []
        return [str(c) for c in resp.json()]

    def increment_views(self, content_id: str, *, premium: bool = False) -> None:
        self._request(
            "POST", f"/stats/{_seg(content_id)}/views", entity="content", entity_id=content_id,
            json={"premium": premium},
        )

    def increment_ad_impressions(self, content_id: str, count: int = 1) -> None:
        if count <= 0:
            return
        self._request(
            "POST", f"/stats/{_seg(content_id)}/ad-impressions", entity="content", entity_id=content_id,
            json={"count": count},
        )

    def list_content_stats(self) -> List[ContentStats]:
        return self._list("/stats", ContentStats)

    # ── Search / payments ───────────────────────────────────
    def search(self, text: str) -> List[SearchResult]:
        return self._list("/search", SearchResult, params={"q": text})

    def create_checkout_session(
        self, items: List[ShoppingItem], success_url: str, cancel_url: str
    ) -> CheckoutSession:
        resp = self._request(
            "POST", "/checkout/sessions", entity="checkout session",
            json={
                "items": [i.model_dump(mode="json") for i in items],
                "success_url": success_url,
                "cancel_url": cancel_url,
            },
        )
        return CheckoutSession.model_validate(resp.json())


__all__ = ["HttpCatalogBackend"]
