from __future__ import annotations

"""
Catalog API · HTTP Utilities
============================

Shared dependencies for API routers:

- Backend boundary access (`get_backend`), overridable in tests via
  `app.dependency_overrides[get_backend]`
- Caller identity: the principal comes from the header set by the external
  identity layer (`settings.PRINCIPAL_HEADER`); role and profile are looked
  up through the backend boundary
- Role gates: `require_authenticated`, `require_admin`, `require_master_admin`

Notes
-----
• Role checks here only guard the HTTP surface. The boundary stays the
  authority: promote/demote are re-checked by the backend itself.
• Dependency functions return the resolved value on success or raise an
  `AppException` subclass on failure.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, Request

from app.core.config import settings
from app.core.exceptions import AuthenticationRequiredException, PermissionDeniedException
from app.repositories.backend import CatalogBackendProtocol, get_catalog_backend
from app.schemas.enums import UserRole
from app.schemas.user import Viewer
from app.services.entitlements import build_viewer

log = logging.getLogger(__name__)

__all__ = [
    "get_backend",
    "get_principal",
    "get_viewer",
    "require_authenticated",
    "require_admin",
    "require_master_admin",
    "utc_now",
]


def get_backend() -> CatalogBackendProtocol:
    return get_catalog_backend()


def get_principal(request: Request) -> Optional[str]:
    value = (request.headers.get(settings.PRINCIPAL_HEADER) or "").strip()
    return value or None


def get_viewer(
    request: Request,
    backend: CatalogBackendProtocol = Depends(get_backend),
) -> Viewer:
    principal = get_principal(request)
    if principal is None:
        return Viewer.anonymous()
    role = backend.current_role(principal)
    profile = backend.get_profile(principal)
    return build_viewer(principal, role, profile)


def require_authenticated(viewer: Viewer = Depends(get_viewer)) -> Viewer:
    if not viewer.authenticated:
        raise AuthenticationRequiredException()
    return viewer


def _require_role(viewer: Viewer, role: UserRole, permission: str) -> Viewer:
    if not viewer.authenticated:
        raise AuthenticationRequiredException()
    if not viewer.role.at_least(role):
        log.info("Role gate denied | principal=%s role=%s needed=%s", viewer.principal, viewer.role.value, role.value)
        raise PermissionDeniedException(permission=permission, role=viewer.role.value)
    return viewer


def require_admin(viewer: Viewer = Depends(get_viewer)) -> Viewer:
    return _require_role(viewer, UserRole.admin, "catalog:manage")


def require_master_admin(viewer: Viewer = Depends(get_viewer)) -> Viewer:
    return _require_role(viewer, UserRole.masterAdmin, "roles:manage")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
