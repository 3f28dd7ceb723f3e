"""
Admin: Staff & roles
====================

Master-admin surface over the identity boundary.

Routes
- GET  /staff                         -> every known principal with role and profile
- POST /staff/{principal}/promote     -> grant a role
- POST /staff/{principal}/demote      -> revoke a role (principal drops back to `user`)

The gate here is a fast fail for the HTTP surface; the boundary re-checks
the caller on every role change.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request, Response

from app.api.http_utils import get_backend, require_master_admin
from app.core.limiter import rate_limit
from app.repositories.backend import CatalogBackendProtocol
from app.schemas.user import RoleChangeIn, StaffMember, Viewer
from app.security_headers import set_sensitive_cache

log = logging.getLogger(__name__)
router = APIRouter(tags=["Admin Staff"])


@router.get("/staff", response_model=List[StaffMember], summary="List principals and roles")
def list_staff(
    response: Response,
    backend: CatalogBackendProtocol = Depends(get_backend),
    master: Viewer = Depends(require_master_admin),
) -> List[StaffMember]:
    set_sensitive_cache(response)
    return backend.list_users()


@router.post("/staff/{principal}/promote", response_model=StaffMember, summary="Grant a role")
@rate_limit("10/minute")
def promote(
    principal: str,
    request: Request,
    payload: RoleChangeIn,
    backend: CatalogBackendProtocol = Depends(get_backend),
    master: Viewer = Depends(require_master_admin),
) -> StaffMember:
    return backend.promote(master.principal, principal, payload.role)


@router.post("/staff/{principal}/demote", response_model=StaffMember, summary="Revoke a role")
@rate_limit("10/minute")
def demote(
    principal: str,
    request: Request,
    payload: RoleChangeIn,
    backend: CatalogBackendProtocol = Depends(get_backend),
    master: Viewer = Depends(require_master_admin),
) -> StaffMember:
    return backend.demote(master.principal, principal, payload.role)


__all__ = ["router"]
