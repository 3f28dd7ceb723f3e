# app/core/exceptions.py
from __future__ import annotations

"""
Application Exceptions
======================
A small, consistent layer on top of FastAPI/Starlette's `HTTPException` that
lets us attach structured metadata and integrate cleanly with the problem+JSON
error shape from `app.core.exception_handlers`.

Key ideas
---------
- One base `AppException` that carries `code`, `request_id` and `details`.
- Domain exceptions inherit from it and set sane defaults:
    NotFoundException              404  referenced id does not resolve
    ValidationFailedException      422  missing/invalid field on create or edit
    AuthenticationRequiredException 401  no principal on a protected route
    PermissionDeniedException      403  role insufficient for the operation
    StaleWriteException            409  revision mismatch on a whole-document replace
- Partial clip generation is *not* an exception; it is reported as a count.

Usage
-----
    raise NotFoundException(entity="asset", entity_id=asset_id)
    raise ValidationFailedException("Missing required fields", details={"missing": ["title"]})
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

__all__ = [
    "AppException",
    "NotFoundException",
    "ValidationFailedException",
    "AuthenticationRequiredException",
    "PermissionDeniedException",
    "StaleWriteException",
    "BackendUnavailableException",
]


# ──────────────────────────────────────────────────────────────
# 📦 Core: AppException
# ──────────────────────────────────────────────────────────────
class AppException(HTTPException):
    """Base application-level exception with optional metadata.

    Attributes
    -----------
    status_code : int
        HTTP status code (e.g., 400/401/403/404/409/422/500).
    message : str
        Human-readable error message (serialized as `detail` as well).
    code : int
        Optional internal/typed error code. Defaults to `status_code`.
    request_id : str | None
        Optional request correlation id.
    details : dict | list | str | None
        Machine-readable details (missing fields, ids, revisions).
    """

    def __init__(
        self,
        *,
        status_code: int,
        message: str,
        code: Optional[int] = None,
        request_id: Optional[str] = None,
        details: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.code: int = int(code or status_code)
        self.message: str = message
        self.request_id: Optional[str] = request_id
        self.details: Optional[Any] = details


# ──────────────────────────────────────────────────────────────
# 🔎 Lookup / validation
# ──────────────────────────────────────────────────────────────
class NotFoundException(AppException):
    """Raised when a referenced asset, series, season, episode, channel, slot, brand or ad is unknown."""

    def __init__(self, *, entity: str, entity_id: str, details: Optional[Any] = None) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            message=f"{entity.capitalize()} '{entity_id}' not found",
            details=details or {"entity": entity, "id": entity_id},
        )


class ValidationFailedException(AppException):
    """Raised when a create/edit is missing required data or breaks a catalog rule."""

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            message=message,
            details=details,
        )


# ──────────────────────────────────────────────────────────────
# 🔐 Authorization
# ──────────────────────────────────────────────────────────────
class AuthenticationRequiredException(AppException):
    """Raised when a route needs a principal and none was supplied."""

    def __init__(self, *, detail: str = "Authentication required") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class PermissionDeniedException(AppException):
    """Raised when a user lacks a required permission."""

    def __init__(
        self,
        *,
        permission: str,
        role: str,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            message=f"Permission '{permission}' denied for role '{role}'",
            details=details or {"permission": permission, "role": role},
        )


# ──────────────────────────────────────────────────────────────
# ♻️ Concurrency
# ──────────────────────────────────────────────────────────────
class StaleWriteException(AppException):
    """Raised when a whole-document replace was computed from an outdated revision."""

    def __init__(self, *, entity: str, entity_id: str, expected: int, actual: int) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            message=f"{entity.capitalize()} '{entity_id}' was modified concurrently; reload and retry",
            details={"entity": entity, "id": entity_id, "expected_revision": expected, "actual_revision": actual},
        )


# ──────────────────────────────────────────────────────────────
# 🌐 Upstream
# ──────────────────────────────────────────────────────────────
class BackendUnavailableException(AppException):
    """Raised when the remote catalog backend cannot be reached or answers with a 5xx."""

    def __init__(self, message: str = "Catalog backend unavailable", *, details: Optional[Any] = None) -> None:
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            message=message,
            details=details,
        )
