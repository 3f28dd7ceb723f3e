"""
Billing (opaque checkout)

- POST /billing/checkout -> {id, url} from the payments boundary

No payment is processed here; the session is created by the boundary and
the caller is redirected to its URL.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status

from app.api.http_utils import get_backend, require_authenticated
from app.core.limiter import rate_limit
from app.repositories.backend import CatalogBackendProtocol
from app.schemas.user import CheckoutRequest, CheckoutSession, Viewer
from app.security_headers import set_sensitive_cache

log = logging.getLogger(__name__)
router = APIRouter(prefix="/billing", tags=["Billing"])


@router.post(
    "/checkout",
    response_model=CheckoutSession,
    status_code=status.HTTP_201_CREATED,
    summary="Create a checkout session",
)
@rate_limit("10/minute")
def create_checkout(
    request: Request,
    payload: CheckoutRequest,
    response: Response,
    backend: CatalogBackendProtocol = Depends(get_backend),
    viewer: Viewer = Depends(require_authenticated),
) -> CheckoutSession:
    set_sensitive_cache(response)
    session = backend.create_checkout_session(payload.items, payload.success_url, payload.cancel_url)
    log.info("Checkout requested | principal=%s session=%s", viewer.principal, session.id)
    return session


__all__ = ["router"]
