"""
Admin: Analytics

Dashboard totals built from playback counters and the current catalog.
Content that has since been deleted still counts toward totals but drops out
of trending.
"""

from fastapi import APIRouter, Depends, Response

from app.api.http_utils import get_backend, require_admin
from app.core.config import settings
from app.repositories.backend import CatalogBackendProtocol
from app.schemas.analytics import Analytics
from app.schemas.user import Viewer
from app.security_headers import set_sensitive_cache
from app.services.analytics import get_analytics

router = APIRouter(tags=["Admin Analytics"])


@router.get("/analytics", response_model=Analytics, summary="Viewing analytics")
def read_analytics(
    response: Response,
    backend: CatalogBackendProtocol = Depends(get_backend),
    admin: Viewer = Depends(require_admin),
) -> Analytics:
    set_sensitive_cache(response)
    return get_analytics(backend, trending_limit=settings.ANALYTICS_TRENDING_LIMIT)


__all__ = ["router"]
