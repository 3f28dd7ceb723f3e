"""
Public Brand Rails

- GET /brands/rails          -> every brand with at least one resolvable item
- GET /brands/{id}/rail      -> one brand's rail (may be empty)
- GET /brands/{id}/channels  -> the brand's live channels, slots in start order
"""

from typing import List

from fastapi import APIRouter, Depends

from app.api.http_utils import get_backend
from app.core.exceptions import NotFoundException
from app.repositories.backend import CatalogBackendProtocol
from app.schemas.brands import BrandRail
from app.schemas.live import LiveChannel
from app.services.brands import build_brand_rails, resolve_brand_rail
from app.services.schedule import sorted_slots

router = APIRouter(prefix="/brands", tags=["Public Brands"])


@router.get("/rails", response_model=List[BrandRail], summary="Brand rails")
def list_rails(backend: CatalogBackendProtocol = Depends(get_backend)) -> List[BrandRail]:
    return build_brand_rails(
        backend.list_brands(), backend.list_assets(), backend.list_series(), backend.list_channels()
    )


@router.get("/{brand_id}/rail", response_model=BrandRail, summary="One brand's rail")
def get_rail(brand_id: str, backend: CatalogBackendProtocol = Depends(get_backend)) -> BrandRail:
    brand = backend.get_brand(brand_id)
    if brand is None:
        raise NotFoundException(entity="brand", entity_id=brand_id)
    return resolve_brand_rail(brand, backend.list_assets(), backend.list_series(), backend.list_channels())


@router.get("/{brand_id}/channels", response_model=List[LiveChannel], summary="A brand's live channels")
def list_brand_channels(brand_id: str, backend: CatalogBackendProtocol = Depends(get_backend)) -> List[LiveChannel]:
    return [
        c.model_copy(update={"schedule": sorted_slots(c)})
        for c in backend.list_channels_by_brand(brand_id)
    ]


__all__ = ["router"]
