from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from artisanverse.core.rate_limiter import api_rate_limit
from artisanverse.core.utils import generate_response
from artisanverse.domain.pagination import positive_int
from artisanverse.services.artisan_service import ArtisanService

router = APIRouter(prefix="/api/artisans", tags=["artisans"], dependencies=[Depends(api_rate_limit)])


def _get_artisan_service(request: Request) -> ArtisanService:
    svc = getattr(getattr(request.app, "state", None), "artisan_service", None)
    if not svc:
        raise RuntimeError("ArtisanService not configured")
    return svc


@router.get("")
def list_artisans(
    request: Request,
    page: str | None = None,
    limit: str | None = None,
    craft_type: str | None = Query(None, alias="craftType"),
    region: str | None = None,
    country: str | None = None,
    sort_by: str = Query("rating", alias="sortBy"),
):
    settings = request.app.state.settings
    svc = _get_artisan_service(request)
    result = svc.list_artisans(
        craft_type=craft_type,
        region=region,
        country=country,
        sort_by=sort_by,
        page=page,
        limit=min(positive_int(limit, settings.default_page_limit), settings.max_page_limit),
    )
    return generate_response(
        True,
        {"artisans": result.items, "pagination": result.pagination},
        "Artisans retrieved successfully",
    )


@router.get("/featured")
def featured_artisans(request: Request, limit: str | None = None):
    svc = _get_artisan_service(request)
    artisans = svc.featured(positive_int(limit, 6))
    return generate_response(True, {"artisans": artisans}, "Featured artisans retrieved successfully")


@router.get("/craft-types")
def craft_types(request: Request):
    svc = _get_artisan_service(request)
    return generate_response(True, {"craftTypes": svc.craft_types()}, "Craft types retrieved successfully")


@router.get("/{artisan_id}")
def artisan_detail(artisan_id: str, request: Request):
    svc = _get_artisan_service(request)
    artisan = svc.get_artisan(artisan_id)
    return generate_response(True, {"artisan": artisan}, "Artisan retrieved successfully")
