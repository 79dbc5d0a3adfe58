from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from artisanverse.core.rate_limiter import api_rate_limit
from artisanverse.core.utils import generate_response
from artisanverse.domain.pagination import positive_int
from artisanverse.services.product_service import ProductService

router = APIRouter(prefix="/api/products", tags=["products"], dependencies=[Depends(api_rate_limit)])


def _get_product_service(request: Request) -> ProductService:
    svc = getattr(getattr(request.app, "state", None), "product_service", None)
    if not svc:
        raise RuntimeError("ProductService not configured")
    return svc


def _page_limit(request: Request, limit: str | None) -> int:
    settings = request.app.state.settings
    return min(positive_int(limit, settings.default_page_limit), settings.max_page_limit)


@router.get("")
def list_products(
    request: Request,
    page: str | None = None,
    limit: str | None = None,
    category: str | None = None,
    region: str | None = None,
    country: str | None = None,
    min_price: float | None = Query(None, alias="minPrice"),
    max_price: float | None = Query(None, alias="maxPrice"),
    search: str | None = None,
    artisan: str | None = None,
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
):
    svc = _get_product_service(request)
    result = svc.list_products(
        page=page,
        limit=_page_limit(request, limit),
        category=category,
        region=region,
        country=country,
        min_price=min_price,
        max_price=max_price,
        search=search,
        artisan=artisan,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return generate_response(
        True,
        {"products": result.items, "pagination": result.pagination},
        "Products retrieved successfully",
    )


@router.get("/categories")
def product_categories(request: Request):
    svc = _get_product_service(request)
    return generate_response(True, {"categories": svc.categories()}, "Categories retrieved successfully")


@router.get("/featured")
def featured_products(request: Request, limit: str | None = None):
    svc = _get_product_service(request)
    products = svc.featured(positive_int(limit, 8))
    return generate_response(True, {"products": products}, "Featured products retrieved successfully")


@router.get("/{product_id}")
def product_detail(product_id: str, request: Request):
    svc = _get_product_service(request)
    product = svc.get_product(product_id)
    return generate_response(True, {"product": product}, "Product retrieved successfully")
