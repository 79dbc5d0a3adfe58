"""Artisan directory, profiles and the artisan dashboard."""
from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from artisanverse.core.utils import calculate_rating, parse_timestamp
from artisanverse.domain.pagination import Page, paginate
from artisanverse.domain.query import sort_records
from artisanverse.domain.records import ORDERS, PRODUCTS, REVIEWS, ROLE_ARTISAN, USERS, Order, User
from artisanverse.repositories.json_storage import RecordStore
from artisanverse.services.errors import ArtisanNotFoundError, NotAuthorizedError
from artisanverse.services.lookups import find_exact
from artisanverse.services.user_service import public_profile

LOW_STOCK_DEFAULT = 5


def _profile_value(artisan: User, key: str) -> float:
    return float((artisan.get("artisanProfile") or {}).get(key) or 0)


def _featured_score(artisan: User) -> float:
    return _profile_value(artisan, "rating") + _profile_value(artisan, "totalOrders") * 0.1


def _last_months(count: int = 12, now: datetime | None = None) -> list[str]:
    now = now or datetime.now(timezone.utc)
    keys = []
    year, month = now.year, now.month
    for _ in range(count):
        keys.append(f"{year}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


def _month_key(value: Any) -> Optional[str]:
    parsed = parse_timestamp(value)
    return f"{parsed.year}-{parsed.month:02d}" if parsed else None


def _artisan_items(order: Order, artisan_id: str) -> list[dict]:
    return [item for item in order.get("items") or [] if item.get("artisanId") == artisan_id]


def _items_revenue(items: Iterable[dict]) -> float:
    return sum(float(item.get("price") or 0) * int(item.get("quantity") or 0) for item in items)


class ArtisanService:
    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def _active_artisans(self, **filters: Any) -> list[User]:
        found = self.store.find_all(USERS, {"role": ROLE_ARTISAN, "isActive": True, **filters})
        return [artisan for artisan in found if artisan.get("role") == ROLE_ARTISAN]

    def list_artisans(
        self,
        *,
        craft_type: str | None = None,
        region: str | None = None,
        country: str | None = None,
        sort_by: str = "rating",
        page: Any = 1,
        limit: Any = 20,
        viewer: Optional[User] = None,
    ) -> Page:
        # country is the narrower location hint, so it wins over region
        location = country or region or None
        artisans = self._active_artisans(craftType=craft_type or None, location=location)
        if sort_by == "rating":
            artisans.sort(key=lambda a: _profile_value(a, "rating"), reverse=True)
        elif sort_by == "orders":
            artisans.sort(key=lambda a: _profile_value(a, "totalOrders"), reverse=True)
        elif sort_by == "newest":
            artisans = sort_records(artisans, "createdAt", "desc")
        return paginate([public_profile(a, viewer) for a in artisans], page, limit)

    def get_artisan(self, artisan_id: str, viewer: Optional[User] = None) -> dict:
        artisan = self.store.find_by_id(USERS, artisan_id)
        if not artisan or artisan.get("role") != ROLE_ARTISAN or not artisan.get("isActive"):
            raise ArtisanNotFoundError("Artisan not found")
        products = find_exact(self.store, PRODUCTS, artisanId=artisan_id, isActive=True)
        reviews: list[dict] = []
        for product in products:
            reviews.extend(find_exact(self.store, REVIEWS, productId=product.get("id")))
        return {
            **public_profile(artisan, viewer),
            "products": products[:8],
            "totalProducts": len(products),
            "reviews": reviews[:10],
            "overallRating": calculate_rating(reviews),
            "totalReviews": len(reviews),
        }

    def craft_types(self) -> list[dict]:
        counts = Counter(a.get("craftType") for a in self._active_artisans() if a.get("craftType"))
        return [{"name": name, "count": count} for name, count in counts.items()]

    def featured(self, limit: int = 6) -> list[dict]:
        artisans = sorted(self._active_artisans(), key=_featured_score, reverse=True)
        return [public_profile(a) for a in artisans[: max(0, limit)]]

    def dashboard(self, artisan: User, *, now: datetime | None = None) -> dict:
        if artisan.get("role") != ROLE_ARTISAN:
            raise NotAuthorizedError("Only artisans can access dashboard")
        artisan_id = artisan.get("id")
        products = find_exact(self.store, PRODUCTS, artisanId=artisan_id)
        active = [p for p in products if p.get("isActive")]
        orders = [o for o in self.store.find_all(ORDERS) if _artisan_items(o, artisan_id)]

        months = _last_months(12, now)
        monthly_orders = dict.fromkeys(months, 0)
        monthly_revenue = dict.fromkeys(months, 0.0)
        for order in orders:
            key = _month_key(order.get("createdAt"))
            if key in monthly_orders:
                monthly_orders[key] += 1
                monthly_revenue[key] += _items_revenue(_artisan_items(order, artisan_id))

        return {
            "analytics": {
                "totalProducts": len(products),
                "activeProducts": len(active),
                "totalOrders": len(orders),
                "totalRevenue": round(sum(_items_revenue(_artisan_items(o, artisan_id)) for o in orders), 2),
                "totalViews": sum(int(p.get("views") or 0) for p in products),
                "totalLikes": sum(int(p.get("likes") or 0) for p in products),
                "averageRating": _profile_value(artisan, "rating"),
            },
            "recentProducts": sort_records(products, "createdAt", "desc")[:5],
            "recentOrders": sort_records(orders, "createdAt", "desc")[:5],
            "lowStockProducts": [
                p for p in active
                if int(p.get("inStock") or 0) <= int(p.get("lowStockThreshold") or LOW_STOCK_DEFAULT)
            ],
            "performance": {
                "monthlyOrders": [{"month": m, "orders": c} for m, c in monthly_orders.items()],
                "monthlyRevenue": [{"month": m, "revenue": round(r, 2)} for m, r in monthly_revenue.items()],
                "topProducts": sorted(active, key=lambda p: int(p.get("views") or 0), reverse=True)[:5],
            },
        }
