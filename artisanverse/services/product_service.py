"""
Product catalogue use cases (listing, detail, artisan inventory, wishlist).
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Optional

from artisanverse.core.utils import generate_sku, utc_now_iso
from artisanverse.domain.pagination import Page, paginate
from artisanverse.domain.query import parse_search_query, sort_records, within_price_range
from artisanverse.domain.records import (
    PRODUCTS,
    REVIEWS,
    ROLE_ADMIN,
    ROLE_ARTISAN,
    ROLE_BUYER,
    USERS,
    Product,
    User,
    full_name,
)
from artisanverse.repositories.json_storage import RecordStore
from artisanverse.services.errors import InvalidRequestError, NotAuthorizedError, ProductUnavailableError
from artisanverse.services.lookups import find_exact

# fields only the platform itself may change
PROTECTED_FIELDS = ("artisanId", "views", "rating", "reviewCount", "likes")


def _searchable_text(product: Product) -> str:
    tags = " ".join(product.get("tags") or [])
    parts = (product.get("title"), product.get("description"), product.get("category"), tags)
    return " ".join(str(part) for part in parts if part)


def _popularity(product: Product) -> int:
    return int(product.get("views") or 0) + int(product.get("likes") or 0)


class ProductService:
    """Catalogue reads/writes built on the record store."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    # -------------------------------------- helpers --------------------------------------
    def _artisan_summary(self, artisan_id: str | None, *, detailed: bool = False) -> Optional[dict]:
        artisan = self.store.find_by_id(USERS, artisan_id) if artisan_id else None
        if not artisan:
            return None
        profile = artisan.get("artisanProfile") or {}
        summary = {
            "id": artisan.get("id"),
            "name": full_name(artisan),
            "avatar": artisan.get("avatar"),
            "craftType": artisan.get("craftType"),
            "location": artisan.get("location"),
            "rating": profile.get("rating"),
        }
        if detailed:
            summary.update(
                {
                    "totalOrders": profile.get("totalOrders"),
                    "heritage": profile.get("heritage"),
                    "specialties": profile.get("specialties"),
                }
            )
        return summary

    def _with_artisan(self, product: Product) -> dict:
        return {**product, "artisan": self._artisan_summary(product.get("artisanId"))}

    def _require_product(self, product_id: str, *, active_only: bool = True) -> Product:
        product = self.store.find_by_id(PRODUCTS, product_id)
        if not product or (active_only and not product.get("isActive")):
            raise ProductUnavailableError("Product not found")
        return product

    @staticmethod
    def _require_owner(actor: User, product: Product, action: str) -> None:
        if product.get("artisanId") != actor.get("id") and actor.get("role") != ROLE_ADMIN:
            raise NotAuthorizedError(f"Not authorized to {action} this product")

    # -------------------------------------- reads --------------------------------------
    def list_products(
        self,
        *,
        page: Any = 1,
        limit: Any = 20,
        category: str | None = None,
        region: str | None = None,
        country: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        search: str | None = None,
        artisan: str | None = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> Page:
        filters = {
            "isActive": True,
            "category": category or None,
            "region": region or None,
            "country": country or None,
        }
        products = self.store.find_all(PRODUCTS, filters)
        if artisan:
            products = (p for p in products if p.get("artisanId") == artisan)
        if min_price is not None or max_price is not None:
            products = (p for p in products if within_price_range(p, min_price, max_price))
        query = parse_search_query(search)
        if query.terms:
            products = (p for p in products if query.matches(_searchable_text(p)))

        ordered = sort_records(products, sort_by or "createdAt", sort_order or "desc")
        result = paginate(ordered, page, limit)
        result.items = [self._with_artisan(product) for product in result.items]
        return result

    def get_product(self, product_id: str) -> dict:
        """Active product with artisan details and reviews; counts one view."""
        self._require_product(product_id)
        product = self.store.modify(PRODUCTS, product_id, lambda p: {"views": int(p.get("views") or 0) + 1})
        return {
            **product,
            "artisan": self._artisan_summary(product.get("artisanId"), detailed=True),
            "reviews": find_exact(self.store, REVIEWS, productId=product_id),
        }

    def categories(self) -> list[dict]:
        counts = Counter(p.get("category") for p in self.store.find_all(PRODUCTS, {"isActive": True}))
        return [{"name": name, "count": count} for name, count in counts.items()]

    def featured(self, limit: int = 8) -> list[dict]:
        products = sorted(self.store.find_all(PRODUCTS, {"isActive": True}), key=_popularity, reverse=True)
        return [self._with_artisan(product) for product in products[: max(0, limit)]]

    def artisan_products(self, artisan_id: str, *, status: str = "active", page: Any = 1, limit: Any = 20) -> Page:
        is_active = {"active": True, "inactive": False}.get(status)
        products = find_exact(self.store, PRODUCTS, artisanId=artisan_id, isActive=is_active)
        return paginate(sort_records(products, "createdAt", "desc"), page, limit)

    # -------------------------------------- writes --------------------------------------
    def create_product(self, actor: User, fields: dict) -> Product:
        if actor.get("role") != ROLE_ARTISAN:
            raise NotAuthorizedError("Only artisans can create products")
        title = (fields.get("title") or "").strip()
        if not title:
            raise InvalidRequestError("Product title is required", code="title_required")
        data = {key: value for key, value in fields.items() if key not in PROTECTED_FIELDS}
        data.update(
            {
                "title": title,
                "artisanId": actor.get("id"),
                "artisanName": full_name(actor),
                "sku": generate_sku(title, data.get("category") or ""),
                "isActive": True,
                "rating": 0,
                "reviewCount": 0,
                "views": 0,
                "likes": 0,
            }
        )
        return self.store.create(PRODUCTS, data)

    def update_product(self, actor: User, product_id: str, fields: dict) -> Product:
        product = self._require_product(product_id, active_only=False)
        self._require_owner(actor, product, "update")
        updates = {key: value for key, value in fields.items() if key not in PROTECTED_FIELDS}
        return self.store.update(PRODUCTS, product_id, updates)

    def deactivate_product(self, actor: User, product_id: str) -> Product:
        """Soft delete: the record stays in the collection with isActive=False."""
        product = self._require_product(product_id, active_only=False)
        self._require_owner(actor, product, "delete")
        return self.store.update(PRODUCTS, product_id, {"isActive": False, "deletedAt": utc_now_iso()})

    def toggle_wishlist(self, user_id: str, product_id: str) -> bool:
        """Add/remove the product from the buyer's wishlist. Returns True when it ends up wishlisted."""
        user = self.store.find_by_id(USERS, user_id)
        if not user or user.get("role") != ROLE_BUYER:
            raise NotAuthorizedError("Only buyers can add items to wishlist")
        self._require_product(product_id)
        outcome = {}

        def toggle(current: User) -> dict:
            wishlist = list(current.get("wishlist") or [])
            outcome["wishlisted"] = product_id not in wishlist
            if outcome["wishlisted"]:
                wishlist.append(product_id)
            else:
                wishlist = [pid for pid in wishlist if pid != product_id]
            return {"wishlist": wishlist}

        self.store.modify(USERS, user_id, toggle)
        delta = 1 if outcome["wishlisted"] else -1
        self.store.modify(PRODUCTS, product_id, lambda p: {"likes": max(0, int(p.get("likes") or 0) + delta)})
        return outcome["wishlisted"]
