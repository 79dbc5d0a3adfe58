"""
User lookups, public profiles and marketplace-wide counters.
"""

from __future__ import annotations

from typing import Optional

from artisanverse.domain.records import (
    ORDERS,
    PRODUCTS,
    ROLE_ADMIN,
    ROLE_ARTISAN,
    ROLE_BUYER,
    USERS,
    User,
    full_name,
)
from artisanverse.repositories.json_storage import RecordStore


def can_see_email(owner: User, viewer: Optional[User]) -> bool:
    if not viewer:
        return False
    return viewer.get("role") == ROLE_ADMIN or viewer.get("id") == owner.get("id")


def public_profile(user: User, viewer: Optional[User] = None) -> dict:
    """Strip credentials (and the e-mail unless the viewer is admin or the user) and add fullName."""
    profile = {key: value for key, value in user.items() if key not in ("password", "email")}
    profile["fullName"] = full_name(user)
    if can_see_email(user, viewer):
        profile["email"] = user.get("email")
    return profile


class UserService:
    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def get(self, user_id: str) -> Optional[User]:
        return self.store.find_by_id(USERS, user_id)

    def find_by_email(self, email: str | None) -> Optional[User]:
        wanted = (email or "").strip().lower()
        if not wanted:
            return None
        for user in self.store.find_all(USERS, {"email": wanted}):
            if (user.get("email") or "").lower() == wanted:
                return user
        return None

    def analytics(self) -> dict:
        users = list(self.store.find_all(USERS))
        products = self.store.count(PRODUCTS, {"isActive": True})
        orders = list(self.store.find_all(ORDERS))
        return {
            "totalUsers": len(users),
            "totalBuyers": sum(1 for u in users if u.get("role") == ROLE_BUYER),
            "totalArtisans": sum(1 for u in users if u.get("role") == ROLE_ARTISAN),
            "totalProducts": products,
            "totalOrders": len(orders),
            "totalRevenue": round(sum(_order_total(order) for order in orders), 2),
        }


def _order_total(order: dict) -> float:
    total = order.get("total")
    if total is None:
        total = (order.get("pricing") or {}).get("total")
    try:
        return float(total or 0)
    except (TypeError, ValueError):
        return 0.0
