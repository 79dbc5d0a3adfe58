"""
Typed views of the records kept in each collection.

The store itself works with plain dicts; these TypedDicts describe the fields
services read and write so typos are caught by type checkers. They are
total=False since older files may miss optional fields, and unknown keys
still pass through untouched at runtime.
"""
from __future__ import annotations

from typing import Any, List, Optional, TypedDict

USERS = "users"
PRODUCTS = "products"
ORDERS = "orders"
CONVERSATIONS = "conversations"
ARTISANS = "artisans"
REVIEWS = "reviews"
WORKSHOPS = "workshops"

COLLECTIONS = (USERS, PRODUCTS, ORDERS, CONVERSATIONS, ARTISANS, REVIEWS, WORKSHOPS)

ROLE_BUYER = "buyer"
ROLE_ARTISAN = "artisan"
ROLE_ADMIN = "admin"

ORDER_STATUS_PENDING = "pending"
ORDER_STATUS_CONFIRMED = "confirmed"
ORDER_STATUS_CANCELLED = "cancelled"

PAYMENT_STATUS_PENDING = "pending"
PAYMENT_STATUS_COMPLETED = "completed"
PAYMENT_STATUS_FAILED = "failed"


class Record(TypedDict, total=False):
    id: str
    createdAt: str
    updatedAt: str


class ArtisanProfile(TypedDict, total=False):
    heritage: str
    experience: int
    specialties: List[str]
    rating: float
    totalOrders: int


class User(Record, total=False):
    email: str
    password: str
    firstName: str
    lastName: str
    role: str
    avatar: str
    location: str
    craftType: str
    interests: List[str]
    wishlist: List[str]
    isVerified: bool
    isActive: bool
    artisanProfile: ArtisanProfile
    culturalPassport: dict


class Product(Record, total=False):
    title: str
    description: str
    price: float
    originalPrice: float
    currency: str
    category: str
    subcategory: str
    region: str
    country: str
    artisanId: str
    artisanName: str
    sku: str
    images: List[str]
    inStock: int
    lowStockThreshold: int
    rating: float
    reviewCount: int
    views: int
    likes: int
    tags: List[str]
    materials: List[str]
    techniques: List[str]
    culturalStory: str
    isActive: bool
    deletedAt: str


class OrderItem(TypedDict, total=False):
    productId: str
    artisanId: str
    title: str
    description: str
    quantity: int
    price: float
    images: List[str]


class Payment(TypedDict, total=False):
    method: str
    status: str
    currency: str
    reference: str
    transactionId: str
    paidAt: str


class Order(Record, total=False):
    orderNumber: str
    buyerId: str
    items: List[OrderItem]
    pricing: dict
    shipping: dict
    payment: Payment
    status: str
    total: float


class Review(Record, total=False):
    productId: str
    userId: str
    rating: float
    comment: str


class Conversation(Record, total=False):
    userId: str
    type: str
    messages: List[dict]
    context: Optional[Any]


class Workshop(Record, total=False):
    title: str
    artisanId: str
    date: str
    capacity: int
    attendees: List[str]
    isActive: bool


def full_name(user: User) -> str:
    return f"{user.get('firstName', '')} {user.get('lastName', '')}".strip()
