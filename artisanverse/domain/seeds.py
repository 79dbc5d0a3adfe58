"""
Seed data written the first time a collection file does not exist.
"""
from __future__ import annotations

import copy
from typing import Callable, Dict, List

from artisanverse.core.utils import utc_now_iso
from artisanverse.domain.records import PRODUCTS, USERS

SeedProvider = Callable[[str], List[dict]]

# bcrypt hash of "password123"; login itself lives outside this service
_DEMO_PASSWORD_HASH = "$2a$10$rOzJqW6tLGXYGDnlNwPr..PgHgXvxgNZ8J8hQiUzQgHi"

_SEEDS: Dict[str, List[dict]] = {
    USERS: [
        {
            "id": "user_buyer_001",
            "email": "sarah@example.com",
            "password": _DEMO_PASSWORD_HASH,
            "firstName": "Sarah",
            "lastName": "Johnson",
            "role": "buyer",
            "avatar": "https://images.unsplash.com/photo-1494790108755-2616b612b5b4?w=150&h=150&fit=crop&crop=face",
            "location": "San Francisco, CA",
            "interests": ["textiles", "jewelry", "home decor"],
            "isVerified": True,
            "isActive": True,
            "culturalPassport": {
                "points": 245,
                "regionsExplored": ["South Asia", "West Africa"],
                "achievements": ["Cultural Explorer", "Textile Enthusiast"],
            },
        },
        {
            "id": "user_artisan_001",
            "email": "meera@example.com",
            "password": _DEMO_PASSWORD_HASH,
            "firstName": "Meera",
            "lastName": "Sharma",
            "role": "artisan",
            "avatar": "https://images.unsplash.com/photo-1594736797933-d0c4e9e6bf43?w=150&h=150&fit=crop&crop=face",
            "location": "Jaipur, India",
            "craftType": "Block Printing",
            "isVerified": True,
            "isActive": True,
            "artisanProfile": {
                "heritage": "5th generation block printer preserving 300-year-old family techniques",
                "experience": 15,
                "specialties": ["Natural Dyes", "Bagru Printing", "Traditional Motifs"],
                "rating": 4.9,
                "totalOrders": 347,
            },
        },
        {
            "id": "user_admin_001",
            "email": "admin@example.com",
            "password": _DEMO_PASSWORD_HASH,
            "firstName": "Admin",
            "lastName": "User",
            "role": "admin",
            "avatar": "https://images.unsplash.com/photo-1472099645785-5658abf4ff4e?w=150&h=150&fit=crop&crop=face",
            "isVerified": True,
            "isActive": True,
        },
    ],
    PRODUCTS: [
        {
            "id": "product_001",
            "title": "Royal Peacock Mandala Block Print Saree",
            "description": (
                "Hand-block printed on pure silk with natural indigo and turmeric dyes. Features traditional "
                "peacock motifs symbolizing grace and beauty in Indian culture."
            ),
            "price": 285,
            "originalPrice": 350,
            "currency": "USD",
            "category": "Textiles",
            "subcategory": "Sarees",
            "region": "South Asia",
            "country": "India",
            "artisanId": "user_artisan_001",
            "images": [
                "https://images.unsplash.com/photo-1610030469983-98e550d6193c?w=600&h=600&fit=crop",
                "https://images.unsplash.com/photo-1594736797933-d0c4e9e6bf43?w=600&h=600&fit=crop",
            ],
            "inStock": 5,
            "rating": 4.9,
            "reviewCount": 47,
            "tags": ["handmade", "sustainable", "traditional", "royal", "ceremonial"],
            "culturalStory": (
                "The peacock has been sacred in Indian culture for millennia, representing the divine beauty of creation."
            ),
            "materials": ["Pure Silk", "Natural Indigo", "Turmeric Dye"],
            "techniques": ["Hand Block Printing", "Natural Dyeing", "Sun Drying"],
            "timeToMake": "15 days",
            "isActive": True,
        }
    ],
}


def initial_data(collection: str) -> List[dict]:
    """Fresh copy of the seed list for `collection` (empty when there is none)."""
    now = utc_now_iso()
    records = copy.deepcopy(_SEEDS.get(collection, []))
    for record in records:
        record.setdefault("createdAt", now)
        record.setdefault("updatedAt", now)
    return records


def no_seeds(collection: str) -> List[dict]:
    return []
