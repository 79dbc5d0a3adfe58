"""
Utility helpers shared across routers/services.
"""

from __future__ import annotations

import re
import secrets
import string
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

_BASE36 = string.digits + string.ascii_lowercase


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 string (Z or offset) into an aware datetime.
    Returns None for empty or unparseable values.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def generate_id() -> str:
    return str(uuid.uuid4())


def generate_response(success: bool, data: Any = None, message: str = "", **metadata: Any) -> dict:
    """Standard JSON envelope returned by every API route."""
    return {
        "success": success,
        "message": message,
        "data": data,
        "timestamp": utc_now_iso(),
        **metadata,
    }


def _base36(number: int) -> str:
    if number <= 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def _random_base36(length: int) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def generate_order_number() -> str:
    """Ex.: AV-LZ3K9Q1A-X7P2M"""
    timestamp = _base36(int(time.time() * 1000))
    return f"AV-{timestamp}-{_random_base36(5)}".upper()


def generate_sku(title: str, category: str) -> str:
    category_code = (category or "")[:3].upper()
    title_code = re.sub(r"[^a-zA-Z0-9]", "", title or "")[:5].upper()
    return f"{category_code}-{title_code}-{_random_base36(4).upper()}"


def calculate_shipping(items: Iterable[Mapping[str, Any]], destination: str = "domestic") -> float:
    items = list(items)
    base_shipping = 25.00 if destination == "international" else 9.99
    weight_factor = sum(int(item.get("quantity") or 0) * 0.5 for item in items)
    item_factor = len(items) * 2.00
    return round(base_shipping + weight_factor + item_factor, 2)


def calculate_rating(reviews: Iterable[Mapping[str, Any]]) -> float:
    ratings = [float(review.get("rating") or 0) for review in reviews]
    if not ratings:
        return 0
    return round(sum(ratings) / len(ratings), 1)
