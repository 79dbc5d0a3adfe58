"""Page slicing for already filtered and sorted sequences."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Sequence

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20


def positive_int(value: Any, default: int) -> int:
    """Coerce query-string style values to an int >= 1, falling back to `default`."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return max(1, default)
    return max(1, number)


@dataclass
class Page:
    items: list
    current_page: int
    total_pages: int
    total_items: int
    has_next: bool
    has_prev: bool

    @property
    def pagination(self) -> dict:
        return {
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "totalItems": self.total_items,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }

    def to_dict(self) -> dict:
        return {"items": self.items, "pagination": self.pagination}


def paginate(items: Sequence, page: Any = DEFAULT_PAGE, limit: Any = DEFAULT_LIMIT) -> Page:
    page = positive_int(page, DEFAULT_PAGE)
    limit = positive_int(limit, DEFAULT_LIMIT)
    items = list(items)
    total = len(items)
    offset = (page - 1) * limit
    return Page(
        items=items[offset : offset + limit],
        current_page=page,
        total_pages=math.ceil(total / limit),
        total_items=total,
        has_next=offset + limit < total,
        has_prev=page > 1,
    )
