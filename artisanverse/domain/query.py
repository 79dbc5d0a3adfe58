"""
Record matching and ordering helpers used by the store and the services.

Matching rule (shared by every find_* call):
- filter value None -> no constraint for that key;
- string value -> case-insensitive substring of the stringified field;
- anything else -> strict equality (booleans never equal numbers).
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from artisanverse.core.utils import parse_timestamp

DATE_FIELDS = {"createdAt", "updatedAt", "deletedAt", "paidAt"}


def stringify(value: Any) -> Optional[str]:
    """Render a field the way it looks once serialized (true/false, 5 not 5.0, a,b for lists, JSON for objects)."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(item) or "" for item in value)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def _equals(actual: Any, expected: Any) -> bool:
    if isinstance(actual, bool) or isinstance(expected, bool):
        return isinstance(actual, bool) and isinstance(expected, bool) and actual is expected
    return actual == expected


def field_matches(actual: Any, expected: Any) -> bool:
    if expected is None:
        return True
    if isinstance(expected, str):
        rendered = stringify(actual)
        if rendered is None:
            return False
        return expected.lower() in rendered.lower()
    return _equals(actual, expected)


def matches(record: Mapping[str, Any], filters: Optional[Mapping[str, Any]]) -> bool:
    """True when every key of `filters` matches the same-named field of `record`."""
    if not filters:
        return True
    return all(field_matches(record.get(key), expected) for key, expected in filters.items())


def _sort_key(sort_by: str, value: Any) -> tuple:
    if sort_by in DATE_FIELDS:
        parsed = parse_timestamp(value)
        if parsed is not None:
            return (0, parsed.timestamp())
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, (int, float)):
        return (0, value)
    return (1, stringify(value) or "")


def sort_records(records: Iterable[dict], sort_by: str = "createdAt", order: str = "desc") -> list[dict]:
    """
    Stable sort on a single field. Date fields compare chronologically and
    records without the field always go last, whatever the direction.
    """
    present: list[dict] = []
    missing: list[dict] = []
    for record in records:
        (missing if record.get(sort_by) is None else present).append(record)
    descending = (order or "desc").lower() == "desc"
    present.sort(key=lambda r: _sort_key(sort_by, r.get(sort_by)), reverse=descending)
    return present + missing


@dataclass
class SearchQuery:
    terms: list[str] = field(default_factory=list)
    exact: str = ""

    def matches(self, text: str) -> bool:
        if not self.terms:
            return True
        haystack = (text or "").lower()
        return any(term in haystack for term in self.terms)


def parse_search_query(query: Optional[str]) -> SearchQuery:
    if not query or not isinstance(query, str):
        return SearchQuery()
    lowered = query.lower()
    return SearchQuery(terms=[term for term in lowered.split() if term], exact=lowered)


def within_price_range(record: Mapping[str, Any], min_price: Optional[float], max_price: Optional[float]) -> bool:
    price = record.get("price")
    if min_price is None and max_price is None:
        return True
    if not isinstance(price, (int, float)) or isinstance(price, bool):
        return False
    if min_price is not None and price < min_price:
        return False
    if max_price is not None and price > max_price:
        return False
    return True
