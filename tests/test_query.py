from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the artisanverse package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from artisanverse.domain.query import (  # noqa: E402
    matches,
    parse_search_query,
    sort_records,
    stringify,
    within_price_range,
)

PRODUCT = {
    "id": "product_001",
    "title": "Royal Peacock Saree",
    "price": 285,
    "weight": 5.0,
    "isActive": True,
    "tags": ["handmade", "royal"],
    "artisanId": "user_artisan_001",
}


def test_empty_filter_matches_everything():
    assert matches(PRODUCT, {})
    assert matches(PRODUCT, None)


def test_none_filter_value_is_no_constraint():
    assert matches(PRODUCT, {"category": None, "title": "peacock"})


@pytest.mark.parametrize(
    "filters",
    [
        {"title": "PEACOCK"},
        {"title": "royal p"},
        {"price": "28"},
        {"weight": "5"},
        {"isActive": "true"},
        {"tags": "royal"},
        {"artisanId": "artisan"},
    ],
)
def test_string_filters_match_by_case_insensitive_substring(filters):
    assert matches(PRODUCT, filters)


def test_string_filter_never_matches_missing_field():
    assert not matches(PRODUCT, {"category": "Textiles"})
    assert not matches({"category": None}, {"category": ""})


def test_non_string_filters_need_exact_equality():
    assert matches(PRODUCT, {"price": 285, "isActive": True})
    assert not matches(PRODUCT, {"price": 284})
    assert not matches({"flag": 1}, {"flag": True})
    assert not matches({"flag": True}, {"flag": 1})
    assert matches({"price": 5.0}, {"price": 5})


def test_every_key_must_match():
    assert not matches(PRODUCT, {"title": "peacock", "price": 1})


def test_stringify_mirrors_json_rendering():
    assert stringify(True) == "true"
    assert stringify(3.0) == "3"
    assert stringify(3.5) == "3.5"
    assert stringify(["a", 1, False]) == "a,1,false"
    assert stringify(None) is None
    assert stringify({"city": "Jaipur", "zip": 302001}) == '{"city": "Jaipur", "zip": 302001}'
    assert matches({"address": {"city": "Jaipur"}}, {"address": "jaipur"})


def test_sort_records_by_created_at_desc_handles_mixed_formats():
    records = [
        {"id": "old", "createdAt": "2024-01-01T00:00:00.000Z"},
        {"id": "new", "createdAt": "2024-06-01T12:00:00+00:00"},
        {"id": "mid", "createdAt": "2024-03-01T00:00:00Z"},
    ]
    assert [r["id"] for r in sort_records(records)] == ["new", "mid", "old"]
    assert [r["id"] for r in sort_records(records, "createdAt", "asc")] == ["old", "mid", "new"]


def test_sort_records_puts_missing_values_last_in_both_directions():
    records = [{"id": "a", "price": 3}, {"id": "b"}, {"id": "c", "price": 1}]
    assert [r["id"] for r in sort_records(records, "price", "asc")] == ["c", "a", "b"]
    assert [r["id"] for r in sort_records(records, "price", "desc")] == ["a", "c", "b"]


def test_sort_records_is_stable_for_ties():
    records = [{"id": str(i), "rating": 4} for i in range(5)]
    assert [r["id"] for r in sort_records(records, "rating", "desc")] == ["0", "1", "2", "3", "4"]


def test_sort_records_tolerates_mixed_types():
    records = [{"id": "a", "price": "n/a"}, {"id": "b", "price": 10}]
    assert [r["id"] for r in sort_records(records, "price", "asc")] == ["b", "a"]


def test_parse_search_query_splits_terms():
    query = parse_search_query("  Silk   SAREE ")
    assert query.terms == ["silk", "saree"]
    assert query.matches("hand printed saree")
    assert not query.matches("wooden bowl")
    assert parse_search_query(None).terms == []
    assert parse_search_query("").matches("anything")


def test_within_price_range():
    assert within_price_range({"price": 50}, 10, 100)
    assert within_price_range({"price": 50}, None, None)
    assert not within_price_range({"price": 5}, 10, None)
    assert not within_price_range({"price": 500}, None, 100)
    assert not within_price_range({}, 10, None)
