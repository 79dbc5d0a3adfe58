from __future__ import annotations

import sys
from pathlib import Path

# Make the artisanverse package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from artisanverse.domain.pagination import paginate, positive_int  # noqa: E402


def test_middle_page_of_97_items():
    page = paginate(list(range(1, 98)), page=3, limit=20)

    assert page.items == list(range(41, 61))
    assert page.pagination == {
        "currentPage": 3,
        "totalPages": 5,
        "totalItems": 97,
        "hasNext": True,
        "hasPrev": True,
    }


def test_last_partial_page():
    page = paginate(list(range(1, 98)), page=5, limit=20)

    assert page.items == list(range(81, 98))
    assert page.has_next is False
    assert page.has_prev is True


def test_empty_input():
    page = paginate([], page=1, limit=20)

    assert page.items == []
    assert page.total_pages == 0
    assert page.has_next is False
    assert page.has_prev is False


def test_out_of_range_page_is_empty_not_an_error():
    page = paginate(list(range(10)), page=7, limit=5)

    assert page.items == []
    assert page.current_page == 7
    assert page.total_pages == 2


def test_page_and_limit_are_normalised():
    page = paginate(list(range(30)), page="0", limit="-4")
    assert page.current_page == 1
    assert page.items == [0]

    page = paginate(list(range(30)), page="2", limit="10")
    assert page.items == list(range(10, 20))

    page = paginate(list(range(30)), page="abc", limit=None)
    assert page.current_page == 1
    assert len(page.items) == 20


def test_accepts_any_iterable_and_serialises():
    page = paginate((n for n in range(3)), page=1, limit=2)
    assert page.to_dict() == {
        "items": [0, 1],
        "pagination": {
            "currentPage": 1,
            "totalPages": 2,
            "totalItems": 3,
            "hasNext": True,
            "hasPrev": False,
        },
    }


def test_positive_int():
    assert positive_int("12", 20) == 12
    assert positive_int(0, 20) == 1
    assert positive_int("x", 20) == 20
    assert positive_int("x", 0) == 1
