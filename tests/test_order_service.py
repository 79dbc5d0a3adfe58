from __future__ import annotations

import sys
import threading
from pathlib import Path

import pytest

# Make the artisanverse package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from artisanverse.repositories.json_storage import RecordNotFoundError, RecordStore  # noqa: E402
from artisanverse.services.errors import (  # noqa: E402
    InsufficientStockError,
    InvalidRequestError,
    NotAuthorizedError,
    ProductUnavailableError,
)
from artisanverse.services.order_service import OrderService  # noqa: E402
from artisanverse.services.user_service import UserService  # noqa: E402


@pytest.fixture()
def store(tmp_path):
    s = RecordStore(tmp_path / "data")
    s.initialize()
    return s


@pytest.fixture()
def svc(store):
    return OrderService(store, tax_rate=0.08)


@pytest.fixture()
def buyer(store):
    return store.find_by_id("users", "user_buyer_001")


def _place(svc, buyer, quantity=1, country="US"):
    return svc.place_order(buyer, [{"productId": "product_001", "quantity": quantity}], {"country": country})


def test_place_order_computes_pricing(svc, buyer):
    order = _place(svc, buyer)

    assert order["orderNumber"].startswith("AV-")
    assert order["status"] == "pending"
    assert order["payment"] == {"method": "stripe", "status": "pending", "currency": "USD"}
    assert order["pricing"]["subtotal"] == 285
    assert order["pricing"]["shipping"] == 12.49
    assert order["pricing"]["tax"] == 22.8
    assert order["pricing"]["total"] == 320.29
    assert order["items"][0]["artisanId"] == "user_artisan_001"
    assert len(order["items"][0]["images"]) == 1


def test_international_shipping(svc, buyer):
    order = _place(svc, buyer, quantity=2, country="IN")
    assert order["pricing"]["shipping"] == 28.0


def test_place_order_validations(svc, buyer, store):
    with pytest.raises(InsufficientStockError):
        _place(svc, buyer, quantity=6)
    with pytest.raises(ProductUnavailableError) as excinfo:
        svc.place_order(buyer, [{"productId": "ghost", "quantity": 1}])
    assert excinfo.value.status_code == 400
    with pytest.raises(InvalidRequestError):
        svc.place_order(buyer, [])
    with pytest.raises(InvalidRequestError):
        svc.place_order(buyer, [{"productId": "product_001", "quantity": 0}])
    with pytest.raises(NotAuthorizedError):
        _place(svc, store.find_by_id("users", "user_artisan_001"))
    assert store.count("orders") == 0


def test_payment_reference_is_stored_as_nested_field(svc, buyer):
    order = _place(svc, buyer)

    updated = svc.attach_payment_reference(order["id"], "pi_123")

    assert updated["payment"]["reference"] == "pi_123"
    assert updated["payment"]["method"] == "stripe"
    assert "payment.reference" not in updated


def test_mark_paid_confirms_and_takes_stock(svc, buyer, store):
    order = _place(svc, buyer, quantity=2)

    paid = svc.mark_paid(order["id"], transaction_id="txn_1")

    assert paid["status"] == "confirmed"
    assert paid["payment"]["status"] == "completed"
    assert paid["payment"]["transactionId"] == "txn_1"
    assert paid["payment"]["paidAt"]
    assert paid["payment"]["method"] == "stripe"
    assert paid["createdAt"] == order["createdAt"]
    assert store.find_by_id("products", "product_001")["inStock"] == 3


def test_mark_failed_cancels(svc, buyer, store):
    order = _place(svc, buyer)

    failed = svc.mark_failed(order["id"])

    assert failed["status"] == "cancelled"
    assert failed["payment"]["status"] == "failed"
    assert store.find_by_id("products", "product_001")["inStock"] == 5


def test_unknown_order_raises_not_found(svc):
    with pytest.raises(RecordNotFoundError):
        svc.mark_paid("missing")


def test_orders_for_each_role(svc, buyer, store):
    first = _place(svc, buyer)
    second = _place(svc, buyer)
    svc.mark_failed(first["id"])

    assert {o["id"] for o in svc.orders_for(buyer)} == {first["id"], second["id"]}
    assert [o["id"] for o in svc.orders_for(buyer, status="cancelled")] == [first["id"]]
    artisan = store.find_by_id("users", "user_artisan_001")
    assert len(svc.orders_for(artisan)) == 2
    assert [o["id"] for o in svc.orders_for(artisan, status="pending")] == [second["id"]]
    with pytest.raises(NotAuthorizedError):
        svc.orders_for(store.find_by_id("users", "user_admin_001"))


def test_marketplace_analytics(svc, buyer, store):
    _place(svc, buyer)
    users = UserService(store)

    stats = users.analytics()

    assert stats == {
        "totalUsers": 3,
        "totalBuyers": 1,
        "totalArtisans": 1,
        "totalProducts": 1,
        "totalOrders": 1,
        "totalRevenue": 320.29,
    }


def test_find_user_by_email_is_exact_and_case_insensitive(store):
    users = UserService(store)

    assert users.find_by_email("MEERA@example.com")["id"] == "user_artisan_001"
    assert users.find_by_email("eera@example.com") is None
    assert users.find_by_email("") is None


def test_repeated_lines_for_one_product_share_its_stock(svc, buyer, store):
    lines = [{"productId": "product_001", "quantity": 3}, {"productId": "product_001", "quantity": 3}]

    with pytest.raises(InsufficientStockError):
        svc.place_order(buyer, lines, {"country": "US"})
    assert store.count("orders") == 0

    lines[1]["quantity"] = 2
    order = svc.place_order(buyer, lines, {"country": "US"})
    assert sum(item["quantity"] for item in order["items"]) == 5


def test_mark_paid_twice_is_rejected_and_stock_taken_once(svc, buyer, store):
    order = _place(svc, buyer, quantity=2)
    svc.mark_paid(order["id"], transaction_id="txn_1")

    with pytest.raises(InvalidRequestError) as excinfo:
        svc.mark_paid(order["id"], transaction_id="txn_2")

    assert excinfo.value.status_code == 409
    assert store.find_by_id("products", "product_001")["inStock"] == 3
    assert store.find_by_id("orders", order["id"])["payment"]["transactionId"] == "txn_1"


def test_cancelled_order_cannot_be_paid(svc, buyer, store):
    order = _place(svc, buyer, quantity=2)
    svc.mark_failed(order["id"])

    with pytest.raises(InvalidRequestError):
        svc.mark_paid(order["id"])

    saved = store.find_by_id("orders", order["id"])
    assert saved["status"] == "cancelled"
    assert saved["payment"]["status"] == "failed"
    assert store.find_by_id("products", "product_001")["inStock"] == 5


def test_paid_order_cannot_be_marked_failed(svc, buyer, store):
    order = _place(svc, buyer)
    svc.mark_paid(order["id"])

    with pytest.raises(InvalidRequestError):
        svc.mark_failed(order["id"])
    assert store.find_by_id("orders", order["id"])["status"] == "confirmed"


def test_concurrent_payments_take_stock_once_per_order(svc, buyer, store):
    orders = [_place(svc, buyer) for _ in range(5)]
    outcomes = []

    def pay(order_id: str) -> None:
        try:
            svc.mark_paid(order_id)
            outcomes.append("paid")
        except InvalidRequestError:
            outcomes.append("rejected")

    # every order is paid twice in parallel; only one attempt per order wins
    threads = [threading.Thread(target=pay, args=(o["id"],)) for o in orders for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("paid") == 5
    assert outcomes.count("rejected") == 5
    assert store.find_by_id("products", "product_001")["inStock"] == 0
