"""
Order bookkeeping: placing orders, recording payment outcomes, listing orders.

Payment processing itself happens outside this service; it only records the
result handed back by whoever talked to the provider.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Optional, Union

from artisanverse.core.utils import calculate_shipping, generate_order_number, utc_now_iso
from artisanverse.domain.query import sort_records
from artisanverse.domain.records import (
    ORDER_STATUS_CANCELLED,
    ORDER_STATUS_CONFIRMED,
    ORDER_STATUS_PENDING,
    ORDERS,
    PAYMENT_STATUS_COMPLETED,
    PAYMENT_STATUS_FAILED,
    PAYMENT_STATUS_PENDING,
    PRODUCTS,
    ROLE_ARTISAN,
    ROLE_BUYER,
    Order,
    User,
)
from artisanverse.repositories.json_storage import RecordNotFoundError, RecordStore
from artisanverse.services.errors import (
    InsufficientStockError,
    InvalidRequestError,
    NotAuthorizedError,
    ProductUnavailableError,
)
from artisanverse.services.lookups import find_exact

CURRENCY = "USD"
DESCRIPTION_PREVIEW = 200


@dataclass
class OrderLine:
    product_id: str
    quantity: int


def _parse_lines(items: Iterable[Mapping]) -> list[OrderLine]:
    lines = []
    for item in items or []:
        product_id = (item.get("productId") or "").strip()
        try:
            quantity = int(item.get("quantity") or 0)
        except (TypeError, ValueError):
            quantity = 0
        if not product_id or quantity < 1:
            raise InvalidRequestError("Each item needs a productId and a positive quantity", code="invalid_item")
        lines.append(OrderLine(product_id, quantity))
    if not lines:
        raise InvalidRequestError("Order has no items", code="empty_order")
    return lines


class OrderService:
    def __init__(self, store: RecordStore, tax_rate: float = 0.08) -> None:
        self.store = store
        self.tax_rate = tax_rate

    def _require_order(self, order_id: str) -> Order:
        order = self.store.find_by_id(ORDERS, order_id)
        if not order:
            raise RecordNotFoundError(ORDERS, order_id)
        return order

    def place_order(
        self,
        buyer: User,
        items: Iterable[Mapping],
        shipping_address: Optional[Mapping] = None,
        payment_method: str = "stripe",
    ) -> Order:
        if buyer.get("role") != ROLE_BUYER:
            raise NotAuthorizedError("Only buyers can place orders")
        order_items = []
        subtotal = 0.0
        requested: dict[str, int] = {}
        for line in _parse_lines(items):
            product = self.store.find_by_id(PRODUCTS, line.product_id)
            if not product or not product.get("isActive"):
                raise ProductUnavailableError(f"Product {line.product_id} is not available", status_code=400)
            requested[line.product_id] = requested.get(line.product_id, 0) + line.quantity
            if int(product.get("inStock") or 0) < requested[line.product_id]:
                raise InsufficientStockError(f"Insufficient stock for {product.get('title')}")
            price = float(product.get("price") or 0)
            subtotal += price * line.quantity
            order_items.append(
                {
                    "productId": product["id"],
                    "artisanId": product.get("artisanId"),
                    "title": product.get("title"),
                    "description": (product.get("description") or "")[:DESCRIPTION_PREVIEW],
                    "quantity": line.quantity,
                    "price": price,
                    "images": (product.get("images") or [])[:1],
                }
            )

        address = dict(shipping_address or {})
        destination = "domestic" if address.get("country") == "US" else "international"
        shipping_cost = calculate_shipping(order_items, destination)
        tax = subtotal * self.tax_rate
        total = round(subtotal + shipping_cost + tax, 2)
        return self.store.create(
            ORDERS,
            {
                "orderNumber": generate_order_number(),
                "buyerId": buyer.get("id"),
                "items": order_items,
                "pricing": {
                    "subtotal": round(subtotal, 2),
                    "shipping": shipping_cost,
                    "tax": round(tax, 2),
                    "total": total,
                    "currency": CURRENCY,
                },
                "shipping": {"address": address, "cost": shipping_cost},
                "payment": {"method": payment_method, "status": PAYMENT_STATUS_PENDING, "currency": CURRENCY},
                "status": ORDER_STATUS_PENDING,
                "total": total,
            },
        )

    def attach_payment_reference(self, order_id: str, reference: str) -> Order:
        self._require_order(order_id)
        return self.store.update(ORDERS, order_id, {"payment.reference": reference}, expand_dotted=True)

    def _transition(self, order_id: str, patch: Union[dict, Callable[[Order], dict]], action: str) -> Order:
        """Apply `patch` to a pending order whose payment is still open, atomically."""

        def guarded(order: Order) -> dict:
            payment_status = (order.get("payment") or {}).get("status")
            if order.get("status") != ORDER_STATUS_PENDING or payment_status != PAYMENT_STATUS_PENDING:
                raise InvalidRequestError(
                    f"Cannot {action} order in status {order.get('status')}",
                    code="invalid_order_state",
                    status_code=409,
                )
            return patch(order) if callable(patch) else patch

        return self.store.modify(ORDERS, order_id, guarded, expand_dotted=True)

    def mark_paid(self, order_id: str, transaction_id: str | None = None) -> Order:
        """Record a successful payment, confirm the order and take the items out of stock."""
        self._require_order(order_id)
        paid = self._transition(
            order_id,
            lambda order: {
                "payment.status": PAYMENT_STATUS_COMPLETED,
                "payment.transactionId": transaction_id or f"txn_{order.get('orderNumber', order_id)}",
                "payment.paidAt": utc_now_iso(),
                "status": ORDER_STATUS_CONFIRMED,
            },
            "confirm",
        )
        for item in paid.get("items") or []:
            product_id = item.get("productId")
            quantity = int(item.get("quantity") or 0)
            if self.store.find_by_id(PRODUCTS, product_id):
                self.store.modify(
                    PRODUCTS,
                    product_id,
                    lambda p, quantity=quantity: {"inStock": max(0, int(p.get("inStock") or 0) - quantity)},
                )
        return paid

    def mark_failed(self, order_id: str) -> Order:
        self._require_order(order_id)
        return self._transition(
            order_id,
            {"payment.status": PAYMENT_STATUS_FAILED, "status": ORDER_STATUS_CANCELLED},
            "cancel",
        )

    def orders_for(self, user: User, status: str | None = None) -> list[Order]:
        """Buyers see their own orders; artisans see orders containing their products."""
        role = user.get("role")
        if role == ROLE_BUYER:
            orders = find_exact(self.store, ORDERS, buyerId=user.get("id"), status=status or None)
        elif role == ROLE_ARTISAN:
            orders = [
                order
                for order in self.store.find_all(ORDERS)
                if any(item.get("artisanId") == user.get("id") for item in order.get("items") or [])
                and (not status or order.get("status") == status)
            ]
        else:
            raise NotAuthorizedError("Not authorized to view orders")
        return sort_records(orders, "createdAt", "desc")
