# backend/tooladmin/services/order_service.py
"""
Order Service

TOTALS: For every order, total_amount == subtotal + tax_amount + shipping_amount,
and for every line, total_price == quantity * unit_price. The database does not
check either; this module computes them on every write. Amounts sent by the
client are accepted only if they agree with the computed value (to the cent).

STATUS: pending -> confirmed -> processing -> shipped -> delivered, with
cancelled and returned reachable from any state before delivered. Anything
else is an InvalidTransition. Setting the current status again is a no-op.

ATOMICITY: An order and its items are inserted in one transaction.
"""
from __future__ import annotations

import secrets
from decimal import Decimal
from typing import Any

from flask import current_app
from sqlalchemy.orm import selectinload

from ..errors import InvalidTransition, ValidationError
from ..extensions import db
from ..models import Customer, Order, OrderItem, OrderStatus, OrderType, Product
from ..models.columns import money
from ..time_utils import utcnow
from ..validation import parse_decimal, MAX_PRICE
from .transactions import atomic, get_or_404


ORDER_NUMBER_CONFLICT = "Order number already exists"
TOLERANCE = Decimal("0.01")
ZERO = Decimal("0.00")

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED, OrderStatus.RETURNED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED, OrderStatus.RETURNED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED, OrderStatus.RETURNED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.RETURNED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.RETURNED: frozenset(),
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target == current or target in ALLOWED_TRANSITIONS[current]


def generate_order_number() -> str:
    """ORD-YYYYMMDD-XXXXXX"""
    return f"ORD-{utcnow():%Y%m%d}-{secrets.token_hex(3).upper()}"


def _agrees(supplied: Decimal | None, computed: Decimal) -> bool:
    return supplied is None or abs(supplied - computed) < TOLERANCE


def _parse_item(raw: Any, index: int) -> dict:
    field = f"items[{index}]"
    if not isinstance(raw, dict):
        raise ValidationError(f"{field} must be an object")

    product_id = raw.get("productId")
    if not isinstance(product_id, str) or not product_id.strip():
        raise ValidationError(f"{field}.productId is required", fields={f"{field}.productId": "required"})

    quantity = raw.get("quantity")
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError(f"{field}.quantity must be a positive integer", fields={f"{field}.quantity": "must be > 0"})

    unit_price = None
    if raw.get("unitPrice") is not None:
        unit_price = parse_decimal(raw["unitPrice"], f"{field}.unitPrice")
        if unit_price < 0 or unit_price > MAX_PRICE:
            raise ValidationError(f"{field}.unitPrice is out of range")

    total_price = None
    if raw.get("totalPrice") is not None:
        total_price = parse_decimal(raw["totalPrice"], f"{field}.totalPrice")

    return {
        "product_id": product_id.strip(),
        "quantity": quantity,
        "unit_price": unit_price,
        "total_price": total_price,
    }


def build_items(raw_items: Any) -> list[OrderItem]:
    """
    Turn the request's items array into OrderItem rows (not yet added).

    unitPrice defaults to the product's current selling price. A supplied
    totalPrice must equal quantity * unitPrice.
    """
    if not isinstance(raw_items, list):
        raise ValidationError("items must be an array")

    parsed = [_parse_item(raw, i) for i, raw in enumerate(raw_items)]
    product_ids = {p["product_id"] for p in parsed}
    products = {
        p.id: p for p in db.session.query(Product).filter(Product.id.in_(product_ids)).all()
    } if product_ids else {}

    items = []
    for i, entry in enumerate(parsed):
        product = products.get(entry["product_id"])
        if product is None:
            raise ValidationError(f"items[{i}].productId: unknown product", fields={f"items[{i}].productId": "unknown product"})

        unit_price = entry["unit_price"] if entry["unit_price"] is not None else Decimal(product.selling_price)
        line_total = (unit_price * entry["quantity"]).quantize(TOLERANCE)
        if not _agrees(entry["total_price"], line_total):
            raise ValidationError(
                f"items[{i}].totalPrice must equal quantity * unitPrice ({money(line_total)})",
                fields={f"items[{i}].totalPrice": f"expected {money(line_total)}"},
            )

        items.append(OrderItem(
            product_id=product.id,
            product_sku=product.sku,
            product_name=product.name,
            quantity=entry["quantity"],
            unit_price=unit_price,
            total_price=line_total,
        ))
    return items


def _settle_totals(order: Order, *, supplied_subtotal=None, supplied_total=None, items=None) -> None:
    """Recompute subtotal (from items, when given) and total; reject disagreeing client values."""
    if items is not None:
        subtotal = sum((Decimal(i.total_price) for i in items), ZERO)
        if not _agrees(supplied_subtotal, subtotal):
            raise ValidationError(
                f"subtotal must equal the sum of item totals ({money(subtotal)})",
                fields={"subtotal": f"expected {money(subtotal)}"},
            )
        order.subtotal = subtotal

    subtotal = Decimal(order.subtotal if order.subtotal is not None else 0)
    tax = Decimal(order.tax_amount if order.tax_amount is not None else 0)
    shipping = Decimal(order.shipping_amount if order.shipping_amount is not None else 0)
    total = (subtotal + tax + shipping).quantize(TOLERANCE)

    if not _agrees(supplied_total, total):
        raise ValidationError(
            f"totalAmount must equal subtotal + taxAmount + shippingAmount ({money(total)})",
            fields={"totalAmount": f"expected {money(total)}"},
        )

    order.subtotal = subtotal
    order.tax_amount = tax
    order.shipping_amount = shipping
    order.total_amount = total


# -- SERIALIZATION --

def order_to_dict(order: Order, *, include_items: bool = False) -> dict:
    data = order.to_dict()
    data["customer"] = order.customer.to_dict() if order.customer is not None else None
    if include_items:
        data["items"] = [item.to_dict() for item in order.items]
    return data


# -- READS --

def list_orders(
    *,
    status: OrderStatus | None = None,
    customer_id: str | None = None,
    order_type: OrderType | None = None,
) -> list[Order]:
    # Customers are loaded with one extra IN query, not one per order
    query = db.session.query(Order).options(selectinload(Order.customer))
    if status is not None:
        query = query.filter(Order.status == status)
    if customer_id:
        query = query.filter(Order.customer_id == customer_id)
    if order_type is not None:
        query = query.filter(Order.order_type == order_type)
    return query.order_by(Order.created_at.desc(), Order.id.asc()).all()


def recent_orders(limit: int | None = None) -> list[Order]:
    if limit is None:
        limit = current_app.config["RECENT_ORDERS_LIMIT"]
    return (
        db.session.query(Order)
        .options(selectinload(Order.customer))
        .order_by(Order.created_at.desc(), Order.id.asc())
        .limit(limit)
        .all()
    )


def get_order(order_id: str) -> Order:
    return get_or_404(Order, order_id, "Order")


# -- WRITES --

def create_order(*, patch: dict, raw_items: Any = None) -> Order:
    """
    Create an order, and its items if raw_items is given, in one transaction.
    """
    if db.session.get(Customer, patch["customer_id"]) is None:
        raise ValidationError("Unknown customer", fields={"customerId": "unknown customer"})

    supplied_subtotal = patch.pop("subtotal", None)
    supplied_total = patch.pop("total_amount", None)

    items = build_items(raw_items) if raw_items is not None else None

    order = Order(**patch)
    if not order.order_number:
        order.order_number = generate_order_number()
    if order.status is None:
        order.status = OrderStatus.PENDING
    if items is None:
        order.subtotal = supplied_subtotal if supplied_subtotal is not None else ZERO

    _settle_totals(order, supplied_subtotal=supplied_subtotal, supplied_total=supplied_total, items=items)

    with atomic(ORDER_NUMBER_CONFLICT):
        db.session.add(order)
        for item in items or []:
            order.items.append(item)

    current_app.logger.info(
        "Created order %s with %d item(s), total %s",
        order.order_number, len(order.items), money(order.total_amount),
    )
    return order


def update_order(order_id: str, *, patch: dict) -> Order:
    """Edit non-status fields; totals are recomputed."""
    order = get_order(order_id)
    supplied_total = patch.pop("total_amount", None)

    with atomic(ORDER_NUMBER_CONFLICT):
        for key, value in patch.items():
            setattr(order, key, value)
        _settle_totals(order, supplied_total=supplied_total)
    return order


def update_order_status(order_id: str, status: OrderStatus) -> Order:
    order = get_order(order_id)
    current = order.status

    if status == current:
        return order

    if not can_transition(current, status):
        raise InvalidTransition(f"Cannot change order status from {current.value} to {status.value}")

    with atomic():
        order.status = status
        if status == OrderStatus.DELIVERED:
            order.actual_delivery = utcnow()

    current_app.logger.info("Order %s: %s -> %s", order.order_number, current.value, status.value)
    return order
