# Overview: Flask API routes for orders; parses input and returns JSON responses.

# backend/tooladmin/routes/orders.py
"""
Order routes.

POST /api/orders creates the order and its items together. Amounts:
- item totalPrice = quantity * unitPrice (unitPrice defaults to the product price)
- subtotal = sum of item totals (when items are sent)
- totalAmount = subtotal + taxAmount + shippingAmount
Client-sent amounts that disagree with the computed ones are rejected (400).

Status changes go through PATCH /api/orders/<id>/status and must follow
pending -> confirmed -> processing -> shipped -> delivered, or exit to
cancelled/returned before delivery (409 otherwise).
"""
from flask import Blueprint, request

from ..decorators import require_auth
from ..errors import ValidationError
from ..models import Order, OrderStatus, OrderType
from ..services import order_service
from ..validation import (
    ModelValidationPolicy,
    enforce_rules_order_amounts,
    parse_enum_arg,
    require_object,
    validate_payload,
)


ORDER_CREATE_POLICY = ModelValidationPolicy(
    writable_fields={
        "order_number", "customer_id", "order_type", "subtotal", "tax_amount",
        "shipping_amount", "total_amount", "notes", "shipping_address",
        "billing_address", "estimated_delivery",
    },
    required_on_create={"customer_id"},
    extra_fields={"items"},
)

ORDER_UPDATE_POLICY = ModelValidationPolicy(
    writable_fields={
        "order_type", "tax_amount", "shipping_amount", "total_amount", "notes",
        "shipping_address", "billing_address", "estimated_delivery",
    },
)

orders_bp = Blueprint("orders", __name__, url_prefix="/api/orders")


@orders_bp.get("")
@require_auth
def list_orders():
    """Query params: status, customerId, orderType. Each order includes its customer."""
    orders = order_service.list_orders(
        status=parse_enum_arg(OrderStatus, request.args.get("status"), "status"),
        customer_id=request.args.get("customerId"),
        order_type=parse_enum_arg(OrderType, request.args.get("orderType"), "orderType"),
    )
    return {"items": [order_service.order_to_dict(o) for o in orders], "count": len(orders)}


@orders_bp.get("/<order_id>")
@require_auth
def get_order(order_id: str):
    order = order_service.get_order(order_id)
    return order_service.order_to_dict(order, include_items=True)


@orders_bp.post("")
@require_auth
def create_order():
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=Order, payload=payload, policy=ORDER_CREATE_POLICY, partial=False)
    enforce_rules_order_amounts(patch)

    order = order_service.create_order(patch=patch, raw_items=payload.get("items"))
    return order_service.order_to_dict(order, include_items=True), 201


@orders_bp.put("/<order_id>")
@require_auth
def update_order(order_id: str):
    """Edit notes, addresses, tax/shipping and estimated delivery. The total is recomputed."""
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=Order, payload=payload, policy=ORDER_UPDATE_POLICY, partial=True)
    enforce_rules_order_amounts(patch)

    order = order_service.update_order(order_id, patch=patch)
    return order_service.order_to_dict(order, include_items=True)


@orders_bp.patch("/<order_id>/status")
@require_auth
def update_order_status(order_id: str):
    payload = require_object(request.get_json(silent=True))
    raw = payload.get("status")
    if not isinstance(raw, str):
        raise ValidationError("status is required", fields={"status": "required"})
    status = parse_enum_arg(OrderStatus, raw, "status")

    order = order_service.update_order_status(order_id, status)
    return order_service.order_to_dict(order)
