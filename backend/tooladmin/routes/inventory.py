# Overview: Flask API routes for inventory operations; parses input and returns JSON responses.

# backend/tooladmin/routes/inventory.py
"""
Inventory routes.

quantityAvailable is computed by the server as quantityOnHand - quantityReserved.
A client may send it; if it does not match, the request is rejected (400).

Listing and detail reads are limited to warehouse/operations roles;
/low-stock is open to every authenticated user (the dashboard uses it).
"""
from flask import Blueprint, request

from ..decorators import require_auth
from ..models import Inventory
from ..services import inventory_service
from ..validation import (
    ModelValidationPolicy,
    enforce_rules_inventory,
    parse_int_arg,
    require_object,
    validate_payload,
)


INVENTORY_POLICY = ModelValidationPolicy(
    writable_fields={
        "product_id", "location", "quantity_on_hand", "quantity_reserved",
        "reorder_point", "max_stock", "last_stock_check",
    },
    required_on_create={"product_id", "location", "quantity_on_hand"},
    extra_fields={"quantityAvailable"},
)

inventory_bp = Blueprint("inventory", __name__, url_prefix="/api/inventory")


def _inventory_to_dict(row: Inventory) -> dict:
    data = row.to_dict()
    data["product"] = row.product.to_summary() if row.product is not None else None
    return data


@inventory_bp.get("")
@require_auth
def list_inventory():
    """Query params: productId, location (exact match)."""
    rows = inventory_service.list_inventory(
        product_id=request.args.get("productId"),
        location=request.args.get("location"),
    )
    return {"items": [_inventory_to_dict(r) for r in rows], "count": len(rows)}


@inventory_bp.get("/low-stock")
@require_auth
def low_stock():
    """Rows with quantityAvailable <= threshold (?threshold=, default LOW_STOCK_THRESHOLD)."""
    threshold = parse_int_arg(request.args.get("threshold"), "threshold")
    rows = inventory_service.low_stock(threshold)
    return {"items": [_inventory_to_dict(r) for r in rows], "count": len(rows)}


@inventory_bp.get("/<inventory_id>")
@require_auth
def get_inventory(inventory_id: str):
    return _inventory_to_dict(inventory_service.get_inventory(inventory_id))


@inventory_bp.post("")
@require_auth
def create_inventory():
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=Inventory, payload=payload, policy=INVENTORY_POLICY, partial=False)
    enforce_rules_inventory(patch)

    row = inventory_service.create_inventory(patch=patch, quantity_available=payload.get("quantityAvailable"))
    return _inventory_to_dict(row), 201


@inventory_bp.put("/<inventory_id>")
@require_auth
def update_inventory(inventory_id: str):
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=Inventory, payload=payload, policy=INVENTORY_POLICY, partial=True)
    enforce_rules_inventory(patch)

    row = inventory_service.update_inventory(
        inventory_id, patch=patch, quantity_available=payload.get("quantityAvailable"),
    )
    return _inventory_to_dict(row)
