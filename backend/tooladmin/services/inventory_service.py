# backend/tooladmin/services/inventory_service.py
"""
Inventory Service

INVARIANT: quantity_available == quantity_on_hand - quantity_reserved.

quantity_available is stored redundantly (it is indexed for low-stock
queries), so every write path in this module recomputes it. Clients may
send quantityAvailable, but only as an assertion: if it disagrees with
on-hand minus reserved the write is rejected. The database CHECK constraint
is the last line.

One row per (product, location).
"""
from __future__ import annotations

from typing import Any

from flask import current_app
from sqlalchemy.orm import selectinload

from ..errors import ValidationError
from ..extensions import db
from ..models import Inventory, Product
from .transactions import atomic, get_or_404


LOCATION_CONFLICT = "Inventory already exists for this product and location"


def _apply_quantities(row: Inventory, supplied_available: Any = None) -> None:
    on_hand = row.quantity_on_hand or 0
    reserved = row.quantity_reserved or 0

    if reserved > on_hand:
        raise ValidationError(
            "quantityReserved cannot exceed quantityOnHand",
            fields={"quantityReserved": "exceeds on hand"},
        )

    available = on_hand - reserved
    if supplied_available is not None:
        if isinstance(supplied_available, bool) or not isinstance(supplied_available, int) \
                or supplied_available != available:
            raise ValidationError(
                f"quantityAvailable must equal quantityOnHand - quantityReserved ({available})",
                fields={"quantityAvailable": f"expected {available}"},
            )

    row.quantity_on_hand = on_hand
    row.quantity_reserved = reserved
    row.quantity_available = available


def list_inventory(*, product_id: str | None = None, location: str | None = None) -> list[Inventory]:
    query = db.session.query(Inventory).options(selectinload(Inventory.product))
    if product_id:
        query = query.filter(Inventory.product_id == product_id)
    if location:
        query = query.filter(Inventory.location == location)
    return query.order_by(Inventory.location.asc(), Inventory.id.asc()).all()


def low_stock(threshold: int | None = None) -> list[Inventory]:
    """Rows with quantity_available <= threshold (default LOW_STOCK_THRESHOLD)."""
    if threshold is None:
        threshold = current_app.config["LOW_STOCK_THRESHOLD"]
    return (
        db.session.query(Inventory)
        .options(selectinload(Inventory.product))
        .filter(Inventory.quantity_available <= threshold)
        .order_by(Inventory.quantity_available.asc(), Inventory.location.asc())
        .all()
    )


def get_inventory(inventory_id: str) -> Inventory:
    return get_or_404(Inventory, inventory_id, "Inventory")


def create_inventory(*, patch: dict, quantity_available: Any = None) -> Inventory:
    if db.session.get(Product, patch["product_id"]) is None:
        raise ValidationError("Unknown product", fields={"productId": "unknown product"})

    row = Inventory(**patch)
    _apply_quantities(row, quantity_available)

    with atomic(LOCATION_CONFLICT):
        db.session.add(row)
    return row


def update_inventory(inventory_id: str, *, patch: dict, quantity_available: Any = None) -> Inventory:
    row = get_inventory(inventory_id)

    if "product_id" in patch and db.session.get(Product, patch["product_id"]) is None:
        raise ValidationError("Unknown product", fields={"productId": "unknown product"})

    with atomic(LOCATION_CONFLICT):
        for key, value in patch.items():
            setattr(row, key, value)
        _apply_quantities(row, quantity_available)
    return row
