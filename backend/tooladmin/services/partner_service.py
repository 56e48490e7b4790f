# Overview: Vendor and supplier directories.

"""
Partner Service

Suppliers are where products are restocked from (Product.supplier_id).
Vendors are sales/distribution partners kept as a separate directory that
nothing references. The two tables are intentionally not merged: suppliers
carry a product relationship and deletion semantics, vendors carry dealer
authorization and payment terms and are only ever deactivated.
"""
from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..models import Product, Supplier, Vendor
from .transactions import atomic, get_or_404


# -- SUPPLIERS --

def list_suppliers() -> list[Supplier]:
    return db.session.query(Supplier).order_by(Supplier.name.asc()).all()


def get_supplier(supplier_id: str) -> Supplier:
    return get_or_404(Supplier, supplier_id, "Supplier")


def create_supplier(*, patch: dict) -> Supplier:
    supplier = Supplier(**patch)
    with atomic():
        db.session.add(supplier)
    return supplier


def update_supplier(supplier_id: str, *, patch: dict) -> Supplier:
    supplier = get_supplier(supplier_id)
    with atomic():
        for key, value in patch.items():
            setattr(supplier, key, value)
    return supplier


def delete_supplier(supplier_id: str) -> int:
    """Delete a supplier, clearing it from its products. Returns products touched."""
    supplier = get_supplier(supplier_id)
    with atomic():
        cleared = (
            db.session.query(Product)
            .filter(Product.supplier_id == supplier.id)
            .update({Product.supplier_id: None}, synchronize_session="fetch")
        )
        db.session.delete(supplier)

    current_app.logger.info("Deleted supplier %s, cleared from %d product(s)", supplier_id, cleared)
    return cleared


# -- VENDORS --

def list_vendors(*, active: bool | None = None) -> list[Vendor]:
    query = db.session.query(Vendor)
    if active is not None:
        query = query.filter(Vendor.is_active.is_(active))
    return query.order_by(Vendor.name.asc()).all()


def get_vendor(vendor_id: str) -> Vendor:
    return get_or_404(Vendor, vendor_id, "Vendor")


def create_vendor(*, patch: dict) -> Vendor:
    vendor = Vendor(**patch)
    with atomic():
        db.session.add(vendor)
    return vendor


def update_vendor(vendor_id: str, *, patch: dict) -> Vendor:
    vendor = get_vendor(vendor_id)
    with atomic():
        for key, value in patch.items():
            setattr(vendor, key, value)
    return vendor
