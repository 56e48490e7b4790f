# backend/tooladmin/services/products_service.py
"""
Products Service

SKU UNIQUENESS: A SKU identifies exactly one sellable thing, so it must be
unique across products AND product variants. Each table has its own unique
index; the cross-table check happens here before insert/update.

CASCADE: Deleting a product removes its variants, ratings, reviews and
inventory rows in the same transaction. Order items and warranties keep
their rows (they are history) with product_id set to NULL.
"""
from __future__ import annotations

from flask import current_app
from sqlalchemy import or_

from ..errors import ConstraintViolation, ValidationError
from ..extensions import db
from ..models import Category, Product, ProductVariant, Supplier
from ..validation import LIKE_ESCAPE, substring_pattern
from .transactions import atomic, get_or_404


SKU_CONFLICT = "SKU already exists"


def sku_exists(
    sku: str,
    *,
    exclude_product_id: str | None = None,
    exclude_variant_id: str | None = None,
) -> bool:
    """True if sku is taken by any product or variant (other than the excluded ones)."""
    product_q = db.session.query(Product.id).filter(Product.sku == sku)
    if exclude_product_id is not None:
        product_q = product_q.filter(Product.id != exclude_product_id)
    if product_q.first() is not None:
        return True

    variant_q = db.session.query(ProductVariant.id).filter(ProductVariant.sku == sku)
    if exclude_variant_id is not None:
        variant_q = variant_q.filter(ProductVariant.id != exclude_variant_id)
    return variant_q.first() is not None


def _resolve_categories(category_ids: list[str]) -> list[Category]:
    found = db.session.query(Category).filter(Category.id.in_(category_ids)).all()
    by_id = {c.id: c for c in found}
    missing = [cid for cid in category_ids if cid not in by_id]
    if missing:
        raise ValidationError(
            f"Unknown category id(s): {', '.join(missing)}",
            fields={"categoryIds": "unknown category"},
        )
    return [by_id[cid] for cid in category_ids]


def _check_supplier(patch: dict) -> None:
    supplier_id = patch.get("supplier_id")
    if supplier_id is not None and db.session.get(Supplier, supplier_id) is None:
        raise ValidationError("Unknown supplier", fields={"supplierId": "unknown supplier"})


def list_products(
    *,
    search: str | None = None,
    category_id: str | None = None,
    active: bool | None = None,
) -> list[Product]:
    """
    Filtered product listing.

    search: case-insensitive substring match across name, SKU and brand
    category_id: only products linked to that category
    active: filter by is_active
    """
    query = db.session.query(Product)

    if search:
        pattern = substring_pattern(search)
        query = query.filter(or_(
            Product.name.ilike(pattern, escape=LIKE_ESCAPE),
            Product.sku.ilike(pattern, escape=LIKE_ESCAPE),
            Product.brand.ilike(pattern, escape=LIKE_ESCAPE),
        ))

    if category_id:
        query = query.filter(Product.categories.any(Category.id == category_id))

    if active is not None:
        query = query.filter(Product.is_active.is_(active))

    return query.order_by(Product.name.asc(), Product.id.asc()).all()


def get_product(product_id: str) -> Product:
    return get_or_404(Product, product_id, "Product")


def create_product(*, patch: dict, category_ids: list[str]) -> Product:
    if sku_exists(patch["sku"]):
        raise ConstraintViolation(SKU_CONFLICT)
    _check_supplier(patch)
    categories = _resolve_categories(category_ids)

    product = Product(**patch)
    product.categories = categories

    with atomic(SKU_CONFLICT):
        db.session.add(product)

    return product


def update_product(product_id: str, *, patch: dict, category_ids: list[str] | None = None) -> Product:
    product = get_product(product_id)

    if "sku" in patch and patch["sku"] != product.sku:
        if sku_exists(patch["sku"], exclude_product_id=product.id):
            raise ConstraintViolation(SKU_CONFLICT)
    _check_supplier(patch)
    categories = _resolve_categories(category_ids) if category_ids is not None else None

    with atomic(SKU_CONFLICT):
        for key, value in patch.items():
            setattr(product, key, value)
        if categories is not None:
            product.categories = categories

    return product


def delete_product(product_id: str) -> None:
    product = get_product(product_id)

    with atomic():
        db.session.delete(product)

    current_app.logger.info("Deleted product %s with its variants, ratings, reviews and inventory", product_id)
