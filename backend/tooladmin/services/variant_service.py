# Overview: Product variant operations; variant SKUs share the product SKU namespace.

from __future__ import annotations

from ..errors import ConstraintViolation
from ..extensions import db
from ..models import ProductVariant
from .products_service import SKU_CONFLICT, get_product, sku_exists
from .transactions import atomic, get_or_404


def list_variants(product_id: str) -> list[ProductVariant]:
    get_product(product_id)
    return (
        db.session.query(ProductVariant)
        .filter(ProductVariant.product_id == product_id)
        .order_by(ProductVariant.created_at.asc(), ProductVariant.sku.asc())
        .all()
    )


def get_variant(variant_id: str) -> ProductVariant:
    return get_or_404(ProductVariant, variant_id, "Product variant")


def create_variant(product_id: str, *, patch: dict) -> ProductVariant:
    product = get_product(product_id)
    if sku_exists(patch["sku"]):
        raise ConstraintViolation(SKU_CONFLICT)

    variant = ProductVariant(product_id=product.id, **patch)
    with atomic(SKU_CONFLICT):
        db.session.add(variant)
    return variant


def update_variant(variant_id: str, *, patch: dict) -> ProductVariant:
    variant = get_variant(variant_id)
    if "sku" in patch and patch["sku"] != variant.sku:
        if sku_exists(patch["sku"], exclude_variant_id=variant.id):
            raise ConstraintViolation(SKU_CONFLICT)

    with atomic(SKU_CONFLICT):
        for key, value in patch.items():
            setattr(variant, key, value)
    return variant


def delete_variant(variant_id: str) -> None:
    variant = get_variant(variant_id)
    with atomic():
        db.session.delete(variant)
