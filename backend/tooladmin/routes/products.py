# Overview: Flask API routes for products operations; parses input and returns JSON responses.

# backend/tooladmin/routes/products.py
"""
Product management routes.

SECURITY: All routes require authentication. Writes are limited to the
catalog editors listed in permissions.py.

Nested collections (variants, ratings, reviews) are created under
/api/products/<id>/...; individual variants, ratings and reviews are edited
through their own blueprints.
"""
from flask import Blueprint, request

from ..decorators import require_auth
from ..errors import ValidationError
from ..models import ModerationStatus, Product, ProductRating, ProductReview, ProductVariant
from ..services import feedback_service, products_service, variant_service
from ..validation import (
    ModelValidationPolicy,
    enforce_rules_product,
    enforce_rules_star_rating,
    enforce_rules_variant,
    parse_bool_arg,
    parse_category_ids,
    parse_enum_arg,
    require_object,
    validate_payload,
)


PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={
        "sku", "name", "description", "detailed_specifications", "brand",
        "cost_price", "selling_price", "original_price", "discount_percentage",
        "weight", "dimensions", "images", "tags", "is_active", "supplier_id",
    },
    required_on_create={
        "sku", "name", "description", "detailed_specifications", "brand",
        "cost_price", "selling_price",
    },
    extra_fields={"categoryIds"},
)

VARIANT_POLICY = ModelValidationPolicy(
    writable_fields={"sku", "attributes", "stock_quantity", "additional_price", "images"},
    required_on_create={"sku", "attributes"},
)

RATING_POLICY = ModelValidationPolicy(
    writable_fields={"customer_id", "rating", "is_verified_purchase"},
    required_on_create={"customer_id", "rating"},
)

REVIEW_POLICY = ModelValidationPolicy(
    writable_fields={"customer_id", "rating", "review_text"},
    required_on_create={"customer_id", "rating", "review_text"},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_auth
def list_products():
    """
    List products.

    Query params:
    - search: case-insensitive substring of name, SKU or brand
    - category: category id
    - active: true/false
    """
    products = products_service.list_products(
        search=request.args.get("search"),
        category_id=request.args.get("category"),
        active=parse_bool_arg(request.args.get("active"), "active"),
    )
    return {"items": [p.to_dict() for p in products], "count": len(products)}


@products_bp.get("/check-sku")
@require_auth
def check_sku():
    """Is this SKU free? Checks products and variants."""
    sku = (request.args.get("sku") or "").strip()
    if not sku:
        raise ValidationError("sku is required", fields={"sku": "required"})
    exists = products_service.sku_exists(sku, exclude_product_id=request.args.get("excludeId"))
    return {"sku": sku, "exists": exists, "available": not exists}


@products_bp.get("/<product_id>")
@require_auth
def get_product(product_id: str):
    return products_service.get_product(product_id).to_dict()


@products_bp.post("")
@require_auth
def create_product():
    """Create a product. categoryIds must name at least one existing category."""
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
    enforce_rules_product(patch)
    category_ids = parse_category_ids(payload.get("categoryIds"))

    product = products_service.create_product(patch=patch, category_ids=category_ids)
    return product.to_dict(), 201


@products_bp.put("/<product_id>")
@require_auth
def update_product(product_id: str):
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
    enforce_rules_product(patch)
    category_ids = parse_category_ids(payload["categoryIds"]) if "categoryIds" in payload else None

    product = products_service.update_product(product_id, patch=patch, category_ids=category_ids)
    return product.to_dict()


@products_bp.delete("/<product_id>")
@require_auth
def delete_product(product_id: str):
    """Delete a product with its variants, ratings, reviews and inventory rows."""
    products_service.delete_product(product_id)
    return {"success": True}


# -- VARIANTS --

@products_bp.get("/<product_id>/variants")
@require_auth
def list_variants(product_id: str):
    variants = variant_service.list_variants(product_id)
    return {"items": [v.to_dict() for v in variants], "count": len(variants)}


@products_bp.post("/<product_id>/variants")
@require_auth
def create_variant(product_id: str):
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=ProductVariant, payload=payload, policy=VARIANT_POLICY, partial=False)
    enforce_rules_variant(patch)

    variant = variant_service.create_variant(product_id, patch=patch)
    return variant.to_dict(), 201


# -- RATINGS --

@products_bp.get("/<product_id>/ratings")
@require_auth
def list_ratings(product_id: str):
    status = parse_enum_arg(ModerationStatus, request.args.get("status"), "status")
    ratings = feedback_service.list_ratings(product_id, status=status)
    return {"items": [r.to_dict() for r in ratings], "count": len(ratings)}


@products_bp.post("/<product_id>/ratings")
@require_auth
def create_rating(product_id: str):
    """New ratings start as pending moderation."""
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=ProductRating, payload=payload, policy=RATING_POLICY, partial=False)
    enforce_rules_star_rating(patch)

    rating = feedback_service.create_rating(product_id, patch=patch)
    return rating.to_dict(), 201


@products_bp.get("/<product_id>/rating-summary")
@require_auth
def rating_summary(product_id: str):
    return feedback_service.rating_summary(product_id)


# -- REVIEWS --

@products_bp.get("/<product_id>/reviews")
@require_auth
def list_reviews(product_id: str):
    reviews = feedback_service.list_reviews(product_id)
    return {"items": [r.to_dict() for r in reviews], "count": len(reviews)}


@products_bp.post("/<product_id>/reviews")
@require_auth
def create_review(product_id: str):
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=ProductReview, payload=payload, policy=REVIEW_POLICY, partial=False)
    enforce_rules_star_rating(patch)

    review = feedback_service.create_review(product_id, patch=patch)
    return review.to_dict(), 201
