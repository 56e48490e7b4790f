# Overview: Flask API routes for catalog categories; parses input and returns JSON responses.

# backend/tooladmin/routes/categories.py
"""
Category routes.

DELETE cascades to products: each product linked to the category loses the
link, and products left with no category are deleted (see category_service).
"""
from flask import Blueprint, request

from ..decorators import require_auth
from ..errors import ValidationError
from ..models import Category
from ..services import category_service
from ..validation import (
    ModelValidationPolicy,
    enforce_rules_category,
    parse_bool_arg,
    parse_int_arg,
    require_object,
    validate_payload,
)


CATEGORY_POLICY = ModelValidationPolicy(
    writable_fields={"name", "description", "slug", "is_active", "sort_order"},
    required_on_create={"name"},
)

categories_bp = Blueprint("categories", __name__, url_prefix="/api/categories")


@categories_bp.get("")
@require_auth
def list_categories():
    """
    Query params:
    - active: true/false
    - includeProductCount: true adds productCount (active products) per category
    - limit: int
    """
    items = category_service.list_categories(
        active=parse_bool_arg(request.args.get("active"), "active"),
        include_product_count=bool(parse_bool_arg(request.args.get("includeProductCount"), "includeProductCount")),
        limit=parse_int_arg(request.args.get("limit"), "limit", minimum=1),
    )
    return {"items": items, "count": len(items)}


@categories_bp.get("/minimal")
@require_auth
def list_minimal():
    items = category_service.list_minimal()
    return {"items": items, "count": len(items)}


@categories_bp.get("/check-slug")
@require_auth
def check_slug():
    slug = (request.args.get("slug") or "").strip()
    if not slug:
        raise ValidationError("slug is required", fields={"slug": "required"})
    exists = category_service.slug_exists(slug, exclude_id=request.args.get("excludeId"))
    return {"slug": slug, "exists": exists, "available": not exists}


@categories_bp.get("/<category_id>")
@require_auth
def get_category(category_id: str):
    return category_service.get_category(category_id).to_dict()


@categories_bp.get("/<category_id>/product-count")
@require_auth
def product_count(category_id: str):
    return {"categoryId": category_id, "count": category_service.category_product_count(category_id)}


@categories_bp.post("")
@require_auth
def create_category():
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=Category, payload=payload, policy=CATEGORY_POLICY, partial=False)
    enforce_rules_category(patch)

    category = category_service.create_category(patch=patch)
    return category.to_dict(), 201


@categories_bp.put("/<category_id>")
@require_auth
def update_category(category_id: str):
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=Category, payload=payload, policy=CATEGORY_POLICY, partial=True)
    enforce_rules_category(patch)

    category = category_service.update_category(category_id, patch=patch)
    return category.to_dict()


@categories_bp.delete("/<category_id>")
@require_auth
def delete_category(category_id: str):
    result = category_service.delete_category(category_id)
    return {"success": True, **result}
