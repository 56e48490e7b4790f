# Overview: Update/delete a single product variant.

from flask import Blueprint, request

from ..decorators import require_auth
from ..models import ProductVariant
from ..services import variant_service
from ..validation import enforce_rules_variant, require_object, validate_payload
from .products import VARIANT_POLICY


variants_bp = Blueprint("variants", __name__, url_prefix="/api/product-variants")


@variants_bp.get("/<variant_id>")
@require_auth
def get_variant(variant_id: str):
    return variant_service.get_variant(variant_id).to_dict()


@variants_bp.put("/<variant_id>")
@require_auth
def update_variant(variant_id: str):
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=ProductVariant, payload=payload, policy=VARIANT_POLICY, partial=True)
    enforce_rules_variant(patch)

    variant = variant_service.update_variant(variant_id, patch=patch)
    return variant.to_dict()


@variants_bp.delete("/<variant_id>")
@require_auth
def delete_variant(variant_id: str):
    variant_service.delete_variant(variant_id)
    return {"success": True}
