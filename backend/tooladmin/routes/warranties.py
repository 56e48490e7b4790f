# Overview: Flask API routes for warranties and their claim/resolve/void actions.

# backend/tooladmin/routes/warranties.py
"""
Warranty routes.

The status in every response is the effective one: an active warranty past
its end date reads as "expired" whether or not the stored row was updated.
Filters (?status=, ?expiringSoon=true) use the same rule.

Actions:
- POST /<id>/claim   {"claimReason": "..."}      active -> claimed
- POST /<id>/resolve {"resolutionNotes": "..."}  claimed stays claimed
- POST /<id>/void                               active|claimed -> voided
"""
from flask import Blueprint, request

from ..decorators import require_auth
from ..errors import ValidationError
from ..models import Warranty, WarrantyStatus
from ..services import warranty_service
from ..validation import (
    ModelValidationPolicy,
    parse_bool_arg,
    parse_enum_arg,
    require_object,
    require_text,
    validate_payload,
)


WARRANTY_POLICY = ModelValidationPolicy(
    writable_fields={
        "product_id", "customer_id", "order_id", "serial_number", "purchase_date",
        "warranty_start_date", "warranty_end_date", "claim_reason", "resolution_notes",
    },
    required_on_create={
        "product_id", "customer_id", "purchase_date", "warranty_start_date", "warranty_end_date",
    },
    extra_fields={"status"},
)

warranties_bp = Blueprint("warranties", __name__, url_prefix="/api/warranties")


@warranties_bp.get("")
@require_auth
def list_warranties():
    """Query params: status, customerId, productId, expiringSoon=true."""
    warranties = warranty_service.list_warranties(
        status=parse_enum_arg(WarrantyStatus, request.args.get("status"), "status"),
        customer_id=request.args.get("customerId"),
        product_id=request.args.get("productId"),
        expiring_soon=bool(parse_bool_arg(request.args.get("expiringSoon"), "expiringSoon")),
    )
    return {
        "items": [warranty_service.warranty_to_dict(w) for w in warranties],
        "count": len(warranties),
    }


@warranties_bp.get("/<warranty_id>")
@require_auth
def get_warranty(warranty_id: str):
    return warranty_service.warranty_to_dict(warranty_service.get_warranty(warranty_id))


@warranties_bp.post("")
@require_auth
def create_warranty():
    """New warranties are always active; a status in the body must say so."""
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=Warranty, payload=payload, policy=WARRANTY_POLICY, partial=False)
    status = parse_enum_arg(WarrantyStatus, payload.get("status"), "status")
    if status not in (None, WarrantyStatus.ACTIVE):
        raise ValidationError("New warranties must be active", fields={"status": "must be active"})

    warranty = warranty_service.create_warranty(patch=patch)
    return warranty_service.warranty_to_dict(warranty), 201


@warranties_bp.patch("/<warranty_id>")
@require_auth
def update_warranty(warranty_id: str):
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=Warranty, payload=payload, policy=WARRANTY_POLICY, partial=True)
    status = parse_enum_arg(WarrantyStatus, payload.get("status"), "status")

    warranty = warranty_service.update_warranty(warranty_id, patch=patch, status=status)
    return warranty_service.warranty_to_dict(warranty)


@warranties_bp.post("/<warranty_id>/claim")
@require_auth
def claim_warranty(warranty_id: str):
    payload = require_object(request.get_json(silent=True))
    reason = require_text(payload, "claimReason")

    warranty = warranty_service.claim_warranty(warranty_id, reason)
    return warranty_service.warranty_to_dict(warranty)


@warranties_bp.post("/<warranty_id>/resolve")
@require_auth
def resolve_warranty(warranty_id: str):
    payload = require_object(request.get_json(silent=True))
    notes = require_text(payload, "resolutionNotes")

    warranty = warranty_service.resolve_warranty(warranty_id, notes)
    return warranty_service.warranty_to_dict(warranty)


@warranties_bp.post("/<warranty_id>/void")
@require_auth
def void_warranty(warranty_id: str):
    warranty = warranty_service.void_warranty(warranty_id)
    return warranty_service.warranty_to_dict(warranty)
