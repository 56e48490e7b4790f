# Overview: Vendor directory routes (no delete; vendors are deactivated).

from flask import Blueprint, request

from ..decorators import require_auth
from ..models import Vendor
from ..services import partner_service
from ..validation import (
    ModelValidationPolicy,
    enforce_rules_partner,
    parse_bool_arg,
    require_object,
    validate_payload,
)


VENDOR_POLICY = ModelValidationPolicy(
    writable_fields={
        "name", "contact_email", "contact_phone", "address",
        "is_authorized_dealer", "payment_terms", "is_active",
    },
    required_on_create={"name"},
)

vendors_bp = Blueprint("vendors", __name__, url_prefix="/api/vendors")


@vendors_bp.get("")
@require_auth
def list_vendors():
    vendors = partner_service.list_vendors(active=parse_bool_arg(request.args.get("active"), "active"))
    return {"items": [v.to_dict() for v in vendors], "count": len(vendors)}


@vendors_bp.get("/<vendor_id>")
@require_auth
def get_vendor(vendor_id: str):
    return partner_service.get_vendor(vendor_id).to_dict()


@vendors_bp.post("")
@require_auth
def create_vendor():
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=Vendor, payload=payload, policy=VENDOR_POLICY, partial=False)
    enforce_rules_partner(patch)

    vendor = partner_service.create_vendor(patch=patch)
    return vendor.to_dict(), 201


@vendors_bp.put("/<vendor_id>")
@require_auth
def update_vendor(vendor_id: str):
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=Vendor, payload=payload, policy=VENDOR_POLICY, partial=True)
    enforce_rules_partner(patch)

    vendor = partner_service.update_vendor(vendor_id, patch=patch)
    return vendor.to_dict()
