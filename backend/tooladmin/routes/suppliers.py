# Overview: Supplier directory routes.

from flask import Blueprint, request

from ..decorators import require_auth
from ..models import Supplier
from ..services import partner_service
from ..validation import (
    ModelValidationPolicy,
    enforce_rules_partner,
    require_object,
    validate_payload,
)


SUPPLIER_POLICY = ModelValidationPolicy(
    writable_fields={"name", "contact_email", "contact_phone", "address"},
    required_on_create={"name"},
)

suppliers_bp = Blueprint("suppliers", __name__, url_prefix="/api/suppliers")


@suppliers_bp.get("")
@require_auth
def list_suppliers():
    suppliers = partner_service.list_suppliers()
    return {"items": [s.to_dict() for s in suppliers], "count": len(suppliers)}


@suppliers_bp.get("/<supplier_id>")
@require_auth
def get_supplier(supplier_id: str):
    return partner_service.get_supplier(supplier_id).to_dict()


@suppliers_bp.post("")
@require_auth
def create_supplier():
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=Supplier, payload=payload, policy=SUPPLIER_POLICY, partial=False)
    enforce_rules_partner(patch)

    supplier = partner_service.create_supplier(patch=patch)
    return supplier.to_dict(), 201


@suppliers_bp.put("/<supplier_id>")
@require_auth
def update_supplier(supplier_id: str):
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=Supplier, payload=payload, policy=SUPPLIER_POLICY, partial=True)
    enforce_rules_partner(patch)

    supplier = partner_service.update_supplier(supplier_id, patch=patch)
    return supplier.to_dict()


@suppliers_bp.delete("/<supplier_id>")
@require_auth
def delete_supplier(supplier_id: str):
    """Delete a supplier; its products stay, with no supplier."""
    cleared = partner_service.delete_supplier(supplier_id)
    return {"success": True, "productsCleared": cleared}
