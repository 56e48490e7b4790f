# Overview: Flask API routes for customer accounts.

from flask import Blueprint, request

from ..decorators import require_auth
from ..models import Customer, CustomerType
from ..services import customer_service
from ..validation import (
    ModelValidationPolicy,
    enforce_rules_customer,
    parse_bool_arg,
    parse_enum_arg,
    require_object,
    validate_payload,
)


CUSTOMER_POLICY = ModelValidationPolicy(
    writable_fields={
        "company_name", "contact_first_name", "contact_last_name", "email", "phone",
        "customer_type", "tax_exempt", "credit_limit", "payment_terms", "address", "is_active",
    },
    required_on_create={"contact_first_name", "contact_last_name", "email"},
)

customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.get("")
@require_auth
def list_customers():
    """
    Query params:
    - type: customer type
    - active: true/false
    - search: substring of company, contact name or email (case-insensitive)
    """
    customers = customer_service.list_customers(
        customer_type=parse_enum_arg(CustomerType, request.args.get("type"), "type"),
        active=parse_bool_arg(request.args.get("active"), "active"),
        search=request.args.get("search"),
    )
    return {"items": [c.to_dict() for c in customers], "count": len(customers)}


@customers_bp.post("")
@require_auth
def create_customer():
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=Customer, payload=payload, policy=CUSTOMER_POLICY, partial=False)
    enforce_rules_customer(patch)

    customer = customer_service.create_customer(patch=patch)
    return customer.to_dict(), 201


@customers_bp.get("/<customer_id>")
@require_auth
def get_customer(customer_id: str):
    return customer_service.get_customer(customer_id).to_dict()


@customers_bp.put("/<customer_id>")
@require_auth
def update_customer(customer_id: str):
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=Customer, payload=payload, policy=CUSTOMER_POLICY, partial=True)
    enforce_rules_customer(patch)

    customer = customer_service.update_customer(customer_id, patch=patch)
    return customer.to_dict()
