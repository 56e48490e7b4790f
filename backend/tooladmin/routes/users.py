# Overview: Staff account administration (super_admin only, see permissions.py).

from flask import Blueprint, request

from ..decorators import require_auth
from ..models import User, UserRole
from ..services import user_service
from ..validation import (
    ModelValidationPolicy,
    enforce_rules_password,
    parse_bool_arg,
    parse_enum_arg,
    require_object,
    validate_email,
    validate_payload,
)


USER_POLICY = ModelValidationPolicy(
    writable_fields={"username", "email", "first_name", "last_name", "role", "is_active"},
    required_on_create={"username", "email", "first_name", "last_name", "role"},
    extra_fields={"password"},
)

users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("")
@require_auth
def list_users():
    role = parse_enum_arg(UserRole, request.args.get("role"), "role")
    active = parse_bool_arg(request.args.get("active"), "active")
    users = user_service.list_users(role=role, active=active)
    return {"items": [u.to_dict() for u in users], "count": len(users)}


@users_bp.post("")
@require_auth
def create_user():
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=User, payload=payload, policy=USER_POLICY, partial=False)
    validate_email(patch.get("email"))
    password = enforce_rules_password(payload.get("password"))

    user = user_service.create_user(patch=patch, password=password)
    return user.to_dict(), 201


@users_bp.get("/<user_id>")
@require_auth
def get_user(user_id: str):
    return user_service.get_user(user_id).to_dict()


@users_bp.put("/<user_id>")
@require_auth
def update_user(user_id: str):
    """
    Partial update. isActive=false deactivates the account (there is no delete).
    A password, if present, is re-checked for strength and re-hashed.
    """
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=User, payload=payload, policy=USER_POLICY, partial=True)
    validate_email(patch.get("email"))
    password = enforce_rules_password(payload["password"]) if "password" in payload else None

    user = user_service.update_user(user_id, patch=patch, password=password)
    return user.to_dict()
