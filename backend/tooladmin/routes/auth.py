# Overview: Flask API routes for login and the caller's profile.

# backend/tooladmin/routes/auth.py
"""
Authentication API routes

- POST /api/auth/login: username + password -> bearer token + user
- GET /api/auth/me: the authenticated caller (never includes the password hash)

Login failures:
- unknown username / wrong password -> 401 "Invalid credentials" (same body)
- correct password on a deactivated account -> 401 "Account is disabled"
"""

from flask import Blueprint, request, g

from ..decorators import require_auth
from ..errors import ValidationError
from ..services import auth_service, token_service
from ..time_utils import to_utc_z
from ..validation import require_object


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and issue a bearer token.

    Token must be included as `Authorization: Bearer <token>` on protected routes.
    """
    data = require_object(request.get_json(silent=True))
    username = data.get("username")
    password = data.get("password")

    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        raise ValidationError("username and password required")

    user = auth_service.authenticate(username.strip(), password)
    token, expires_at = token_service.issue_token(user)

    return {
        "token": token,
        "expiresAt": to_utc_z(expires_at),
        "user": user.to_dict(),
    }, 200


@auth_bp.get("/me")
@require_auth
def me_route():
    """Get the current user's profile."""
    return g.current_user.to_dict()
