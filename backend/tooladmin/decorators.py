# Overview: Request authentication and role checks for API routes.

from functools import wraps
from flask import request, g

from .errors import Forbidden, Unauthorized
from .permissions import is_allowed
from .services import token_service


def _bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    token = auth_header.split(" ", 1)[1].strip()
    return token or None


def require_auth(f):
    """
    Require a valid bearer token and a role allowed for this endpoint.

    Sets the following Flask g attributes:
    - g.current_user: The authenticated User object
    - g.token_context: The full TokenContext object

    Raises (rendered by the error handlers):
    - Unauthorized (401): no Authorization header / not a Bearer token
    - Forbidden (403): invalid or expired token, user gone or deactivated
    - Forbidden (403): role not in ROUTE_POLICY for request.endpoint
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = _bearer_token()
        if token is None:
            raise Unauthorized()

        context = token_service.validate_token(token)

        g.current_user = context.user
        g.token_context = context

        # Single policy checkpoint, keyed by "<blueprint>.<view>"
        if not is_allowed(context.user.role, request.endpoint):
            raise Forbidden()

        return f(*args, **kwargs)

    return decorated_function
