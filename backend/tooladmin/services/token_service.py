# Overview: Signed bearer tokens for staff sessions.

"""
Bearer Token Service

Tokens are HS256-signed JWTs carrying the user id (`sub`), issue time and
expiry (TOKEN_TTL_HOURS, default 24h). Nothing is stored server-side; a token
stays valid until it expires, but every request re-loads the user, so a
deleted or deactivated account is refused immediately.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app

from ..errors import Forbidden
from ..extensions import db
from ..models import User


@dataclass
class TokenContext:
    """Authenticated caller, as established by validate_token()."""
    user: User
    expires_at: datetime


def issue_token(user: User) -> tuple[str, datetime]:
    """
    Create a signed token for user.

    Returns (token, expires_at) with expires_at as an aware UTC datetime.
    """
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(hours=current_app.config["TOKEN_TTL_HOURS"])
    payload = {
        "sub": user.id,
        "iat": now,
        "exp": expires_at,
    }
    token = jwt.encode(
        payload,
        current_app.config["JWT_SECRET_KEY"],
        algorithm=current_app.config["JWT_ALGORITHM"],
    )
    return token, expires_at


def decode_token(token: str) -> dict:
    """
    Verify signature and expiry and return the claims.

    Raises Forbidden for anything that is not a valid, unexpired token.
    """
    try:
        return jwt.decode(
            token,
            current_app.config["JWT_SECRET_KEY"],
            algorithms=[current_app.config["JWT_ALGORITHM"]],
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise Forbidden("Token expired")
    except jwt.InvalidTokenError:
        raise Forbidden("Invalid token")


def validate_token(token: str) -> TokenContext:
    """
    Resolve a bearer token to the acting user.

    Raises Forbidden if the token is invalid or expired, if the user no longer
    exists, or if the account has been deactivated since the token was issued.
    """
    claims = decode_token(token)

    user = db.session.get(User, claims["sub"])
    if user is None:
        raise Forbidden("Invalid token")

    if not user.is_active:
        raise Forbidden("Account is disabled")

    return TokenContext(
        user=user,
        expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
    )
