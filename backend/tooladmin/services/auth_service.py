# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service

WHY: Every action must be attributable. Uses bcrypt for secure password
hashing and validates password strength.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor from BCRYPT_ROUNDS, default 12)
- Minimum 8 characters required
- Must contain uppercase, lowercase, digit, and special char
- Unknown usernames and wrong passwords fail identically, and both pay for
  one bcrypt comparison, so response time does not reveal which usernames exist
- Bearer tokens are issued separately (see token_service.py)
"""

import re

import bcrypt
from flask import current_app

from ..errors import AccountDisabled, InvalidCredentials, ValidationError
from ..extensions import db
from ..models import User
from ..time_utils import utcnow
from .transactions import atomic


class PasswordValidationError(ValidationError):
    """Raised when password doesn't meet strength requirements."""
    pass


# Compared against when the username does not exist, keyed by cost factor
_dummy_hashes: dict[int, str] = {}


def dummy_hash() -> str:
    """Hash at the configured cost, so unknown usernames take as long to refuse."""
    rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    if rounds not in _dummy_hashes:
        salt = bcrypt.gensalt(rounds=rounds)
        _dummy_hashes[rounds] = bcrypt.hashpw(b"not-a-real-password", salt).decode("utf-8")
    return _dummy_hashes[rounds]


def validate_password_strength(password: str) -> None:
    """
    Validate password meets strength requirements.

    Requirements:
    - Minimum 8 characters
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one digit
    - At least one special character (!@#$%^&*(),.'":{}|<>)

    Raises PasswordValidationError if requirements not met.
    """
    if not isinstance(password, str):
        raise PasswordValidationError("Password is required")

    if len(password) < 8:
        raise PasswordValidationError("Password must be at least 8 characters long")

    if not re.search(r'[A-Z]', password):
        raise PasswordValidationError("Password must contain at least one uppercase letter")

    if not re.search(r'[a-z]', password):
        raise PasswordValidationError("Password must contain at least one lowercase letter")

    if not re.search(r'\d', password):
        raise PasswordValidationError("Password must contain at least one digit")

    if not re.search(r"[!@#$%^&*(),.'\":{}|<>]", password):
        raise PasswordValidationError("Password must contain at least one special character")


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt.

    Password is validated for strength before hashing.
    """
    validate_password_strength(password)
    rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    Returns True if password matches hash, False otherwise.

    WHY timing-safe: bcrypt.checkpw() compares in constant time.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed stored hash
        return False


def authenticate(username: str, password: str) -> User:
    """
    Authenticate user with username and password.

    Returns the User on success and stamps last_login_at.

    Raises:
        InvalidCredentials: unknown username or wrong password (same message)
        AccountDisabled: credentials are right but the account is deactivated
    """
    user = db.session.query(User).filter(User.username == username).first()

    if user is None:
        verify_password(password, dummy_hash())
        current_app.logger.warning("Login refused: unknown username")
        raise InvalidCredentials()

    if not verify_password(password, user.password_hash):
        current_app.logger.warning("Login refused: bad password for user %s", user.id)
        raise InvalidCredentials()

    if not user.is_active:
        current_app.logger.warning("Login refused: user %s is disabled", user.id)
        raise AccountDisabled()

    with atomic():
        user.last_login_at = utcnow()
    return user
