# Overview: Staff account management (list, create, update, bootstrap admin).

from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..models import User, UserRole
from .auth_service import hash_password
from .transactions import atomic, get_or_404


USER_CONFLICT = "Username or email already exists"


def list_users(*, role: UserRole | None = None, active: bool | None = None) -> list[User]:
    query = db.session.query(User)
    if role is not None:
        query = query.filter(User.role == role)
    if active is not None:
        query = query.filter(User.is_active.is_(active))
    return query.order_by(User.username.asc()).all()


def get_user(user_id: str) -> User:
    return get_or_404(User, user_id, "User")


def create_user(*, patch: dict, password: str) -> User:
    """
    Create a staff account.

    patch is a validated column patch (no password). The password is checked
    for strength and hashed here.
    """
    user = User(**patch)
    user.password_hash = hash_password(password)

    with atomic(USER_CONFLICT):
        db.session.add(user)

    current_app.logger.info("Created user %s (%s)", user.username, user.role.value)
    return user


def update_user(user_id: str, *, patch: dict, password: str | None = None) -> User:
    """
    Apply a partial update. Passing is_active=False deactivates the account;
    its outstanding tokens are refused from the next request on.
    """
    user = get_user(user_id)
    password_hash = hash_password(password) if password is not None else None

    with atomic(USER_CONFLICT):
        for key, value in patch.items():
            setattr(user, key, value)
        if password_hash is not None:
            user.password_hash = password_hash

    return user


def ensure_default_admin() -> User | None:
    """
    Create the configured super_admin if no user exists yet.

    Idempotent. Returns the created user, or None when users already exist.
    """
    if db.session.query(User.id).first() is not None:
        return None

    cfg = current_app.config
    admin = User(
        username=cfg["DEFAULT_ADMIN_USERNAME"],
        email=cfg["DEFAULT_ADMIN_EMAIL"],
        first_name="System",
        last_name="Administrator",
        role=UserRole.SUPER_ADMIN,
        is_active=True,
    )
    admin.password_hash = hash_password(cfg["DEFAULT_ADMIN_PASSWORD"])

    with atomic(USER_CONFLICT):
        db.session.add(admin)

    current_app.logger.info("Bootstrapped default admin '%s'", admin.username)
    return admin
