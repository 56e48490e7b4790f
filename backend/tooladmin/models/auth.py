from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow
from .columns import new_id
from .enums import UserRole, enum_column_type


class User(db.Model):
    """
    Staff accounts for the back office.

    Username and email are globally unique. Accounts are deactivated
    (is_active=False), never hard-deleted, so every change stays attributable.
    """
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=new_id)

    username = db.Column(db.String(255), nullable=False, unique=True, index=True)
    email = db.Column(db.String(255), nullable=False, unique=True)

    # Bcrypt hashed password. Never serialized.
    password_hash = db.Column(db.String(255), nullable=False)

    first_name = db.Column(db.String(255), nullable=False)
    last_name = db.Column(db.String(255), nullable=False)
    role = db.Column(enum_column_type(UserRole, "user_role"), nullable=False, default=UserRole.CUSTOMER_SERVICE)

    is_active = db.Column(db.Boolean, nullable=False, default=True)

    last_login_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "role": self.role.value if self.role else None,
            "isActive": self.is_active,
            "lastLoginAt": to_utc_z(self.last_login_at),
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
