from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow
from .columns import new_id, money
from .enums import CustomerType, enum_column_type


class Customer(db.Model):
    """
    Buyer account, individual or organizational.

    The address is a free-form JSON object ({street, city, state, zipCode,
    country}); its shape is checked at the API boundary, not by the database.
    """
    __tablename__ = "customers"
    __table_args__ = (
        db.Index("ix_customers_type_active", "customer_type", "is_active"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)

    company_name = db.Column(db.String(255), nullable=True)
    contact_first_name = db.Column(db.String(100), nullable=False)
    contact_last_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True)
    phone = db.Column(db.String(50), nullable=True)

    customer_type = db.Column(
        enum_column_type(CustomerType, "customer_type"),
        nullable=False,
        default=CustomerType.INDIVIDUAL,
    )
    tax_exempt = db.Column(db.Boolean, nullable=False, default=False)
    credit_limit = db.Column(db.Numeric(10, 2), nullable=True)
    # Net payment terms in days (30, 60, 90...)
    payment_terms = db.Column(db.Integer, nullable=True)
    address = db.Column(db.JSON, nullable=True)

    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def display_name(self) -> str:
        if self.company_name:
            return self.company_name
        return f"{self.contact_first_name} {self.contact_last_name}".strip()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "companyName": self.company_name,
            "contactFirstName": self.contact_first_name,
            "contactLastName": self.contact_last_name,
            "displayName": self.display_name,
            "email": self.email,
            "phone": self.phone,
            "customerType": self.customer_type.value if self.customer_type else None,
            "taxExempt": self.tax_exempt,
            "creditLimit": money(self.credit_limit),
            "paymentTerms": self.payment_terms,
            "address": self.address,
            "isActive": self.is_active,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
