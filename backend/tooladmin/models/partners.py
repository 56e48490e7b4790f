from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow
from .columns import new_id


class Supplier(db.Model):
    """
    Manufacturer or distributor that products are restocked from.

    Referenced by Product.supplier_id; deleting a supplier clears that
    reference rather than removing products.
    """
    __tablename__ = "suppliers"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    contact_email = db.Column(db.String(255), nullable=True)
    contact_phone = db.Column(db.String(50), nullable=True)
    address = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    products = db.relationship("Product", back_populates="supplier")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "contactEmail": self.contact_email,
            "contactPhone": self.contact_phone,
            "address": self.address,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }


class Vendor(db.Model):
    """
    Sales/distribution partner (authorized dealers, resellers).

    A standalone directory: nothing references vendors.
    """
    __tablename__ = "vendors"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    contact_email = db.Column(db.String(255), nullable=True)
    contact_phone = db.Column(db.String(50), nullable=True)
    address = db.Column(db.JSON, nullable=True)
    is_authorized_dealer = db.Column(db.Boolean, nullable=False, default=False)
    # Net payment terms in days
    payment_terms = db.Column(db.Integer, nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "contactEmail": self.contact_email,
            "contactPhone": self.contact_phone,
            "address": self.address,
            "isAuthorizedDealer": self.is_authorized_dealer,
            "paymentTerms": self.payment_terms,
            "isActive": self.is_active,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
