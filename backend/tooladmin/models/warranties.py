from __future__ import annotations

from datetime import datetime, timedelta

from ..extensions import db
from ..time_utils import to_utc_z, utcnow
from .columns import new_id
from .enums import WarrantyStatus, enum_column_type


class Warranty(db.Model):
    """
    Coverage window attached to a purchased product.

    Expiry is derived, not stored: a row whose stored status is ACTIVE and
    whose warranty_end_date has passed is reported as EXPIRED by
    effective_status(). Every read path (serialization, filters, dashboard)
    uses that one rule.
    """
    __tablename__ = "warranties"
    __table_args__ = (
        db.Index("ix_warranties_status_end", "status", "warranty_end_date"),
        db.CheckConstraint(
            "warranty_end_date >= warranty_start_date",
            name="ck_warranties_window_order",
        ),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    product_id = db.Column(
        db.String(36),
        db.ForeignKey("products.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    customer_id = db.Column(db.String(36), db.ForeignKey("customers.id"), nullable=False, index=True)
    order_id = db.Column(
        db.String(36),
        db.ForeignKey("orders.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    serial_number = db.Column(db.String(100), nullable=True)
    purchase_date = db.Column(db.DateTime, nullable=False)
    warranty_start_date = db.Column(db.DateTime, nullable=False)
    warranty_end_date = db.Column(db.DateTime, nullable=False)

    status = db.Column(
        enum_column_type(WarrantyStatus, "warranty_status"),
        nullable=False,
        default=WarrantyStatus.ACTIVE,
    )
    claim_date = db.Column(db.DateTime, nullable=True)
    claim_reason = db.Column(db.Text, nullable=True)
    resolution_notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    product = db.relationship("Product", back_populates="warranties")
    customer = db.relationship("Customer", backref=db.backref("warranties", lazy=True))
    order = db.relationship("Order", backref=db.backref("warranties", lazy=True))

    def effective_status(self, now: datetime | None = None) -> WarrantyStatus:
        now = now or utcnow()
        if self.status == WarrantyStatus.ACTIVE and self.warranty_end_date < now:
            return WarrantyStatus.EXPIRED
        return self.status

    def is_expiring_soon(self, days: int = 30, now: datetime | None = None) -> bool:
        now = now or utcnow()
        if self.effective_status(now) != WarrantyStatus.ACTIVE:
            return False
        return self.warranty_end_date <= now + timedelta(days=days)

    def to_dict(self, *, expiring_days: int = 30, now: datetime | None = None) -> dict:
        now = now or utcnow()
        return {
            "id": self.id,
            "productId": self.product_id,
            "customerId": self.customer_id,
            "orderId": self.order_id,
            "serialNumber": self.serial_number,
            "purchaseDate": to_utc_z(self.purchase_date),
            "warrantyStartDate": to_utc_z(self.warranty_start_date),
            "warrantyEndDate": to_utc_z(self.warranty_end_date),
            "status": self.effective_status(now).value,
            "isExpiringSoon": self.is_expiring_soon(expiring_days, now),
            "claimDate": to_utc_z(self.claim_date),
            "claimReason": self.claim_reason,
            "resolutionNotes": self.resolution_notes,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
