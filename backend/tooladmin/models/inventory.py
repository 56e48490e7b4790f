from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow
from .columns import new_id


class Inventory(db.Model):
    """
    Stock record for one product at one physical location (bin, shelf, site).

    quantity_available is stored, not computed on read. Every write path goes
    through inventory_service, which keeps it equal to
    quantity_on_hand - quantity_reserved.
    """
    __tablename__ = "inventory"
    __table_args__ = (
        db.UniqueConstraint("product_id", "location", name="uq_inventory_product_location"),
        db.CheckConstraint("quantity_on_hand >= 0", name="ck_inventory_on_hand_nonneg"),
        db.CheckConstraint("quantity_reserved >= 0", name="ck_inventory_reserved_nonneg"),
        db.CheckConstraint(
            "quantity_available = quantity_on_hand - quantity_reserved",
            name="ck_inventory_available_consistent",
        ),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    product_id = db.Column(
        db.String(36),
        db.ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    location = db.Column(db.String(100), nullable=False)

    quantity_on_hand = db.Column(db.Integer, nullable=False, default=0)
    quantity_reserved = db.Column(db.Integer, nullable=False, default=0)
    quantity_available = db.Column(db.Integer, nullable=False, default=0, index=True)

    reorder_point = db.Column(db.Integer, nullable=True, default=10)
    max_stock = db.Column(db.Integer, nullable=True)
    last_stock_check = db.Column(db.DateTime, nullable=True)

    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    product = db.relationship("Product", back_populates="inventory_rows")

    @property
    def needs_reorder(self) -> bool:
        return self.reorder_point is not None and self.quantity_available <= self.reorder_point

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "productId": self.product_id,
            "location": self.location,
            "quantityOnHand": self.quantity_on_hand,
            "quantityReserved": self.quantity_reserved,
            "quantityAvailable": self.quantity_available,
            "reorderPoint": self.reorder_point,
            "maxStock": self.max_stock,
            "needsReorder": self.needs_reorder,
            "lastStockCheck": to_utc_z(self.last_stock_check),
            "updatedAt": to_utc_z(self.updated_at),
        }
