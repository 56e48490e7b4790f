from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow
from .columns import new_id, money
from .enums import OrderStatus, OrderType, enum_column_type


class Order(db.Model):
    """
    Customer purchase.

    total_amount == subtotal + tax_amount + shipping_amount. The database does
    not check this; order_service recomputes it on every write.
    Addresses are JSON snapshots taken at order time.
    """
    __tablename__ = "orders"
    __table_args__ = (
        db.Index("ix_orders_status_created", "status", "created_at"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    order_number = db.Column(db.String(50), nullable=False, unique=True)
    customer_id = db.Column(db.String(36), db.ForeignKey("customers.id"), nullable=False, index=True)

    order_type = db.Column(enum_column_type(OrderType, "order_type"), nullable=False, default=OrderType.RETAIL)
    status = db.Column(enum_column_type(OrderStatus, "order_status"), nullable=False, default=OrderStatus.PENDING)

    subtotal = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    tax_amount = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    shipping_amount = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_amount = db.Column(db.Numeric(10, 2), nullable=False, default=0)

    notes = db.Column(db.Text, nullable=True)
    shipping_address = db.Column(db.JSON, nullable=True)
    billing_address = db.Column(db.JSON, nullable=True)

    estimated_delivery = db.Column(db.DateTime, nullable=True)
    actual_delivery = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    customer = db.relationship("Customer", backref=db.backref("orders", lazy=True))
    items = db.relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.created_at",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "orderNumber": self.order_number,
            "customerId": self.customer_id,
            "orderType": self.order_type.value if self.order_type else None,
            "status": self.status.value if self.status else None,
            "subtotal": money(self.subtotal),
            "taxAmount": money(self.tax_amount),
            "shippingAmount": money(self.shipping_amount),
            "totalAmount": money(self.total_amount),
            "notes": self.notes,
            "shippingAddress": self.shipping_address,
            "billingAddress": self.billing_address,
            "estimatedDelivery": to_utc_z(self.estimated_delivery),
            "actualDelivery": to_utc_z(self.actual_delivery),
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }


class OrderItem(db.Model):
    """
    Line item. total_price == quantity * unit_price.

    product_sku / product_name snapshot the catalog entry so the line stays
    readable after the product is deleted (product_id becomes NULL).
    """
    __tablename__ = "order_items"
    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    order_id = db.Column(
        db.String(36),
        db.ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id = db.Column(
        db.String(36),
        db.ForeignKey("products.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    product_sku = db.Column(db.String(100), nullable=True)
    product_name = db.Column(db.String(255), nullable=True)

    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Numeric(10, 2), nullable=False)
    total_price = db.Column(db.Numeric(10, 2), nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    order = db.relationship("Order", back_populates="items")
    product = db.relationship("Product", back_populates="order_items")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "orderId": self.order_id,
            "productId": self.product_id,
            "productSku": self.product_sku,
            "productName": self.product_name,
            "quantity": self.quantity,
            "unitPrice": money(self.unit_price),
            "totalPrice": money(self.total_price),
            "createdAt": to_utc_z(self.created_at),
        }
