from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow
from .columns import new_id, money, decimal_str
from .enums import ModerationStatus, enum_column_type


# Many-to-many Product <-> Category.
# The API exposes this as Product.categoryIds; rows go away with either side.
product_categories = db.Table(
    "product_categories",
    db.Column(
        "product_id",
        db.String(36),
        db.ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    db.Column(
        "category_id",
        db.String(36),
        db.ForeignKey("categories.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
)


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    slug = db.Column(db.String(100), nullable=False, unique=True, index=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    sort_order = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    products = db.relationship(
        "Product",
        secondary=product_categories,
        back_populates="categories",
        lazy="select",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "slug": self.slug,
            "isActive": self.is_active,
            "sortOrder": self.sort_order,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }


class Product(db.Model):
    """
    Catalog item.

    SKU is unique across products AND variants. Images are URL strings
    (at most 4). Prices are Numeric(10,2); discount_percentage is 0-100.

    Children (variants, ratings, reviews, inventory rows) are removed with the
    product. Order items and warranties are history: their product reference
    is nulled instead.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_active_name", "is_active", "name"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)

    sku = db.Column(db.String(100), nullable=False, unique=True, index=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    detailed_specifications = db.Column(db.Text, nullable=False)
    brand = db.Column(db.String(100), nullable=False)

    cost_price = db.Column(db.Numeric(10, 2), nullable=False)
    selling_price = db.Column(db.Numeric(10, 2), nullable=False)
    original_price = db.Column(db.Numeric(10, 2), nullable=True)
    discount_percentage = db.Column(db.Integer, nullable=True)

    weight = db.Column(db.Numeric(8, 3), nullable=True)
    # {"length": n, "width": n, "height": n, "unit": "cm" | "in"}
    dimensions = db.Column(db.JSON, nullable=True)
    images = db.Column(db.JSON, nullable=False, default=list)
    tags = db.Column(db.JSON, nullable=False, default=list)

    is_active = db.Column(db.Boolean, nullable=False, default=True)

    supplier_id = db.Column(
        db.String(36),
        db.ForeignKey("suppliers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    categories = db.relationship(
        "Category",
        secondary=product_categories,
        back_populates="products",
        order_by="[Category.sort_order, Category.name]",
        lazy="select",
    )
    supplier = db.relationship("Supplier", back_populates="products")

    variants = db.relationship("ProductVariant", back_populates="product", cascade="all, delete-orphan")
    ratings = db.relationship("ProductRating", back_populates="product", cascade="all, delete-orphan")
    reviews = db.relationship("ProductReview", back_populates="product", cascade="all, delete-orphan")
    inventory_rows = db.relationship("Inventory", back_populates="product", cascade="all, delete-orphan")

    # History rows: default cascade nulls their product_id when the product goes
    order_items = db.relationship("OrderItem", back_populates="product")
    warranties = db.relationship("Warranty", back_populates="product")

    @property
    def category_ids(self) -> list[str]:
        return [c.id for c in self.categories]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sku": self.sku,
            "name": self.name,
            "description": self.description,
            "detailedSpecifications": self.detailed_specifications,
            "brand": self.brand,
            "categoryIds": self.category_ids,
            "costPrice": money(self.cost_price),
            "sellingPrice": money(self.selling_price),
            "originalPrice": money(self.original_price),
            "discountPercentage": self.discount_percentage,
            "weight": decimal_str(self.weight),
            "dimensions": self.dimensions,
            "images": list(self.images or []),
            "tags": list(self.tags or []),
            "isActive": self.is_active,
            "supplierId": self.supplier_id,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }

    def to_summary(self) -> dict:
        return {
            "id": self.id,
            "sku": self.sku,
            "name": self.name,
            "brand": self.brand,
            "sellingPrice": money(self.selling_price),
            "isActive": self.is_active,
        }


class ProductVariant(db.Model):
    """
    SKU-distinct variation of a product (color, size, voltage...).

    attributes: [{"type": "color", "value": "red"}, ...], at least one pair.
    additional_price is a signed delta from the parent's selling price.
    """
    __tablename__ = "product_variants"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    product_id = db.Column(
        db.String(36),
        db.ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sku = db.Column(db.String(100), nullable=False, unique=True)
    attributes = db.Column(db.JSON, nullable=False)
    stock_quantity = db.Column(db.Integer, nullable=False, default=0)
    additional_price = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    images = db.Column(db.JSON, nullable=False, default=list)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    product = db.relationship("Product", back_populates="variants")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "productId": self.product_id,
            "sku": self.sku,
            "attributes": self.attributes,
            "stockQuantity": self.stock_quantity,
            "additionalPrice": money(self.additional_price),
            "images": list(self.images or []),
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }


class ProductRating(db.Model):
    """1-5 star score from one customer for one product, moderated before display."""
    __tablename__ = "product_ratings"
    __table_args__ = (
        db.UniqueConstraint("product_id", "customer_id", name="uq_product_ratings_product_customer"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    product_id = db.Column(
        db.String(36),
        db.ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    customer_id = db.Column(
        db.String(36),
        db.ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    rating = db.Column(db.Integer, nullable=False)
    status = db.Column(
        enum_column_type(ModerationStatus, "moderation_status"),
        nullable=False,
        default=ModerationStatus.PENDING,
    )
    is_verified_purchase = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    product = db.relationship("Product", back_populates="ratings")
    customer = db.relationship(
        "Customer",
        backref=db.backref("ratings", lazy=True, cascade="all, delete-orphan"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "productId": self.product_id,
            "customerId": self.customer_id,
            "rating": self.rating,
            "status": self.status.value if self.status else None,
            "isVerifiedPurchase": self.is_verified_purchase,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }


class ProductReview(db.Model):
    __tablename__ = "product_reviews"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    product_id = db.Column(
        db.String(36),
        db.ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    customer_id = db.Column(
        db.String(36),
        db.ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    rating = db.Column(db.Integer, nullable=False)
    review_text = db.Column(db.Text, nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    product = db.relationship("Product", back_populates="reviews")
    customer = db.relationship(
        "Customer",
        backref=db.backref("reviews", lazy=True, cascade="all, delete-orphan"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "productId": self.product_id,
            "customerId": self.customer_id,
            "rating": self.rating,
            "reviewText": self.review_text,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
