# Overview: Product ratings (moderated star scores) and free-text reviews.

"""
Feedback Service

Ratings:
- one per (customer, product); a second one is a ConstraintViolation
- created as PENDING; only APPROVED ratings count towards the summary
- is_verified_purchase defaults to "customer has a delivered order
  containing this product" unless the caller sets it explicitly

Reviews are unmoderated text with their own 1-5 score.
"""
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import func

from ..errors import ValidationError
from ..extensions import db
from ..models import (
    Customer,
    ModerationStatus,
    Order,
    OrderItem,
    OrderStatus,
    ProductRating,
    ProductReview,
)
from .products_service import get_product
from .transactions import atomic, get_or_404


RATING_CONFLICT = "Customer has already rated this product"


def _require_customer(customer_id: str) -> Customer:
    customer = db.session.get(Customer, customer_id)
    if customer is None:
        raise ValidationError("Unknown customer", fields={"customerId": "unknown customer"})
    return customer


def has_delivered_purchase(customer_id: str, product_id: str) -> bool:
    row = (
        db.session.query(OrderItem.id)
        .join(Order, Order.id == OrderItem.order_id)
        .filter(
            Order.customer_id == customer_id,
            Order.status == OrderStatus.DELIVERED,
            OrderItem.product_id == product_id,
        )
        .first()
    )
    return row is not None


# -- RATINGS --

def list_ratings(product_id: str, *, status: ModerationStatus | None = None) -> list[ProductRating]:
    get_product(product_id)
    query = db.session.query(ProductRating).filter(ProductRating.product_id == product_id)
    if status is not None:
        query = query.filter(ProductRating.status == status)
    return query.order_by(ProductRating.created_at.desc()).all()


def get_rating(rating_id: str) -> ProductRating:
    return get_or_404(ProductRating, rating_id, "Rating")


def create_rating(product_id: str, *, patch: dict) -> ProductRating:
    product = get_product(product_id)
    _require_customer(patch["customer_id"])

    if patch.get("is_verified_purchase") is None:
        patch["is_verified_purchase"] = has_delivered_purchase(patch["customer_id"], product.id)

    rating = ProductRating(product_id=product.id, status=ModerationStatus.PENDING, **patch)
    with atomic(RATING_CONFLICT):
        db.session.add(rating)
    return rating


def moderate_rating(rating_id: str, status: ModerationStatus) -> ProductRating:
    rating = get_rating(rating_id)
    with atomic():
        rating.status = status
    return rating


def delete_rating(rating_id: str) -> None:
    rating = get_rating(rating_id)
    with atomic():
        db.session.delete(rating)


def rating_summary(product_id: str) -> dict:
    """Average and count over APPROVED ratings, plus a 1-5 distribution."""
    get_product(product_id)
    rows = (
        db.session.query(ProductRating.rating, func.count(ProductRating.id))
        .filter(
            ProductRating.product_id == product_id,
            ProductRating.status == ModerationStatus.APPROVED,
        )
        .group_by(ProductRating.rating)
        .all()
    )
    distribution = {str(stars): 0 for stars in range(1, 6)}
    total = 0
    count = 0
    for stars, n in rows:
        distribution[str(stars)] = n
        total += stars * n
        count += n

    average = None
    if count:
        average = str((Decimal(total) / Decimal(count)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))

    return {
        "productId": product_id,
        "averageRating": average,
        "count": count,
        "distribution": distribution,
    }


# -- REVIEWS --

def list_reviews(product_id: str) -> list[ProductReview]:
    get_product(product_id)
    return (
        db.session.query(ProductReview)
        .filter(ProductReview.product_id == product_id)
        .order_by(ProductReview.created_at.desc())
        .all()
    )


def get_review(review_id: str) -> ProductReview:
    return get_or_404(ProductReview, review_id, "Review")


def create_review(product_id: str, *, patch: dict) -> ProductReview:
    product = get_product(product_id)
    _require_customer(patch["customer_id"])

    review = ProductReview(product_id=product.id, **patch)
    with atomic():
        db.session.add(review)
    return review


def update_review(review_id: str, *, patch: dict) -> ProductReview:
    review = get_review(review_id)
    with atomic():
        for key, value in patch.items():
            setattr(review, key, value)
    return review


def delete_review(review_id: str) -> None:
    review = get_review(review_id)
    with atomic():
        db.session.delete(review)
