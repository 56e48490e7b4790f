# Overview: Edit/remove a single product review.

from flask import Blueprint, request

from ..decorators import require_auth
from ..models import ProductReview
from ..services import feedback_service
from ..validation import (
    ModelValidationPolicy,
    enforce_rules_star_rating,
    require_object,
    validate_payload,
)


# The author (customer) of a review does not change
REVIEW_EDIT_POLICY = ModelValidationPolicy(writable_fields={"rating", "review_text"})

reviews_bp = Blueprint("reviews", __name__, url_prefix="/api/product-reviews")


@reviews_bp.put("/<review_id>")
@require_auth
def update_review(review_id: str):
    payload = require_object(request.get_json(silent=True))
    patch = validate_payload(model=ProductReview, payload=payload, policy=REVIEW_EDIT_POLICY, partial=True)
    enforce_rules_star_rating(patch)

    review = feedback_service.update_review(review_id, patch=patch)
    return review.to_dict()


@reviews_bp.delete("/<review_id>")
@require_auth
def delete_review(review_id: str):
    feedback_service.delete_review(review_id)
    return {"success": True}
