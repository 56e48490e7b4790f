# Overview: Rating moderation and removal.

from flask import Blueprint, request

from ..decorators import require_auth
from ..errors import ValidationError
from ..models import ModerationStatus
from ..services import feedback_service
from ..validation import parse_enum_arg, require_object


ratings_bp = Blueprint("ratings", __name__, url_prefix="/api/product-ratings")


@ratings_bp.patch("/<rating_id>/status")
@require_auth
def moderate_rating(rating_id: str):
    """Body: {"status": "approved" | "rejected" | "pending"}"""
    payload = require_object(request.get_json(silent=True))
    raw = payload.get("status")
    if not isinstance(raw, str):
        raise ValidationError("status is required", fields={"status": "required"})
    status = parse_enum_arg(ModerationStatus, raw, "status")

    rating = feedback_service.moderate_rating(rating_id, status)
    return rating.to_dict()


@ratings_bp.delete("/<rating_id>")
@require_auth
def delete_rating(rating_id: str):
    feedback_service.delete_rating(rating_id)
    return {"success": True}
