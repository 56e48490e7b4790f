# backend/tooladmin/services/warranty_service.py
"""
Warranty Service

EXPIRY IS COMPUTED: a warranty whose stored status is ACTIVE and whose end
date has passed IS expired, for every reader. The same rule is expressed
twice, once in Python (Warranty.effective_status, for serialization) and once
in SQL (effective_status_filter, for list filters and dashboard counts).
expire_overdue() persists it for reporting tools that read the table
directly; nothing in the API depends on it having run.

STATE MACHINE:
    active  --claim(reason)-->  claimed  --resolve(notes)-->  claimed
    active  --void-->  voided
    claimed --void-->  voided
Expired and voided warranties accept no further action.
"""
from __future__ import annotations

from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy import and_, or_

from ..errors import InvalidTransition, ValidationError
from ..extensions import db
from ..models import Customer, Order, Product, Warranty, WarrantyStatus
from ..time_utils import start_of_month, utcnow
from ..validation import enforce_rules_warranty_window
from .transactions import atomic, get_or_404


def effective_status_filter(status: WarrantyStatus, now: datetime):
    """SQL condition matching rows whose *effective* status is `status`."""
    if status == WarrantyStatus.ACTIVE:
        return and_(Warranty.status == WarrantyStatus.ACTIVE, Warranty.warranty_end_date >= now)
    if status == WarrantyStatus.EXPIRED:
        return or_(
            Warranty.status == WarrantyStatus.EXPIRED,
            and_(Warranty.status == WarrantyStatus.ACTIVE, Warranty.warranty_end_date < now),
        )
    return Warranty.status == status


def expiring_soon_filter(now: datetime, days: int):
    return and_(
        Warranty.status == WarrantyStatus.ACTIVE,
        Warranty.warranty_end_date >= now,
        Warranty.warranty_end_date <= now + timedelta(days=days),
    )


def expiring_days() -> int:
    return current_app.config["WARRANTY_EXPIRING_DAYS"]


def warranty_to_dict(warranty: Warranty, now: datetime | None = None) -> dict:
    return warranty.to_dict(expiring_days=expiring_days(), now=now)


def list_warranties(
    *,
    status: WarrantyStatus | None = None,
    customer_id: str | None = None,
    product_id: str | None = None,
    expiring_soon: bool = False,
    now: datetime | None = None,
) -> list[Warranty]:
    now = now or utcnow()
    query = db.session.query(Warranty)
    if status is not None:
        query = query.filter(effective_status_filter(status, now))
    if customer_id:
        query = query.filter(Warranty.customer_id == customer_id)
    if product_id:
        query = query.filter(Warranty.product_id == product_id)
    if expiring_soon:
        query = query.filter(expiring_soon_filter(now, expiring_days()))
    return query.order_by(Warranty.warranty_end_date.asc(), Warranty.id.asc()).all()


def get_warranty(warranty_id: str) -> Warranty:
    return get_or_404(Warranty, warranty_id, "Warranty")


def _check_references(patch: dict) -> None:
    if "customer_id" in patch and db.session.get(Customer, patch["customer_id"]) is None:
        raise ValidationError("Unknown customer", fields={"customerId": "unknown customer"})
    if patch.get("product_id") is not None and db.session.get(Product, patch["product_id"]) is None:
        raise ValidationError("Unknown product", fields={"productId": "unknown product"})
    if patch.get("order_id") is not None and db.session.get(Order, patch["order_id"]) is None:
        raise ValidationError("Unknown order", fields={"orderId": "unknown order"})


def create_warranty(*, patch: dict) -> Warranty:
    # product_id only goes NULL later, when the product is deleted
    if patch.get("product_id") is None:
        raise ValidationError("productId is required", fields={"productId": "required"})
    _check_references(patch)
    enforce_rules_warranty_window(
        patch["purchase_date"], patch["warranty_start_date"], patch["warranty_end_date"],
    )

    warranty = Warranty(status=WarrantyStatus.ACTIVE, **patch)
    with atomic():
        db.session.add(warranty)
    return warranty


def update_warranty(warranty_id: str, *, patch: dict, status: WarrantyStatus | None = None) -> Warranty:
    """
    Edit non-state fields. A status, if given, must be a legal action from
    the current effective status and is applied through the same rules as
    the dedicated claim/void endpoints.
    """
    warranty = get_warranty(warranty_id)
    _check_references(patch)
    enforce_rules_warranty_window(
        patch.get("purchase_date", warranty.purchase_date),
        patch.get("warranty_start_date", warranty.warranty_start_date),
        patch.get("warranty_end_date", warranty.warranty_end_date),
    )

    now = utcnow()
    with atomic():
        for key, value in patch.items():
            setattr(warranty, key, value)
        if status is not None and status != warranty.effective_status(now):
            _transition(warranty, status, now)
    return warranty


def _transition(warranty: Warranty, target: WarrantyStatus, now: datetime) -> None:
    current = warranty.effective_status(now)

    if target == WarrantyStatus.CLAIMED:
        if current != WarrantyStatus.ACTIVE:
            raise InvalidTransition(f"Cannot claim a warranty that is {current.value}")
        if not (warranty.claim_reason or "").strip():
            raise ValidationError("claimReason is required", fields={"claimReason": "required"})
        warranty.status = WarrantyStatus.CLAIMED
        warranty.claim_date = now
        return

    if target == WarrantyStatus.VOIDED:
        if current not in (WarrantyStatus.ACTIVE, WarrantyStatus.CLAIMED):
            raise InvalidTransition(f"Cannot void a warranty that is {current.value}")
        warranty.status = WarrantyStatus.VOIDED
        return

    raise InvalidTransition(f"Cannot change warranty status from {current.value} to {target.value}")


def claim_warranty(warranty_id: str, reason: str) -> Warranty:
    warranty = get_warranty(warranty_id)
    now = utcnow()
    with atomic():
        warranty.claim_reason = reason
        _transition(warranty, WarrantyStatus.CLAIMED, now)
    current_app.logger.info("Warranty %s claimed", warranty_id)
    return warranty


def resolve_warranty(warranty_id: str, notes: str) -> Warranty:
    """Record the outcome of a claim. Status stays CLAIMED."""
    warranty = get_warranty(warranty_id)
    if warranty.status != WarrantyStatus.CLAIMED:
        raise InvalidTransition(f"Cannot resolve a warranty that is {warranty.effective_status().value}")
    with atomic():
        warranty.resolution_notes = notes
    return warranty


def void_warranty(warranty_id: str) -> Warranty:
    warranty = get_warranty(warranty_id)
    with atomic():
        _transition(warranty, WarrantyStatus.VOIDED, utcnow())
    current_app.logger.info("Warranty %s voided", warranty_id)
    return warranty


def expire_overdue(now: datetime | None = None) -> int:
    """Persist EXPIRED on active warranties past their end date. Returns rows changed."""
    now = now or utcnow()
    with atomic():
        changed = (
            db.session.query(Warranty)
            .filter(Warranty.status == WarrantyStatus.ACTIVE, Warranty.warranty_end_date < now)
            .update({Warranty.status: WarrantyStatus.EXPIRED}, synchronize_session=False)
        )
    return changed


def count_expiring(now: datetime | None = None) -> int:
    now = now or utcnow()
    return db.session.query(Warranty).filter(expiring_soon_filter(now, expiring_days())).count()


def count_claims_this_month(now: datetime | None = None) -> int:
    now = now or utcnow()
    return (
        db.session.query(Warranty)
        .filter(Warranty.claim_date.isnot(None), Warranty.claim_date >= start_of_month(now))
        .count()
    )
