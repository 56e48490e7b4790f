# Overview: Customer account listing, search and edits.

from __future__ import annotations

from sqlalchemy import or_

from ..extensions import db
from ..models import Customer, CustomerType
from ..validation import LIKE_ESCAPE, substring_pattern
from .transactions import atomic, get_or_404


EMAIL_CONFLICT = "Customer email already exists"


def list_customers(
    *,
    customer_type: CustomerType | None = None,
    active: bool | None = None,
    search: str | None = None,
) -> list[Customer]:
    query = db.session.query(Customer)
    if customer_type is not None:
        query = query.filter(Customer.customer_type == customer_type)
    if active is not None:
        query = query.filter(Customer.is_active.is_(active))
    if search:
        pattern = substring_pattern(search)
        query = query.filter(or_(
            Customer.company_name.ilike(pattern, escape=LIKE_ESCAPE),
            Customer.contact_first_name.ilike(pattern, escape=LIKE_ESCAPE),
            Customer.contact_last_name.ilike(pattern, escape=LIKE_ESCAPE),
            Customer.email.ilike(pattern, escape=LIKE_ESCAPE),
        ))
    return query.order_by(Customer.created_at.desc(), Customer.id.asc()).all()


def get_customer(customer_id: str) -> Customer:
    return get_or_404(Customer, customer_id, "Customer")


def create_customer(*, patch: dict) -> Customer:
    customer = Customer(**patch)
    with atomic(EMAIL_CONFLICT):
        db.session.add(customer)
    return customer


def update_customer(customer_id: str, *, patch: dict) -> Customer:
    customer = get_customer(customer_id)
    with atomic(EMAIL_CONFLICT):
        for key, value in patch.items():
            setattr(customer, key, value)
    return customer
