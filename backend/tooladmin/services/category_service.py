# Overview: Category CRUD, product counts, and the category-delete cascade.

"""
Category Service

Categories are linked to products through the product_categories join table.
Deleting a category is a cascade and runs as ONE transaction:

1. unlink the category from every product that lists it
2. delete every product left with no category at all (which in turn removes
   that product's variants, ratings, reviews and inventory rows)
3. delete the category

Either all of it happens or none of it does.
"""
from __future__ import annotations

import re

from flask import current_app
from sqlalchemy import func

from ..errors import ValidationError
from ..extensions import db
from ..models import Category, Product, product_categories
from .transactions import atomic, get_or_404


SLUG_CONFLICT = "Category slug already exists"


def slugify(value: str) -> str:
    """'Power Tools & Drills' -> 'power-tools-drills'"""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower())
    return slug.strip("-")


def _base_query(active: bool | None):
    query = db.session.query(Category)
    if active is not None:
        query = query.filter(Category.is_active.is_(active))
    return query.order_by(Category.sort_order.asc(), Category.name.asc())


def product_counts(category_ids: list[str] | None = None) -> dict[str, int]:
    """Active product count per category id, in one grouped query."""
    query = (
        db.session.query(product_categories.c.category_id, func.count(Product.id))
        .join(Product, Product.id == product_categories.c.product_id)
        .filter(Product.is_active.is_(True))
        .group_by(product_categories.c.category_id)
    )
    if category_ids is not None:
        query = query.filter(product_categories.c.category_id.in_(category_ids))
    return {category_id: count for category_id, count in query.all()}


def list_categories(
    *,
    active: bool | None = None,
    include_product_count: bool = False,
    limit: int | None = None,
) -> list[dict]:
    """Categories ordered by sort_order, then name."""
    query = _base_query(active)
    if limit is not None:
        query = query.limit(limit)
    categories = query.all()

    if not include_product_count:
        return [c.to_dict() for c in categories]

    counts = product_counts([c.id for c in categories])
    items = []
    for c in categories:
        data = c.to_dict()
        data["productCount"] = counts.get(c.id, 0)
        items.append(data)
    return items


def list_minimal() -> list[dict]:
    """Id/name/slug of active categories, for pickers."""
    return [
        {"id": c.id, "name": c.name, "slug": c.slug}
        for c in _base_query(True).all()
    ]


def get_category(category_id: str) -> Category:
    return get_or_404(Category, category_id, "Category")


def category_product_count(category_id: str) -> int:
    get_category(category_id)
    return product_counts([category_id]).get(category_id, 0)


def slug_exists(slug: str, *, exclude_id: str | None = None) -> bool:
    query = db.session.query(Category.id).filter(Category.slug == slug)
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    return query.first() is not None


def create_category(*, patch: dict) -> Category:
    if not patch.get("slug"):
        patch["slug"] = slugify(patch["name"])
        if not patch["slug"]:
            raise ValidationError("slug could not be derived from name", fields={"slug": "required"})

    category = Category(**patch)
    with atomic(SLUG_CONFLICT):
        db.session.add(category)
    return category


def update_category(category_id: str, *, patch: dict) -> Category:
    category = get_category(category_id)
    with atomic(SLUG_CONFLICT):
        for key, value in patch.items():
            setattr(category, key, value)
    return category


def delete_category(category_id: str) -> dict:
    """
    Delete a category and apply the product cascade.

    Returns counts of products unlinked (kept) and products deleted.
    """
    category = get_category(category_id)

    unlinked = 0
    deleted = 0
    with atomic():
        for product in list(category.products):
            product.categories.remove(category)
            if product.categories:
                unlinked += 1
            else:
                db.session.delete(product)
                deleted += 1
        db.session.delete(category)

    current_app.logger.info(
        "Deleted category %s: %d product(s) unlinked, %d product(s) deleted",
        category_id, unlinked, deleted,
    )
    return {"productsUnlinked": unlinked, "productsDeleted": deleted}
