"""
Category tests: listing order, slugs, product counts, and the delete cascade.
"""

import pytest
from sqlalchemy import event
from sqlalchemy.orm import Session

from tooladmin.extensions import db
from tooladmin.models import Category, Inventory, Product, ProductVariant, UserRole
from tooladmin.services import category_service


@pytest.fixture
def pm_headers(headers_for):
    return headers_for(UserRole.PRODUCT_MANAGER)


class TestCategoryReads:

    def test_list_is_ordered_by_sort_order_then_name(self, client, db_session, pm_headers):
        db_session.add_all([
            Category(name="Zeta", slug="zeta", sort_order=1),
            Category(name="Alpha", slug="alpha", sort_order=2),
            Category(name="Beta", slug="beta", sort_order=1),
        ])
        db_session.commit()

        resp = client.get("/api/categories", headers=pm_headers)

        assert resp.status_code == 200
        assert [c["name"] for c in resp.json["items"]] == ["Beta", "Zeta", "Alpha"]

    def test_active_filter_and_limit(self, client, db_session, pm_headers):
        db_session.add_all([
            Category(name="A", slug="a", sort_order=1),
            Category(name="B", slug="b", sort_order=2),
            Category(name="Hidden", slug="hidden", sort_order=0, is_active=False),
        ])
        db_session.commit()

        resp = client.get("/api/categories?active=true&limit=1", headers=pm_headers)

        assert [c["slug"] for c in resp.json["items"]] == ["a"]

    def test_product_counts_only_active_products(self, client, make_product, category, pm_headers):
        make_product("P-1", [category])
        make_product("P-2", [category], is_active=False)

        resp = client.get("/api/categories?includeProductCount=true", headers=pm_headers)
        assert resp.json["items"][0]["productCount"] == 1

        resp = client.get(f"/api/categories/{category.id}/product-count", headers=pm_headers)
        assert resp.json["count"] == 1

    def test_minimal_lists_active_only(self, client, db_session, category, pm_headers):
        db_session.add(Category(name="Old", slug="old", is_active=False))
        db_session.commit()

        resp = client.get("/api/categories/minimal", headers=pm_headers)

        assert resp.json["items"] == [{"id": category.id, "name": "Power Tools", "slug": "power-tools"}]

    def test_check_slug(self, client, category, pm_headers):
        taken = client.get("/api/categories/check-slug?slug=power-tools", headers=pm_headers).json
        free = client.get("/api/categories/check-slug?slug=garden", headers=pm_headers).json

        assert taken["exists"] is True and taken["available"] is False
        assert free["exists"] is False and free["available"] is True

    def test_unknown_category_is_404(self, client, pm_headers):
        resp = client.get("/api/categories/does-not-exist", headers=pm_headers)
        assert resp.status_code == 404
        assert resp.json["message"] == "Category not found"


class TestCategoryWrites:

    def test_slug_derived_from_name(self, client, pm_headers):
        resp = client.post("/api/categories", json={"name": "Saws & Blades"}, headers=pm_headers)
        assert resp.status_code == 201
        assert resp.json["slug"] == "saws-blades"

    def test_duplicate_slug_is_conflict(self, client, category, pm_headers):
        resp = client.post("/api/categories", json={"name": "Other", "slug": "power-tools"}, headers=pm_headers)
        assert resp.status_code == 409
        assert "slug" in resp.json["message"].lower()

    def test_bad_slug_format_is_400(self, client, pm_headers):
        resp = client.post("/api/categories", json={"name": "X", "slug": "Bad Slug!"}, headers=pm_headers)
        assert resp.status_code == 400
        assert resp.json["fields"] == {"slug": "invalid format"}

    def test_unknown_field_is_400(self, client, pm_headers):
        resp = client.post("/api/categories", json={"name": "X", "color": "red"}, headers=pm_headers)
        assert resp.status_code == 400

    def test_update(self, client, category, pm_headers):
        resp = client.put(f"/api/categories/{category.id}", json={"sortOrder": 5, "isActive": False}, headers=pm_headers)
        assert resp.status_code == 200
        assert resp.json["sortOrder"] == 5
        assert resp.json["isActive"] is False


class TestCategoryDeleteCascade:

    def test_sole_category_product_is_deleted(self, client, db_session, make_product, category, pm_headers):
        product = make_product("ONLY-1", [category])
        db_session.add(ProductVariant(product_id=product.id, sku="ONLY-1-RED", attributes=[{"type": "color", "value": "red"}]))
        db_session.add(Inventory(product_id=product.id, location="A1", quantity_on_hand=3, quantity_available=3))
        db_session.commit()
        product_id = product.id

        resp = client.delete(f"/api/categories/{category.id}", headers=pm_headers)

        assert resp.status_code == 200
        assert resp.json["productsDeleted"] == 1
        assert db.session.get(Product, product_id) is None
        assert db.session.query(ProductVariant).count() == 0
        assert db.session.query(Inventory).count() == 0

    def test_multi_category_product_loses_only_the_link(self, client, db_session, make_product, category, pm_headers):
        other = Category(name="Cordless", slug="cordless")
        db_session.add(other)
        db_session.commit()
        product = make_product("MULTI-1", [category, other], name="Cordless Drill")
        product_id, other_id = product.id, other.id

        resp = client.delete(f"/api/categories/{category.id}", headers=pm_headers)

        assert resp.status_code == 200
        assert resp.json == {"success": True, "productsUnlinked": 1, "productsDeleted": 0}
        kept = db.session.get(Product, product_id)
        assert kept is not None
        assert kept.category_ids == [other_id]
        assert kept.name == "Cordless Drill"

    def test_cascade_rolls_back_as_a_unit(self, db_session, make_product, category):
        doomed = make_product("ROLL-1", [category])
        doomed_id, category_id = doomed.id, category.id

        # Fail the flush that removes the category; the product delete queued
        # before it must not stick either
        def fail_on_category_delete(session, flush_context, instances):
            if any(isinstance(obj, Category) for obj in session.deleted):
                raise RuntimeError("boom")

        event.listen(Session, "before_flush", fail_on_category_delete)
        try:
            with pytest.raises(RuntimeError):
                category_service.delete_category(category_id)
        finally:
            event.remove(Session, "before_flush", fail_on_category_delete)

        assert db.session.get(Category, category_id) is not None
        restored = db.session.get(Product, doomed_id)
        assert restored is not None
        assert restored.category_ids == [category_id]

    def test_delete_unknown_is_404(self, client, pm_headers):
        assert client.delete("/api/categories/nope", headers=pm_headers).status_code == 404
