"""
Customer accounts, suppliers (who supply products) and vendors (dealers).
"""
import pytest

from tooladmin.extensions import db
from tooladmin.models import Product, UserRole


@pytest.fixture
def sales_headers(headers_for):
    return headers_for(UserRole.SALES_REPRESENTATIVE)


class TestCustomers:

    def test_create_defaults(self, client, sales_headers):
        resp = client.post("/api/customers", json={
            "contactFirstName": "Lee",
            "contactLastName": "Mason",
            "email": "lee@masonry.test",
            "creditLimit": 5000,
        }, headers=sales_headers)

        assert resp.status_code == 201
        assert resp.json["customerType"] == "individual"
        assert resp.json["creditLimit"] == "5000.00"
        assert resp.json["isActive"] is True

    def test_bad_email_is_400(self, client, sales_headers):
        resp = client.post("/api/customers", json={
            "contactFirstName": "Lee", "contactLastName": "Mason", "email": "not-an-email",
        }, headers=sales_headers)
        assert resp.status_code == 400
        assert resp.json["fields"] == {"email": "invalid email"}

    def test_duplicate_email_is_conflict(self, client, customer, sales_headers):
        resp = client.post("/api/customers", json={
            "contactFirstName": "Other", "contactLastName": "Person", "email": customer.email,
        }, headers=sales_headers)
        assert resp.status_code == 409

    def test_search_and_type_filter(self, client, customer, sales_headers):
        client.post("/api/customers", json={
            "contactFirstName": "Sam", "contactLastName": "Solo", "email": "sam@home.test",
        }, headers=sales_headers)

        by_company = client.get("/api/customers?search=builder", headers=sales_headers).json
        assert [c["id"] for c in by_company["items"]] == [customer.id]

        contractors = client.get("/api/customers?type=professional_contractor", headers=sales_headers).json
        assert contractors["count"] == 1

        assert client.get("/api/customers?type=alien", headers=sales_headers).status_code == 400

    def test_search_treats_wildcards_literally(self, client, customer, sales_headers):
        def ids(query):
            resp = client.get("/api/customers", query_string={"search": query}, headers=sales_headers)
            return [c["id"] for c in resp.json["items"]]

        assert ids("Bu_lder") == []
        assert ids("%") == []
        assert ids("bros llc") == [customer.id]

    def test_update(self, client, customer, sales_headers):
        resp = client.put(f"/api/customers/{customer.id}", json={"taxExempt": True, "paymentTerms": 30}, headers=sales_headers)
        assert resp.status_code == 200
        assert resp.json["taxExempt"] is True
        assert resp.json["paymentTerms"] == 30


class TestSuppliers:

    def test_delete_clears_product_links(self, client, make_product, category, headers_for):
        pm = headers_for(UserRole.PRODUCT_MANAGER)
        supplier = client.post("/api/suppliers", json={"name": "Bolt Co", "contactEmail": "sales@bolt.test"}, headers=pm).json
        product = make_product("SUP-1", [category], supplier_id=supplier["id"])
        product_id = product.id

        resp = client.delete(f"/api/suppliers/{supplier['id']}", headers=pm)

        assert resp.json == {"success": True, "productsCleared": 1}
        db.session.expire_all()
        assert db.session.get(Product, product_id).supplier_id is None
        assert client.get(f"/api/suppliers/{supplier['id']}", headers=pm).status_code == 404

    def test_update_unknown_supplier_is_404(self, client, headers_for):
        pm = headers_for(UserRole.PRODUCT_MANAGER)
        resp = client.put("/api/suppliers/none", json={"name": "X"}, headers=pm)
        assert resp.status_code == 404


class TestVendors:

    def test_create_update_and_filter(self, client, headers_for):
        ops = headers_for(UserRole.OPERATIONS_MANAGER)
        vendor = client.post("/api/vendors", json={
            "name": "Acme Dealers",
            "isAuthorizedDealer": True,
            "paymentTerms": 45,
            "address": {"city": "Springfield"},
        }, headers=ops)
        assert vendor.status_code == 201
        assert vendor.json["isAuthorizedDealer"] is True

        resp = client.put(f"/api/vendors/{vendor.json['id']}", json={"isActive": False}, headers=ops)
        assert resp.json["isActive"] is False

        assert client.get("/api/vendors?active=true", headers=ops).json["count"] == 0
        assert client.get("/api/vendors?active=false", headers=ops).json["count"] == 1

    def test_negative_payment_terms_is_400(self, client, headers_for):
        ops = headers_for(UserRole.OPERATIONS_MANAGER)
        resp = client.post("/api/vendors", json={"name": "Bad", "paymentTerms": -1}, headers=ops)
        assert resp.status_code == 400
