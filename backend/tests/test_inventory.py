"""
Inventory tests: available stock is always on-hand minus reserved.
"""
import pytest

from tooladmin.models import Inventory, UserRole


@pytest.fixture
def wh_headers(headers_for):
    return headers_for(UserRole.WAREHOUSE_MANAGER)


@pytest.fixture
def stock(db_session, product):
    row = Inventory(product_id=product.id, location="A1-3", quantity_on_hand=50, quantity_reserved=5, quantity_available=45)
    db_session.add(row)
    db_session.commit()
    return row


class TestInventoryWrites:

    def test_available_is_computed(self, client, product, wh_headers):
        resp = client.post(
            "/api/inventory",
            json={"productId": product.id, "location": "A1-3", "quantityOnHand": 50, "quantityReserved": 5},
            headers=wh_headers,
        )

        assert resp.status_code == 201
        assert resp.json["quantityAvailable"] == 45
        assert resp.json["product"]["sku"] == "DRL-001"

    def test_matching_available_is_accepted(self, client, product, wh_headers):
        resp = client.post(
            "/api/inventory",
            json={"productId": product.id, "location": "B1", "quantityOnHand": 10, "quantityReserved": 2, "quantityAvailable": 8},
            headers=wh_headers,
        )
        assert resp.status_code == 201

    def test_mismatched_available_is_400(self, client, product, wh_headers):
        resp = client.post(
            "/api/inventory",
            json={"productId": product.id, "location": "B1", "quantityOnHand": 10, "quantityReserved": 2, "quantityAvailable": 10},
            headers=wh_headers,
        )

        assert resp.status_code == 400
        assert resp.json["fields"] == {"quantityAvailable": "expected 8"}

    def test_reserved_above_on_hand_is_400(self, client, product, wh_headers):
        resp = client.post(
            "/api/inventory",
            json={"productId": product.id, "location": "B1", "quantityOnHand": 1, "quantityReserved": 2},
            headers=wh_headers,
        )
        assert resp.status_code == 400

    def test_negative_quantity_is_400(self, client, product, wh_headers):
        resp = client.post(
            "/api/inventory",
            json={"productId": product.id, "location": "B1", "quantityOnHand": -1},
            headers=wh_headers,
        )
        assert resp.status_code == 400

    def test_unknown_product_is_400(self, client, wh_headers):
        resp = client.post(
            "/api/inventory",
            json={"productId": "missing", "location": "B1", "quantityOnHand": 1},
            headers=wh_headers,
        )
        assert resp.status_code == 400

    def test_same_product_and_location_is_conflict(self, client, stock, product, wh_headers):
        resp = client.post(
            "/api/inventory",
            json={"productId": product.id, "location": "A1-3", "quantityOnHand": 1},
            headers=wh_headers,
        )
        assert resp.status_code == 409

    def test_update_recomputes_available(self, client, stock, wh_headers):
        resp = client.put(f"/api/inventory/{stock.id}", json={"quantityReserved": 20}, headers=wh_headers)

        assert resp.status_code == 200
        assert resp.json["quantityOnHand"] == 50
        assert resp.json["quantityAvailable"] == 30

    def test_update_rejected_leaves_row_unchanged(self, client, stock, wh_headers):
        stock_id = stock.id
        resp = client.put(f"/api/inventory/{stock_id}", json={"quantityReserved": 51}, headers=wh_headers)
        assert resp.status_code == 400

        body = client.get(f"/api/inventory/{stock_id}", headers=wh_headers).json
        assert body["quantityReserved"] == 5
        assert body["quantityAvailable"] == 45


class TestInventoryReads:

    def test_list_filters(self, client, stock, product, wh_headers):
        resp = client.get(f"/api/inventory?productId={product.id}&location=A1-3", headers=wh_headers)
        assert resp.json["count"] == 1

        resp = client.get("/api/inventory?location=Z9", headers=wh_headers)
        assert resp.json["count"] == 0

    def test_low_stock_uses_threshold(self, client, db_session, stock, product, wh_headers):
        db_session.add(Inventory(product_id=product.id, location="C4", quantity_on_hand=3, quantity_available=3))
        db_session.commit()

        default = client.get("/api/inventory/low-stock", headers=wh_headers).json
        assert [r["location"] for r in default["items"]] == ["C4"]

        wide = client.get("/api/inventory/low-stock?threshold=45", headers=wh_headers).json
        assert [r["location"] for r in wide["items"]] == ["C4", "A1-3"]

    def test_bad_threshold_is_400(self, client, wh_headers):
        assert client.get("/api/inventory/low-stock?threshold=lots", headers=wh_headers).status_code == 400

    def test_needs_reorder_flag(self, client, db_session, product, wh_headers):
        row = Inventory(product_id=product.id, location="D1", quantity_on_hand=8, quantity_available=8, reorder_point=10)
        db_session.add(row)
        db_session.commit()

        body = client.get(f"/api/inventory/{row.id}", headers=wh_headers).json
        assert body["needsReorder"] is True
