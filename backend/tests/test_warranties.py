"""
Warranty tests.

Verifies:
- An active warranty past its end date reads as expired everywhere
- Status and expiring-soon filters use the same rule
- claim / resolve / void follow the warranty state machine
- `flask warranties expire` persists what reads already report
"""
from datetime import timedelta

import pytest

from tooladmin.extensions import db
from tooladmin.models import UserRole, Warranty, WarrantyStatus
from tooladmin.time_utils import to_utc_z, utcnow


@pytest.fixture
def cs_headers(headers_for):
    return headers_for(UserRole.CUSTOMER_SERVICE)


class TestEffectiveStatus:

    def test_overdue_active_reads_as_expired(self, client, customer, product, make_warranty, cs_headers):
        warranty = make_warranty(customer, product, end_in_days=-1)

        body = client.get(f"/api/warranties/{warranty.id}", headers=cs_headers).json

        assert body["status"] == "expired"
        assert body["isExpiringSoon"] is False
        assert db.session.get(Warranty, warranty.id).status == WarrantyStatus.ACTIVE

    def test_status_filter_uses_effective_status(self, client, customer, product, make_warranty, cs_headers):
        live = make_warranty(customer, product, end_in_days=100)
        overdue = make_warranty(customer, product, end_in_days=-5)
        stored_expired = make_warranty(customer, product, end_in_days=-30, status=WarrantyStatus.EXPIRED)
        make_warranty(customer, product, end_in_days=-3, status=WarrantyStatus.VOIDED)

        def ids(status):
            items = client.get(f"/api/warranties?status={status}", headers=cs_headers).json["items"]
            return {w["id"] for w in items}

        assert ids("active") == {live.id}
        assert ids("expired") == {overdue.id, stored_expired.id}
        assert len(ids("voided")) == 1

    def test_expiring_soon(self, client, customer, product, make_warranty, cs_headers):
        soon = make_warranty(customer, product, end_in_days=10)
        make_warranty(customer, product, end_in_days=90)
        make_warranty(customer, product, end_in_days=-1)
        make_warranty(customer, product, end_in_days=5, status=WarrantyStatus.CLAIMED, claim_reason="Broken")

        items = client.get("/api/warranties?expiringSoon=true", headers=cs_headers).json["items"]

        assert [w["id"] for w in items] == [soon.id]
        assert items[0]["isExpiringSoon"] is True

    def test_filter_by_customer_and_product(self, client, db_session, customer, product, make_warranty, cs_headers):
        make_warranty(customer, product, end_in_days=100)

        resp = client.get(f"/api/warranties?customerId={customer.id}&productId={product.id}", headers=cs_headers)
        assert resp.json["count"] == 1
        assert client.get("/api/warranties?customerId=other", headers=cs_headers).json["count"] == 0


class TestWarrantyWrites:

    def _payload(self, customer, product, **overrides):
        now = utcnow()
        payload = {
            "customerId": customer.id,
            "productId": product.id,
            "serialNumber": "SN-0001",
            "purchaseDate": to_utc_z(now - timedelta(days=1)),
            "warrantyStartDate": to_utc_z(now - timedelta(days=1)),
            "warrantyEndDate": to_utc_z(now + timedelta(days=365)),
        }
        payload.update(overrides)
        return payload

    def test_create_is_active(self, client, customer, product, cs_headers):
        resp = client.post("/api/warranties", json=self._payload(customer, product), headers=cs_headers)

        assert resp.status_code == 201
        assert resp.json["status"] == "active"
        assert resp.json["serialNumber"] == "SN-0001"

    def test_create_with_other_status_is_400(self, client, customer, product, cs_headers):
        resp = client.post("/api/warranties", json=self._payload(customer, product, status="claimed"), headers=cs_headers)
        assert resp.status_code == 400

    def test_end_before_start_is_400(self, client, customer, product, cs_headers):
        now = utcnow()
        payload = self._payload(
            customer, product,
            warrantyStartDate=to_utc_z(now),
            warrantyEndDate=to_utc_z(now - timedelta(days=1)),
        )
        assert client.post("/api/warranties", json=payload, headers=cs_headers).status_code == 400

    def test_start_before_purchase_is_400(self, client, customer, product, cs_headers):
        now = utcnow()
        payload = self._payload(customer, product, purchaseDate=to_utc_z(now + timedelta(days=2)))
        assert client.post("/api/warranties", json=payload, headers=cs_headers).status_code == 400

    def test_unknown_product_is_400(self, client, customer, product, cs_headers):
        payload = self._payload(customer, product, productId="nope")
        assert client.post("/api/warranties", json=payload, headers=cs_headers).status_code == 400

    def test_null_product_is_400(self, client, customer, product, cs_headers):
        payload = self._payload(customer, product, productId=None)

        resp = client.post("/api/warranties", json=payload, headers=cs_headers)

        assert resp.status_code == 400
        assert resp.json["fields"] == {"productId": "required"}
        assert db.session.query(Warranty).count() == 0

    def test_patch_edits_fields(self, client, customer, product, make_warranty, cs_headers):
        warranty = make_warranty(customer, product, end_in_days=100)
        resp = client.patch(f"/api/warranties/{warranty.id}", json={"serialNumber": "SN-9"}, headers=cs_headers)
        assert resp.status_code == 200
        assert resp.json["serialNumber"] == "SN-9"

    def test_patch_to_claimed_needs_reason(self, client, customer, product, make_warranty, cs_headers):
        warranty = make_warranty(customer, product, end_in_days=100)
        url = f"/api/warranties/{warranty.id}"

        assert client.patch(url, json={"status": "claimed"}, headers=cs_headers).status_code == 400

        resp = client.patch(url, json={"status": "claimed", "claimReason": "Motor burnt"}, headers=cs_headers)
        assert resp.status_code == 200
        assert resp.json["status"] == "claimed"
        assert resp.json["claimDate"] is not None


class TestWarrantyActions:

    def test_claim_then_resolve(self, client, customer, product, make_warranty, cs_headers):
        warranty = make_warranty(customer, product, end_in_days=100)

        resp = client.post(f"/api/warranties/{warranty.id}/claim", json={"claimReason": "Chuck slips"}, headers=cs_headers)
        assert resp.status_code == 200
        assert resp.json["status"] == "claimed"
        assert resp.json["claimReason"] == "Chuck slips"

        resp = client.post(f"/api/warranties/{warranty.id}/resolve", json={"resolutionNotes": "Replaced chuck"}, headers=cs_headers)
        assert resp.status_code == 200
        assert resp.json["status"] == "claimed"
        assert resp.json["resolutionNotes"] == "Replaced chuck"

    def test_claim_requires_reason(self, client, customer, product, make_warranty, cs_headers):
        warranty = make_warranty(customer, product, end_in_days=100)
        resp = client.post(f"/api/warranties/{warranty.id}/claim", json={"claimReason": "  "}, headers=cs_headers)
        assert resp.status_code == 400
        assert resp.json["fields"] == {"claimReason": "required"}

    def test_cannot_claim_expired(self, client, customer, product, make_warranty, cs_headers):
        warranty = make_warranty(customer, product, end_in_days=-1)
        warranty_id = warranty.id

        resp = client.post(f"/api/warranties/{warranty_id}/claim", json={"claimReason": "Late"}, headers=cs_headers)

        assert resp.status_code == 409
        stored = db.session.get(Warranty, warranty_id)
        assert stored.claim_reason is None
        assert stored.status == WarrantyStatus.ACTIVE

    def test_cannot_resolve_unclaimed(self, client, customer, product, make_warranty, cs_headers):
        warranty = make_warranty(customer, product, end_in_days=100)
        resp = client.post(f"/api/warranties/{warranty.id}/resolve", json={"resolutionNotes": "n/a"}, headers=cs_headers)
        assert resp.status_code == 409

    @pytest.mark.parametrize("status", [WarrantyStatus.ACTIVE, WarrantyStatus.CLAIMED])
    def test_void_from_active_or_claimed(self, client, customer, product, make_warranty, cs_headers, status):
        warranty = make_warranty(customer, product, end_in_days=100, status=status, claim_reason="x")
        resp = client.post(f"/api/warranties/{warranty.id}/void", headers=cs_headers)
        assert resp.status_code == 200
        assert resp.json["status"] == "voided"

    def test_voided_is_final(self, client, customer, product, make_warranty, cs_headers):
        warranty = make_warranty(customer, product, end_in_days=100, status=WarrantyStatus.VOIDED)
        assert client.post(f"/api/warranties/{warranty.id}/void", headers=cs_headers).status_code == 409
        resp = client.post(f"/api/warranties/{warranty.id}/claim", json={"claimReason": "x"}, headers=cs_headers)
        assert resp.status_code == 409


class TestExpireCommand:

    def test_expire_persists_overdue_rows(self, app, customer, product, make_warranty):
        overdue = make_warranty(customer, product, end_in_days=-2)
        live = make_warranty(customer, product, end_in_days=20)
        overdue_id, live_id = overdue.id, live.id

        result = app.test_cli_runner().invoke(args=["warranties", "expire"])

        assert result.exit_code == 0
        assert "Marked 1 warranty(ies) as expired" in result.output
        db.session.expire_all()
        assert db.session.get(Warranty, overdue_id).status == WarrantyStatus.EXPIRED
        assert db.session.get(Warranty, live_id).status == WarrantyStatus.ACTIVE
