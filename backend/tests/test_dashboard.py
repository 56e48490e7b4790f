"""
Dashboard tests: the landing-page figures and the recent orders feed.
"""
from datetime import timedelta
from decimal import Decimal

import pytest

from tooladmin.models import Inventory, Order, OrderStatus, WarrantyStatus
from tooladmin.time_utils import start_of_month, utcnow


@pytest.fixture
def make_order(db_session, customer):
    counter = iter(range(1, 100))

    def _make(status: OrderStatus, total: str, created_at=None) -> Order:
        order = Order(
            order_number=f"ORD-20260101-{next(counter):06d}",
            customer_id=customer.id,
            status=status,
            subtotal=Decimal(total),
            total_amount=Decimal(total),
        )
        if created_at is not None:
            order.created_at = created_at
        db_session.add(order)
        db_session.commit()
        return order
    return _make


def test_metrics(client, db_session, make_order, customer, product, make_warranty, admin_headers):
    make_order(OrderStatus.DELIVERED, "100.10")
    make_order(OrderStatus.SHIPPED, "50.05")
    make_order(OrderStatus.PENDING, "999.00")
    make_order(OrderStatus.CONFIRMED, "1.00")
    make_order(OrderStatus.PROCESSING, "1.00")
    make_order(OrderStatus.CANCELLED, "75.00")
    make_order(OrderStatus.DELIVERED, "400.00", created_at=start_of_month(utcnow()) - timedelta(days=1))

    db_session.add_all([
        Inventory(product_id=product.id, location="A1", quantity_on_hand=3, quantity_available=3),
        Inventory(product_id=product.id, location="A2", quantity_on_hand=10, quantity_available=10),
        Inventory(product_id=product.id, location="A3", quantity_on_hand=40, quantity_available=40),
    ])
    db_session.commit()

    make_warranty(customer, product, end_in_days=200, status=WarrantyStatus.CLAIMED,
                  claim_reason="Cracked housing", claim_date=utcnow())
    make_warranty(customer, product, end_in_days=12)
    make_warranty(customer, product, end_in_days=-1)

    resp = client.get("/api/dashboard/metrics", headers=admin_headers)

    assert resp.status_code == 200
    assert resp.json == {
        "monthlyRevenue": "150.15",
        "activeOrders": 3,
        "lowStockItems": 2,
        "warrantyClaimsCount": 1,
        "expiringWarranties": 1,
    }


def test_metrics_on_empty_database(client, admin_headers):
    body = client.get("/api/dashboard/metrics", headers=admin_headers).json
    assert body["monthlyRevenue"] == "0.00"
    assert body["activeOrders"] == 0


def test_recent_orders_newest_first(client, make_order, admin_headers):
    now = utcnow()
    old = make_order(OrderStatus.PENDING, "1.00", created_at=now - timedelta(days=2))
    new = make_order(OrderStatus.PENDING, "2.00", created_at=now)

    body = client.get("/api/dashboard/recent-orders?limit=1", headers=admin_headers).json

    assert [o["id"] for o in body["items"]] == [new.id]
    assert body["items"][0]["customer"]["contactFirstName"] == "Dana"
    assert old.id != new.id


def test_recent_orders_limit_must_be_positive(client, admin_headers):
    assert client.get("/api/dashboard/recent-orders?limit=0", headers=admin_headers).status_code == 400
