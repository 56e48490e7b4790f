# Overview: Aggregate figures for the dashboard landing page.

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from flask import current_app
from sqlalchemy import func

from ..extensions import db
from ..models import Inventory, Order, OrderStatus
from ..models.columns import money
from ..time_utils import start_of_month, utcnow
from . import warranty_service


REVENUE_STATUSES = (OrderStatus.DELIVERED, OrderStatus.SHIPPED)
ACTIVE_STATUSES = (OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING)


def get_metrics(now: datetime | None = None) -> dict:
    """
    monthlyRevenue: sum of totalAmount for shipped/delivered orders created this month
    activeOrders: pending + confirmed + processing
    lowStockItems: inventory rows at or below LOW_STOCK_THRESHOLD available
    warrantyClaimsCount: warranties with a claim date this month
    expiringWarranties: effectively active warranties ending within WARRANTY_EXPIRING_DAYS
    """
    now = now or utcnow()
    month_start = start_of_month(now)

    revenue = (
        db.session.query(func.coalesce(func.sum(Order.total_amount), 0))
        .filter(Order.created_at >= month_start, Order.status.in_(REVENUE_STATUSES))
        .scalar()
    )

    active_orders = (
        db.session.query(func.count(Order.id))
        .filter(Order.status.in_(ACTIVE_STATUSES))
        .scalar()
    )

    low_stock = (
        db.session.query(func.count(Inventory.id))
        .filter(Inventory.quantity_available <= current_app.config["LOW_STOCK_THRESHOLD"])
        .scalar()
    )

    return {
        "monthlyRevenue": money(Decimal(str(revenue or 0))),
        "activeOrders": active_orders or 0,
        "lowStockItems": low_stock or 0,
        "warrantyClaimsCount": warranty_service.count_claims_this_month(now),
        "expiringWarranties": warranty_service.count_expiring(now),
    }
