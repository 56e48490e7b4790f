# Overview: Dashboard aggregates; open to every authenticated role.

from flask import Blueprint, request

from ..decorators import require_auth
from ..services import dashboard_service, order_service
from ..validation import parse_int_arg


dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@dashboard_bp.get("/metrics")
@require_auth
def metrics():
    return dashboard_service.get_metrics()


@dashboard_bp.get("/recent-orders")
@require_auth
def recent_orders():
    """N most recent orders, each with its customer. ?limit= (default RECENT_ORDERS_LIMIT)."""
    limit = parse_int_arg(request.args.get("limit"), "limit", minimum=1)
    orders = order_service.recent_orders(limit)
    return {"items": [order_service.order_to_dict(o) for o in orders], "count": len(orders)}
