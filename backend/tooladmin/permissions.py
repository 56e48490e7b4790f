# Overview: Role policy table; the single place that says which roles may call which endpoint.

"""
Role-based access control.

ROUTE_POLICY maps a Flask endpoint name ("<blueprint>.<view function>") to the
set of roles allowed to call it. Endpoints not listed are open to every
authenticated, active user. The table is checked by require_auth() in
decorators.py after the bearer token is verified, so there are no per-route
role lists scattered through the routes.
"""
from __future__ import annotations

from .models.enums import UserRole


SUPER_ADMIN = UserRole.SUPER_ADMIN
OPERATIONS_MANAGER = UserRole.OPERATIONS_MANAGER
PRODUCT_MANAGER = UserRole.PRODUCT_MANAGER
CUSTOMER_SERVICE = UserRole.CUSTOMER_SERVICE
SALES_REPRESENTATIVE = UserRole.SALES_REPRESENTATIVE
WAREHOUSE_MANAGER = UserRole.WAREHOUSE_MANAGER
TECHNICAL_SUPPORT = UserRole.TECHNICAL_SUPPORT


# -- ROLE GROUPS --

ADMIN_ONLY = frozenset({SUPER_ADMIN})
CATALOG_EDITORS = frozenset({SUPER_ADMIN, PRODUCT_MANAGER})
CUSTOMER_CREATORS = frozenset({SUPER_ADMIN, OPERATIONS_MANAGER, SALES_REPRESENTATIVE})
CUSTOMER_EDITORS = frozenset({SUPER_ADMIN, OPERATIONS_MANAGER, SALES_REPRESENTATIVE, CUSTOMER_SERVICE})
ORDER_EDITORS = frozenset({SUPER_ADMIN, OPERATIONS_MANAGER, SALES_REPRESENTATIVE, CUSTOMER_SERVICE})
INVENTORY_VIEWERS = frozenset({SUPER_ADMIN, OPERATIONS_MANAGER, WAREHOUSE_MANAGER})
INVENTORY_CREATORS = frozenset({SUPER_ADMIN, WAREHOUSE_MANAGER})
INVENTORY_EDITORS = frozenset({SUPER_ADMIN, OPERATIONS_MANAGER, WAREHOUSE_MANAGER})
WARRANTY_EDITORS = frozenset({SUPER_ADMIN, CUSTOMER_SERVICE, TECHNICAL_SUPPORT})
VENDOR_EDITORS = frozenset({SUPER_ADMIN, OPERATIONS_MANAGER})
FEEDBACK_MODERATORS = frozenset({SUPER_ADMIN, PRODUCT_MANAGER, CUSTOMER_SERVICE})


ROUTE_POLICY: dict[str, frozenset[UserRole]] = {
    # Users
    "users.list_users": ADMIN_ONLY,
    "users.create_user": ADMIN_ONLY,
    "users.get_user": ADMIN_ONLY,
    "users.update_user": ADMIN_ONLY,

    # Customers
    "customers.create_customer": CUSTOMER_CREATORS,
    "customers.update_customer": CUSTOMER_EDITORS,

    # Catalog
    "categories.create_category": CATALOG_EDITORS,
    "categories.update_category": CATALOG_EDITORS,
    "categories.delete_category": CATALOG_EDITORS,
    "products.create_product": CATALOG_EDITORS,
    "products.update_product": CATALOG_EDITORS,
    "products.delete_product": CATALOG_EDITORS,
    "products.create_variant": CATALOG_EDITORS,
    "variants.update_variant": CATALOG_EDITORS,
    "variants.delete_variant": CATALOG_EDITORS,
    "suppliers.create_supplier": CATALOG_EDITORS,
    "suppliers.update_supplier": CATALOG_EDITORS,
    "suppliers.delete_supplier": CATALOG_EDITORS,

    # Ratings / reviews moderation
    "ratings.moderate_rating": FEEDBACK_MODERATORS,
    "ratings.delete_rating": FEEDBACK_MODERATORS,
    "reviews.delete_review": FEEDBACK_MODERATORS,

    # Inventory
    "inventory.list_inventory": INVENTORY_VIEWERS,
    "inventory.get_inventory": INVENTORY_VIEWERS,
    "inventory.create_inventory": INVENTORY_CREATORS,
    "inventory.update_inventory": INVENTORY_EDITORS,

    # Orders
    "orders.create_order": ORDER_EDITORS,
    "orders.update_order": ORDER_EDITORS,
    "orders.update_order_status": ORDER_EDITORS,

    # Warranties
    "warranties.create_warranty": WARRANTY_EDITORS,
    "warranties.update_warranty": WARRANTY_EDITORS,
    "warranties.claim_warranty": WARRANTY_EDITORS,
    "warranties.resolve_warranty": WARRANTY_EDITORS,
    "warranties.void_warranty": WARRANTY_EDITORS,

    # Vendors
    "vendors.create_vendor": VENDOR_EDITORS,
    "vendors.update_vendor": VENDOR_EDITORS,
}


def allowed_roles(endpoint: str | None) -> frozenset[UserRole] | None:
    """Allowed roles for an endpoint, or None when any authenticated role may call it."""
    if endpoint is None:
        return None
    return ROUTE_POLICY.get(endpoint)


def is_allowed(role: UserRole, endpoint: str | None) -> bool:
    roles = allowed_roles(endpoint)
    return roles is None or role in roles
