# Overview: Closed value sets for role and status columns.

from __future__ import annotations

import enum

from ..extensions import db


class UserRole(str, enum.Enum):
    SUPER_ADMIN = "super_admin"
    OPERATIONS_MANAGER = "operations_manager"
    PRODUCT_MANAGER = "product_manager"
    CUSTOMER_SERVICE = "customer_service"
    SALES_REPRESENTATIVE = "sales_representative"
    WAREHOUSE_MANAGER = "warehouse_manager"
    TECHNICAL_SUPPORT = "technical_support"


class CustomerType(str, enum.Enum):
    INDIVIDUAL = "individual"
    PROFESSIONAL_CONTRACTOR = "professional_contractor"
    INDUSTRIAL_ACCOUNT = "industrial_account"
    GOVERNMENT_MUNICIPAL = "government_municipal"
    EDUCATIONAL_INSTITUTION = "educational_institution"


class OrderType(str, enum.Enum):
    RETAIL = "retail"
    BULK = "bulk"
    EMERGENCY = "emergency"
    WARRANTY = "warranty"
    RECURRING = "recurring"


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"


class WarrantyStatus(str, enum.Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    CLAIMED = "claimed"
    VOIDED = "voided"


class ModerationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


def enum_column_type(enum_cls: type[enum.Enum], name: str) -> db.Enum:
    """db.Enum storing the lowercase .value strings, with a CHECK constraint on SQLite."""
    return db.Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
        create_constraint=True,
    )
