from __future__ import annotations
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from tooladmin.time_utils import parse_iso_datetime

import enum
import re
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Boolean, Integer, Numeric, String, Text, DateTime, Enum, JSON
from sqlalchemy.orm import DeclarativeMeta

from .errors import ValidationError


# Maximum price: $99,999,999.99, the Numeric(10, 2) ceiling
MAX_PRICE = Decimal("99999999.99")
MAX_PRODUCT_IMAGES = 4
DIMENSION_UNITS = {"cm", "in"}
SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary), as column keys
    - required_on_create: fields required for POST
    - extra_fields: camelCase keys that are accepted but handled by the caller
      (e.g. categoryIds, items); they are left out of the returned patch
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore
    extra_fields: set[str] | None = None


def camel_to_snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def parse_decimal(value: Any, field: str, *, scale: int = 2) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    if isinstance(value, (int, float, Decimal)):
        raw = str(value)
    elif isinstance(value, str) and value.strip():
        raw = value.strip()
    else:
        raise ValidationError(f"{field} must be a number")
    try:
        dec = Decimal(raw)
    except InvalidOperation:
        raise ValidationError(f"{field} must be a number")
    if not dec.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    return dec.quantize(Decimal(1).scaleb(-scale), rounding=ROUND_HALF_UP)


def _coerce_value(col, field: str, value: Any):
    coltype = col.type

    if value is None:
        return None

    # Enums - closed value sets, unknown values rejected
    if isinstance(coltype, Enum) and coltype.enum_class is not None:
        enum_cls: type[enum.Enum] = coltype.enum_class
        if isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(value)
        except ValueError:
            allowed = ", ".join(m.value for m in enum_cls)
            raise ValidationError(f"{field} must be one of: {allowed}")

    # Integers - strict validation to reject floats and scientific notation
    if isinstance(coltype, Integer):
        # Already an int (but not bool which is a subclass of int)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        # String input - must be plain digits (with optional leading minus)
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValidationError(f"{field} must be an integer")
            # Reject scientific notation (e.g., "1e15", "1E10")
            if 'e' in stripped.lower():
                raise ValidationError(f"{field} must be a plain integer (scientific notation not allowed)")
            # Reject decimal points (e.g., "12.5")
            if '.' in stripped:
                raise ValidationError(f"{field} must be an integer (no decimals)")
            try:
                return int(stripped)
            except ValueError:
                raise ValidationError(f"{field} must be an integer")
        # Integral floats from JS clients (5.0) are fine, 5.5 is not
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise ValidationError(f"{field} must be an integer")

    # Numerics (money, weight) - Decimal at the column's scale
    if isinstance(coltype, Numeric):
        return parse_decimal(value, field, scale=coltype.scale if coltype.scale is not None else 2)

    # Booleans
    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        raise ValidationError(f"{field} must be a boolean")

    # Datetimes (accept ISO-8601 strings; normalize to UTC)
    if isinstance(coltype, DateTime):
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                dt = parse_iso_datetime(value)
            except ValueError:
                raise ValidationError(f"{field} must be an ISO-8601 datetime")
            if dt is None:
                raise ValidationError(f"{field} must be an ISO-8601 datetime")
            return dt
        raise ValidationError(f"{field} must be a datetime")

    # JSON - shape is checked by the enforce_rules_* helpers
    if isinstance(coltype, JSON):
        if not isinstance(value, (dict, list)):
            raise ValidationError(f"{field} must be a JSON object or array")
        return value

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        if not isinstance(value, (str, int, float)) or isinstance(value, bool):
            raise ValidationError(f"{field} must be a string")
        return str(value).strip()

    # Default: leave as-is
    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict keyed by column name with only writable fields.

    Payload keys are camelCase (as the dashboard sends them); error messages
    use the key the client sent.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    extra = policy.extra_fields or set()
    cols = _columns_by_key(model)

    keyed: dict[str, tuple[str, Any]] = {}
    for k, raw in payload.items():
        if k in extra:
            continue
        col_key = camel_to_snake(k)
        # Reject unknown / non-writable fields
        if col_key not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}", fields={k: "not allowed"})
        if col_key not in cols:
            raise ValidationError(f"Unknown field: {k}", fields={k: "unknown"})
        keyed[col_key] = (k, raw)

    required = policy.required_on_create or set()
    if not partial:
        missing = sorted(snake_to_camel(f) for f in required if f not in keyed)
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                fields={f: "required" for f in missing},
            )

    patch: dict = {}

    for col_key, (field, raw) in keyed.items():
        col = cols[col_key]

        # NULL handling
        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{field} cannot be null", fields={field: "cannot be null"})
            patch[col_key] = None
            continue

        val = _coerce_value(col, field, raw)

        # Blank string check for non-nullable text fields
        if isinstance(col.type, (String, Text)) and not isinstance(col.type, Enum) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{field} cannot be blank", fields={field: "cannot be blank"})

        # Max length check for String(n)
        if isinstance(col.type, String) and not isinstance(col.type, Enum) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(
                    f"{field} exceeds max length {col.type.length}",
                    fields={field: f"max length {col.type.length}"},
                )

        patch[col_key] = val

    return patch


def require_object(payload: Any) -> dict:
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    return payload


def _check_price(patch: dict, key: str, field: str, *, allow_negative: bool = False, allow_zero: bool = True) -> None:
    if key not in patch or patch[key] is None:
        return
    price = patch[key]
    if not allow_negative and price < 0:
        raise ValidationError(f"{field} must be >= 0")
    if not allow_zero and price == 0:
        raise ValidationError(f"{field} must be > 0")
    if abs(price) > MAX_PRICE:
        raise ValidationError(f"{field} cannot exceed {MAX_PRICE}")


def _check_url_list(value: Any, field: str, *, max_items: int | None = None) -> None:
    if not isinstance(value, list) or not all(isinstance(v, str) and v.strip() for v in value):
        raise ValidationError(f"{field} must be a list of non-empty strings")
    if max_items is not None and len(value) > max_items:
        raise ValidationError(f"Maximum {max_items} {field} allowed")


def validate_email(value: str | None, field: str = "email") -> None:
    if value is not None and not EMAIL_RE.match(value):
        raise ValidationError(f"{field} must be a valid email address", fields={field: "invalid email"})


def validate_address(value: Any, field: str) -> None:
    if value is None:
        return
    if not isinstance(value, dict):
        raise ValidationError(f"{field} must be an object")
    for k, v in value.items():
        if v is not None and not isinstance(v, str):
            raise ValidationError(f"{field}.{k} must be a string")


def enforce_rules_product(patch: dict) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.
    Keep these small and centralized.
    """
    _check_price(patch, "cost_price", "costPrice", allow_zero=False)
    _check_price(patch, "selling_price", "sellingPrice", allow_zero=False)
    _check_price(patch, "original_price", "originalPrice")

    if patch.get("discount_percentage") is not None:
        if not 0 <= patch["discount_percentage"] <= 100:
            raise ValidationError("discountPercentage must be between 0 and 100")

    if patch.get("weight") is not None and patch["weight"] <= 0:
        raise ValidationError("weight must be > 0")

    if patch.get("dimensions") is not None:
        dims = patch["dimensions"]
        if not isinstance(dims, dict):
            raise ValidationError("dimensions must be an object")
        for k in ("length", "width", "height"):
            v = dims.get(k)
            if isinstance(v, bool) or not isinstance(v, (int, float)) or v <= 0:
                raise ValidationError(f"dimensions.{k} must be a positive number")
        if dims.get("unit") not in DIMENSION_UNITS:
            raise ValidationError("dimensions.unit must be one of: cm, in")

    if "images" in patch:
        _check_url_list(patch["images"], "images", max_items=MAX_PRODUCT_IMAGES)
    if "tags" in patch:
        _check_url_list(patch["tags"], "tags")


def parse_category_ids(value: Any) -> list[str]:
    if not isinstance(value, list) or not value:
        raise ValidationError("At least one category is required", fields={"categoryIds": "required"})
    if not all(isinstance(v, str) and v.strip() for v in value):
        raise ValidationError("categoryIds must be a list of ids")
    # De-duplicate, keep order
    return list(dict.fromkeys(v.strip() for v in value))


def enforce_rules_variant(patch: dict) -> None:
    if "attributes" in patch:
        attrs = patch["attributes"]
        if not isinstance(attrs, list) or not attrs:
            raise ValidationError("At least one attribute is required", fields={"attributes": "required"})
        for attr in attrs:
            if not isinstance(attr, dict):
                raise ValidationError("attributes must be {type, value} objects")
            for k in ("type", "value"):
                v = attr.get(k)
                if not isinstance(v, str) or not v.strip():
                    raise ValidationError(f"Attribute {k} is required")
    if patch.get("stock_quantity") is not None and patch["stock_quantity"] < 0:
        raise ValidationError("stockQuantity cannot be negative")
    _check_price(patch, "additional_price", "additionalPrice", allow_negative=True)
    if "images" in patch:
        _check_url_list(patch["images"], "images")


def enforce_rules_star_rating(patch: dict) -> None:
    if "rating" in patch and patch["rating"] is not None:
        if not 1 <= patch["rating"] <= 5:
            raise ValidationError("rating must be between 1 and 5", fields={"rating": "1-5"})


def enforce_rules_category(patch: dict) -> None:
    if patch.get("slug") is not None and not SLUG_RE.match(patch["slug"]):
        raise ValidationError(
            "slug must be lowercase letters, digits and single hyphens",
            fields={"slug": "invalid format"},
        )


def enforce_rules_customer(patch: dict) -> None:
    validate_email(patch.get("email"))
    _check_price(patch, "credit_limit", "creditLimit")
    if patch.get("payment_terms") is not None and patch["payment_terms"] < 0:
        raise ValidationError("paymentTerms must be >= 0")
    validate_address(patch.get("address"), "address")


def enforce_rules_partner(patch: dict) -> None:
    validate_email(patch.get("contact_email"), "contactEmail")
    if patch.get("payment_terms") is not None and patch["payment_terms"] < 0:
        raise ValidationError("paymentTerms must be >= 0")
    if isinstance(patch.get("address"), dict):
        validate_address(patch["address"], "address")


def enforce_rules_inventory(patch: dict) -> None:
    for key, field in (
        ("quantity_on_hand", "quantityOnHand"),
        ("quantity_reserved", "quantityReserved"),
        ("reorder_point", "reorderPoint"),
        ("max_stock", "maxStock"),
    ):
        if patch.get(key) is not None and patch[key] < 0:
            raise ValidationError(f"{field} cannot be negative", fields={field: "must be >= 0"})


def enforce_rules_order_amounts(patch: dict) -> None:
    for key, field in (
        ("subtotal", "subtotal"),
        ("tax_amount", "taxAmount"),
        ("shipping_amount", "shippingAmount"),
        ("total_amount", "totalAmount"),
    ):
        _check_price(patch, key, field)
    validate_address(patch.get("shipping_address"), "shippingAddress")
    validate_address(patch.get("billing_address"), "billingAddress")


def enforce_rules_warranty_window(purchase: datetime, start: datetime, end: datetime) -> None:
    if end < start:
        raise ValidationError("warrantyEndDate must be on or after warrantyStartDate")
    if start < purchase:
        raise ValidationError("warrantyStartDate must be on or after purchaseDate")


def enforce_rules_password(password: Any) -> str:
    if not isinstance(password, str) or not password:
        raise ValidationError("password is required", fields={"password": "required"})
    return password


# -- QUERY STRING HELPERS --

def parse_bool_arg(value: str | None, name: str) -> bool | None:
    """'true'/'false' (any case) -> bool; missing -> None."""
    if value is None or value == "":
        return None
    lowered = value.strip().lower()
    if lowered in ("true", "1"):
        return True
    if lowered in ("false", "0"):
        return False
    raise ValidationError(f"{name} must be true or false", fields={name: "must be true or false"})


def parse_enum_arg(enum_cls: type[enum.Enum], value: str | None, name: str):
    if value is None or value == "":
        return None
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{name} must be one of: {allowed}", fields={name: "invalid value"})


def parse_int_arg(value: str | None, name: str, *, minimum: int = 0) -> int | None:
    if value is None or value == "":
        return None
    try:
        parsed = int(value)
    except ValueError:
        raise ValidationError(f"{name} must be an integer", fields={name: "must be an integer"})
    if parsed < minimum:
        raise ValidationError(f"{name} must be >= {minimum}", fields={name: f"must be >= {minimum}"})
    return parsed


LIKE_ESCAPE = "\\"


def substring_pattern(search: str) -> str:
    """ILIKE pattern matching `search` literally; use with escape=LIKE_ESCAPE."""
    term = search.strip()
    for char in (LIKE_ESCAPE, "%", "_"):
        term = term.replace(char, LIKE_ESCAPE + char)
    return f"%{term}%"


def require_text(payload: dict, key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} is required", fields={key: "required"})
    return value.strip()
