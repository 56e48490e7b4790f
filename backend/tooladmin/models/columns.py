# Overview: Shared column defaults and serialization helpers for the models.

from __future__ import annotations

import uuid
from decimal import Decimal


def new_id() -> str:
    return str(uuid.uuid4())


def money(value: Decimal | None) -> str | None:
    """Two-decimal string for Numeric money columns ("129.99")."""
    if value is None:
        return None
    return f"{Decimal(value):.2f}"


def decimal_str(value: Decimal | None) -> str | None:
    if value is None:
        return None
    return str(value)
