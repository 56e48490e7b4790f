from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

# Every DateTime column holds UTC with tzinfo stripped; the wire uses "...Z".


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def start_of_month(now: Optional[datetime] = None) -> datetime:
    """Midnight on the 1st of the month containing `now`; the dashboard's revenue and claims window."""
    now = now or utcnow()
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Read a client timestamp (purchase dates, warranty windows, order dates)
    into the stored form. Blank means no value. Offsets are shifted to UTC;
    a bare date or a timestamp without an offset is taken as UTC already.

    Raises ValueError for text that is not ISO-8601.
    """
    if value is None or not value.strip():
        return None
    text = value.strip()
    if text[-1] in "zZ":
        text = text[:-1] + "+00:00"

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.replace(tzinfo=None)


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """Whole-second UTC timestamp for JSON bodies, e.g. 2026-10-19T08:30:00Z."""
    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.replace(microsecond=0).isoformat() + "Z"
