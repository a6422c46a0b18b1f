from __future__ import annotations

from datetime import datetime
from typing import Optional

# Sale timestamps are stored as local wall-clock minutes, e.g. "2025-06-15 14:05".
SALE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"


def localnow() -> datetime:
    """Register-side 'now' (naive local time, like the till clock)."""
    return datetime.now()


def format_sale_timestamp(dt: datetime) -> str:
    return dt.strftime(SALE_TIMESTAMP_FORMAT)


def day_prefix(dt: datetime) -> str:
    """The YYYY-MM-DD prefix used to match sale timestamps to a calendar day."""
    return dt.strftime("%Y-%m-%d")


def is_same_day(created_at: Optional[str], day: datetime) -> bool:
    """
    True when a stored sale timestamp falls on ``day``.

    Works for both the local "YYYY-MM-DD HH:MM" form and ISO-8601 strings
    coming back from the remote store, since both start with the date.
    """
    if not created_at:
        return False
    return created_at.startswith(day_prefix(day))
