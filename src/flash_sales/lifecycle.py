"""Time-window rules for flash sales.

A sale is *effectively active* when its `isActive` flag is set and
`startDate <= now < endDate`. The flag alone is never enough.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

MISSING_ORDER = 999


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts a trailing 'Z'. Naive values are read as server local time.
    Returns None when the value cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed.astimezone(timezone.utc)


def is_effectively_active(sale: Dict[str, Any], now: datetime) -> bool:
    if not sale.get("isActive"):
        return False
    start = parse_timestamp(sale.get("startDate"))
    end = parse_timestamp(sale.get("endDate"))
    if start is None or end is None:
        logger.warning("Flash sale %s has an unreadable date window", sale.get("id"))
        return False
    return start <= now < end


def is_expired(sale: Dict[str, Any], now: datetime) -> bool:
    """True when endDate is strictly in the past. Unreadable dates never expire."""
    end = parse_timestamp(sale.get("endDate"))
    if end is None:
        return False
    return end < now


def order_key(sale: Dict[str, Any]) -> int:
    order = sale.get("order")
    if order is None or isinstance(order, bool):
        return MISSING_ORDER
    try:
        return int(order)
    except (TypeError, ValueError):
        return MISSING_ORDER


def active_sales(sales: List[Dict[str, Any]], now: datetime) -> List[Dict[str, Any]]:
    """Effectively-active sales sorted by `order`; ties keep storage order."""
    return sorted((s for s in sales if is_effectively_active(s, now)), key=order_key)
