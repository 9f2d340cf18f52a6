"""Timestamp and money formatting helpers for API output."""
from datetime import datetime, date, timezone
from decimal import Decimal

import pytz

from .constants import DEFAULT_TIMEZONE


def fmt_iso_local(value, tz_name: str = DEFAULT_TIMEZONE) -> str:
    """
    Render a timestamp as ISO-8601 in the business timezone.
    Supports:
      - datetime objects (naive ones are assumed UTC)
      - 'YYYY-MM-DDTHH:MM:SS' / 'YYYY-MM-DD HH:MM:SS', with 'Z' or an offset
      - 'YYYY-MM-DD' and date objects, returned as the plain date
    On parse error, returns the original value.
    """
    if value is None:
        return ""

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return value.isoformat()
    else:
        s = str(value).strip()
        if not s:
            return ""
        s_norm = s.replace("T", " ")
        if s_norm.endswith("Z"):
            s_norm = s_norm[:-1] + "+00:00"
        if ":" not in s_norm:
            # Date-only
            try:
                return datetime.strptime(s_norm, "%Y-%m-%d").date().isoformat()
            except ValueError:
                return s
        try:
            dt = datetime.fromisoformat(s_norm)
        except ValueError:
            return s

    # If naive datetime, assume UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    local = dt.astimezone(pytz.timezone(tz_name))
    return local.isoformat(timespec="seconds")


def fmt_money(value: Decimal) -> str:
    """Two-decimal string with thousands separators, e.g. '37,350.00'."""
    return f"{Decimal(value):,.2f}"
