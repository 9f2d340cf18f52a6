"""Shared service helpers."""

from datetime import datetime, date
from typing import Optional

from ..exceptions import InvalidDateRangeError, InvalidRequestError
from ..models.category import Category
from ..models.store import Store
from ..utils.constants import DATE_FMT


def _store() -> Store:
    """Get the shared store instance."""
    return Store.instance()


# -------- date & number helpers --------
def parse_date(s: str) -> date:
    """Parse YYYY-MM-DD string to date."""
    return datetime.strptime(s, DATE_FMT).date()


def as_date(x, field: str = "date") -> date:
    """Coerce a date, datetime or 'YYYY-MM-DD' (optionally with a time part) to a date."""
    if isinstance(x, datetime):
        return x.date()
    if isinstance(x, date):
        return x
    if isinstance(x, str) and x.strip():
        try:
            return parse_date(x.split("T", 1)[0].strip())
        except ValueError:
            pass
    raise InvalidDateRangeError(f"Error: {field} must be a date in YYYY-MM-DD format", **{field: x})


def as_int(value, field: str, minimum: Optional[int] = None) -> int:
    """Coerce ``value`` to int, rejecting bools, junk and values below ``minimum``."""
    if isinstance(value, bool):
        raise InvalidRequestError(f"Error: {field} must be a whole number", **{field: value})
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise InvalidRequestError(f"Error: {field} must be a whole number", **{field: value}) from None
    if isinstance(value, float) and value != n:
        raise InvalidRequestError(f"Error: {field} must be a whole number", **{field: value})
    if minimum is not None and n < minimum:
        raise InvalidRequestError(f"Error: {field} must be at least {minimum}", **{field: value})
    return n


def _lc(s):
    """Safe lowercase for case-insensitive compare."""
    return (s or "").lower()


def parse_category(value) -> Category:
    """Category from its name; unknown names are a bad request."""
    try:
        return Category.parse(value)
    except ValueError:
        raise InvalidRequestError(
            "Error: category must be one of " + "/".join(c.name for c in Category), category=value
        ) from None
