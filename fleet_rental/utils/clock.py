"""Injectable clocks so booking rules can be tested against fixed times."""
from datetime import date, datetime, timedelta

import pytz

from .constants import DEFAULT_TIMEZONE


class SystemClock:
    """Wall clock in a fixed business timezone (pytz)."""

    def __init__(self, timezone: str = DEFAULT_TIMEZONE):
        self.tz = pytz.timezone(timezone)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()


class FixedClock:
    """
    A clock frozen at ``at`` until moved with ``advance``.
    Naive datetimes are taken as UTC.
    """

    def __init__(self, at: datetime):
        if at.tzinfo is None:
            at = pytz.utc.localize(at)
        self._now = at

    def now(self) -> datetime:
        return self._now

    def today(self) -> date:
        return self._now.date()

    def advance(self, days: int = 0, hours: int = 0) -> None:
        self._now = self._now + timedelta(days=days, hours=hours)
