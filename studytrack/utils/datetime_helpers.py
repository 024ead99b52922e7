"""
Calendar Date Utilities

Every streak decision is made on calendar dates, never on timestamps:
1. "Today" is the date in the user's local time zone
2. Dates cross the storage boundary as ISO strings (YYYY-MM-DD)
3. Day differences are whole days, independent of time-of-day
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Protocol, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DateLike = Union[date, str]


class Clock(Protocol):
    """Source of the current calendar date"""

    def today(self) -> str:
        """Return today's date as YYYY-MM-DD"""
        ...


class SystemClock:
    """
    Wall clock in the user's time zone

    Args:
        tz_name: IANA zone name. None or "" uses the host's local zone.
    """

    def __init__(self, tz_name: Optional[str] = None):
        self.tz: Optional[ZoneInfo] = None
        if tz_name:
            try:
                self.tz = ZoneInfo(tz_name)
            except (ZoneInfoNotFoundError, ValueError) as e:
                logger.error(f"Invalid timezone '{tz_name}', using local time: {e}")

    def now(self) -> datetime:
        if self.tz is None:
            return datetime.now().astimezone()
        return datetime.now(self.tz)

    def today(self) -> str:
        return self.now().date().isoformat()


class FixedClock:
    """Clock pinned to a given date; tests move it explicitly"""

    def __init__(self, today: DateLike):
        self._today = parse_iso_date(today)

    def today(self) -> str:
        return self._today.isoformat()

    def set(self, value: DateLike) -> None:
        self._today = parse_iso_date(value)

    def advance(self, days: int = 1) -> str:
        self._today += timedelta(days=days)
        return self.today()


def parse_iso_date(value: DateLike) -> date:
    """
    Parse a YYYY-MM-DD string (or pass through a date)

    Raises:
        ValueError: If value is not an ISO calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Expected ISO date string, got {type(value).__name__}")
    return date.fromisoformat(value.strip())


def days_between(later: DateLike, earlier: DateLike) -> int:
    """
    Signed number of calendar days from `earlier` to `later`

    Example:
        days_between("2024-01-03", "2024-01-01") == 2
        days_between("2024-01-01", "2024-01-03") == -2
    """
    return (parse_iso_date(later) - parse_iso_date(earlier)).days
