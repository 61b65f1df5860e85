"""Datetime utilities with consistent timezone handling.

This module provides centralized datetime functions so that every datetime
flowing through the analytics engine is timezone-aware. Naive values are
assumed to be UTC.
"""

import calendar
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union


def now_utc() -> datetime:
    """Return current datetime in UTC timezone.

    Returns:
        Current datetime with timezone=UTC
    """
    return datetime.now(timezone.utc)


def ensure_aware(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure datetime is timezone-aware, assuming UTC if naive.

    Args:
        dt: Datetime to check/convert, or None

    Returns:
        Timezone-aware datetime, or None if input was None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=timezone.utc)

    return dt


def parse_datetime(value: Union[str, date, datetime, None]) -> Optional[datetime]:
    """Parse an ISO string, date or datetime into an aware datetime.

    Accepts a trailing ``Z`` UTC suffix and fractional seconds. Plain dates
    become midnight UTC.

    Raises:
        ValueError: If the string is not a recognizable ISO date/datetime
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)

    text = str(value).strip()
    if not text:
        return None
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    return ensure_aware(datetime.fromisoformat(text))


def start_of_day(dt: datetime) -> datetime:
    """Midnight of the calendar day containing ``dt`` (same tzinfo)."""
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(dt: datetime) -> datetime:
    """Last representable instant of the calendar day containing ``dt``."""
    return dt.replace(hour=23, minute=59, second=59, microsecond=999999)


def subtract_months(dt: datetime, months: int) -> datetime:
    """Move ``dt`` back by calendar months, clamping the day of month.

    31 March minus one month is the last day of February.
    """
    month_index = dt.year * 12 + (dt.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return dt.replace(year=year, month=month, day=min(dt.day, last_day))


def subtract_years(dt: datetime, years: int) -> datetime:
    """Move ``dt`` back by calendar years (29 Feb clamps to 28 Feb)."""
    return subtract_months(dt, years * 12)


def date_key(dt: datetime) -> str:
    """Calendar date of ``dt`` as an ISO ``YYYY-MM-DD`` string."""
    return dt.date().isoformat()


def days_ceil(delta: timedelta) -> int:
    """Number of days in ``delta`` rounded up; partial days count as a whole day."""
    seconds = delta.total_seconds()
    whole, remainder = divmod(seconds, 86400)
    return int(whole) + (1 if remainder > 0 else 0)


def to_iso_string(dt: Optional[datetime]) -> Optional[str]:
    """Convert datetime to ISO string with timezone info.

    Args:
        dt: Datetime to convert, or None

    Returns:
        ISO format string with timezone, or None if input was None
    """
    if dt is None:
        return None

    aware_dt = ensure_aware(dt)
    return aware_dt.isoformat()
