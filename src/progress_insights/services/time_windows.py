"""Date ranges, record filtering and time bucketing for analytics.

Period windows other than ``day`` are rolling: "week" is the seven days
ending at ``now``, not Monday to Sunday. Day-of-week bucketing, on the other
hand, uses the calendar weekday of each record. The two are deliberately
kept apart.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional, TypeVar

from ..utils.datetime import end_of_day, start_of_day, subtract_months, subtract_years

T = TypeVar("T")

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


class Period(Enum):
    """Reporting periods accepted by the stats report."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @classmethod
    def parse(cls, raw) -> "Period":
        """Parse a period token; anything unknown means a week."""
        if isinstance(raw, Period):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.WEEK


@dataclass(frozen=True)
class DateRange:
    """Inclusive [start, end] window."""
    start: datetime
    end: datetime

    def __contains__(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


def date_range_for(period, now: datetime) -> DateRange:
    """Window covered by ``period`` when reporting at ``now``."""
    period = Period.parse(period)
    if period == Period.DAY:
        return today_range(now)
    if period == Period.MONTH:
        return DateRange(month_window_start(now), now)
    if period == Period.YEAR:
        return DateRange(subtract_years(now, 1), now)
    return DateRange(now - timedelta(days=7), now)


def today_range(now: datetime) -> DateRange:
    """Midnight to the last instant of the calendar day of ``now``."""
    return DateRange(start_of_day(now), end_of_day(now))


def rolling_window(now: datetime, days: int = 7, offset_days: int = 0) -> DateRange:
    """``days`` long window ending ``offset_days`` before ``now``."""
    end = now - timedelta(days=offset_days)
    return DateRange(end - timedelta(days=days), end)


def month_window_start(now: datetime) -> datetime:
    """Start of the rolling "this month" window: one calendar month back."""
    return subtract_months(now, 1)


def record_timestamp(item) -> Optional[datetime]:
    """Best available timestamp of a record.

    Prefers ``created_at``, then ``entry_date``, then ``start_time``.
    """
    for attr in ("created_at", "entry_date", "start_time"):
        value = getattr(item, attr, None)
        if value is not None:
            return value
    return None


def filter_by_date_range(items: Iterable[T], start: datetime, end: datetime) -> List[T]:
    """Records whose timestamp falls in [start, end]; undated records are dropped."""
    selected = []
    for item in items:
        moment = record_timestamp(item)
        if moment is not None and start <= moment <= end:
            selected.append(item)
    return selected


def local_date(moment: datetime, reference: datetime):
    """Calendar date of ``moment`` as seen from the timezone of ``reference``."""
    return moment.astimezone(reference.tzinfo).date()


def hour_of_day(moment: datetime, reference: datetime) -> int:
    """Hour (0-23) of ``moment`` in the timezone of ``reference``."""
    return moment.astimezone(reference.tzinfo).hour


def sunday_first_weekday(moment: datetime) -> int:
    """Weekday index with Sunday = 0 through Saturday = 6."""
    return (moment.weekday() + 1) % 7


def day_name(moment: datetime) -> str:
    return DAY_NAMES[sunday_first_weekday(moment)]


def last_n_days(now: datetime, days: int) -> List[datetime]:
    """The ``days`` calendar days ending at ``now``, oldest first."""
    return [now - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
