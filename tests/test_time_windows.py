"""Tests for period windows, record filtering and time bucketing."""

from datetime import date, datetime, timedelta, timezone

from progress_insights.services.time_windows import (
    DateRange,
    Period,
    date_range_for,
    day_name,
    filter_by_date_range,
    last_n_days,
    local_date,
    month_window_start,
    record_timestamp,
    rolling_window,
    sunday_first_weekday,
)
from progress_insights.utils.datetime import days_ceil, parse_datetime, subtract_months

from conftest import NOW, make_entry, make_session, make_todo


class TestPeriodWindows:
    """Test date_range_for and the named windows"""

    def test_day_is_calendar_day(self):
        window = date_range_for("day", NOW)
        assert window.start == datetime(2024, 5, 15, tzinfo=timezone.utc)
        assert window.end == datetime(2024, 5, 15, 23, 59, 59, 999999, tzinfo=timezone.utc)

    def test_week_is_rolling(self):
        window = date_range_for("week", NOW)
        assert window.start == NOW - timedelta(days=7)
        assert window.end == NOW

    def test_month_and_year_subtract_calendar_units(self):
        assert date_range_for("month", NOW).start == datetime(2024, 4, 15, 12, tzinfo=timezone.utc)
        assert date_range_for("year", NOW).start == datetime(2023, 5, 15, 12, tzinfo=timezone.utc)

    def test_unknown_period_falls_back_to_week(self):
        assert Period.parse("fortnight") == Period.WEEK
        assert date_range_for("fortnight", NOW) == date_range_for("week", NOW)

    def test_month_subtraction_clamps_day(self):
        moment = datetime(2024, 3, 31, 8, tzinfo=timezone.utc)
        assert month_window_start(moment) == datetime(2024, 2, 29, 8, tzinfo=timezone.utc)
        assert subtract_months(datetime(2023, 3, 31, tzinfo=timezone.utc), 1).day == 28

    def test_leap_day_minus_year(self):
        window = date_range_for("year", datetime(2024, 2, 29, tzinfo=timezone.utc))
        assert window.start == datetime(2023, 2, 28, tzinfo=timezone.utc)

    def test_rolling_window_offset(self):
        last_week = rolling_window(NOW, days=7, offset_days=7)
        assert last_week.end == NOW - timedelta(days=7)
        assert last_week.start == NOW - timedelta(days=14)

    def test_date_range_is_inclusive(self):
        window = DateRange(NOW - timedelta(days=1), NOW)
        assert NOW in window
        assert NOW - timedelta(days=1) in window
        assert NOW + timedelta(seconds=1) not in window


class TestFiltering:
    """Test record_timestamp and filter_by_date_range"""

    def test_prefers_created_at(self):
        entry = make_entry(days_ago=3)
        entry.created_at = NOW
        assert record_timestamp(entry) == NOW

    def test_falls_back_to_entry_date_then_start_time(self):
        entry = make_entry(days_ago=3)
        session = make_session(hours_ago=5)
        assert record_timestamp(entry) == NOW - timedelta(days=3)
        assert record_timestamp(session) == NOW - timedelta(hours=5)

    def test_filters_inclusive_and_drops_undated(self):
        inside = make_todo(id="in", days_ago=7)
        outside = make_todo(id="out", days_ago=8)
        undated = object()
        result = filter_by_date_range([inside, outside, undated], NOW - timedelta(days=7), NOW)
        assert result == [inside]


class TestBucketing:
    """Test calendar bucketing helpers"""

    def test_sunday_is_zero(self):
        sunday = datetime(2024, 5, 12, tzinfo=timezone.utc)
        assert sunday_first_weekday(sunday) == 0
        assert sunday_first_weekday(sunday + timedelta(days=6)) == 6
        assert day_name(NOW) == "Wednesday"

    def test_local_date_uses_reference_timezone(self):
        plus_two = timezone(timedelta(hours=2))
        reference = datetime(2024, 5, 15, 12, tzinfo=plus_two)
        late_utc = datetime(2024, 5, 14, 23, 30, tzinfo=timezone.utc)
        assert local_date(late_utc, reference) == date(2024, 5, 15)

    def test_last_n_days_oldest_first(self):
        days = last_n_days(NOW, 7)
        assert len(days) == 7
        assert days[0].date() == date(2024, 5, 9)
        assert days[-1].date() == date(2024, 5, 15)


class TestDatetimeHelpers:
    """Test parsing and day arithmetic"""

    def test_parse_zulu_iso_with_millis(self):
        assert parse_datetime("2024-05-15T12:00:00.000Z") == NOW

    def test_parse_plain_date_is_utc_midnight(self):
        assert parse_datetime("2024-05-15") == datetime(2024, 5, 15, tzinfo=timezone.utc)

    def test_naive_datetime_assumed_utc(self):
        assert parse_datetime(datetime(2024, 5, 15, 12)) == NOW

    def test_days_ceil(self):
        assert days_ceil(timedelta(days=10)) == 10
        assert days_ceil(timedelta(days=9, hours=1)) == 10
        assert days_ceil(timedelta(hours=-5)) == 0
        assert days_ceil(timedelta(days=-1, hours=-1)) == -1
