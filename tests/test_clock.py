"""
Tests for time parsing, formatting and week arithmetic.
"""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from studyplan import clock


class TestParse:
    def test_z_suffix(self):
        assert clock.parse_instant("2026-03-02T09:00:00.000Z") == datetime(2026, 3, 2, 9, tzinfo=UTC)

    def test_offset(self):
        dt = clock.parse_instant("2026-03-02T09:00:00+04:00")
        assert dt.utcoffset() == timedelta(hours=4)

    def test_naive_rejected(self):
        with pytest.raises(ValueError, match="offset"):
            clock.parse_instant("2026-03-02T09:00:00")

    def test_garbage_rejected(self):
        with pytest.raises(ValueError):
            clock.parse_instant("next tuesday")

    def test_datetime_passthrough(self):
        dt = datetime(2026, 3, 2, 9, tzinfo=UTC)
        assert clock.parse_instant(dt) is dt

    def test_parse_local_naive_uses_zone(self):
        zone = timezone(timedelta(hours=2))
        assert clock.parse_local("2026-03-02T09:00", zone) == datetime(2026, 3, 2, 9, tzinfo=zone)

    def test_parse_local_keeps_offset(self):
        assert clock.parse_local("2026-03-02T09:00Z").tzinfo is not None

    def test_parse_local_default_is_aware(self):
        assert clock.parse_local("2026-03-02T09:00").tzinfo is not None


class TestFormat:
    @pytest.mark.parametrize(
        "hour,minute,expected",
        [(0, 5, "12:05 AM"), (9, 0, "9:00 AM"), (12, 30, "12:30 PM"), (23, 59, "11:59 PM")],
    )
    def test_format_time(self, hour, minute, expected):
        assert clock.format_time(datetime(2026, 3, 2, hour, minute, tzinfo=UTC), UTC) == expected

    def test_format_date(self):
        assert clock.format_date(date(2026, 3, 2)) == "Mar 2, 2026"

    @pytest.mark.parametrize("minutes,expected", [(45, "45m"), (120, "2h"), (90, "1h 30m")])
    def test_format_duration(self, minutes, expected):
        start = datetime(2026, 3, 2, 9, tzinfo=UTC)
        assert clock.format_duration(start, start + timedelta(minutes=minutes)) == expected


class TestWeeks:
    def test_week_days_monday_first(self):
        days = clock.week_days(date(2026, 3, 8))  # Sunday
        assert days[0] == date(2026, 3, 2)
        assert days[-1] == date(2026, 3, 8)

    def test_week_bounds(self):
        start, end = clock.week_bounds(date(2026, 3, 4), UTC)
        assert start == datetime(2026, 3, 2, tzinfo=UTC)
        assert end == datetime(2026, 3, 8, 23, 59, 59, 999999, tzinfo=UTC)

    def test_week_bounds_local_are_aware(self):
        start, end = clock.week_bounds(date(2026, 3, 4))
        assert start.tzinfo is not None and end.tzinfo is not None
        assert start.replace(tzinfo=None) == datetime(2026, 3, 2)

    def test_time_slots(self):
        slots = clock.time_slots(6, 8)
        assert slots == ["06:00", "06:30", "07:00", "07:30", "08:00"]

    def test_default_time_slots(self):
        assert len(clock.time_slots()) == 33
