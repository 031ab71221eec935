"""Tests for datetime utilities."""

from datetime import date, datetime, timedelta, timezone

import pytest

from core.utils.datetime import day_bounds, ensure_utc, parse_datetime, start_of_day


class TestEnsureUTC:
    def test_naive_is_assumed_utc(self):
        naive = datetime(2024, 5, 1, 12, 30)

        assert ensure_utc(naive) == datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)

    def test_aware_is_converted(self):
        plus_two = datetime(2024, 5, 1, 1, 0, tzinfo=timezone(timedelta(hours=2)))

        result = ensure_utc(plus_two)

        assert result.tzinfo == timezone.utc
        assert result == datetime(2024, 4, 30, 23, 0, tzinfo=timezone.utc)


class TestDayBoundaries:
    def test_start_of_day_from_datetime(self):
        dt = datetime(2024, 5, 1, 18, 45, 12, 999, tzinfo=timezone.utc)

        assert start_of_day(dt) == datetime(2024, 5, 1, tzinfo=timezone.utc)

    def test_start_of_day_from_date(self):
        assert start_of_day(date(2024, 5, 1)) == datetime(2024, 5, 1, tzinfo=timezone.utc)

    def test_start_of_day_uses_utc_calendar(self):
        # 01:00 at +02:00 is still the previous UTC day
        dt = datetime(2024, 5, 2, 1, 0, tzinfo=timezone(timedelta(hours=2)))

        assert start_of_day(dt) == datetime(2024, 5, 1, tzinfo=timezone.utc)

    def test_day_bounds_half_open(self):
        start, end = day_bounds(datetime(2024, 12, 31, 23, 59, tzinfo=timezone.utc))

        assert start == datetime(2024, 12, 31, tzinfo=timezone.utc)
        assert end == datetime(2025, 1, 1, tzinfo=timezone.utc)


class TestParseDatetime:
    @pytest.mark.parametrize("value,expected", [
        ("2024-05-01T10:00:00Z", datetime(2024, 5, 1, 10, tzinfo=timezone.utc)),
        ("2024-05-01T12:00:00+02:00", datetime(2024, 5, 1, 10, tzinfo=timezone.utc)),
        ("2024-05-01", datetime(2024, 5, 1, tzinfo=timezone.utc)),
    ])
    def test_parses(self, value, expected):
        assert parse_datetime(value) == expected

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty(self, value):
        assert parse_datetime(value) is None

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_datetime("next tuesday")
