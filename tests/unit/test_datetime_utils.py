"""Unit tests for recurcal.datetime_utils and recurcal.timezone_utils."""

from datetime import date, datetime, time, timedelta, timezone

import pytest

from recurcal.datetime_utils import (
    align_datetime,
    end_of_day,
    ensure_datetime,
    format_ics_date,
    format_ics_datetime,
    parse_ics_date,
    weekday_number,
)
from recurcal.timezone_utils import TimeProvider, now_utc

pytestmark = [pytest.mark.unit, pytest.mark.fast]


class TestWeekdayNumber:
    """Sunday-based weekday numbering."""

    @pytest.mark.parametrize(
        ("day", "expected"),
        [
            (date(2026, 1, 4), 0),  # Sunday
            (date(2026, 1, 5), 1),  # Monday
            (date(2026, 1, 7), 3),  # Wednesday
            (date(2026, 1, 10), 6),  # Saturday
        ],
    )
    def test_numbers(self, day, expected):
        assert weekday_number(day) == expected
        assert weekday_number(datetime.combine(day, time(23, 59))) == expected


class TestDatetimeCoercion:
    """Date promotion and timezone alignment."""

    def test_ensure_datetime(self):
        assert ensure_datetime(date(2026, 1, 15)) == datetime(2026, 1, 15, 0, 0)
        moment = datetime(2026, 1, 15, 9, 30)
        assert ensure_datetime(moment) is moment

    def test_naive_takes_reference_timezone(self):
        reference = datetime(2026, 1, 1, tzinfo=timezone.utc)

        aligned = align_datetime(datetime(2026, 1, 15, 9, 0), reference)

        assert aligned == datetime(2026, 1, 15, 9, 0, tzinfo=timezone.utc)

    def test_aware_against_naive_reference_becomes_naive(self):
        aware = datetime(2026, 1, 15, 9, 0, tzinfo=timezone.utc)

        aligned = align_datetime(aware, datetime(2026, 1, 1))

        assert aligned.tzinfo is None
        assert aligned == aware.astimezone().replace(tzinfo=None)

    def test_matching_awareness_is_unchanged(self):
        moment = datetime(2026, 1, 15, 9, 0)

        assert align_datetime(moment, datetime(2026, 1, 1)) is moment

    def test_end_of_day(self):
        assert end_of_day(date(2026, 1, 15)) == datetime(2026, 1, 15, 23, 59, 59, 999999)
        assert end_of_day(date(2026, 1, 15), timezone.utc).tzinfo is timezone.utc


class TestIcsDateText:
    """iCalendar date formatting and parsing."""

    def test_formatting(self):
        assert format_ics_date(date(2026, 3, 9)) == "20260309"
        assert format_ics_datetime(datetime(2026, 3, 9, 7, 5, 0)) == "20260309T070500"

    @pytest.mark.parametrize(
        "value",
        [
            "20260309",
            "20260309T000000",
            "20260309T235959Z",
            "2026-03-09",
            "2026-03-09T12:00:00",
            date(2026, 3, 9),
            datetime(2026, 3, 9, 12, 0),
        ],
    )
    def test_parse_accepts_common_forms(self, value):
        assert parse_ics_date(value) == date(2026, 3, 9)

    @pytest.mark.parametrize("value", [None, "", "  ", "tomorrow", "2026-13-01"])
    def test_parse_rejects_bad_values(self, value):
        assert parse_ics_date(value) is None


class TestTimeProvider:
    """Clock with environment override."""

    def test_real_clock_is_utc(self):
        before = datetime.now(timezone.utc) - timedelta(seconds=1)

        assert now_utc() >= before
        assert now_utc().tzinfo == timezone.utc

    def test_override(self, monkeypatch):
        monkeypatch.setenv("RECURCAL_TEST_TIME", "2026-01-15T09:00:00+02:00")

        assert TimeProvider().now_utc() == datetime(2026, 1, 15, 7, 0, tzinfo=timezone.utc)

    def test_naive_override_is_utc(self, monkeypatch):
        monkeypatch.setenv("RECURCAL_TEST_TIME", "2026-01-15T09:00:00")

        assert now_utc() == datetime(2026, 1, 15, 9, 0, tzinfo=timezone.utc)

    def test_bad_override_falls_back_to_real_time(self, monkeypatch):
        monkeypatch.setenv("RECURCAL_TEST_TIME", "not-a-time")

        assert now_utc().year >= 2026
