"""Shared fixtures for recurcal tests."""

import logging
from collections.abc import Iterator
from datetime import datetime, timedelta
from typing import Any, Callable

import pytest

from recurcal.logging_config import PACKAGE_LOGGERS, QUIET_LOGGERS
from recurcal.models import CalendarEvent


def pytest_configure(config: Any) -> None:
    """Register test markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "fast: Tests that finish in milliseconds")


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear environment overrides that change clock or logging behavior."""
    for name in ("RECURCAL_TEST_TIME", "RECURCAL_DEBUG", "RECURCAL_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_logging_levels() -> Iterator[None]:
    """Put logger levels back after tests that configure logging."""
    names = ["", *PACKAGE_LOGGERS, *QUIET_LOGGERS]
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


@pytest.fixture
def make_event() -> Callable[..., CalendarEvent]:
    """Return a factory for CalendarEvent objects.

    Defaults to a one-hour event at 2026-01-15 09:00 (a Thursday) that does
    not repeat; keyword arguments override any field.
    """

    def _make(**overrides: Any) -> CalendarEvent:
        start = overrides.pop("start", datetime(2026, 1, 15, 9, 0))
        fields: dict[str, Any] = {
            "id": "evt-1",
            "title": "Standup",
            "start": start,
            "end": start + timedelta(hours=1),
            "location": "Room 4",
            "description": "Daily sync",
            "color": "#3366ff",
            "reminders": [10],
        }
        fields.update(overrides)
        return CalendarEvent(**fields)

    return _make


# ==================== ICS Test Data Fixtures ====================


@pytest.fixture
def sample_ics_simple() -> str:
    """
    Return a simple ICS calendar string with a single event.

    - Event: "Team Meeting" on 2026-01-15 10:00-11:00 UTC
    """
    return """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Recurcal Test//EN
CALSCALE:GREGORIAN
X-WR-CALNAME:Work
BEGIN:VEVENT
UID:test-event-001@recurcal.test
DTSTART:20260115T100000Z
DTEND:20260115T110000Z
SUMMARY:Team Meeting
LOCATION:Conference Room A
DESCRIPTION:Weekly team sync meeting
DTSTAMP:20260115T090000Z
END:VEVENT
END:VCALENDAR"""


@pytest.fixture
def sample_ics_recurring() -> str:
    """
    Return an ICS string with a recurring event.

    - Event: "Daily Standup" recurring daily at 09:00-09:15 UTC
    - RRULE:FREQ=DAILY;COUNT=5 (5 occurrences)
    - Two reminders, one repeated, plus an absolute trigger
    """
    return """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Recurcal Test//EN
CALSCALE:GREGORIAN
BEGIN:VEVENT
UID:test-event-002@recurcal.test
DTSTART:20260115T090000Z
DTEND:20260115T091500Z
SUMMARY:Daily Standup
LOCATION:Virtual
RRULE:FREQ=DAILY;COUNT=5
DTSTAMP:20260115T080000Z
BEGIN:VALARM
ACTION:DISPLAY
DESCRIPTION:Reminder
TRIGGER:-PT15M
END:VALARM
BEGIN:VALARM
ACTION:DISPLAY
DESCRIPTION:Reminder
TRIGGER:-PT1H
END:VALARM
BEGIN:VALARM
ACTION:DISPLAY
DESCRIPTION:Reminder
TRIGGER:-PT15M
END:VALARM
BEGIN:VALARM
ACTION:DISPLAY
DESCRIPTION:Reminder
TRIGGER;VALUE=DATE-TIME:20260114T090000Z
END:VALARM
END:VEVENT
END:VCALENDAR"""


@pytest.fixture
def sample_ics_mixed() -> str:
    """
    Return an ICS string exercising the importer's edge cases.

    - An all-day weekly event on Mondays and Wednesdays
    - An event without UID that uses DURATION instead of DTEND
    - An event without DTSTART (must be skipped)
    """
    return """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Recurcal Test//EN
BEGIN:VEVENT
UID:allday-1
DTSTART;VALUE=DATE:20260105
DTEND;VALUE=DATE:20260106
SUMMARY:Gym
RRULE:FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE;UNTIL=20260331T000000Z
DTSTAMP:20260101T000000Z
END:VEVENT
BEGIN:VEVENT
DTSTART:20260120T140000Z
DURATION:PT30M
SUMMARY:Call
DTSTAMP:20260101T000000Z
END:VEVENT
BEGIN:VEVENT
UID:no-start
SUMMARY:Broken
DTSTAMP:20260101T000000Z
END:VEVENT
END:VCALENDAR"""
