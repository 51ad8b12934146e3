"""Date and time helpers shared by the recurrence engine and the ICS adapters.

Weekdays are numbered the way recurrence rules store them: 0=Sunday..6=Saturday.
"""

import logging
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Optional

logger = logging.getLogger(__name__)

WEEKDAY_CODES = ("SU", "MO", "TU", "WE", "TH", "FR", "SA")
WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

ONE_WEEK = timedelta(weeks=1)

_ICS_DATE_FORMATS = (
    "%Y%m%d",  # 20261231
    "%Y-%m-%d",  # 2026-12-31
)


def weekday_number(dt: date) -> int:
    """Return the Sunday-based weekday number (0=Sunday..6=Saturday)."""
    return dt.isoweekday() % 7


def ensure_datetime(value: date) -> datetime:
    """Promote a date to a datetime at midnight; datetimes pass through."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def align_datetime(dt: datetime, reference: datetime) -> datetime:
    """Make ``dt`` comparable with ``reference``.

    A naive ``dt`` takes the reference's tzinfo (same wall clock). An aware
    ``dt`` compared against a naive reference is converted to local wall-clock
    time and stripped, the way a browser treats timestamps.

    Args:
        dt: Datetime to align
        reference: Datetime whose awareness ``dt`` must match

    Returns:
        Datetime with the same awareness as ``reference``
    """
    if reference.tzinfo is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=reference.tzinfo)
    if reference.tzinfo is None and dt.tzinfo is not None:
        return dt.astimezone().replace(tzinfo=None)
    return dt


def end_of_day(day: date, tz: Optional[tzinfo] = None) -> datetime:
    """Return the last representable instant of ``day`` in ``tz``."""
    return datetime.combine(day, time.max).replace(tzinfo=tz)


def format_ics_datetime(dt: datetime) -> str:
    """Format a datetime as an iCalendar local timestamp (YYYYMMDDTHHMMSS)."""
    return dt.strftime("%Y%m%dT%H%M%S")


def format_ics_date(day: date) -> str:
    """Format a date as an iCalendar date value (YYYYMMDD)."""
    return day.strftime("%Y%m%d")


def parse_ics_date(value: Any) -> Optional[date]:
    """Parse the date portion of an iCalendar or ISO date/timestamp.

    Accepts ``YYYYMMDD``, ``YYYYMMDDTHHMMSS[Z]``, ``YYYY-MM-DD`` and
    ``YYYY-MM-DDTHH:MM:SS`` forms as well as ``date``/``datetime`` objects.
    Only the calendar date is kept.

    Args:
        value: Value to parse

    Returns:
        Parsed date, or None when the value cannot be interpreted
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None

    # Drop any time portion: 20261231T000000Z -> 20261231
    day_part = text.split("T", 1)[0]
    for fmt in _ICS_DATE_FORMATS:
        try:
            return datetime.strptime(day_part, fmt).date()
        except ValueError:
            continue

    logger.debug("Unable to parse date value %r", value)
    return None
