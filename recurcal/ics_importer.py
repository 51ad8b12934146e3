"""Import calendar events from iCalendar (.ics) documents."""

import logging
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Optional, Union

from icalendar import Calendar

from .datetime_utils import ensure_datetime
from .exceptions import ICSImportError
from .models import CalendarEvent, ICSImportResult, RecurrenceRule
from .rrule_codec import from_rrule
from .timezone_utils import now_utc

logger = logging.getLogger(__name__)


def _decoded_datetime(prop: Any) -> tuple[Optional[datetime], bool]:
    """Return (datetime, is_date_only) for a DTSTART/DTEND property."""
    if prop is None:
        return None, False
    value = getattr(prop, "dt", prop)
    if isinstance(value, datetime):
        return value, False
    if isinstance(value, date):
        return ensure_datetime(value), True
    return None, False


def _text(component: Any, name: str) -> str:
    value = component.get(name)
    return "" if value is None else str(value)


def _parse_recurrence(component: Any) -> RecurrenceRule:
    prop = component.get("RRULE")
    if prop is None:
        return RecurrenceRule()
    if isinstance(prop, list):
        # Several RRULEs on one VEVENT: only the first is representable
        prop = prop[0]
    raw = prop.to_ical().decode("utf-8") if hasattr(prop, "to_ical") else str(prop)
    return from_rrule(raw)


def _parse_reminders(component: Any) -> list[int]:
    """Collect VALARM relative triggers as minutes before start."""
    reminders: list[int] = []
    for alarm in component.walk("VALARM"):
        trigger = alarm.get("TRIGGER")
        if trigger is None:
            continue
        offset = getattr(trigger, "dt", None)
        if not isinstance(offset, timedelta):
            # Absolute trigger times have no minute-offset equivalent
            continue
        minutes = int(abs(offset.total_seconds()) // 60)
        if minutes not in reminders:
            reminders.append(minutes)
    return reminders


def _parse_vevent(component: Any, fallback_id: str) -> Optional[CalendarEvent]:
    """Convert one VEVENT into a CalendarEvent, or None when it has no start."""
    start, all_day = _decoded_datetime(component.get("DTSTART"))
    if start is None:
        return None

    end, _ = _decoded_datetime(component.get("DTEND"))
    if end is None and component.get("DURATION") is not None:
        duration = getattr(component.get("DURATION"), "dt", None)
        if isinstance(duration, timedelta):
            end = start + duration

    uid = _text(component, "UID")
    return CalendarEvent(
        id=f"ics-{uid}" if uid else fallback_id,
        title=_text(component, "SUMMARY"),
        start=start,
        end=end,
        all_day=all_day,
        location=_text(component, "LOCATION"),
        description=_text(component, "DESCRIPTION"),
        reminders=_parse_reminders(component),
        recurrence=_parse_recurrence(component),
    )


def import_events(ics_content: Union[str, bytes]) -> ICSImportResult:
    """Parse an iCalendar document into events.

    VEVENTs without a DTSTART are skipped with a warning. The importer never
    raises for bad content; failures are reported on the result.

    Args:
        ics_content: Raw .ics content

    Returns:
        ICSImportResult with the imported events and statistics
    """
    if not ics_content or not str(ics_content).strip():
        return ICSImportResult(success=False, error_message="Empty ICS content")

    try:
        calendar = Calendar.from_ical(ics_content)
    except Exception as e:
        logger.warning("Failed to parse ICS content: %s", e)
        return ICSImportResult(success=False, error_message=f"Invalid ICS content: {e}")

    stamp = int(now_utc().timestamp() * 1000)
    events: list[CalendarEvent] = []
    warnings: list[str] = []

    for component in calendar.walk("VEVENT"):
        try:
            event = _parse_vevent(component, f"ics-{stamp}-{len(events)}")
        except Exception as e:
            logger.warning("Skipping unreadable VEVENT %s: %s", component.get("UID"), e)
            warnings.append(f"Skipped unreadable event {component.get('UID')}: {e}")
            continue
        if event is None:
            warnings.append(f"Skipped event without DTSTART: {component.get('UID')}")
            continue
        events.append(event)

    calendar_name = calendar.get("X-WR-CALNAME")
    prodid = calendar.get("PRODID")
    result = ICSImportResult(
        success=True,
        events=events,
        calendar_name=str(calendar_name) if calendar_name is not None else None,
        prodid=str(prodid) if prodid is not None else None,
        event_count=len(events),
        recurring_event_count=sum(1 for event in events if event.is_recurring),
        warnings=warnings,
    )
    logger.info(
        "Imported %d events (%d recurring, %d skipped)",
        result.event_count,
        result.recurring_event_count,
        len(warnings),
    )
    return result


def load_ics_file(path: Union[str, Path]) -> ICSImportResult:
    """Read and import an .ics file.

    Raises:
        ICSImportError: If the file cannot be read
    """
    source = Path(path)
    try:
        content = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ICSImportError(f"Unable to read {source}: {e}") from e
    return import_events(content)
