"""Export calendar events to iCalendar (.ics) documents.

Only parent events are written; generated occurrence instances are skipped
since the RRULE on the parent already describes them.
"""

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Optional, Union

from icalendar import Alarm, Calendar, Event as ICalEvent, vRecur

from .exceptions import ICSExportError
from .models import CalendarEvent, EventInstance
from .rrule_codec import to_rrule
from .timezone_utils import now_utc

logger = logging.getLogger(__name__)

DEFAULT_PRODID = "-//Calendar App//EN"


def _is_instance(item: Any) -> bool:
    if isinstance(item, EventInstance):
        return True
    if isinstance(item, dict):
        return bool(item.get("isRecurringInstance") or item.get("is_recurring_instance"))
    return False


def _build_vevent(event: CalendarEvent, stamp: datetime) -> ICalEvent:
    """Build a VEVENT component for one parent event."""
    vevent = ICalEvent()
    vevent.add("uid", event.id)
    vevent.add("summary", event.title or "Untitled")

    if event.all_day:
        vevent.add("dtstart", event.start.date())
        if event.end is not None:
            vevent.add("dtend", event.end.date())
    else:
        vevent.add("dtstart", event.start)
        if event.end is not None:
            vevent.add("dtend", event.end)

    if event.description:
        vevent.add("description", event.description)
    if event.location:
        vevent.add("location", event.location)

    rrule = to_rrule(event.recurrence)
    if rrule:
        vevent.add("rrule", vRecur.from_ical(rrule))

    for minutes in event.reminders:
        alarm = Alarm()
        alarm.add("action", "DISPLAY")
        alarm.add("trigger", timedelta(minutes=-minutes))
        alarm.add("description", "Reminder")
        vevent.add_component(alarm)

    vevent.add("dtstamp", stamp)
    return vevent


def export_events(
    events: Iterable[Union[CalendarEvent, EventInstance, dict]],
    *,
    prodid: str = DEFAULT_PRODID,
    calendar_name: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """Serialize events to an iCalendar document.

    Args:
        events: Events to export; instances are skipped, mappings are validated
        prodid: PRODID written on the calendar
        calendar_name: Optional X-WR-CALNAME
        now: DTSTAMP value (defaults to the current UTC time)

    Returns:
        VCALENDAR text with CRLF line endings

    Raises:
        ICSExportError: If an event cannot be validated or serialized
    """
    stamp = now or now_utc()

    calendar = Calendar()
    calendar.add("version", "2.0")
    calendar.add("prodid", prodid)
    calendar.add("calscale", "GREGORIAN")
    calendar.add("method", "PUBLISH")
    if calendar_name:
        calendar.add("x-wr-calname", calendar_name)

    exported = 0
    skipped = 0
    for item in events:
        if _is_instance(item):
            skipped += 1
            continue
        try:
            event = item if isinstance(item, CalendarEvent) else CalendarEvent.model_validate(item)
            calendar.add_component(_build_vevent(event, stamp))
        except (TypeError, ValueError) as e:
            raise ICSExportError(f"Failed to export event {getattr(item, 'id', item)!r}: {e}") from e
        exported += 1

    # TZID references need matching VTIMEZONE components
    calendar.add_missing_timezones()
    logger.debug("Exported %d events (%d recurring instances skipped)", exported, skipped)
    return calendar.to_ical().decode("utf-8")


def write_ics_file(path: Union[str, Path], events: Iterable[Any], **kwargs: Any) -> Path:
    """Export events and write them to ``path`` as UTF-8.

    Raises:
        ICSExportError: If serialization or writing fails
    """
    target = Path(path)
    content = export_events(events, **kwargs)
    try:
        target.write_text(content, encoding="utf-8", newline="")
    except OSError as e:
        raise ICSExportError(f"Unable to write {target}: {e}") from e
    logger.info("Wrote calendar to %s", target)
    return target
