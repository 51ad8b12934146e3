"""Window queries that merge literal events with generated occurrences.

This is what a calendar view renders: non-recurring events that overlap the
window plus the instances of every recurring event. A recurring parent is not
returned itself because its first occurrence is already instance 0.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime
from typing import Union

from .datetime_utils import align_datetime, end_of_day, ensure_datetime
from .models import CalendarEvent, EventInstance
from .recurrence_engine import MAX_OCCURRENCES, DateLike, generate_instances

logger = logging.getLogger(__name__)

ViewItem = Union[CalendarEvent, EventInstance]


def _overlaps(event: CalendarEvent, range_start: DateLike, range_end: DateLike) -> bool:
    start = align_datetime(ensure_datetime(range_start), event.start)
    end = align_datetime(ensure_datetime(range_end), event.start)
    if event.start > end:
        return False
    event_end = event.end if event.end is not None and event.end > event.start else event.start
    return event_end >= start


def collect_events(
    events: Iterable[CalendarEvent],
    range_start: DateLike,
    range_end: DateLike,
    *,
    max_occurrences: int = MAX_OCCURRENCES,
) -> list[ViewItem]:
    """Return everything visible in ``[range_start, range_end]``, sorted by start.

    Args:
        events: Stored events
        range_start: Window start
        range_end: Window end, inclusive
        max_occurrences: Occurrence cap passed to the recurrence engine

    Returns:
        Literal events and generated instances ordered by start time
    """
    visible: list[ViewItem] = []
    literal_count = 0

    for event in events:
        if event.is_recurring:
            visible.extend(
                generate_instances(event, range_start, range_end, max_occurrences=max_occurrences)
            )
        elif _overlaps(event, range_start, range_end):
            visible.append(event)
            literal_count += 1

    visible.sort(key=lambda item: _sort_key(item.start))
    logger.debug(
        "Collected %d items (%d literal) for %s..%s",
        len(visible),
        literal_count,
        range_start,
        range_end,
    )
    return visible


def _sort_key(start: datetime) -> datetime:
    # Mixed naive and aware starts cannot be compared directly
    if start.tzinfo is None:
        return start
    return start.astimezone().replace(tzinfo=None)


def events_for_day(events: Iterable[CalendarEvent], day: date) -> list[ViewItem]:
    """Return everything visible on ``day`` (midnight through end of day)."""
    if isinstance(day, datetime):
        day = day.date()
    return collect_events(events, ensure_datetime(day), end_of_day(day))


def parent_event_id(item: ViewItem) -> str:
    """Return the id an edit or deletion of ``item`` must target."""
    if isinstance(item, EventInstance):
        return item.parent_id
    return item.id
