"""Recurrence expansion for recurring calendar events.

Walks a recurring event forward from its original start and materializes the
occurrences that touch a query window. Every function here is pure: no state
is kept between calls and arguments are never mutated.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Any, Union

from dateutil.relativedelta import relativedelta
from pydantic import ValidationError

from .datetime_utils import ONE_WEEK, align_datetime, end_of_day, ensure_datetime, weekday_number
from .models import CalendarEvent, EndCondition, EventInstance, Frequency, RecurrenceRule
from .rrule_codec import from_rrule, to_rrule
from .rule_formatter import format_rule

logger = logging.getLogger(__name__)

# Circuit breaker for rules that never reach their end condition within the window
MAX_OCCURRENCES = 1000

DateLike = Union[date, datetime]


def _next_listed_weekday(
    current: datetime,
    days_of_week: list[int],
    interval: int,
    original_start: datetime,
) -> datetime:
    """Step a weekly rule with explicit weekdays.

    Moves to the next listed weekday within the coming seven days. When that
    day falls in a week that is not a multiple of ``interval`` weeks after the
    original start, skip a full ``interval`` weeks from ``current`` instead.
    """
    for offset in range(1, 8):
        candidate = current + timedelta(days=offset)
        if weekday_number(candidate) not in days_of_week:
            continue
        weeks_elapsed = (candidate - original_start) // ONE_WEEK
        if weeks_elapsed % interval == 0:
            return candidate
        break
    return current + timedelta(weeks=interval)


def get_next_date(current: datetime, rule: RecurrenceRule, original_start: datetime) -> datetime:
    """Return the occurrence that follows ``current`` under ``rule``.

    Monthly and yearly steps are re-anchored on the original start's day of
    month, clamped to the last day of shorter months (Jan 31 -> Feb 28 -> Mar 31).

    Args:
        current: Current occurrence start
        rule: Recurrence rule being expanded
        original_start: Start of the parent event

    Returns:
        Start of the next candidate occurrence
    """
    interval = rule.interval if rule.interval > 0 else 1

    if rule.frequency == Frequency.DAILY:
        return current + timedelta(days=interval)

    if rule.frequency == Frequency.WEEKLY:
        if rule.days_of_week:
            return _next_listed_weekday(current, rule.days_of_week, interval, original_start)
        return current + timedelta(weeks=interval)

    if rule.frequency == Frequency.MONTHLY:
        return current + relativedelta(months=interval, day=original_start.day)

    if rule.frequency == Frequency.YEARLY:
        return current + relativedelta(
            years=interval, month=original_start.month, day=original_start.day
        )

    return current + timedelta(days=1)


def _create_instance(
    parent_event: CalendarEvent,
    occurrence: datetime,
    duration: timedelta,
    ordinal: int,
) -> EventInstance:
    """Project the parent event onto one occurrence."""
    return EventInstance(
        id=f"{parent_event.id}-instance-{ordinal}",
        parent_id=parent_event.id,
        title=parent_event.title,
        start=occurrence,
        end=occurrence + duration if duration > timedelta(0) else None,
        all_day=parent_event.all_day,
        location=parent_event.location,
        description=parent_event.description,
        color=parent_event.color,
        reminders=list(parent_event.reminders),
    )


def generate_instances(
    parent_event: Any,
    range_start: DateLike,
    range_end: DateLike,
    *,
    max_occurrences: int = MAX_OCCURRENCES,
) -> list[EventInstance]:
    """Expand a recurring event into the instances visible in a window.

    The original occurrence is step 0: it counts toward ``end_count`` and is
    returned when it falls in the window, so callers rendering the literal
    parent alongside must de-duplicate. An occurrence that starts before
    ``range_start`` is still returned when its end reaches into the window.

    Args:
        parent_event: CalendarEvent (or a mapping that validates as one)
        range_start: Window start; a date means midnight
        range_end: Window end, inclusive; a date means midnight
        max_occurrences: Hard cap on the number of steps walked

    Returns:
        Instances in chronological order; empty for non-recurring events or
        events that cannot be read
    """
    if not isinstance(parent_event, CalendarEvent):
        try:
            parent_event = CalendarEvent.model_validate(parent_event)
        except ValidationError as e:
            logger.warning("Cannot expand malformed event: %s", e.errors(include_url=False))
            return []

    rule = parent_event.recurrence
    if not rule.is_recurring:
        return []

    event_start = parent_event.start
    duration = parent_event.duration
    window_start = align_datetime(ensure_datetime(range_start), event_start)
    window_end = align_datetime(ensure_datetime(range_end), event_start)

    series_end = None
    if rule.end_condition == EndCondition.ON and rule.end_date is not None:
        series_end = end_of_day(rule.end_date, event_start.tzinfo)
    series_count = rule.end_count if rule.end_condition == EndCondition.AFTER else None

    instances: list[EventInstance] = []
    current = event_start
    count = 0

    while current <= window_end and count < max_occurrences:
        if series_end is not None and current > series_end:
            break
        if series_count is not None and count >= series_count:
            break

        in_window = current >= window_start or (
            duration > timedelta(0) and current + duration >= window_start
        )
        if in_window and (not rule.days_of_week or weekday_number(current) in rule.days_of_week):
            instances.append(_create_instance(parent_event, current, duration, count))

        count += 1
        try:
            current = get_next_date(current, rule, event_start)
        except (OverflowError, ValueError):
            logger.debug("Recurrence for %s stepped past the calendar range", parent_event.id)
            break

    if count >= max_occurrences:
        logger.debug(
            "Recurrence expansion for %s truncated at %d occurrences", parent_event.id, count
        )

    logger.debug(
        "Expanded %s (%s every %d): %d steps, %d instances",
        parent_event.id,
        rule.frequency.value,
        rule.interval,
        count,
        len(instances),
    )
    return instances


class RecurrenceEngine:
    """Stateless namespace exposing the recurrence operations."""

    generate_instances = staticmethod(generate_instances)
    format_rule = staticmethod(format_rule)
    to_rrule = staticmethod(to_rrule)
    from_rrule = staticmethod(from_rrule)
