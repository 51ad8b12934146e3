"""Data models for recurring calendar events."""

import logging
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .datetime_utils import align_datetime, ensure_datetime, parse_ics_date
from .timezone_utils import now_utc as _now_utc

logger = logging.getLogger(__name__)


class Frequency(str, Enum):
    """How often a recurring event repeats."""

    NEVER = "never"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class EndCondition(str, Enum):
    """When a recurring series stops."""

    NEVER = "never"
    AFTER = "after"
    ON = "on"


class RecurrenceRule(BaseModel):
    """Recurrence rule attached to a calendar event.

    Malformed values are normalized rather than rejected so that rules coming
    from stored JSON or third-party ICS files always produce a usable rule:

    - unknown frequencies become ``daily``
    - a non-positive or non-numeric interval becomes 1
    - weekday numbers outside 0..6 are dropped, and the weekday set is
      cleared for anything but a weekly rule
    - a non-positive count or unparseable end date is discarded
    """

    frequency: Frequency = Field(default=Frequency.NEVER, description="Repeat frequency")
    interval: int = Field(default=1, description="Repeat every N frequency units")
    days_of_week: list[int] = Field(
        default_factory=list, description="Weekdays (0=Sunday..6=Saturday) for weekly rules"
    )
    end_condition: EndCondition = Field(default=EndCondition.NEVER, description="End condition")
    end_count: Optional[int] = Field(
        default=None, description="Maximum occurrences, including the first"
    )
    end_date: Optional[date] = Field(default=None, description="Inclusive last day of the series")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("frequency", mode="before")
    @classmethod
    def _coerce_frequency(cls, value: Any) -> Frequency:
        if value is None or value == "":
            return Frequency.NEVER
        if isinstance(value, Frequency):
            return value
        try:
            return Frequency(str(value).strip().lower())
        except ValueError:
            logger.warning("Unknown recurrence frequency %r; treating as daily", value)
            return Frequency.DAILY

    @field_validator("end_condition", mode="before")
    @classmethod
    def _coerce_end_condition(cls, value: Any) -> EndCondition:
        if isinstance(value, EndCondition):
            return value
        try:
            return EndCondition(str(value).strip().lower())
        except ValueError:
            return EndCondition.NEVER

    @field_validator("interval", mode="before")
    @classmethod
    def _coerce_interval(cls, value: Any) -> int:
        try:
            interval = int(value)
        except (TypeError, ValueError):
            return 1
        return interval if interval >= 1 else 1

    @field_validator("days_of_week", mode="before")
    @classmethod
    def _coerce_days_of_week(cls, value: Any) -> list[int]:
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        try:
            candidates = list(value)
        except TypeError:
            return []

        days: list[int] = []
        for candidate in candidates:
            try:
                day = int(candidate)
            except (TypeError, ValueError):
                continue
            if 0 <= day <= 6 and day not in days:
                days.append(day)
        return days

    @field_validator("end_count", mode="before")
    @classmethod
    def _coerce_end_count(cls, value: Any) -> Optional[int]:
        if value is None:
            return None
        try:
            count = int(value)
        except (TypeError, ValueError):
            return None
        return count if count > 0 else None

    @field_validator("end_date", mode="before")
    @classmethod
    def _coerce_end_date(cls, value: Any) -> Optional[date]:
        return parse_ics_date(value)

    @model_validator(mode="after")
    def _drop_weekdays_outside_weekly(self) -> "RecurrenceRule":
        if self.frequency != Frequency.WEEKLY and self.days_of_week:
            self.days_of_week = []
        return self

    @property
    def is_recurring(self) -> bool:
        """Check if the rule generates any occurrences."""
        return self.frequency != Frequency.NEVER


def _blank_if_none(value: Any) -> Any:
    return "" if value is None else value


class CalendarEvent(BaseModel):
    """A stored calendar event, the single source of truth for its occurrences."""

    id: str = Field(..., description="Event ID")
    title: str = Field(default="", description="Event title")
    start: datetime = Field(..., description="Event start")
    end: Optional[datetime] = Field(default=None, description="Event end")
    all_day: bool = Field(default=False, description="All-day event flag")
    location: str = Field(default="", description="Location text")
    description: str = Field(default="", description="Free-form description")
    color: str = Field(default="", description="Display color")
    reminders: list[int] = Field(
        default_factory=list, description="Reminder offsets in minutes before start"
    )
    recurrence: RecurrenceRule = Field(default_factory=RecurrenceRule)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("title", "location", "description", "color", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _blank_if_none(value)

    @field_validator("start", "end", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> Any:
        if isinstance(value, date) and not isinstance(value, datetime):
            return ensure_datetime(value)
        return value

    @field_validator("reminders", mode="before")
    @classmethod
    def _coerce_reminders(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("recurrence", mode="before")
    @classmethod
    def _coerce_recurrence(cls, value: Any) -> Any:
        return RecurrenceRule() if value is None else value

    @model_validator(mode="after")
    def _align_end_with_start(self) -> "CalendarEvent":
        # A floating end next to a zoned start (or the reverse) takes the start's awareness
        if self.end is not None:
            self.end = align_datetime(self.end, self.start)
        return self

    @property
    def is_recurring(self) -> bool:
        """Check if the event carries a rule that generates occurrences."""
        return self.recurrence.is_recurring

    @property
    def duration(self) -> timedelta:
        """Return the event length, zero when it has no end."""
        if self.end is None:
            return timedelta(0)
        return self.end - self.start


class EventInstance(BaseModel):
    """One occurrence of a recurring event.

    Instances are generated on demand for a query window and never stored.
    Edits and deletions must target ``parent_id``.
    """

    id: str = Field(..., description="Synthetic instance ID")
    parent_id: str = Field(..., description="ID of the recurring parent event")
    title: str = ""
    start: datetime
    end: Optional[datetime] = None
    all_day: bool = False
    location: str = ""
    description: str = ""
    color: str = ""
    reminders: list[int] = Field(default_factory=list)
    is_recurring_instance: bool = True

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ICSImportResult(BaseModel):
    """Result of an ICS import."""

    success: bool
    events: list[CalendarEvent] = Field(default_factory=list, description="Imported events")
    calendar_name: Optional[str] = None
    prodid: Optional[str] = None

    # Import statistics
    event_count: int = 0
    recurring_event_count: int = 0

    # Error information
    error_message: Optional[str] = None
    warnings: list[str] = Field(default_factory=list)

    import_time: datetime = Field(default_factory=_now_utc)
