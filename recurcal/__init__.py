"""recurcal - recurrence-rule expansion for calendar events.

Expands a recurring event into concrete occurrences for a date window,
describes rules in English, and converts rules to and from iCalendar RRULE
values. ICS import/export and a calendar-view query helper are built on top.
"""

__version__ = "0.1.0"

import logging
import os
import sys
from typing import Optional

from colorlog import ColoredFormatter

from .calendar_view import collect_events, events_for_day, parent_event_id
from .ics_exporter import export_events
from .ics_importer import import_events
from .models import (
    CalendarEvent,
    EndCondition,
    EventInstance,
    Frequency,
    ICSImportResult,
    RecurrenceRule,
)
from .recurrence_engine import RecurrenceEngine, generate_instances
from .rrule_codec import from_rrule, to_rrule
from .rule_formatter import format_rule

__all__ = [
    "CalendarEvent",
    "EndCondition",
    "EventInstance",
    "Frequency",
    "ICSImportResult",
    "RecurrenceEngine",
    "RecurrenceRule",
    "collect_events",
    "events_for_day",
    "export_events",
    "format_rule",
    "from_rrule",
    "generate_instances",
    "import_events",
    "parent_event_id",
    "to_rrule",
]


def _init_logging(level_name: Optional[str]) -> None:
    """Initialize root logging to stream to console.

    Installs a colorized stderr handler when the root logger has none, then
    applies the requested level. RECURCAL_DEBUG (truthy values: "1", "true",
    "yes", "on") forces DEBUG verbosity.
    """
    debug_env = os.environ.get("RECURCAL_DEBUG", "")
    if debug_env.strip().lower() in ("1", "true", "yes", "on"):
        level_name = "DEBUG"

    root = logging.getLogger()
    # Only configure a handler if none is present to avoid duplicate output.
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        # HH:MM:SS  LEVEL   logger.name: message, with only the level colorized
        fmt = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
        log_colors = {
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        }
        handler.setFormatter(ColoredFormatter(fmt, datefmt="%H:%M:%S", log_colors=log_colors))
        root.addHandler(handler)

    level = logging.INFO
    if isinstance(level_name, str):
        candidate = getattr(logging, level_name.upper(), None)
        if isinstance(candidate, int):
            level = candidate
    root.setLevel(level)
    logging.getLogger(__name__).debug(
        "Logging initialized at level %s", logging.getLevelName(level)
    )
