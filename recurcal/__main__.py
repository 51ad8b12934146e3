"""Command-line entry for recurcal.

Subcommands:
  describe  print the English description of an RRULE value
  expand    list the occurrences in an .ics file for a date window
  export    re-export an .ics file restricted to the supported RRULE subset
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from typing import Optional

from dateutil.parser import isoparse

from . import _init_logging
from .calendar_view import collect_events
from .config_loader import Config, load_config
from .datetime_utils import end_of_day
from .exceptions import ICSImportError, RecurcalError
from .ics_exporter import write_ics_file
from .ics_importer import load_ics_file
from .logging_config import configure_logging
from .models import CalendarEvent
from .rrule_codec import from_rrule
from .rule_formatter import format_rule

logger = logging.getLogger(__name__)


def _parse_when(value: str) -> datetime:
    try:
        return isoparse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date/time: {value!r}") from e


def _parse_window_end(value: str) -> datetime:
    when = _parse_when(value)
    if "T" not in value.upper():
        return end_of_day(when.date(), when.tzinfo)
    return when


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the recurcal CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="recurcal",
        description="Expand, describe and convert recurring calendar events",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m recurcal describe "FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE"
  python -m recurcal expand team.ics --start 2026-01-01 --end 2026-01-31
  python -m recurcal export google.ics -o normalized.ics
        """,
    )
    parser.add_argument("--config", metavar="PATH", help="Path to recurcal.yaml")
    parser.add_argument(
        "--log-level",
        metavar="LEVEL",
        help="Logging level (default: from config, INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    describe = subparsers.add_parser("describe", help="Describe an RRULE in English")
    describe.add_argument("rrule", help='RRULE value, e.g. "FREQ=DAILY;COUNT=5"')

    expand = subparsers.add_parser("expand", help="List occurrences in a date window")
    expand.add_argument("ics_file", help="Calendar file to read")
    expand.add_argument("--start", required=True, type=_parse_when, help="Window start")
    expand.add_argument(
        "--end",
        required=True,
        type=_parse_window_end,
        help="Window end; a bare date includes that whole day",
    )

    export = subparsers.add_parser("export", help="Re-export a calendar file")
    export.add_argument("ics_file", help="Calendar file to read")
    export.add_argument("-o", "--output", required=True, help="File to write")

    return parser


def _load_events(path: str) -> list[CalendarEvent]:
    result = load_ics_file(path)
    if not result.success:
        raise ICSImportError(result.error_message or f"Unable to import {path}")
    for warning in result.warnings:
        logger.warning(warning)
    return result.events


def _cmd_describe(args: argparse.Namespace, config: Config) -> int:
    description = format_rule(from_rrule(args.rrule))
    print(description or "(does not repeat)")
    return 0


def _cmd_expand(args: argparse.Namespace, config: Config) -> int:
    events = _load_events(args.ics_file)
    items = collect_events(
        events, args.start, args.end, max_occurrences=config.max_occurrences
    )
    for item in items:
        print(f"{item.start.isoformat()}  {item.title}  [{item.id}]")
    logger.info("%d items between %s and %s", len(items), args.start, args.end)
    return 0


def _cmd_export(args: argparse.Namespace, config: Config) -> int:
    events = _load_events(args.ics_file)
    write_ics_file(
        args.output,
        events,
        prodid=config.ics_prodid,
        calendar_name=config.calendar_name,
    )
    print(f"Exported {len(events)} events to {args.output}")
    return 0


_COMMANDS = {
    "describe": _cmd_describe,
    "expand": _cmd_expand,
    "export": _cmd_export,
}


def main(argv: Optional[list[str]] = None) -> int:
    """Run the recurcal CLI.

    Returns:
        Process exit status
    """
    parser = _create_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        _init_logging(args.log_level or config.log_level)
        configure_logging(default_level=logging.getLogger().level)
        return _COMMANDS[args.command](args, config)
    except RecurcalError as exc:
        print(f"recurcal: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
