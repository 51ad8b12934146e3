"""Conversion between RecurrenceRule and iCalendar RRULE strings.

Only the subset the engine understands is read or written: FREQ, INTERVAL,
BYDAY (plain two-letter codes), COUNT and UNTIL. Anything else is dropped.
"""

import logging
from typing import Any, Optional

from .datetime_utils import WEEKDAY_CODES, format_ics_date, parse_ics_date
from .models import EndCondition, Frequency, RecurrenceRule

logger = logging.getLogger(__name__)

_FREQ_TOKENS = {
    Frequency.DAILY: "DAILY",
    Frequency.WEEKLY: "WEEKLY",
    Frequency.MONTHLY: "MONTHLY",
    Frequency.YEARLY: "YEARLY",
}
_FREQ_BY_TOKEN = {token: freq for freq, token in _FREQ_TOKENS.items()}
_DAY_BY_CODE = {code: number for number, code in enumerate(WEEKDAY_CODES)}


def to_rrule(rule: RecurrenceRule) -> str:
    """Serialize a rule to RRULE syntax (without the ``RRULE:`` prefix).

    Examples:
        >>> to_rrule(RecurrenceRule(frequency="weekly", interval=2, days_of_week=[1, 3],
        ...                         end_condition="after", end_count=5))
        'FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE;COUNT=5'

    UNTIL is always written as a floating midnight (``YYYYMMDDT000000``), even
    when the event start carries a timezone. RFC 5545 wants UNTIL in UTC in
    that case, so strict clients may end the series one day early; the engine
    itself treats the end date as inclusive through end of day.

    Returns:
        RRULE value, or an empty string for a rule that never repeats
    """
    if rule is None or not rule.is_recurring:
        return ""

    parts = [f"FREQ={_FREQ_TOKENS.get(rule.frequency, 'DAILY')}"]

    if rule.interval > 1:
        parts.append(f"INTERVAL={rule.interval}")

    if rule.frequency == Frequency.WEEKLY and rule.days_of_week:
        parts.append("BYDAY=" + ",".join(WEEKDAY_CODES[day] for day in rule.days_of_week))

    if rule.end_condition == EndCondition.AFTER and rule.end_count:
        parts.append(f"COUNT={rule.end_count}")
    elif rule.end_condition == EndCondition.ON and rule.end_date:
        parts.append(f"UNTIL={format_ics_date(rule.end_date)}T000000")

    return ";".join(parts)


def _parse_positive_int(value: str) -> Optional[int]:
    try:
        number = int(value.strip())
    except ValueError:
        return None
    return number if number > 0 else None


def from_rrule(rrule: Any) -> RecurrenceRule:
    """Parse an RRULE string into a rule.

    Parsing is forgiving: unknown keys, tokens without ``=``, unparseable
    numbers and unknown BYDAY codes are dropped. A missing or unrecognized
    FREQ yields a daily rule.

    Args:
        rrule: RRULE value, with or without the ``RRULE:`` prefix

    Returns:
        Parsed rule; a never-repeating rule for empty input
    """
    if not rrule or not str(rrule).strip():
        return RecurrenceRule()

    text = str(rrule).strip()
    if text.upper().startswith("RRULE:"):
        text = text[len("RRULE:"):]

    fields: dict[str, Any] = {"frequency": Frequency.DAILY}

    for part in text.split(";"):
        if "=" not in part:
            continue
        key, value = part.split("=", 1)
        key = key.strip().upper()
        value = value.strip()

        if key == "FREQ":
            fields["frequency"] = _FREQ_BY_TOKEN.get(value.upper(), Frequency.DAILY)
        elif key == "INTERVAL":
            fields["interval"] = _parse_positive_int(value) or 1
        elif key == "BYDAY":
            codes = (code.strip().upper() for code in value.split(","))
            fields["days_of_week"] = [_DAY_BY_CODE[code] for code in codes if code in _DAY_BY_CODE]
        elif key == "COUNT":
            count = _parse_positive_int(value)
            if count is not None:
                fields["end_condition"] = EndCondition.AFTER
                fields["end_count"] = count
        elif key == "UNTIL":
            until = parse_ics_date(value)
            if until is not None:
                fields["end_condition"] = EndCondition.ON
                fields["end_date"] = until
        else:
            logger.debug("Ignoring unsupported RRULE part %s=%s", key, value)

    return RecurrenceRule(**fields)
