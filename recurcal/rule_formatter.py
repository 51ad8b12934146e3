"""Human-readable descriptions of recurrence rules."""

from .datetime_utils import WEEKDAY_NAMES
from .models import EndCondition, Frequency, RecurrenceRule

_UNITS = {
    Frequency.DAILY: ("day", "days"),
    Frequency.WEEKLY: ("week", "weeks"),
    Frequency.MONTHLY: ("month", "months"),
    Frequency.YEARLY: ("year", "years"),
}


def format_rule(rule: RecurrenceRule) -> str:
    """Describe a rule in English.

    Examples:
        "Every day", "Every 2 weeks on Mon, Wed", "Every month, 5 times",
        "Every year, until 2026-12-31"

    Returns:
        Description, or an empty string for a rule that never repeats
    """
    if rule is None or not rule.is_recurring:
        return ""

    text = ""
    units = _UNITS.get(rule.frequency)
    if units is not None:
        singular, plural = units
        text = f"Every {singular}" if rule.interval <= 1 else f"Every {rule.interval} {plural}"

    if rule.frequency == Frequency.WEEKLY and rule.days_of_week:
        text += " on " + ", ".join(WEEKDAY_NAMES[day] for day in rule.days_of_week)

    if rule.end_condition == EndCondition.AFTER and rule.end_count:
        text += f", {rule.end_count} times"
    elif rule.end_condition == EndCondition.ON and rule.end_date:
        text += f", until {rule.end_date.isoformat()}"

    return text
