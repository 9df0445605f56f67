"""
Recurrence rule encoding.

Persisted form: "FREQ=WEEKLY;BYDAY=MO;UNTIL=20240722" or
"FREQ=MONTHLY;UNTIL=20241231". Only this module reads or writes the string;
the expander works on the parsed variant.
"""

from dataclasses import dataclass
from datetime import date, datetime

# Index matches date.weekday(): Monday = 0
WEEKDAY_CODES = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")


@dataclass(frozen=True)
class Weekly:
    by_day: int | None = None  # date.weekday() index; None → weekday of start date


@dataclass(frozen=True)
class Monthly:
    pass


RecurrenceFrequency = Weekly | Monthly


@dataclass(frozen=True)
class ParsedRule:
    frequency: RecurrenceFrequency
    until_date: date


def parse_rrule(value: str | None) -> ParsedRule | None:
    """
    Parse a rule string.

    Returns None for anything that cannot be expanded: missing or malformed
    UNTIL, unknown FREQ, unknown BYDAY code.
    """
    if not value:
        return None

    parts = {}
    for chunk in value.split(";"):
        if "=" not in chunk:
            continue
        key, _, raw = chunk.partition("=")
        parts[key.strip().upper()] = raw.strip()

    until_date = _parse_until(parts.get("UNTIL"))
    if until_date is None:
        return None

    freq = parts.get("FREQ", "").upper()
    if freq == "WEEKLY":
        by_day = parts.get("BYDAY")
        if not by_day:
            return ParsedRule(Weekly(), until_date)
        code = by_day.upper()
        if code not in WEEKDAY_CODES:
            return None
        return ParsedRule(Weekly(WEEKDAY_CODES.index(code)), until_date)
    if freq == "MONTHLY":
        return ParsedRule(Monthly(), until_date)
    return None


def format_rrule(frequency: RecurrenceFrequency, until_date: date) -> str:
    until = until_date.strftime("%Y%m%d")
    if isinstance(frequency, Weekly):
        if frequency.by_day is None:
            return f"FREQ=WEEKLY;UNTIL={until}"
        return f"FREQ=WEEKLY;BYDAY={WEEKDAY_CODES[frequency.by_day]};UNTIL={until}"
    if isinstance(frequency, Monthly):
        return f"FREQ=MONTHLY;UNTIL={until}"
    raise TypeError(f"Unsupported frequency: {frequency!r}")


def _parse_until(raw: str | None) -> date | None:
    if not raw or len(raw) != 8 or not raw.isdigit():
        return None
    try:
        return datetime.strptime(raw, "%Y%m%d").date()
    except ValueError:
        return None
