"""
Recurring bookings.

rrule    - persisted rule string <-> tagged frequency variant
expander - rules -> concrete instances in a date range
agenda   - stored bookings merged with generated instances
"""

from .rrule import Monthly, ParsedRule, Weekly, format_rrule, parse_rrule
from .records import BookingRecord, GeneratedInstance, RecurrenceRule, instance_id, is_synthetic_id
from .expander import cancellation_keys, expand_recurring_bookings, expand_rules, occurrence_dates
from .agenda import build_agenda, load_agenda

__all__ = [
    "Weekly",
    "Monthly",
    "ParsedRule",
    "parse_rrule",
    "format_rrule",
    "RecurrenceRule",
    "BookingRecord",
    "GeneratedInstance",
    "instance_id",
    "is_synthetic_id",
    "cancellation_keys",
    "expand_recurring_bookings",
    "expand_rules",
    "occurrence_dates",
    "build_agenda",
    "load_agenda",
]
