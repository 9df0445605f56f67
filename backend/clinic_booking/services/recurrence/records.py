"""
Value types consumed and produced by the recurrence expander.
"""

from dataclasses import dataclass
from datetime import date, datetime, time

from .rrule import RecurrenceFrequency

RULE_ACTIVE = "active"
RULE_SUSPENDED = "suspended"
RULE_COMPLETED = "completed"

# Completed rules keep the instances up to their (truncated) until date
GENERATING_STATUSES = frozenset({RULE_ACTIVE, RULE_COMPLETED})

BOOKING_CONFIRMED = "confirmed"
BOOKING_CANCELED = "canceled"

SYNTHETIC_ID_PREFIX = "R-"

# (rule_id, occurrence date, occurrence time)
CancellationKey = tuple[int, date, time]


@dataclass(frozen=True)
class RecurrenceRule:
    id: int
    user_id: int | None
    service_id: int
    professional_id: int
    start_date: date
    start_time: time | None
    duration_minutes: int
    frequency: RecurrenceFrequency | None
    until_date: date | None
    status: str = RULE_ACTIVE


@dataclass(frozen=True)
class BookingRecord:
    """A stored booking as seen by the agenda."""
    id: int
    user_id: int | None
    service_id: int
    professional_id: int
    start: datetime
    duration_minutes: int
    status: str
    recurring_rule_id: int | None = None
    notes: str | None = None


@dataclass(frozen=True)
class GeneratedInstance:
    """One occurrence of a recurring rule; never persisted."""
    id: str
    recurring_rule_id: int
    user_id: int | None
    service_id: int
    professional_id: int
    start: datetime
    duration_minutes: int
    status: str = BOOKING_CONFIRMED
    is_recurring_instance: bool = True


def instance_id(rule_id: int, start: datetime) -> str:
    """Deterministic synthetic id for the (rule, occurrence) pair."""
    return f"{SYNTHETIC_ID_PREFIX}{rule_id}-{start:%Y%m%dT%H%M}"


def is_synthetic_id(value) -> bool:
    return isinstance(value, str) and value.startswith(SYNTHETIC_ID_PREFIX)
