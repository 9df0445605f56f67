"""
Clinic schedule snapshot types.

Stored format (clinic_settings.operating_hours), keyed by weekday with
Sunday = "0":

    {"1": {"open": true, "start": "08:00", "end": "20:00",
           "lunchStart": "12:00", "lunchEnd": "13:00"},
     "0": {"open": false}}

Parsing is lenient: unreadable fields become None, which the resolver
treats as "closed" (hours) or "no lunch" (lunch window).
"""

import logging
from dataclasses import dataclass
from datetime import date, time
from typing import Mapping

from .config import parse_time, format_time, time_to_minutes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DaySchedule:
    is_open: bool
    start_time: time | None = None
    end_time: time | None = None
    lunch_start: time | None = None
    lunch_end: time | None = None

    @property
    def hours(self) -> tuple[int, int] | None:
        """(start, end) in minutes, or None when the day cannot take bookings."""
        if not self.is_open or self.start_time is None or self.end_time is None:
            return None
        return time_to_minutes(self.start_time), time_to_minutes(self.end_time)

    @property
    def lunch_window(self) -> tuple[int, int] | None:
        """(start, end) in minutes; an incomplete window is ignored."""
        if self.lunch_start is None or self.lunch_end is None:
            return None
        return time_to_minutes(self.lunch_start), time_to_minutes(self.lunch_end)

    @classmethod
    def closed(cls) -> "DaySchedule":
        return cls(is_open=False)

    @classmethod
    def from_dict(cls, data: Mapping | None) -> "DaySchedule":
        if not data:
            return cls.closed()
        return cls(
            is_open=bool(data.get("open", False)),
            start_time=lenient_time(data.get("start")),
            end_time=lenient_time(data.get("end")),
            lunch_start=lenient_time(data.get("lunchStart")),
            lunch_end=lenient_time(data.get("lunchEnd")),
        )

    def to_dict(self) -> dict:
        data: dict = {"open": self.is_open}
        for key, value in (
            ("start", self.start_time),
            ("end", self.end_time),
            ("lunchStart", self.lunch_start),
            ("lunchEnd", self.lunch_end),
        ):
            if value is not None:
                data[key] = format_time(value)
        return data


@dataclass(frozen=True)
class HolidayException:
    """Overrides the weekday schedule for one exact date."""
    date: date
    name: str
    schedule: DaySchedule


@dataclass(frozen=True)
class OccupiedSlot:
    """Interval held by an existing booking (or recurring instance) on one date."""
    booking_id: int | str
    professional_id: int
    start_time: time
    duration_minutes: int


WeeklySchedule = Mapping[int, DaySchedule]


def weekly_schedule_from_json(data: Mapping | None) -> dict[int, DaySchedule]:
    """Build a weekday → DaySchedule mapping from the stored JSON object."""
    schedule: dict[int, DaySchedule] = {}
    for key, value in (data or {}).items():
        try:
            weekday = int(key)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring operating hours entry with bad weekday key: {key!r}")
            continue
        if 0 <= weekday <= 6 and isinstance(value, Mapping):
            schedule[weekday] = DaySchedule.from_dict(value)
    return schedule


def weekly_schedule_to_json(schedule: WeeklySchedule) -> dict[str, dict]:
    return {str(weekday): day.to_dict() for weekday, day in sorted(schedule.items())}


def validate_day_schedule(day: DaySchedule) -> list[str]:
    """
    Check the invariants enforced when an admin edits opening hours.

    Returns a list of human-readable problems; empty means valid.
    """
    errors = []
    if not day.is_open:
        return errors

    if day.start_time is None or day.end_time is None:
        errors.append("Start and end times are required for an open day.")
        return errors
    if day.start_time >= day.end_time:
        errors.append("Start time must be before end time.")
        return errors

    if (day.lunch_start is None) != (day.lunch_end is None):
        errors.append("Lunch start and end must both be set or both be empty.")
    elif day.lunch_start is not None:
        if day.lunch_start >= day.lunch_end:
            errors.append("Lunch start must be before lunch end.")
        elif day.lunch_start < day.start_time or day.lunch_end > day.end_time:
            errors.append("Lunch break must be within opening hours.")

    return errors


def lenient_time(value) -> time | None:
    if value in (None, ""):
        return None
    try:
        return parse_time(value)
    except (AttributeError, TypeError, ValueError, IndexError):
        logger.warning(f"Ignoring unreadable schedule time: {value!r}")
        return None
