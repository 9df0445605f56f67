"""
Level 1: clinic day grid.

Resolves which schedule governs a date and produces the candidate start
times on the slot grid that fit inside opening hours.

Contains:
✓ weekly operating hours
✓ holiday exceptions (exact-date override)
✓ closing-time fit for the requested duration

Does NOT contain:
✗ Lunch break (Level 2)
✗ Existing bookings (Level 2)
"""

from datetime import date
from typing import Iterable

from .config import BookingConfig, get_booking_config, sunday_weekday
from .schedule import DaySchedule, HolidayException, WeeklySchedule


def resolve_day_schedule(
    target_date: date,
    weekly_schedule: WeeklySchedule,
    holiday_exceptions: Iterable[HolidayException],
) -> DaySchedule | None:
    """
    Effective schedule for target_date.

    A holiday exception for the exact date wins over the weekday entry.
    Returns None when neither exists.
    """
    for exception in holiday_exceptions:
        if exception.date == target_date:
            return exception.schedule
    return weekly_schedule.get(sunday_weekday(target_date))


def calculate_candidate_minutes(
    day: DaySchedule | None,
    duration_minutes: int,
    config: BookingConfig | None = None,
) -> list[int]:
    """
    Grid start times (minutes since midnight) for a service of duration_minutes.

    Candidates start at opening time, step by slot_step_minutes, stay strictly
    before closing time, and must finish no later than closing time.
    """
    config = config or get_booking_config()
    hours = day.hours if day is not None else None
    if hours is None:
        return []

    start_min, end_min = hours
    candidates = []
    t = start_min
    while t < end_min:
        if t + duration_minutes <= end_min:
            candidates.append(t)
        t += config.slot_step_minutes

    return candidates
