"""
Level 2: professional availability.

Filters the clinic day grid against the lunch break and the professional's
occupied intervals. `compute_available_slots` is pure; `load_availability`
fetches the snapshot it needs from the database.
"""

import json
import logging
from datetime import date, datetime, time
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...exceptions import ScheduleUnavailableError
from .calculator import calculate_candidate_minutes, resolve_day_schedule
from .config import (
    BookingConfig,
    get_booking_config,
    minutes_to_time,
    overlaps,
    parse_time,
    time_to_minutes,
)
from .schedule import (
    DaySchedule,
    HolidayException,
    OccupiedSlot,
    WeeklySchedule,
    weekly_schedule_from_json,
)

logger = logging.getLogger(__name__)


def compute_available_slots(
    target_date: date,
    professional_id: int | None,
    service_duration_minutes: int,
    weekly_schedule: WeeklySchedule,
    holiday_exceptions: Iterable[HolidayException],
    occupied_slots: Iterable[OccupiedSlot],
    ignore_booking_id: int | str | None = None,
    *,
    now: datetime | None = None,
    config: BookingConfig | None = None,
) -> list[time]:
    """
    Bookable start times for a professional on target_date, ascending.

    Args:
        ignore_booking_id: Occupied slot to disregard (the booking being
            rescheduled must not block itself).
        now: When given and target_date is today, times already past are
            dropped.
    """
    assert service_duration_minutes > 0, "service duration must be positive"

    if professional_id is None:
        return []

    day = resolve_day_schedule(target_date, weekly_schedule, holiday_exceptions)
    candidates = calculate_candidate_minutes(day, service_duration_minutes, config)
    if not candidates:
        return []

    lunch = day.lunch_window
    busy = [
        (time_to_minutes(slot.start_time), time_to_minutes(slot.start_time) + slot.duration_minutes)
        for slot in occupied_slots
        if slot.professional_id == professional_id
        and (ignore_booking_id is None or slot.booking_id != ignore_booking_id)
    ]

    cutoff = None
    if now is not None and now.date() == target_date:
        cutoff = now.hour * 60 + now.minute

    available = []
    for start in candidates:
        end = start + service_duration_minutes

        if cutoff is not None and start < cutoff:
            continue
        if lunch is not None and overlaps(start, end, *lunch):
            continue
        if any(overlaps(start, end, busy_start, busy_end) for busy_start, busy_end in busy):
            continue

        available.append(minutes_to_time(start))

    return available


def load_availability(
    db: Session,
    target_date: date,
    professional_id: int | None,
    service_duration_minutes: int,
    ignore_booking_id: int | str | None = None,
    now: datetime | None = None,
    config: BookingConfig | None = None,
) -> tuple[DaySchedule | None, list[time]]:
    """
    Fetch the schedule snapshot and occupied slots, then resolve availability.

    Returns:
        (effective day schedule, available start times)

    Raises:
        ScheduleUnavailableError: the snapshot could not be read.
    """
    config = config or get_booking_config()

    try:
        weekly = _get_weekly_schedule(db)
        holidays = _get_holiday_exceptions(db, target_date)
        occupied = _get_occupied_slots(db, target_date)
    except SQLAlchemyError as e:
        logger.error(f"Failed to load availability data for {target_date}: {e}")
        raise ScheduleUnavailableError(f"Could not load schedule data for {target_date}") from e

    day = resolve_day_schedule(target_date, weekly, holidays)
    times = compute_available_slots(
        target_date,
        professional_id,
        service_duration_minutes,
        weekly,
        holidays,
        occupied,
        ignore_booking_id,
        now=now,
        config=config,
    )
    return day, times


# ── Database helpers ─────────────────────────────────────────────────────


def _get_weekly_schedule(db: Session) -> dict[int, DaySchedule]:
    """Weekly operating hours from the clinic settings row."""
    from ...models.generated import ClinicSettings

    settings_row = db.query(ClinicSettings).order_by(ClinicSettings.id).first()
    if not settings_row:
        return {}
    try:
        data = json.loads(settings_row.operating_hours) if settings_row.operating_hours else {}
    except json.JSONDecodeError:
        logger.warning("Clinic operating hours are not valid JSON, treating as closed")
        data = {}
    return weekly_schedule_from_json(data if isinstance(data, dict) else {})


def _get_holiday_exceptions(db: Session, target_date: date) -> list[HolidayException]:
    """Holiday exceptions for the date."""
    from ...models.generated import HolidayExceptions
    from ..clinic_settings import holiday_from_row

    rows = (
        db.query(HolidayExceptions)
        .filter(HolidayExceptions.date == target_date.isoformat())
        .all()
    )
    return [holiday_from_row(row) for row in rows]


def _get_occupied_slots(db: Session, target_date: date) -> list[OccupiedSlot]:
    """
    Intervals already taken on the date.

    Stored non-canceled bookings plus generated recurring instances.
    """
    from ...models.generated import Bookings
    from ..recurrence.store import load_bookings, load_rules
    from ..recurrence.expander import expand_recurring_bookings

    slots = []
    rows = (
        db.query(Bookings)
        .filter(
            Bookings.booking_date == target_date.isoformat(),
            Bookings.status != "canceled",
        )
        .all()
    )
    for row in rows:
        try:
            start = parse_time(row.booking_time)
        except (AttributeError, TypeError, ValueError, IndexError):
            logger.warning(f"Booking {row.id} has unreadable time {row.booking_time!r}, skipping")
            continue
        slots.append(OccupiedSlot(
            booking_id=row.id,
            professional_id=row.professional_id,
            start_time=start,
            duration_minutes=row.duration,
        ))

    instances = expand_recurring_bookings(
        load_rules(db, generating_only=True),
        load_bookings(db, target_date, target_date, recurring_only=True),
        target_date,
        target_date,
    )
    for instance in instances:
        slots.append(OccupiedSlot(
            booking_id=instance.id,
            professional_id=instance.professional_id,
            start_time=instance.start.time(),
            duration_minutes=instance.duration_minutes,
        ))

    return slots
