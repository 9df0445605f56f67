"""
Clinic settings: weekly operating hours and holiday exceptions.

This is the edit boundary for schedule data. Writes are validated here so
the availability resolver can stay lenient on read.
"""

import json
import logging
from datetime import date

from sqlalchemy.orm import Session

from ..exceptions import BookingError, NotFoundError
from ..models.generated import ClinicSettings, HolidayExceptions
from .slots.schedule import (
    DaySchedule,
    HolidayException,
    lenient_time,
    validate_day_schedule,
    weekly_schedule_from_json,
    weekly_schedule_to_json,
)
from .slots.config import format_time

logger = logging.getLogger(__name__)


class DuplicateHolidayError(BookingError):
    """A holiday exception already exists for the date."""


class InvalidScheduleError(BookingError):
    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        super().__init__("; ".join(f"{key}: {' '.join(msgs)}" for key, msgs in errors.items()))


def holiday_from_row(row) -> HolidayException:
    return HolidayException(
        date=date.fromisoformat(row.date),
        name=row.name,
        schedule=DaySchedule(
            is_open=bool(row.is_open),
            start_time=lenient_time(row.start_time),
            end_time=lenient_time(row.end_time),
            lunch_start=lenient_time(row.lunch_start),
            lunch_end=lenient_time(row.lunch_end),
        ),
    )


def get_operating_hours(db: Session) -> dict[int, DaySchedule]:
    row = db.query(ClinicSettings).order_by(ClinicSettings.id).first()
    if not row or not row.operating_hours:
        return {}
    try:
        data = json.loads(row.operating_hours)
    except json.JSONDecodeError:
        logger.warning("Clinic operating hours are not valid JSON")
        return {}
    return weekly_schedule_from_json(data if isinstance(data, dict) else {})


def set_operating_hours(db: Session, schedule: dict[int, DaySchedule]) -> dict[int, DaySchedule]:
    """Validate and replace the weekly schedule."""
    errors = {}
    for weekday, day in schedule.items():
        if not 0 <= weekday <= 6:
            errors[str(weekday)] = ["Weekday must be between 0 (Sunday) and 6 (Saturday)."]
            continue
        problems = validate_day_schedule(day)
        if problems:
            errors[str(weekday)] = problems
    if errors:
        raise InvalidScheduleError(errors)

    row = db.query(ClinicSettings).order_by(ClinicSettings.id).first()
    if row is None:
        row = ClinicSettings()
        db.add(row)
    row.operating_hours = json.dumps(weekly_schedule_to_json(schedule))
    db.commit()

    logger.info(f"Operating hours updated for weekdays {sorted(schedule)}")
    return dict(schedule)


def list_holiday_exceptions(db: Session) -> list:
    return db.query(HolidayExceptions).order_by(HolidayExceptions.date).all()


def add_holiday_exception(db: Session, holiday: HolidayException):
    problems = validate_day_schedule(holiday.schedule)
    if problems:
        raise InvalidScheduleError({holiday.date.isoformat(): problems})

    date_str = holiday.date.isoformat()
    if db.query(HolidayExceptions).filter(HolidayExceptions.date == date_str).first():
        raise DuplicateHolidayError(f"A holiday exception already exists for {date_str}")

    schedule = holiday.schedule
    obj = HolidayExceptions(
        date=date_str,
        name=holiday.name,
        is_open=1 if schedule.is_open else 0,
        start_time=_fmt(schedule.start_time),
        end_time=_fmt(schedule.end_time),
        lunch_start=_fmt(schedule.lunch_start),
        lunch_end=_fmt(schedule.lunch_end),
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)

    logger.info(f"Holiday exception added: {date_str} ({holiday.name})")
    return obj


def delete_holiday_exception(db: Session, holiday_id: int) -> None:
    obj = db.get(HolidayExceptions, holiday_id)
    if not obj:
        raise NotFoundError(f"Holiday exception {holiday_id} not found")
    db.delete(obj)
    db.commit()


def _fmt(value):
    return format_time(value) if value is not None else None
