from datetime import date, time

from clinic_booking.services.slots import DaySchedule, HolidayException, resolve_day_schedule, validate_day_schedule
from clinic_booking.services.slots.calculator import calculate_candidate_minutes
from clinic_booking.services.slots.config import sunday_weekday
from clinic_booking.services.slots.schedule import weekly_schedule_from_json, weekly_schedule_to_json


def test_sunday_is_weekday_zero() -> None:
    assert sunday_weekday(date(2024, 6, 30)) == 0
    assert sunday_weekday(date(2024, 7, 1)) == 1
    assert sunday_weekday(date(2024, 7, 6)) == 6


def test_weekly_schedule_reads_stored_json() -> None:
    schedule = weekly_schedule_from_json({
        "0": {"open": False},
        "1": {"open": True, "start": "08:00", "end": "18:00", "lunchStart": "12:00", "lunchEnd": "13:00"},
    })

    assert schedule[0] == DaySchedule.closed()
    assert schedule[1].start_time == time(8, 0)
    assert schedule[1].lunch_window == (720, 780)


def test_unreadable_entries_degrade_instead_of_failing() -> None:
    schedule = weekly_schedule_from_json({
        "monday": {"open": True, "start": "08:00", "end": "18:00"},
        "2": {"open": True, "start": "8h", "end": "18:00"},
        "3": {"open": True, "start": "08:00", "end": "18:00", "lunchStart": "25:00", "lunchEnd": "13:00"},
        "9": {"open": True},
    })

    assert set(schedule) == {2, 3}
    assert schedule[2].hours is None
    assert schedule[3].lunch_window is None


def test_stored_json_survives_a_write() -> None:
    stored = {
        "0": {"open": False},
        "1": {"open": True, "start": "08:00", "end": "18:00", "lunchStart": "12:00", "lunchEnd": "13:00"},
    }

    assert weekly_schedule_to_json(weekly_schedule_from_json(stored)) == stored


def test_holiday_wins_over_weekday() -> None:
    weekly = {1: DaySchedule(is_open=True, start_time=time(8, 0), end_time=time(18, 0))}
    holiday = HolidayException(date=date(2024, 7, 1), name="Feriado", schedule=DaySchedule.closed())

    assert resolve_day_schedule(date(2024, 7, 1), weekly, [holiday]) == DaySchedule.closed()
    assert resolve_day_schedule(date(2024, 7, 8), weekly, [holiday]) == weekly[1]


def test_candidates_fit_before_closing() -> None:
    day = DaySchedule(is_open=True, start_time=time(8, 0), end_time=time(10, 0))

    assert calculate_candidate_minutes(day, 60) == [480, 510, 540]
    assert calculate_candidate_minutes(day, 180) == []
    assert calculate_candidate_minutes(None, 30) == []


def test_validation_accepts_well_formed_days() -> None:
    assert validate_day_schedule(DaySchedule.closed()) == []
    assert validate_day_schedule(
        DaySchedule(is_open=True, start_time=time(8, 0), end_time=time(18, 0),
                    lunch_start=time(12, 0), lunch_end=time(13, 0))
    ) == []


def test_validation_rejects_broken_days() -> None:
    assert validate_day_schedule(DaySchedule(is_open=True, start_time=time(8, 0)))
    assert validate_day_schedule(DaySchedule(is_open=True, start_time=time(18, 0), end_time=time(8, 0)))
    assert validate_day_schedule(
        DaySchedule(is_open=True, start_time=time(8, 0), end_time=time(18, 0), lunch_start=time(12, 0))
    )
    assert validate_day_schedule(
        DaySchedule(is_open=True, start_time=time(8, 0), end_time=time(18, 0),
                    lunch_start=time(13, 0), lunch_end=time(12, 0))
    )
    assert validate_day_schedule(
        DaySchedule(is_open=True, start_time=time(8, 0), end_time=time(18, 0),
                    lunch_start=time(17, 30), lunch_end=time(18, 30))
    )
