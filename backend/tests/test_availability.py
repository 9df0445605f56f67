from datetime import date, datetime, time

import pytest

from clinic_booking.services.slots import (
    BookingConfig,
    DaySchedule,
    HolidayException,
    OccupiedSlot,
    compute_available_slots,
)
from clinic_booking.services.slots.config import time_to_minutes

MONDAY = date(2024, 7, 1)
PROFESSIONAL = 1


def _weekly(lunch: bool = True) -> dict[int, DaySchedule]:
    monday = DaySchedule(
        is_open=True,
        start_time=time(8, 0),
        end_time=time(20, 0),
        lunch_start=time(12, 0) if lunch else None,
        lunch_end=time(13, 0) if lunch else None,
    )
    return {0: DaySchedule.closed(), 1: monday}


def _slots(duration: int, occupied=(), ignore=None, holidays=(), weekly=None, **kwargs) -> list[time]:
    return compute_available_slots(
        MONDAY,
        PROFESSIONAL,
        duration,
        weekly if weekly is not None else _weekly(),
        list(holidays),
        list(occupied),
        ignore,
        **kwargs,
    )


def test_ninety_minute_service_respects_lunch_and_closing_time() -> None:
    slots = _slots(90)

    assert time(10, 30) in slots  # ends exactly at lunch start
    assert time(13, 0) in slots
    for blocked in (time(11, 0), time(11, 30), time(12, 0), time(12, 30)):
        assert blocked not in slots
    assert time(19, 30) not in slots  # would end at 21:00
    assert slots[-1] == time(18, 30)
    assert slots[0] == time(8, 0)


def test_occupied_slot_blocks_professional_unless_ignored() -> None:
    booking = OccupiedSlot(booking_id=7, professional_id=PROFESSIONAL, start_time=time(14, 0), duration_minutes=30)

    assert time(14, 0) not in _slots(30, occupied=[booking])
    assert time(14, 0) in _slots(30, occupied=[booking], ignore=7)


def test_other_professionals_bookings_do_not_block() -> None:
    booking = OccupiedSlot(booking_id=8, professional_id=2, start_time=time(9, 0), duration_minutes=60)

    assert time(9, 0) in _slots(30, occupied=[booking])


def test_long_booking_blocks_every_overlapping_start() -> None:
    booking = OccupiedSlot(booking_id=9, professional_id=PROFESSIONAL, start_time=time(15, 0), duration_minutes=60)

    slots = _slots(60, occupied=[booking])

    assert time(14, 0) in slots  # ends at 15:00
    assert time(14, 30) not in slots
    assert time(15, 0) not in slots
    assert time(15, 30) not in slots
    assert time(16, 0) in slots


def test_closed_day_has_no_slots_even_without_bookings() -> None:
    sunday = date(2024, 6, 30)

    assert compute_available_slots(sunday, PROFESSIONAL, 30, _weekly(), [], []) == []


def test_day_missing_from_schedule_is_closed() -> None:
    tuesday = date(2024, 7, 2)

    assert compute_available_slots(tuesday, PROFESSIONAL, 30, _weekly(), [], []) == []


def test_open_day_without_hours_is_closed() -> None:
    weekly = {1: DaySchedule(is_open=True, start_time=time(8, 0))}

    assert _slots(30, weekly=weekly) == []


def test_missing_professional_yields_nothing() -> None:
    assert compute_available_slots(MONDAY, None, 30, _weekly(), [], []) == []


def test_non_positive_duration_is_a_caller_error() -> None:
    with pytest.raises(AssertionError):
        _slots(0)


def test_holiday_exception_overrides_weekday() -> None:
    short_day = HolidayException(
        date=MONDAY,
        name="Corpus Christi",
        schedule=DaySchedule(is_open=True, start_time=time(9, 0), end_time=time(12, 0)),
    )

    slots = _slots(30, holidays=[short_day])

    assert slots == [time(9, 0), time(9, 30), time(10, 0), time(10, 30), time(11, 0), time(11, 30)]


def test_closed_holiday_blocks_whole_day() -> None:
    closed = HolidayException(date=MONDAY, name="Natal", schedule=DaySchedule.closed())

    assert _slots(30, holidays=[closed]) == []


def test_holiday_on_other_date_is_ignored() -> None:
    other = HolidayException(date=date(2024, 7, 8), name="Outro", schedule=DaySchedule.closed())

    assert _slots(30, holidays=[other]) == _slots(30)


def test_incomplete_lunch_window_is_ignored() -> None:
    weekly = {
        1: DaySchedule(is_open=True, start_time=time(8, 0), end_time=time(20, 0), lunch_start=time(12, 0)),
    }

    assert time(12, 0) in _slots(30, weekly=weekly)


def test_past_times_are_dropped_for_today_only() -> None:
    now = datetime(2024, 7, 1, 10, 15)

    assert _slots(30, now=now)[0] == time(10, 30)
    assert _slots(30, now=datetime(2024, 6, 28, 18, 0))[0] == time(8, 0)


def test_slot_step_comes_from_config() -> None:
    slots = _slots(30, config=BookingConfig(slot_step_minutes=60))

    assert slots[:3] == [time(8, 0), time(9, 0), time(10, 0)]


def test_repeated_calls_are_identical() -> None:
    occupied = [OccupiedSlot(booking_id=1, professional_id=PROFESSIONAL, start_time=time(9, 0), duration_minutes=45)]

    assert _slots(45, occupied=occupied) == _slots(45, occupied=occupied)


@pytest.mark.parametrize("duration", [15, 30, 45, 60, 90, 120, 240])
def test_generated_slots_hold_schedule_invariants(duration: int) -> None:
    occupied = [
        OccupiedSlot(booking_id=1, professional_id=PROFESSIONAL, start_time=time(9, 0), duration_minutes=45),
        OccupiedSlot(booking_id=2, professional_id=PROFESSIONAL, start_time=time(16, 30), duration_minutes=90),
        OccupiedSlot(booking_id=3, professional_id=2, start_time=time(10, 0), duration_minutes=60),
    ]
    day_start, day_end = 8 * 60, 20 * 60
    lunch_start, lunch_end = 12 * 60, 13 * 60

    slots = _slots(duration, occupied=occupied)

    assert slots == sorted(slots)
    for slot in slots:
        start = time_to_minutes(slot)
        end = start + duration
        assert day_start <= start and end <= day_end
        assert not (start < lunch_end and lunch_start < end)
        for busy in occupied:
            if busy.professional_id != PROFESSIONAL:
                continue
            busy_start = time_to_minutes(busy.start_time)
            busy_end = busy_start + busy.duration_minutes
            assert not (start < busy_end and busy_start < end)
