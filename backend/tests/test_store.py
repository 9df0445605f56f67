from datetime import date, time
from types import SimpleNamespace

from clinic_booking.services.recurrence import Monthly, Weekly
from clinic_booking.services.recurrence.store import rule_from_row


def _row(**overrides) -> SimpleNamespace:
    fields = dict(
        id=1,
        user_id=10,
        service_id=3,
        professional_id=5,
        start_date="2024-07-01",
        start_time="09:00",
        duration=60,
        rrule="FREQ=WEEKLY;BYDAY=MO;UNTIL=20240722",
        status="active",
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def test_row_converts_to_rule() -> None:
    rule = rule_from_row(_row())

    assert rule.start_date == date(2024, 7, 1)
    assert rule.start_time == time(9, 0)
    assert rule.frequency == Weekly(0)
    assert rule.until_date == date(2024, 7, 22)


def test_byday_must_match_start_weekday() -> None:
    # 2024-07-01 is a Monday
    rule = rule_from_row(_row(rrule="FREQ=WEEKLY;BYDAY=WE;UNTIL=20240722"))

    assert rule.frequency is None
    assert rule.until_date is None


def test_rules_without_byday_are_kept() -> None:
    assert rule_from_row(_row(rrule="FREQ=WEEKLY;UNTIL=20240722")).frequency == Weekly(None)
    assert rule_from_row(_row(rrule="FREQ=MONTHLY;UNTIL=20241231")).frequency == Monthly()


def test_unreadable_fields_degrade_to_none() -> None:
    assert rule_from_row(_row(start_time="9h")).start_time is None
    assert rule_from_row(_row(start_date="01/07/2024")).frequency is None
    assert rule_from_row(_row(rrule="FREQ=DAILY;UNTIL=20240722")).until_date is None
