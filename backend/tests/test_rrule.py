from datetime import date

import pytest

from clinic_booking.services.recurrence import Monthly, ParsedRule, Weekly, format_rrule, parse_rrule


def test_weekly_with_byday() -> None:
    assert parse_rrule("FREQ=WEEKLY;BYDAY=MO;UNTIL=20240722") == ParsedRule(Weekly(0), date(2024, 7, 22))
    assert parse_rrule("FREQ=WEEKLY;BYDAY=SU;UNTIL=20240722").frequency == Weekly(6)


def test_weekly_without_byday_falls_back_to_start_date() -> None:
    assert parse_rrule("FREQ=WEEKLY;UNTIL=20240722") == ParsedRule(Weekly(None), date(2024, 7, 22))


def test_monthly_needs_no_byday() -> None:
    assert parse_rrule("FREQ=MONTHLY;UNTIL=20241231") == ParsedRule(Monthly(), date(2024, 12, 31))


@pytest.mark.parametrize("value", [
    None,
    "",
    "FREQ=WEEKLY;BYDAY=MO",
    "FREQ=WEEKLY;BYDAY=MO;UNTIL=2024-07-22",
    "FREQ=WEEKLY;BYDAY=MO;UNTIL=20241341",
    "FREQ=DAILY;UNTIL=20240722",
    "FREQ=WEEKLY;BYDAY=XX;UNTIL=20240722",
    "garbage",
])
def test_non_expandable_rules_parse_to_none(value) -> None:
    assert parse_rrule(value) is None


def test_format_matches_stored_encoding() -> None:
    assert format_rrule(Weekly(0), date(2024, 7, 22)) == "FREQ=WEEKLY;BYDAY=MO;UNTIL=20240722"
    assert format_rrule(Monthly(), date(2024, 12, 31)) == "FREQ=MONTHLY;UNTIL=20241231"
