"""
Recurrence expansion.

Turns recurring-booking rules into the concrete instances that fall inside
a date range. Instances cancelled one by one are suppressed through a set of
(rule_id, date, time) keys.

Monthly rules whose anchor day does not exist in a month (e.g. the 31st in
April) skip that month; the series continues in the next month that has the
day. Nothing is shifted into a neighbouring month.
"""

import calendar
import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Iterator

from .records import (
    BOOKING_CANCELED,
    GENERATING_STATUSES,
    BookingRecord,
    CancellationKey,
    GeneratedInstance,
    RecurrenceRule,
    instance_id,
)
from .rrule import Monthly, Weekly

logger = logging.getLogger(__name__)


def cancellation_keys(existing_bookings: Iterable[BookingRecord]) -> set[CancellationKey]:
    """Keys of recurring instances that were cancelled individually."""
    return {
        (booking.recurring_rule_id, booking.start.date(), booking.start.time())
        for booking in existing_bookings
        if booking.status == BOOKING_CANCELED and booking.recurring_rule_id is not None
    }


def expand_recurring_bookings(
    rules: Iterable[RecurrenceRule],
    existing_bookings: Iterable[BookingRecord],
    range_start: date,
    range_end: date,
) -> list[GeneratedInstance]:
    """Instances of active and completed rules in [range_start, range_end], ordered by start."""
    return expand_rules(rules, cancellation_keys(existing_bookings), range_start, range_end)


def expand_rules(
    rules: Iterable[RecurrenceRule],
    exceptions: set[CancellationKey],
    range_start: date,
    range_end: date,
) -> list[GeneratedInstance]:
    instances: list[GeneratedInstance] = []

    for rule in rules:
        if rule.status not in GENERATING_STATUSES:
            continue
        try:
            instances.extend(_expand_rule(rule, exceptions, range_start, range_end))
        except (TypeError, ValueError, OverflowError) as e:
            # A malformed rule must not hide the rest of the agenda
            logger.warning(f"Skipping recurring rule {rule.id}: {e}")

    instances.sort(key=lambda instance: (instance.start, instance.recurring_rule_id))
    return instances


def occurrence_dates(rule: RecurrenceRule, range_start: date, range_end: date) -> list[date]:
    """Dates on which the rule fires inside the range, ignoring status and exceptions."""
    if rule.start_time is None or rule.until_date is None:
        return []

    window_start = max(range_start, rule.start_date)
    window_end = min(range_end, rule.until_date)
    if window_start > window_end:
        return []

    if isinstance(rule.frequency, Weekly):
        return list(_weekly_dates(rule, window_start, window_end))
    if isinstance(rule.frequency, Monthly):
        return list(_monthly_dates(rule, window_start, window_end))
    return []


def _expand_rule(
    rule: RecurrenceRule,
    exceptions: set[CancellationKey],
    range_start: date,
    range_end: date,
) -> Iterator[GeneratedInstance]:
    for day in occurrence_dates(rule, range_start, range_end):
        if (rule.id, day, rule.start_time) in exceptions:
            continue

        start = datetime.combine(day, rule.start_time)
        yield GeneratedInstance(
            id=instance_id(rule.id, start),
            recurring_rule_id=rule.id,
            user_id=rule.user_id,
            service_id=rule.service_id,
            professional_id=rule.professional_id,
            start=start,
            duration_minutes=rule.duration_minutes,
        )


def _weekly_dates(rule: RecurrenceRule, window_start: date, window_end: date) -> Iterator[date]:
    weekday = rule.frequency.by_day
    if weekday is None:
        weekday = rule.start_date.weekday()

    current = window_start + timedelta(days=(weekday - window_start.weekday()) % 7)
    while current <= window_end:
        yield current
        current += timedelta(days=7)


def _monthly_dates(rule: RecurrenceRule, window_start: date, window_end: date) -> Iterator[date]:
    anchor_day = rule.start_date.day
    year, month = window_start.year, window_start.month

    while date(year, month, 1) <= window_end:
        if anchor_day <= calendar.monthrange(year, month)[1]:
            current = date(year, month, anchor_day)
            if window_start <= current <= window_end:
                yield current
        month += 1
        if month > 12:
            year, month = year + 1, 1
