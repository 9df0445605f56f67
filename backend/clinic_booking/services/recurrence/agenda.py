"""
Agenda view: stored bookings merged with generated recurring instances.

A cancelled booking that carries a recurring_rule_id is only a suppression
marker for one instance and is never shown.
"""

from datetime import date
from typing import Iterable

from sqlalchemy.orm import Session

from .expander import expand_recurring_bookings
from .records import BOOKING_CANCELED, BookingRecord, GeneratedInstance, RecurrenceRule
from .store import load_bookings, load_rules


def build_agenda(
    bookings: Iterable[BookingRecord],
    rules: Iterable[RecurrenceRule],
    range_start: date,
    range_end: date,
) -> list[BookingRecord | GeneratedInstance]:
    bookings = list(bookings)

    visible: list[BookingRecord | GeneratedInstance] = [
        booking
        for booking in bookings
        if booking.recurring_rule_id is None
        and booking.status != BOOKING_CANCELED
        and range_start <= booking.start.date() <= range_end
    ]
    visible.extend(expand_recurring_bookings(rules, bookings, range_start, range_end))
    visible.sort(key=lambda entry: (entry.start, str(entry.id)))
    return visible


def load_agenda(db: Session, range_start: date, range_end: date) -> list[BookingRecord | GeneratedInstance]:
    return build_agenda(
        load_bookings(db, range_start, range_end),
        load_rules(db, generating_only=True),
        range_start,
        range_end,
    )
