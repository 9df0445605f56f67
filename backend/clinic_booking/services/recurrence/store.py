"""
Persistence boundary for recurrence data.

Converts database rows into expander records. Rows that cannot be read are
converted with the unreadable fields set to None so the expander skips them
instead of failing the whole request.
"""

import logging
from datetime import date, datetime

from sqlalchemy.orm import Session

from ..slots.config import parse_time
from .records import GENERATING_STATUSES, BookingRecord, RecurrenceRule
from .rrule import Weekly, parse_rrule

logger = logging.getLogger(__name__)


def rule_from_row(row) -> RecurrenceRule:
    parsed = parse_rrule(row.rrule)
    if parsed is None:
        logger.warning(f"Recurring rule {row.id} has non-expandable rrule {row.rrule!r}")

    try:
        start_date = date.fromisoformat(row.start_date)
    except (TypeError, ValueError):
        logger.warning(f"Recurring rule {row.id} has unreadable start date {row.start_date!r}")
        start_date = date.max
        parsed = None

    if (
        parsed is not None
        and isinstance(parsed.frequency, Weekly)
        and parsed.frequency.by_day is not None
        and parsed.frequency.by_day != start_date.weekday()
    ):
        # Weekly rules fire on the start date's weekday
        logger.warning(
            f"Recurring rule {row.id} BYDAY does not match start date {row.start_date}, skipping"
        )
        parsed = None

    try:
        start_time = parse_time(row.start_time)
    except (AttributeError, TypeError, ValueError, IndexError):
        logger.warning(f"Recurring rule {row.id} has unreadable start time {row.start_time!r}")
        start_time = None

    return RecurrenceRule(
        id=row.id,
        user_id=row.user_id,
        service_id=row.service_id,
        professional_id=row.professional_id,
        start_date=start_date,
        start_time=start_time,
        duration_minutes=row.duration,
        frequency=parsed.frequency if parsed else None,
        until_date=parsed.until_date if parsed else None,
        status=row.status,
    )


def booking_from_row(row) -> BookingRecord | None:
    try:
        start = datetime.combine(
            date.fromisoformat(row.booking_date),
            parse_time(row.booking_time),
        )
    except (AttributeError, TypeError, ValueError, IndexError):
        logger.warning(f"Booking {row.id} has unreadable date/time, skipping")
        return None

    return BookingRecord(
        id=row.id,
        user_id=row.user_id,
        service_id=row.service_id,
        professional_id=row.professional_id,
        start=start,
        duration_minutes=row.duration,
        status=row.status,
        recurring_rule_id=row.recurring_rule_id,
        notes=row.notes,
    )


def load_rules(db: Session, generating_only: bool = False) -> list[RecurrenceRule]:
    from ...models.generated import RecurringBookings

    query = db.query(RecurringBookings)
    if generating_only:
        query = query.filter(RecurringBookings.status.in_(GENERATING_STATUSES))
    return [rule_from_row(row) for row in query.order_by(RecurringBookings.id).all()]


def load_bookings(
    db: Session,
    range_start: date,
    range_end: date,
    recurring_only: bool = False,
) -> list[BookingRecord]:
    """Stored bookings with booking_date in [range_start, range_end]."""
    from ...models.generated import Bookings

    query = db.query(Bookings).filter(
        Bookings.booking_date >= range_start.isoformat(),
        Bookings.booking_date <= range_end.isoformat(),
    )
    if recurring_only:
        query = query.filter(Bookings.recurring_rule_id.isnot(None))

    records = []
    for row in query.order_by(Bookings.booking_date, Bookings.booking_time).all():
        record = booking_from_row(row)
        if record is not None:
            records.append(record)
    return records
