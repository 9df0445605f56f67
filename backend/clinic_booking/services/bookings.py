"""
Booking writes.

Every write that takes a time slot re-checks availability against the live
occupied set first. Losing that race raises SlotUnavailableError and nothing
is committed.

Recurring rules are changed only through status transitions (a whole-rule
cancel also truncates UNTIL to the cancellation date); cancelling a
single instance stores a cancelled booking row carrying recurring_rule_id,
which the expander reads as a suppression marker.
"""

import logging
from datetime import date, datetime, time

from sqlalchemy.orm import Session

from ..exceptions import (
    BookingError,
    NotFoundError,
    RuleTransitionError,
    SlotUnavailableError,
    SyntheticBookingError,
)
from ..models.generated import (
    Bookings as DBBookings,
    Professionals as DBProfessionals,
    RecurringBookings as DBRecurringBookings,
    Services as DBServices,
)
from .events import emit_event
from .recurrence.expander import occurrence_dates
from .recurrence.records import (
    BOOKING_CANCELED,
    BOOKING_CONFIRMED,
    RULE_ACTIVE,
    RULE_COMPLETED,
    RULE_SUSPENDED,
    RecurrenceRule,
    is_synthetic_id,
)
from .recurrence.rrule import Monthly, Weekly, format_rrule, parse_rrule
from .recurrence.store import rule_from_row
from .slots.availability import load_availability
from .slots.config import format_time

logger = logging.getLogger(__name__)

# Leaving active is final
RULE_TRANSITIONS = {
    RULE_ACTIVE: {RULE_SUSPENDED, RULE_COMPLETED},
    RULE_SUSPENDED: set(),
    RULE_COMPLETED: set(),
}


# ── Single bookings ──────────────────────────────────────────────────────


def create_booking(
    db: Session,
    *,
    service_id: int,
    professional_id: int,
    booking_date: date,
    booking_time: time,
    duration: int,
    user_id: int | None = None,
    notes: str | None = None,
    now: datetime | None = None,
) -> DBBookings:
    """
    Create a confirmed booking after re-checking the slot.

    Raises:
        NotFoundError: service or professional missing/inactive
        SlotUnavailableError: the time is not offered any more
        ScheduleUnavailableError: schedule data could not be loaded
    """
    _get_active(db, DBServices, service_id, "Service")
    _get_active(db, DBProfessionals, professional_id, "Professional")

    _ensure_available(db, professional_id, booking_date, booking_time, duration, now=now)

    obj = DBBookings(
        user_id=user_id,
        service_id=service_id,
        professional_id=professional_id,
        booking_date=booking_date.isoformat(),
        booking_time=format_time(booking_time),
        duration=duration,
        status=BOOKING_CONFIRMED,
        notes=notes,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)

    logger.info(
        f"Booking created: booking_id={obj.id}, professional_id={professional_id}, "
        f"time={obj.booking_date} {obj.booking_time}, duration={duration}"
    )
    emit_event("booking_created", {"booking_id": obj.id, "user_id": user_id})
    return obj


def reschedule_booking(
    db: Session,
    booking_id: int | str,
    booking_date: date,
    booking_time: time,
    professional_id: int | None = None,
    duration: int | None = None,
    now: datetime | None = None,
) -> DBBookings:
    """
    Edit when, with whom and for how long a stored booking takes place.

    The booking's current slot does not block the edit. Saving it unchanged
    is always accepted, even if the slot is no longer on offer (the clinic
    hours changed, the time has passed).
    """
    obj = _get_stored_booking(db, booking_id)
    if obj.status == BOOKING_CANCELED:
        raise BookingError(f"Booking {obj.id} is canceled and cannot be rescheduled")

    professional_id = professional_id or obj.professional_id
    duration = duration or obj.duration

    unchanged = (
        booking_date.isoformat() == obj.booking_date
        and format_time(booking_time) == obj.booking_time
        and professional_id == obj.professional_id
        and duration == obj.duration
    )
    if not unchanged:
        if professional_id != obj.professional_id:
            _get_active(db, DBProfessionals, professional_id, "Professional")
        _ensure_available(
            db,
            professional_id,
            booking_date,
            booking_time,
            duration,
            ignore_booking_id=obj.id,
            now=now,
        )

    obj.professional_id = professional_id
    obj.duration = duration
    obj.booking_date = booking_date.isoformat()
    obj.booking_time = format_time(booking_time)
    obj.updated_at = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    db.commit()
    db.refresh(obj)

    logger.info(f"Booking {obj.id} rescheduled to {obj.booking_date} {obj.booking_time}")
    emit_event("booking_rescheduled", {"booking_id": obj.id, "user_id": obj.user_id})
    return obj


def cancel_booking(db: Session, booking_id: int | str) -> DBBookings:
    obj = _get_stored_booking(db, booking_id)
    if obj.status == BOOKING_CANCELED:
        return obj

    obj.status = BOOKING_CANCELED
    obj.updated_at = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    db.commit()
    db.refresh(obj)

    logger.info(f"Booking {obj.id} canceled")
    emit_event("booking_canceled", {"booking_id": obj.id, "user_id": obj.user_id})
    return obj


# ── Recurring rules ──────────────────────────────────────────────────────


def create_recurring_rule(
    db: Session,
    *,
    service_id: int,
    professional_id: int,
    start_date: date,
    start_time: time,
    duration: int,
    frequency: str,
    until_date: date,
    user_id: int | None = None,
    now: datetime | None = None,
) -> DBRecurringBookings:
    """
    Create an active rule after checking every occurrence is free.

    Raises:
        SlotUnavailableError: the first occurrence that is not on offer
    """
    _get_active(db, DBServices, service_id, "Service")
    _get_active(db, DBProfessionals, professional_id, "Professional")

    if frequency == "weekly":
        variant = Weekly(by_day=start_date.weekday())
    elif frequency == "monthly":
        variant = Monthly()
    else:
        raise ValueError(f"Unsupported frequency: {frequency}")

    candidate = RecurrenceRule(
        id=0,
        user_id=user_id,
        service_id=service_id,
        professional_id=professional_id,
        start_date=start_date,
        start_time=start_time,
        duration_minutes=duration,
        frequency=variant,
        until_date=until_date,
    )
    for occurrence in occurrence_dates(candidate, start_date, until_date):
        _ensure_available(db, professional_id, occurrence, start_time, duration, now=now)

    obj = DBRecurringBookings(
        user_id=user_id,
        service_id=service_id,
        professional_id=professional_id,
        start_date=start_date.isoformat(),
        start_time=format_time(start_time),
        duration=duration,
        rrule=format_rrule(variant, until_date),
        status=RULE_ACTIVE,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)

    logger.info(f"Recurring rule created: rule_id={obj.id}, rrule={obj.rrule}")
    return obj


def cancel_recurring_rule(
    db: Session,
    rule_id: int,
    cancel_date: date | None = None,
) -> DBRecurringBookings:
    """
    Cancel a whole rule: nothing is generated after cancel_date (default today).

    Instances up to and including cancel_date stay in the agenda; the rule
    moves to completed with its UNTIL truncated.
    """
    cancel_date = cancel_date or date.today()
    obj = _get_rule_for_transition(db, rule_id, RULE_COMPLETED)

    parsed = parse_rrule(obj.rrule)
    if parsed is not None and cancel_date < parsed.until_date:
        obj.rrule = format_rrule(parsed.frequency, cancel_date)

    return _set_rule_status(db, obj, RULE_COMPLETED)


def change_rule_status(db: Session, rule_id: int, target_status: str) -> DBRecurringBookings:
    """
    Move a rule out of the active state without touching its dates.

    Raises:
        RuleTransitionError: the rule is not active
    """
    obj = _get_rule_for_transition(db, rule_id, target_status)
    return _set_rule_status(db, obj, target_status)


def cancel_recurring_instance(db: Session, rule_id: int, occurrence_date: date) -> DBBookings:
    """
    Suppress one occurrence of an active rule without touching the rule.

    Idempotent: cancelling the same occurrence twice returns the stored marker.
    """
    row = db.get(DBRecurringBookings, rule_id)
    if not row:
        raise NotFoundError(f"Recurring rule {rule_id} not found")
    if row.status != RULE_ACTIVE:
        raise RuleTransitionError(f"Recurring rule {rule_id} is {row.status}")

    rule = rule_from_row(row)
    if occurrence_date not in occurrence_dates(rule, occurrence_date, occurrence_date):
        raise NotFoundError(f"Recurring rule {rule_id} has no occurrence on {occurrence_date}")

    booking_time = format_time(rule.start_time)
    existing = (
        db.query(DBBookings)
        .filter(
            DBBookings.recurring_rule_id == rule_id,
            DBBookings.booking_date == occurrence_date.isoformat(),
            DBBookings.booking_time == booking_time,
            DBBookings.status == BOOKING_CANCELED,
        )
        .first()
    )
    if existing:
        return existing

    marker = DBBookings(
        user_id=rule.user_id,
        service_id=rule.service_id,
        professional_id=rule.professional_id,
        booking_date=occurrence_date.isoformat(),
        booking_time=booking_time,
        duration=rule.duration_minutes,
        status=BOOKING_CANCELED,
        recurring_rule_id=rule_id,
    )
    db.add(marker)
    db.commit()
    db.refresh(marker)

    logger.info(f"Recurring instance canceled: rule_id={rule_id}, date={occurrence_date}")
    emit_event("recurring_instance_canceled", {
        "rule_id": rule_id,
        "user_id": rule.user_id,
        "date": occurrence_date.isoformat(),
        "time": booking_time,
    })
    return marker


# ── Helpers ──────────────────────────────────────────────────────────────


def _get_rule_for_transition(db: Session, rule_id: int, target_status: str) -> DBRecurringBookings:
    obj = db.get(DBRecurringBookings, rule_id)
    if not obj:
        raise NotFoundError(f"Recurring rule {rule_id} not found")

    allowed = RULE_TRANSITIONS.get(obj.status, set())
    if target_status not in allowed:
        raise RuleTransitionError(
            f"Recurring rule {rule_id} cannot go from {obj.status} to {target_status}"
        )
    return obj


def _set_rule_status(db: Session, obj: DBRecurringBookings, target_status: str) -> DBRecurringBookings:
    obj.status = target_status
    obj.updated_at = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    db.commit()
    db.refresh(obj)

    logger.info(f"Recurring rule {obj.id} is now {target_status} ({obj.rrule})")
    emit_event("recurring_rule_status_changed", {"rule_id": obj.id, "user_id": obj.user_id, "status": target_status})
    return obj


def _ensure_available(
    db: Session,
    professional_id: int,
    booking_date: date,
    booking_time: time,
    duration: int,
    ignore_booking_id: int | None = None,
    now: datetime | None = None,
) -> None:
    _, times = load_availability(
        db,
        booking_date,
        professional_id,
        duration,
        ignore_booking_id=ignore_booking_id,
        now=now or datetime.now(),
    )
    if booking_time.replace(second=0, microsecond=0) not in times:
        logger.info(
            f"Slot conflict: professional_id={professional_id}, "
            f"time={booking_date} {format_time(booking_time)}"
        )
        raise SlotUnavailableError(professional_id, booking_date, format_time(booking_time))


def _get_stored_booking(db: Session, booking_id: int | str) -> DBBookings:
    if is_synthetic_id(booking_id):
        raise SyntheticBookingError(
            f"{booking_id} is a recurring instance; cancel the instance or the rule instead"
        )
    try:
        key = int(booking_id)
    except (TypeError, ValueError):
        raise NotFoundError(f"Booking {booking_id} not found")

    obj = db.get(DBBookings, key)
    if not obj:
        raise NotFoundError(f"Booking {booking_id} not found")
    return obj


def _get_active(db: Session, model, obj_id: int, label: str):
    obj = db.get(model, obj_id)
    if not obj or not obj.is_active:
        raise NotFoundError(f"{label} {obj_id} not found or inactive")
    return obj
