# backend/clinic_booking/routers/recurring_bookings.py
# PATCH = 405: rules only change through cancel/suspend

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..exceptions import BookingError
from ..models.generated import RecurringBookings as DBRecurringBookings
from ..schemas.bookings import BookingRead
from ..schemas.recurring_bookings import (
    RecurringBookingCreate,
    RecurringBookingRead,
    RecurringInstanceCancel,
    RecurringRuleCancel,
)
from ..services import bookings as booking_service
from ..services.recurrence.records import RULE_SUSPENDED
from .bookings import to_http_error

router = APIRouter(prefix="/recurring_bookings", tags=["recurring_bookings"])


@router.get("/", response_model=list[RecurringBookingRead])
def list_recurring_bookings(db: Session = Depends(get_db)):
    return db.query(DBRecurringBookings).all()


@router.get("/{id}", response_model=RecurringBookingRead)
def get_recurring_booking(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBRecurringBookings, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=RecurringBookingRead, status_code=status.HTTP_201_CREATED)
def create_recurring_booking(
    data: RecurringBookingCreate,
    db: Session = Depends(get_db),
):
    try:
        return booking_service.create_recurring_rule(db, **data.model_dump())
    except BookingError as e:
        raise to_http_error(e)


@router.post("/{id}/cancel", response_model=RecurringBookingRead)
def cancel_recurring_booking(
    id: int,
    data: RecurringRuleCancel | None = None,
    db: Session = Depends(get_db),
):
    """Cancel the whole rule; instances up to the cancellation date are kept."""
    try:
        return booking_service.cancel_recurring_rule(db, id, data.cancel_date if data else None)
    except BookingError as e:
        raise to_http_error(e)


@router.post("/{id}/suspend", response_model=RecurringBookingRead)
def suspend_recurring_booking(id: int, db: Session = Depends(get_db)):
    try:
        return booking_service.change_rule_status(db, id, RULE_SUSPENDED)
    except BookingError as e:
        raise to_http_error(e)


@router.post("/{id}/instances/cancel", response_model=BookingRead)
def cancel_recurring_instance(
    id: int,
    data: RecurringInstanceCancel,
    db: Session = Depends(get_db),
):
    """Cancel one occurrence; the rule itself is left untouched."""
    try:
        return booking_service.cancel_recurring_instance(db, id, data.occurrence_date)
    except BookingError as e:
        raise to_http_error(e)


@router.patch("/{id}")
def patch_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )
