# backend/clinic_booking/routers/bookings.py
# DELETE = 405: bookings are cancelled, never removed

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..exceptions import (
    BookingError,
    NotFoundError,
    ScheduleUnavailableError,
    SlotUnavailableError,
    SyntheticBookingError,
)
from ..models.generated import Bookings as DBBookings
from ..schemas.bookings import (
    BookingCreate,
    BookingRead,
    BookingReschedule,
)
from ..services import bookings as booking_service

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("/", response_model=list[BookingRead])
def list_bookings(db: Session = Depends(get_db)):
    return db.query(DBBookings).all()


@router.get("/{id}", response_model=BookingRead)
def get_booking(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBBookings, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    db: Session = Depends(get_db),
):
    try:
        return booking_service.create_booking(db, **data.model_dump())
    except BookingError as e:
        raise to_http_error(e)


@router.put("/{id}/schedule", response_model=BookingRead)
def reschedule_booking(
    id: str,
    data: BookingReschedule,
    db: Session = Depends(get_db),
):
    try:
        return booking_service.reschedule_booking(
            db,
            id,
            data.booking_date,
            data.booking_time,
            professional_id=data.professional_id,
            duration=data.duration,
        )
    except BookingError as e:
        raise to_http_error(e)


@router.post("/{id}/cancel", response_model=BookingRead)
def cancel_booking(id: str, db: Session = Depends(get_db)):
    try:
        return booking_service.cancel_booking(db, id)
    except BookingError as e:
        raise to_http_error(e)


@router.delete("/{id}")
def delete_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )


def to_http_error(e: BookingError) -> HTTPException:
    """Map a booking service error to the HTTP response the client sees."""
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, SlotUnavailableError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "code": "slot_unavailable",
                "message": str(e),
                "date": e.booking_date.isoformat(),
                "time": e.booking_time,
            },
        )
    if isinstance(e, ScheduleUnavailableError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    if isinstance(e, SyntheticBookingError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
