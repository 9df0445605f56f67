# backend/clinic_booking/routers/slots.py
"""
Slots API endpoints.

GET /slots/day - available start times for a professional on a day
"""

from datetime import date, datetime
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..exceptions import ScheduleUnavailableError
from ..schemas.slots import SlotsDayResponse
from ..services.slots import get_booking_config, load_availability
from ..services.slots.config import format_time


router = APIRouter(prefix="/slots", tags=["slots"])


@router.get("/day", response_model=SlotsDayResponse)
def get_slots_day(
    duration: int = Query(..., gt=0, description="Service duration in minutes"),
    target_date: date = Query(..., alias="date"),
    professional_id: int | None = None,
    ignore_booking_id: str | None = Query(None, description="Booking being rescheduled"),
    db: Session = Depends(get_db),
):
    """Get available start times for a professional on a specific day."""
    config = get_booking_config()

    try:
        day, times = load_availability(
            db,
            target_date,
            professional_id,
            duration,
            ignore_booking_id=_booking_key(ignore_booking_id),
            now=datetime.now(),
            config=config,
        )
    except ScheduleUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    return SlotsDayResponse(
        professional_id=professional_id,
        date=target_date,
        service_duration_min=duration,
        is_open=day is not None and day.hours is not None,
        available_times=[format_time(t) for t in times],
        slot_step_minutes=config.slot_step_minutes,
    )


def _booking_key(value: str | None) -> int | str | None:
    """Stored bookings have integer ids; generated instances keep their string id."""
    if value is None or value == "":
        return None
    return int(value) if value.isdecimal() else value
