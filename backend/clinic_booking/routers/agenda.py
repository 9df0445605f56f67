# backend/clinic_booking/routers/agenda.py
"""
Agenda API: stored bookings merged with generated recurring instances.
"""

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.agenda import AgendaEntry, AgendaResponse
from ..services.recurrence import GeneratedInstance, load_agenda

router = APIRouter(prefix="/agenda", tags=["agenda"])

MAX_RANGE_DAYS = 366


@router.get("/", response_model=AgendaResponse)
def get_agenda(
    start_date: date,
    end_date: date,
    db: Session = Depends(get_db),
):
    if end_date < start_date:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")
    if (end_date - start_date).days > MAX_RANGE_DAYS:
        raise HTTPException(status_code=400, detail=f"Range cannot exceed {MAX_RANGE_DAYS} days")

    try:
        entries = load_agenda(db, start_date, end_date)
    except SQLAlchemyError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not load agenda data",
        )

    return AgendaResponse(
        start_date=start_date,
        end_date=end_date,
        entries=[
            AgendaEntry(
                id=str(entry.id),
                user_id=entry.user_id,
                service_id=entry.service_id,
                professional_id=entry.professional_id,
                start=entry.start,
                duration_minutes=entry.duration_minutes,
                status=entry.status,
                is_recurring_instance=isinstance(entry, GeneratedInstance),
                recurring_rule_id=entry.recurring_rule_id,
            )
            for entry in entries
        ],
    )
