# backend/clinic_booking/schemas/bookings.py

from datetime import date, time
from typing import Optional
from pydantic import BaseModel, Field


class BookingCreate(BaseModel):
    user_id: Optional[int] = None
    service_id: int
    professional_id: int

    booking_date: date
    booking_time: time

    duration: int = Field(gt=0, description="Minutes")

    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class BookingReschedule(BaseModel):
    booking_date: date
    booking_time: time

    # Omitted fields keep the booking's current values
    professional_id: Optional[int] = None
    duration: Optional[int] = Field(None, gt=0, description="Minutes")


class BookingRead(BaseModel):
    id: int

    user_id: Optional[int] = None
    service_id: int
    professional_id: int

    booking_date: date
    booking_time: time
    duration: int

    status: str
    notes: Optional[str] = None
    recurring_rule_id: Optional[int] = None

    model_config = {"from_attributes": True}
