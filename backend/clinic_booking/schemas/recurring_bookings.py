# backend/clinic_booking/schemas/recurring_bookings.py

from datetime import date, time
from typing import Literal, Optional
from pydantic import BaseModel, Field, model_validator


class RecurringBookingCreate(BaseModel):
    user_id: Optional[int] = None
    service_id: int
    professional_id: int

    start_date: date
    start_time: time
    duration: int = Field(gt=0, description="Minutes")

    frequency: Literal["weekly", "monthly"]
    until_date: date

    model_config = {"from_attributes": True}

    @model_validator(mode="after")
    def check_range(self):
        if self.until_date < self.start_date:
            raise ValueError("until_date must not be before start_date")
        return self


class RecurringBookingRead(BaseModel):
    id: int

    user_id: Optional[int] = None
    service_id: int
    professional_id: int

    start_date: date
    start_time: time
    duration: int

    rrule: str
    status: str

    model_config = {"from_attributes": True}


class RecurringInstanceCancel(BaseModel):
    occurrence_date: date


class RecurringRuleCancel(BaseModel):
    """Instances after cancel_date (default: today) are no longer generated."""
    cancel_date: Optional[date] = None
