# backend/clinic_booking/schemas/agenda.py

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel


class AgendaEntry(BaseModel):
    """Stored booking or generated recurring instance."""
    id: str
    user_id: Optional[int] = None
    service_id: int
    professional_id: int
    start: datetime
    duration_minutes: int
    status: str
    is_recurring_instance: bool = False
    recurring_rule_id: Optional[int] = None

    model_config = {"from_attributes": True}


class AgendaResponse(BaseModel):
    start_date: date
    end_date: date
    entries: list[AgendaEntry]
