"""
Pydantic schemas for slots API.
"""

from datetime import date
from pydantic import BaseModel, Field


class SlotsDayResponse(BaseModel):
    """Available start times for one professional on one day."""
    professional_id: int | None = None
    date: date
    service_duration_min: int
    is_open: bool
    available_times: list[str] = Field(description='Ascending "HH:MM" start times')
    slot_step_minutes: int

    model_config = {"from_attributes": True}
