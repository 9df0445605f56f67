# backend/clinic_booking/schemas/clinic_settings.py

from datetime import date, time
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from ..services.slots.schedule import DaySchedule, HolidayException, validate_day_schedule


class DayScheduleBase(BaseModel):
    open: bool
    start: Optional[time] = None
    end: Optional[time] = None
    lunch_start: Optional[time] = Field(None, alias="lunchStart")
    lunch_end: Optional[time] = Field(None, alias="lunchEnd")

    model_config = {"from_attributes": True, "populate_by_name": True}

    @model_validator(mode="after")
    def check_invariants(self):
        problems = validate_day_schedule(self.to_schedule())
        if problems:
            raise ValueError(" ".join(problems))
        return self

    def to_schedule(self) -> DaySchedule:
        return DaySchedule(
            is_open=self.open,
            start_time=self.start,
            end_time=self.end,
            lunch_start=self.lunch_start,
            lunch_end=self.lunch_end,
        )

    @classmethod
    def from_schedule(cls, day: DaySchedule) -> "DayScheduleBase":
        # Stored data is not re-validated on read
        return cls.model_construct(
            open=day.is_open,
            start=day.start_time,
            end=day.end_time,
            lunch_start=day.lunch_start,
            lunch_end=day.lunch_end,
        )


class OperatingHours(BaseModel):
    """Weekday (0 = Sunday .. 6 = Saturday) → schedule."""
    days: dict[int, DayScheduleBase]

    model_config = {"from_attributes": True}

    @model_validator(mode="after")
    def check_weekdays(self):
        bad = [weekday for weekday in self.days if not 0 <= weekday <= 6]
        if bad:
            raise ValueError(f"Weekday keys must be between 0 and 6, got {bad}")
        return self


class HolidayExceptionCreate(DayScheduleBase):
    date: date
    name: str = Field(min_length=1)

    def to_holiday(self) -> HolidayException:
        return HolidayException(date=self.date, name=self.name.strip(), schedule=self.to_schedule())


class HolidayExceptionRead(BaseModel):
    id: int
    date: date
    name: str
    is_open: bool
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    lunch_start: Optional[time] = None
    lunch_end: Optional[time] = None

    model_config = {"from_attributes": True}
