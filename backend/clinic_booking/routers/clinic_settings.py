# backend/clinic_booking/routers/clinic_settings.py
# Holiday exceptions: PATCH = 405, DELETE = ALLOWED (hard)

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..exceptions import NotFoundError
from ..schemas.clinic_settings import (
    DayScheduleBase,
    HolidayExceptionCreate,
    HolidayExceptionRead,
    OperatingHours,
)
from ..services import clinic_settings as settings_service
from ..services.clinic_settings import DuplicateHolidayError, InvalidScheduleError

router = APIRouter(prefix="/clinic_settings", tags=["clinic_settings"])


@router.get("/operating_hours", response_model=OperatingHours)
def get_operating_hours(db: Session = Depends(get_db)):
    schedule = settings_service.get_operating_hours(db)
    return OperatingHours.model_construct(
        days={weekday: DayScheduleBase.from_schedule(day) for weekday, day in schedule.items()}
    )


@router.put("/operating_hours", response_model=OperatingHours)
def update_operating_hours(data: OperatingHours, db: Session = Depends(get_db)):
    try:
        settings_service.set_operating_hours(
            db, {weekday: day.to_schedule() for weekday, day in data.days.items()}
        )
    except InvalidScheduleError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.errors)
    return data


@router.get("/holiday_exceptions", response_model=list[HolidayExceptionRead])
def list_holiday_exceptions(db: Session = Depends(get_db)):
    return settings_service.list_holiday_exceptions(db)


@router.post(
    "/holiday_exceptions",
    response_model=HolidayExceptionRead,
    status_code=status.HTTP_201_CREATED,
)
def create_holiday_exception(
    data: HolidayExceptionCreate,
    db: Session = Depends(get_db),
):
    try:
        return settings_service.add_holiday_exception(db, data.to_holiday())
    except DuplicateHolidayError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except InvalidScheduleError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.errors)


@router.patch("/holiday_exceptions/{id}")
def patch_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )


@router.delete("/holiday_exceptions/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_holiday_exception(id: int, db: Session = Depends(get_db)):
    try:
        settings_service.delete_holiday_exception(db, id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Not found")
