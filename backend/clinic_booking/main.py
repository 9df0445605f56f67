import logging

from fastapi import FastAPI

from .config import settings
from .redis_client import redis_client
from .routers import agenda, bookings, clinic_settings, recurring_bookings, slots

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Clinic Booking API")

app.include_router(slots.router)
app.include_router(bookings.router)
app.include_router(recurring_bookings.router)
app.include_router(agenda.router)
app.include_router(clinic_settings.router)


@app.get("/health")
def health():
    try:
        redis_ok = bool(redis_client.ping())
    except Exception as e:
        logger.warning(f"Redis ping failed: {e}")
        redis_ok = False
    return {"redis": redis_ok}
