"""
Slots calculation module.

Level 1: Clinic day grid (operating hours + holiday exceptions)
Level 2: Professional availability (lunch break + occupied intervals)
"""

from .config import BookingConfig, get_booking_config
from .schedule import DaySchedule, HolidayException, OccupiedSlot, validate_day_schedule
from .calculator import resolve_day_schedule, calculate_candidate_minutes
from .availability import compute_available_slots, load_availability

__all__ = [
    "BookingConfig",
    "get_booking_config",
    "DaySchedule",
    "HolidayException",
    "OccupiedSlot",
    "validate_day_schedule",
    "resolve_day_schedule",
    "calculate_candidate_minutes",
    "compute_available_slots",
    "load_availability",
]
