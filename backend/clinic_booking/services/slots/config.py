"""
Booking configuration and time helpers for slots calculation.
"""

from dataclasses import dataclass
from datetime import date, time
from functools import lru_cache


@dataclass(frozen=True)
class BookingConfig:
    """
    Configuration for the availability resolver.

    Attributes:
        slot_step_minutes: Candidate grid step in minutes (15/30/60)
    """
    slot_step_minutes: int = 30  # 15 / 30 / 60

    def __post_init__(self):
        """Validate configuration."""
        if self.slot_step_minutes not in (15, 30, 60):
            raise ValueError(f"slot_step_minutes must be 15, 30, or 60, got {self.slot_step_minutes}")


@lru_cache
def get_booking_config() -> BookingConfig:
    """Get booking configuration (singleton) from application settings."""
    from ...config import settings
    return BookingConfig(slot_step_minutes=settings.slot_step_minutes)


# ── Time helpers ─────────────────────────────────────────────────────────


def time_to_minutes(value: time) -> int:
    """Minutes since midnight."""
    return value.hour * 60 + value.minute


def minutes_to_time(minutes: int) -> time:
    """Inverse of time_to_minutes. Values past midnight are not representable."""
    return time(minutes // 60, minutes % 60)


def time_str_to_minutes(time_str: str) -> int:
    """Convert "HH:MM" (or "HH:MM:SS") to minutes since midnight."""
    parts = time_str.split(":")
    return int(parts[0]) * 60 + int(parts[1])


def parse_time(value: time | str) -> time:
    """Accept a time object or an "HH:MM" string as stored in JSON columns."""
    if isinstance(value, time):
        return value
    return minutes_to_time(time_str_to_minutes(value))


def format_time(value: time) -> str:
    return value.strftime("%H:%M")


def overlaps(start: int, end: int, other_start: int, other_end: int) -> bool:
    """Half-open interval overlap: [start, end) and [other_start, other_end)."""
    return start < other_end and other_start < end


def sunday_weekday(target_date: date) -> int:
    """Weekday index with Sunday = 0 .. Saturday = 6."""
    return (target_date.weekday() + 1) % 7
