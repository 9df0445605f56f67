"""
Domain errors raised by the booking services.

Routers translate these into HTTP responses; the pure availability and
recurrence functions never raise them for data-shape problems.
"""


class BookingError(Exception):
    """Base class for booking service errors."""


class NotFoundError(BookingError):
    """Requested record does not exist."""


class SlotUnavailableError(BookingError):
    """
    The requested start time is no longer offered for the professional.

    Raised at write time when another booking took the slot between the
    availability lookup and the confirmation. Retryable: the client should
    return to slot selection.
    """

    def __init__(self, professional_id: int, booking_date, booking_time):
        self.professional_id = professional_id
        self.booking_date = booking_date
        self.booking_time = booking_time
        super().__init__(
            f"Slot {booking_date} {booking_time} is no longer available "
            f"for professional {professional_id}"
        )


class ScheduleUnavailableError(BookingError):
    """Schedule or occupied-slot data could not be loaded."""


class RuleTransitionError(BookingError):
    """Recurring rule is not in a state that allows the requested change."""


class SyntheticBookingError(BookingError):
    """A generated recurring instance id was used where a stored booking is required."""
