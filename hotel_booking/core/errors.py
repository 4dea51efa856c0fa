"""
Application error kinds raised by the service layer.

Services never raise HTTPException for business failures. Routes translate
these kinds into status codes, and several kinds share a status code at the
HTTP boundary (403 covers a full room, a duplicate booking and an
ineligible ticket on the write paths).
"""

from typing import Optional


class ApplicationError(Exception):
    """Base class for expected, client-caused failures."""

    message = "Application error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class NotFoundError(ApplicationError):
    """Enrollment, room, hotel or booking does not exist."""

    message = "No result for this search!"


class CannotListBookingError(ApplicationError):
    """Ticket is missing, unpaid, remote or does not include hotel."""

    message = "Cannot list bookings for this ticket"


class AlreadyBookedError(CannotListBookingError):
    """User already holds a booking."""

    message = "User already has a booking"


class BookingMismatchError(CannotListBookingError):
    """Supplied booking id is not the user's current booking."""

    message = "Booking does not belong to this user"


class RoomCapacityError(ApplicationError):
    message = "Selected room is out of capacity"


class BookingConflictError(ApplicationError):
    """Optimistic lock on the room kept failing under contention."""

    message = "Booking failed due to high demand. Please try again."
