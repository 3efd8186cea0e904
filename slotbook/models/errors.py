"""Engine error taxonomy.

Every expected booking outcome that is not a success is one of these
exceptions. Callers catch ``BookingError`` and report ``error_type``;
anything else (e.g. ``sqlite3.OperationalError``) is an internal failure
and propagates unchanged.
"""

from slotbook.models.schemas import ErrorType


class BookingError(Exception):
    """Base class for recoverable engine errors."""

    error_type: ErrorType = ErrorType.INVALID_INPUT

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidInput(BookingError):
    """Malformed date, time, duration or instant."""

    error_type = ErrorType.INVALID_INPUT


class InvalidDate(InvalidInput):
    """Local date string is not a valid YYYY-MM-DD calendar date."""


class NotFound(BookingError):
    error_type = ErrorType.NOT_FOUND


class ProviderNotFound(NotFound):
    pass


class ServiceNotFound(NotFound):
    pass


class AppointmentNotFound(NotFound):
    pass


class Forbidden(BookingError):
    """Requester has the wrong role or does not own the resource."""

    error_type = ErrorType.FORBIDDEN


class PastDate(BookingError):
    error_type = ErrorType.PAST_DATE


class BookingHorizonExceeded(BookingError):
    error_type = ErrorType.BOOKING_HORIZON_EXCEEDED


class SlotBlocked(BookingError):
    """Slot overlaps a provider block."""

    error_type = ErrorType.SLOT_BLOCKED


class OutsideAvailability(SlotBlocked):
    """Instant is not a duration-aligned start inside an availability window."""


class SlotConflict(BookingError):
    """Slot overlaps another scheduled appointment (including commit races)."""

    error_type = ErrorType.SLOT_CONFLICT


class AlreadyCancelled(BookingError):
    error_type = ErrorType.ALREADY_CANCELLED


__all__ = [
    "BookingError",
    "InvalidInput",
    "InvalidDate",
    "NotFound",
    "ProviderNotFound",
    "ServiceNotFound",
    "AppointmentNotFound",
    "Forbidden",
    "PastDate",
    "BookingHorizonExceeded",
    "SlotBlocked",
    "OutsideAvailability",
    "SlotConflict",
    "AlreadyCancelled",
]
