"""slotbook - availability and conflict resolution for appointment booking.

Lists bookable slots from weekly availability, blocks and existing
appointments, and commits bookings without ever double-booking a provider.
"""

from slotbook.engine import BookingEngine
from slotbook.local_time import DayRange, LocalTimeResolver
from slotbook.models import (
    Appointment,
    AppointmentStatus,
    BookingError,
    EngineError,
    ErrorType,
)
from slotbook.storage import BookingStore

__all__ = [
    # Engine
    "BookingEngine",
    "LocalTimeResolver",
    "DayRange",
    # Storage
    "BookingStore",
    # Models
    "Appointment",
    "AppointmentStatus",
    # Errors
    "ErrorType",
    "EngineError",
    "BookingError",
]
