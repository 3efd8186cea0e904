"""Pydantic models and the engine error taxonomy."""

from slotbook.models.errors import (
    AlreadyCancelled,
    AppointmentNotFound,
    BookingError,
    BookingHorizonExceeded,
    Forbidden,
    InvalidDate,
    InvalidInput,
    NotFound,
    OutsideAvailability,
    PastDate,
    ProviderNotFound,
    ServiceNotFound,
    SlotBlocked,
    SlotConflict,
)
from slotbook.models.schemas import (
    Appointment,
    AppointmentStatus,
    AvailabilityWindow,
    Block,
    BookingSettings,
    CreateAvailability,
    CreateBlock,
    CreateService,
    EngineError,
    ErrorType,
    Provider,
    Service,
)

__all__ = [
    # Resources
    "Provider",
    "Service",
    "AvailabilityWindow",
    "Block",
    "Appointment",
    "AppointmentStatus",
    # Requests
    "CreateAvailability",
    "CreateBlock",
    "CreateService",
    "BookingSettings",
    # Errors
    "ErrorType",
    "EngineError",
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
