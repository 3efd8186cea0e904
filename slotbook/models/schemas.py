"""Booking engine Pydantic models.

Provider → Service, AvailabilityWindow, Block → Appointment
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from pydantic import AwareDatetime, BaseModel, Field, model_validator

from slotbook.config import DEFAULT_MAX_BOOKING_DAYS, MAX_BOOKING_DAYS, MIN_BOOKING_DAYS

# 24-hour HH:MM; "24:00" is allowed as an end-of-day bound
TIME_OF_DAY_PATTERN = r"^(([01]\d|2[0-3]):[0-5]\d|24:00)$"


# =============================================================================
# Error Types
# =============================================================================


class ErrorType(str, Enum):
    """Types of errors the engine reports to callers."""

    INVALID_INPUT = "invalid_input"  # Malformed date, time, duration
    NOT_FOUND = "not_found"  # Provider/service/appointment absent or mismatched
    FORBIDDEN = "forbidden"  # Wrong role, wrong owner on cancel
    PAST_DATE = "past_date"
    BOOKING_HORIZON_EXCEEDED = "booking_horizon_exceeded"
    SLOT_BLOCKED = "slot_blocked"  # Overlaps a block or falls outside availability
    SLOT_CONFLICT = "slot_conflict"  # Overlaps another scheduled appointment
    ALREADY_CANCELLED = "already_cancelled"
    INTERNAL_ERROR = "internal_error"  # Persistence failures, never detailed


class EngineError(BaseModel):
    """Structured error information for a failed engine operation."""

    type: ErrorType = Field(description="Category of error")
    message: str = Field(description="Human-readable error message")
    operation: str = Field(description="Engine operation that failed")
    timestamp: datetime = Field(default_factory=datetime.now)
    details: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, e: Exception, operation: str) -> "EngineError":
        """Create an EngineError from an exception.

        Engine errors keep their type, message and details. Any other
        exception is reported as an opaque internal error.

        Args:
            e: The exception that occurred
            operation: Name of the operation (e.g. "book_slot")

        Returns:
            EngineError instance
        """
        from slotbook.models.errors import BookingError

        if isinstance(e, BookingError):
            return cls(
                type=e.error_type,
                message=e.message,
                operation=operation,
                details={"exception_type": type(e).__name__, **e.details},
            )

        return cls(
            type=ErrorType.INTERNAL_ERROR,
            message="Internal error",
            operation=operation,
            details={"exception_type": type(e).__name__},
        )


# =============================================================================
# Resource Models
# =============================================================================


class AppointmentStatus(str, Enum):
    """Lifecycle of an appointment. Only SCHEDULED occupies time."""

    SCHEDULED = "SCHEDULED"
    CANCELLED = "CANCELLED"


class Provider(BaseModel):
    """A bookable account, e.g. a barber."""

    id: str
    name: str
    is_provider: bool = True
    max_booking_days: int = DEFAULT_MAX_BOOKING_DAYS


class Service(BaseModel):
    """A service offered by exactly one provider."""

    id: str
    provider_id: str
    name: str
    duration_minutes: int = Field(gt=0)
    price: float | None = Field(default=None, description="Display only")


class AvailabilityWindow(BaseModel):
    """A recurring weekly open interval in local time."""

    id: str
    provider_id: str
    weekday: int = Field(ge=0, le=6, description="0 = Sunday .. 6 = Saturday")
    start_time: str = Field(pattern=TIME_OF_DAY_PATTERN)
    end_time: str = Field(pattern=TIME_OF_DAY_PATTERN)


class Block(BaseModel):
    """A one-off unavailable interval, stored in UTC."""

    id: str
    provider_id: str
    start_utc: datetime
    end_utc: datetime
    reason: str | None = None


class Appointment(BaseModel):
    """A customer booking. Duration is captured when the booking is made."""

    id: str
    provider_id: str
    customer_id: str
    service_id: str
    start_utc: datetime
    duration_minutes: int = Field(gt=0)
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def end_utc(self) -> datetime:
        """Exclusive end of the occupied interval."""
        return self.start_utc + timedelta(minutes=self.duration_minutes)


# =============================================================================
# Request Models (for creation)
# =============================================================================


class CreateAvailability(BaseModel):
    """Request to add an availability window."""

    weekday: int = Field(ge=0, le=6)
    start_time: str = Field(pattern=TIME_OF_DAY_PATTERN)
    end_time: str = Field(pattern=TIME_OF_DAY_PATTERN)

    @model_validator(mode="after")
    def check_order(self) -> "CreateAvailability":
        # Zero-padded HH:MM compares correctly as text
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class CreateBlock(BaseModel):
    """Request to block out an absolute interval."""

    start_utc: AwareDatetime
    end_utc: AwareDatetime
    reason: str | None = None

    @model_validator(mode="after")
    def check_order(self) -> "CreateBlock":
        if self.end_utc <= self.start_utc:
            raise ValueError("end_utc must be after start_utc")
        return self


class CreateService(BaseModel):
    """Request to create a service."""

    name: str
    duration_minutes: int = Field(gt=0, le=24 * 60)
    price: float | None = None


class BookingSettings(BaseModel):
    """Provider booking configuration."""

    max_booking_days: int = Field(ge=MIN_BOOKING_DAYS, le=MAX_BOOKING_DAYS)
