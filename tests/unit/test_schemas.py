"""Tests for slotbook.models module."""

import sqlite3

import pytest
from pydantic import ValidationError

from slotbook.models import (
    Appointment,
    AvailabilityWindow,
    BookingSettings,
    CreateAvailability,
    CreateBlock,
    EngineError,
    ErrorType,
    InvalidDate,
    OutsideAvailability,
    ProviderNotFound,
    Service,
    SlotBlocked,
)
from tests.conftest import utc


class TestAppointment:
    """Tests for Appointment model."""

    def test_defaults(self):
        """New appointments should be scheduled."""
        appt = Appointment(
            id="appt_1",
            provider_id="barber",
            customer_id="alice",
            service_id="haircut",
            start_utc=utc(2026, 10, 19, 12),
            duration_minutes=45,
        )
        assert appt.status == "SCHEDULED"
        assert appt.notes is None

    def test_end_utc(self):
        """End should be start plus captured duration."""
        appt = Appointment(
            id="appt_1",
            provider_id="barber",
            customer_id="alice",
            service_id="haircut",
            start_utc=utc(2026, 10, 19, 12),
            duration_minutes=45,
        )
        assert appt.end_utc == utc(2026, 10, 19, 12, 45)

    def test_zero_duration_rejected(self):
        with pytest.raises(ValidationError):
            Appointment(
                id="appt_1",
                provider_id="barber",
                customer_id="alice",
                service_id="haircut",
                start_utc=utc(2026, 10, 19, 12),
                duration_minutes=0,
            )


class TestResourceModels:
    """Tests for Service and AvailabilityWindow."""

    def test_service_duration_positive(self):
        """Service duration must be positive."""
        with pytest.raises(ValidationError):
            Service(id="s", provider_id="p", name="Nothing", duration_minutes=0)

    def test_service_price_optional(self):
        service = Service(id="s", provider_id="p", name="Trim", duration_minutes=15)
        assert service.price is None

    def test_window_weekday_bounds(self):
        with pytest.raises(ValidationError):
            AvailabilityWindow(
                id="a", provider_id="p", weekday=7, start_time="09:00", end_time="10:00"
            )

    def test_window_time_format(self):
        with pytest.raises(ValidationError):
            AvailabilityWindow(
                id="a", provider_id="p", weekday=1, start_time="9:00", end_time="10:00"
            )


class TestRequestModels:
    """Tests for creation request models."""

    def test_availability_order(self):
        """End time should be after start time."""
        with pytest.raises(ValidationError):
            CreateAvailability(weekday=1, start_time="12:00", end_time="09:00")

    def test_availability_until_midnight(self):
        request = CreateAvailability(weekday=1, start_time="18:00", end_time="24:00")
        assert request.end_time == "24:00"

    def test_block_order(self):
        with pytest.raises(ValidationError):
            CreateBlock(start_utc=utc(2026, 10, 19, 14), end_utc=utc(2026, 10, 19, 13))

    def test_block_requires_aware(self):
        from datetime import datetime

        with pytest.raises(ValidationError):
            CreateBlock(start_utc=datetime(2026, 10, 19, 13), end_utc=datetime(2026, 10, 19, 14))

    @pytest.mark.parametrize("days", [0, 61])
    def test_booking_settings_bounds(self, days):
        with pytest.raises(ValidationError):
            BookingSettings(max_booking_days=days)


class TestEngineError:
    """Tests for EngineError.from_exception."""

    def test_booking_error(self):
        """Booking errors should keep type, message and details."""
        error = EngineError.from_exception(
            ProviderNotFound("Provider not found: x", provider_id="x"), "generate_slots"
        )

        assert error.type == ErrorType.NOT_FOUND
        assert error.message == "Provider not found: x"
        assert error.operation == "generate_slots"
        assert error.details["provider_id"] == "x"
        assert error.details["exception_type"] == "ProviderNotFound"

    def test_subclass_keeps_parent_type(self):
        assert EngineError.from_exception(InvalidDate("bad"), "op").type == ErrorType.INVALID_INPUT
        assert (
            EngineError.from_exception(OutsideAvailability("closed"), "op").type
            == ErrorType.SLOT_BLOCKED
        )

    def test_internal_error_is_opaque(self):
        """Unexpected exceptions should not leak their message."""
        error = EngineError.from_exception(
            sqlite3.OperationalError("database is locked: /srv/secret.db"), "book_slot"
        )

        assert error.type == ErrorType.INTERNAL_ERROR
        assert error.message == "Internal error"
        assert "secret" not in error.model_dump_json()

    def test_slot_blocked_distinct_from_outside_availability(self):
        assert issubclass(OutsideAvailability, SlotBlocked)
        assert not issubclass(SlotBlocked, OutsideAvailability)
