"""Booking engine facade.

Binds one store and one local-time policy so that slot listing and
booking always share the same day boundaries and the same notion of
"now". This is the surface exposed to request-handling code.
"""

from datetime import datetime

from slotbook.local_time import LocalTimeResolver
from slotbook.models import Appointment, AvailabilityWindow, Block, Provider
from slotbook.scheduling import (
    add_availability,
    add_block,
    book_slot,
    cancel_appointment,
    customer_appointments,
    generate_slots,
    provider_agenda,
    set_max_booking_days,
)


class BookingEngine:
    """Availability and conflict resolution over a booking store.

    Example:
        store = BookingStore(":memory:")
        store.init_schema()
        engine = BookingEngine(store)
        slots = engine.generate_slots("prov_1", "svc_1", "2026-10-19")
        appt = engine.book_slot("prov_1", "cust_1", "svc_1", slots[0])
    """

    def __init__(self, store, resolver: LocalTimeResolver | None = None):
        """Initialize engine.

        Args:
            store: Persistence collaborator (see slotbook.storage.BookingStore)
            resolver: Local time policy. Defaults to the configured offset
                      and the system clock.
        """
        self.store = store
        self.resolver = resolver or LocalTimeResolver()

    def generate_slots(
        self, provider_id: str, service_id: str, date_str: str
    ) -> list[datetime]:
        """Bookable UTC start instants for a local YYYY-MM-DD date."""
        return generate_slots(self.store, self.resolver, provider_id, service_id, date_str)

    def book_slot(
        self,
        provider_id: str,
        customer_id: str,
        service_id: str,
        start_utc: datetime,
        notes: str | None = None,
    ) -> Appointment:
        """Re-validate ``start_utc`` and commit a SCHEDULED appointment."""
        return book_slot(
            self.store,
            self.resolver,
            provider_id,
            customer_id,
            service_id,
            start_utc,
            notes=notes,
        )

    def cancel_appointment(self, appointment_id: str, requester_id: str) -> Appointment:
        """Cancel an appointment on behalf of its customer or provider."""
        return cancel_appointment(self.store, appointment_id, requester_id)

    def provider_agenda(self, provider_id: str, date_str: str) -> list[Appointment]:
        return provider_agenda(self.store, self.resolver, provider_id, date_str)

    def customer_appointments(self, customer_id: str) -> list[Appointment]:
        return customer_appointments(self.store, customer_id)

    def set_max_booking_days(
        self, provider_id: str, requester_id: str, days: int
    ) -> Provider:
        return set_max_booking_days(self.store, provider_id, requester_id, days)

    def add_availability(
        self, provider_id: str, weekday: int, start_time: str, end_time: str
    ) -> AvailabilityWindow:
        return add_availability(self.store, provider_id, weekday, start_time, end_time)

    def add_block(
        self,
        provider_id: str,
        start_utc: datetime,
        end_utc: datetime,
        reason: str | None = None,
    ) -> Block:
        return add_block(self.store, provider_id, start_utc, end_utc, reason)
