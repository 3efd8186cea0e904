"""Read-only appointment listings for providers and customers."""

from slotbook.local_time import LocalTimeResolver
from slotbook.models import Appointment
from slotbook.scheduling.validators import resolve_provider


def provider_agenda(
    store, resolver: LocalTimeResolver, provider_id: str, date_str: str
) -> list[Appointment]:
    """Scheduled appointments starting on a provider's local day, ascending."""
    provider = resolve_provider(store, provider_id)
    day = resolver.day_range(date_str)
    appointments = store.list_scheduled_appointments(
        provider.id, day.start_utc, day.end_utc
    )
    # Overlap query also returns bookings carried over from the previous day
    return [a for a in appointments if day.start_utc <= a.start_utc < day.end_utc]


def customer_appointments(store, customer_id: str) -> list[Appointment]:
    """All of a customer's appointments, newest first, cancelled included."""
    return store.list_customer_appointments(customer_id)
