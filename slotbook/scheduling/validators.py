"""Checks shared by slot listing and booking.

Booking re-runs every one of these against fresh reads; nothing computed
while listing slots is trusted at commit time.
"""

from slotbook.local_time import DayRange, LocalTimeResolver
from slotbook.models import (
    BookingHorizonExceeded,
    PastDate,
    Provider,
    ProviderNotFound,
    Service,
    ServiceNotFound,
)


def resolve_provider(store, provider_id: str) -> Provider:
    """Load a provider, rejecting unknown ids and non-provider accounts."""
    provider = store.get_provider(provider_id)
    if provider is None or not provider.is_provider:
        raise ProviderNotFound(f"Provider not found: {provider_id}", provider_id=provider_id)
    return provider


def resolve_service(store, provider: Provider, service_id: str) -> Service:
    """Load a service owned by ``provider``."""
    service = store.get_service(service_id)
    if service is None or service.provider_id != provider.id:
        raise ServiceNotFound(
            f"Service {service_id} not found for provider {provider.id}",
            service_id=service_id,
            provider_id=provider.id,
        )
    return service


def check_booking_horizon(
    resolver: LocalTimeResolver, provider: Provider, day: DayRange
) -> int:
    """Reject past days and days beyond the provider's booking horizon.

    Returns:
        Local-day distance from today (0 = today)
    """
    distance = resolver.day_distance_from_now(day.start_utc)

    if distance < 0:
        raise PastDate(
            f"Cannot book past dates: {day.local_date.isoformat()}",
            date=day.local_date.isoformat(),
        )
    if distance > provider.max_booking_days:
        raise BookingHorizonExceeded(
            f"Cannot book more than {provider.max_booking_days} days in advance",
            date=day.local_date.isoformat(),
            max_booking_days=provider.max_booking_days,
        )
    return distance
