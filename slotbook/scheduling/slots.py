"""Slot Generation Service

Generates the bookable start instants for one local day, considering:
- Weekly availability windows for the day's weekday
- Provider blocks touching the day
- Already scheduled appointments
- Slots of today that have already started
"""

import logging
from datetime import datetime

from slotbook.local_time import LocalTimeResolver
from slotbook.scheduling.availability import candidate_starts, windows_for
from slotbook.scheduling.obstructions import ObstructionSet
from slotbook.scheduling.validators import (
    check_booking_horizon,
    resolve_provider,
    resolve_service,
)

logger = logging.getLogger(__name__)


def generate_slots(
    store,
    resolver: LocalTimeResolver,
    provider_id: str,
    service_id: str,
    date_str: str,
) -> list[datetime]:
    """List bookable UTC start instants for a local day.

    Args:
        store: Persistence collaborator
        resolver: Local time policy (shared with booking)
        provider_id: Provider to book with
        service_id: Service whose current duration sizes the slots
        date_str: Local calendar date, YYYY-MM-DD

    Returns:
        Ascending list of aware UTC datetimes

    Raises:
        ProviderNotFound, ServiceNotFound, InvalidDate, PastDate,
        BookingHorizonExceeded

    Algorithm:
        1. Resolve provider and service
        2. Resolve the local day and check the booking horizon
        3. Load availability windows and obstructions (no caching)
        4. Step each window by the service duration
        5. Drop slots overlapping an obstruction or already started
        6. Sort the union across windows
    """
    provider = resolve_provider(store, provider_id)
    service = resolve_service(store, provider, service_id)
    day = resolver.day_range(date_str)
    check_booking_horizon(resolver, provider, day)

    windows = windows_for(store, provider.id, day.weekday)
    if not windows:
        return []

    obstructions = ObstructionSet.load(store, provider.id, day)
    duration = service.duration_minutes
    now = resolver.now()

    slots: set[datetime] = set()
    for start_min in candidate_starts(windows, duration):
        if not obstructions.is_free(start_min, start_min + duration):
            continue

        instant = day.at(start_min)
        if instant <= now:
            continue

        slots.add(instant)

    logger.debug(
        f"Generated {len(slots)} slots for provider {provider.id} on {date_str} "
        f"({len(windows)} windows, {len(obstructions)} obstructions)"
    )
    return sorted(slots)
