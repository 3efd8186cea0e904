"""Booking Validator/Committer

Re-validates a requested start instant against fresh state and commits
it atomically. The check and the insert run inside one store transaction,
so two requests racing for overlapping time cannot both succeed.
"""

import logging
from datetime import datetime

import pytz

from slotbook.local_time import LocalTimeResolver, require_aware
from slotbook.models import (
    AlreadyCancelled,
    Appointment,
    AppointmentNotFound,
    AppointmentStatus,
    Forbidden,
    InvalidInput,
    OutsideAvailability,
    PastDate,
    SlotBlocked,
    SlotConflict,
)
from slotbook.scheduling.availability import is_candidate_start, windows_for
from slotbook.scheduling.obstructions import ObstructionSet
from slotbook.scheduling.validators import (
    check_booking_horizon,
    resolve_provider,
    resolve_service,
)

logger = logging.getLogger(__name__)


def book_slot(
    store,
    resolver: LocalTimeResolver,
    provider_id: str,
    customer_id: str,
    service_id: str,
    start_utc: datetime,
    notes: str | None = None,
) -> Appointment:
    """Validate and commit a booking for ``start_utc``.

    Args:
        store: Persistence collaborator (must provide ``transaction()``)
        resolver: Local time policy (shared with slot listing)
        provider_id: Provider being booked
        customer_id: Customer making the booking
        service_id: Service whose current duration is captured
        start_utc: Requested start, timezone-aware
        notes: Optional free-text notes

    Returns:
        The created SCHEDULED appointment

    Raises:
        InvalidInput, ProviderNotFound, ServiceNotFound, PastDate,
        BookingHorizonExceeded, OutsideAvailability, SlotBlocked,
        SlotConflict
    """
    start_utc = require_aware(start_utc).astimezone(pytz.utc)
    if start_utc.second or start_utc.microsecond:
        raise InvalidInput(
            f"Start must fall on a whole minute: {start_utc.isoformat()}"
        )

    provider = resolve_provider(store, provider_id)
    service = resolve_service(store, provider, service_id)
    day = resolver.day_range_for_instant(start_utc)
    check_booking_horizon(resolver, provider, day)

    if start_utc <= resolver.now():
        raise PastDate(
            f"Cannot book a slot that has already started: {start_utc.isoformat()}"
        )

    duration = service.duration_minutes
    start_min = day.offset_minutes(start_utc)
    end_min = start_min + duration

    with store.transaction():
        windows = windows_for(store, provider.id, day.weekday)
        if not is_candidate_start(windows, start_min, duration):
            raise OutsideAvailability(
                f"Provider not available at {start_utc.isoformat()}",
                provider_id=provider.id,
            )

        obstructions = ObstructionSet.load(store, provider.id, day)

        block = obstructions.blocking(start_min, end_min)
        if block is not None:
            raise SlotBlocked(
                f"Provider blocked at {start_utc.isoformat()}",
                block_id=block.source_id,
            )

        conflict = obstructions.conflicting(start_min, end_min)
        if conflict is not None:
            raise SlotConflict(
                f"Time slot already taken: {start_utc.isoformat()}",
                appointment_id=conflict.source_id,
            )

        appointment = store.create_appointment(
            provider_id=provider.id,
            customer_id=customer_id,
            service_id=service.id,
            start_utc=start_utc,
            duration_minutes=duration,
            notes=notes,
        )

    logger.info(
        f"✅ Booked {appointment.id}: provider={provider.id} "
        f"customer={customer_id} start={start_utc.isoformat()} ({duration} min)"
    )
    return appointment


def cancel_appointment(store, appointment_id: str, requester_id: str) -> Appointment:
    """Move a SCHEDULED appointment to CANCELLED.

    Only the owning customer or the owning provider may cancel. Cancelling
    an already cancelled appointment raises AlreadyCancelled.

    Raises:
        AppointmentNotFound, Forbidden, AlreadyCancelled
    """
    with store.transaction():
        appointment = store.get_appointment(appointment_id)
        if appointment is None:
            raise AppointmentNotFound(
                f"Appointment not found: {appointment_id}",
                appointment_id=appointment_id,
            )

        if requester_id not in (appointment.customer_id, appointment.provider_id):
            raise Forbidden(
                "Only the customer or the provider can cancel this appointment",
                appointment_id=appointment_id,
            )

        updated = store.update_appointment_status(
            appointment_id,
            AppointmentStatus.CANCELLED,
            expected=AppointmentStatus.SCHEDULED,
        )
        if not updated:
            raise AlreadyCancelled(
                f"Appointment already cancelled: {appointment_id}",
                appointment_id=appointment_id,
            )

        cancelled = store.get_appointment(appointment_id)

    logger.info(f"✅ Cancelled {appointment_id} by {requester_id}")
    return cancelled
