"""CLI command implementations.

Contains all cmd_* functions for CLI subcommands. Engine errors are
printed as ``❌ <type>: <message>`` and exit with status 1.
"""

import sys
from argparse import Namespace
from datetime import datetime

from slotbook.engine import BookingEngine
from slotbook.local_time import LocalTimeResolver
from slotbook.models import Appointment, BookingError, EngineError, InvalidInput
from slotbook.storage import BookingStore, SeedLoadError, apply_seed, load_seed


def _open_engine(args: Namespace) -> BookingEngine:
    resolver = None
    if args.utc_offset is not None:
        try:
            resolver = LocalTimeResolver(args.utc_offset)
        except ValueError as e:
            _fail(InvalidInput(str(e)), args.command)

    store = BookingStore(args.db)
    store.init_schema()
    return BookingEngine(store, resolver)


def _fail(e: BookingError, operation: str) -> None:
    error = EngineError.from_exception(e, operation)
    print(f"❌ {error.type.value}: {error.message}")
    sys.exit(1)


def _parse_instant(value: str) -> datetime:
    try:
        instant = datetime.fromisoformat(value)
    except ValueError as e:
        raise InvalidInput(f"Invalid ISO timestamp: {value!r}") from e
    if instant.tzinfo is None:
        raise InvalidInput(f"Timestamp needs an offset, e.g. {value}+00:00")
    return instant


def _format_appointment(appointment: Appointment, resolver: LocalTimeResolver) -> str:
    local = appointment.start_utc.astimezone(resolver.tz)
    return (
        f"   {appointment.id}  {local:%Y-%m-%d %H:%M}  "
        f"{appointment.duration_minutes} min  {appointment.status.value}  "
        f"customer={appointment.customer_id}"
    )


def cmd_seed(args: Namespace) -> None:
    """Load providers, services, availability and blocks from YAML."""
    try:
        data = load_seed(args.seed_path)
        engine = _open_engine(args)
        counts = apply_seed(engine.store, data)
    except SeedLoadError as e:
        print(f"❌ {e}")
        sys.exit(1)

    print(f"\n🌱 Seeded {args.db}")
    for section, count in counts.items():
        print(f"   {section}: {count}")


def cmd_slots(args: Namespace) -> None:
    """List bookable slots for a provider, service and local date."""
    engine = _open_engine(args)
    try:
        slots = engine.generate_slots(args.provider, args.service, args.date)
    except BookingError as e:
        _fail(e, "generate_slots")
        return

    print(f"\n📅 {len(slots)} slots on {args.date}")
    for slot in slots:
        local = slot.astimezone(engine.resolver.tz)
        print(f"   {local:%H:%M}  ({slot.isoformat()})")


def cmd_book(args: Namespace) -> None:
    """Book a slot at an exact UTC instant."""
    engine = _open_engine(args)
    try:
        appointment = engine.book_slot(
            args.provider,
            args.customer,
            args.service,
            _parse_instant(args.start),
            notes=args.notes,
        )
    except BookingError as e:
        _fail(e, "book_slot")
        return

    print(f"\n✅ Booked {appointment.id}")
    print(_format_appointment(appointment, engine.resolver))


def cmd_cancel(args: Namespace) -> None:
    """Cancel an appointment."""
    engine = _open_engine(args)
    try:
        appointment = engine.cancel_appointment(args.appointment, args.requester)
    except BookingError as e:
        _fail(e, "cancel_appointment")
        return

    print(f"\n✅ Cancelled {appointment.id}")


def cmd_agenda(args: Namespace) -> None:
    """Show a provider's scheduled appointments for a local date."""
    engine = _open_engine(args)
    try:
        appointments = engine.provider_agenda(args.provider, args.date)
    except BookingError as e:
        _fail(e, "provider_agenda")
        return

    print(f"\n📋 {len(appointments)} appointments on {args.date}")
    for appointment in appointments:
        print(_format_appointment(appointment, engine.resolver))
