"""Availability & conflict resolution.

- Interval math (intervals.py)
- Weekly availability windows (availability.py)
- Blocks and booked time for a day (obstructions.py)
- Slot generation (slots.py)
- Booking validation, commit and cancellation (booking.py)
- Provider settings and listings (settings.py, agenda.py)
"""

from slotbook.scheduling.agenda import customer_appointments, provider_agenda
from slotbook.scheduling.booking import book_slot, cancel_appointment
from slotbook.scheduling.intervals import format_hhmm, overlaps, parse_hhmm
from slotbook.scheduling.obstructions import Obstruction, ObstructionSet
from slotbook.scheduling.settings import (
    add_availability,
    add_block,
    set_max_booking_days,
)
from slotbook.scheduling.slots import generate_slots

__all__ = [
    "overlaps",
    "parse_hhmm",
    "format_hhmm",
    "Obstruction",
    "ObstructionSet",
    "generate_slots",
    "book_slot",
    "cancel_appointment",
    "set_max_booking_days",
    "add_availability",
    "add_block",
    "provider_agenda",
    "customer_appointments",
]
