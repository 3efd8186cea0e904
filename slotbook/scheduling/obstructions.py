"""Obstruction Set

Blocks and scheduled appointments touching one local day, projected into
minutes relative to that day's local midnight.
"""

import math
from typing import Iterator, Literal, NamedTuple

from slotbook.local_time import DayRange
from slotbook.models import Appointment, Block
from slotbook.scheduling.intervals import overlaps


class Obstruction(NamedTuple):
    """An interval that removes time from bookability."""

    start_min: int
    end_min: int
    kind: Literal["block", "appointment"]
    source_id: str


def _project_block(day: DayRange, block: Block) -> Obstruction:
    # Round outward so partial minutes stay unavailable
    start = math.floor((block.start_utc - day.start_utc).total_seconds() / 60)
    end = math.ceil((block.end_utc - day.start_utc).total_seconds() / 60)
    return Obstruction(start, end, "block", block.id)


def _project_appointment(day: DayRange, appointment: Appointment) -> Obstruction:
    start = day.offset_minutes(appointment.start_utc)
    # Captured duration, never the service's current one
    return Obstruction(
        start, start + appointment.duration_minutes, "appointment", appointment.id
    )


class ObstructionSet:
    """Unavailable intervals for one provider and local day.

    Minutes are relative to local midnight of ``day`` and are not wrapped:
    a block that started the previous evening has a negative start, one
    running past midnight ends after 1440.
    """

    def __init__(self, day: DayRange, blocks: list[Block], appointments: list[Appointment]):
        self.day = day
        self.blocks = [_project_block(day, b) for b in blocks]
        self.appointments = [_project_appointment(day, a) for a in appointments]

    @classmethod
    def load(cls, store, provider_id: str, day: DayRange) -> "ObstructionSet":
        """Read blocks and scheduled appointments overlapping ``day``."""
        blocks = store.list_blocks_overlapping(provider_id, day.start_utc, day.end_utc)
        appointments = store.list_scheduled_appointments(
            provider_id, day.start_utc, day.end_utc
        )
        return cls(day, blocks, appointments)

    def blocking(self, start_min: int, end_min: int) -> Obstruction | None:
        """First block overlapping ``[start_min, end_min)``, if any."""
        return next(
            (o for o in self.blocks if overlaps(start_min, end_min, o.start_min, o.end_min)),
            None,
        )

    def conflicting(self, start_min: int, end_min: int) -> Obstruction | None:
        """First scheduled appointment overlapping ``[start_min, end_min)``."""
        return next(
            (
                o
                for o in self.appointments
                if overlaps(start_min, end_min, o.start_min, o.end_min)
            ),
            None,
        )

    def is_free(self, start_min: int, end_min: int) -> bool:
        return (
            self.blocking(start_min, end_min) is None
            and self.conflicting(start_min, end_min) is None
        )

    def __iter__(self) -> Iterator[Obstruction]:
        return iter(sorted(self.blocks + self.appointments))

    def __len__(self) -> int:
        return len(self.blocks) + len(self.appointments)
