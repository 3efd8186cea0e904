"""Availability Model

Turns a provider's stored weekly windows into ordered minute ranges and
enumerates the duration-aligned slot starts inside them.
"""

import logging
from typing import Iterator

from slotbook.models.errors import InvalidInput
from slotbook.scheduling.intervals import parse_hhmm

logger = logging.getLogger(__name__)

Window = tuple[int, int]


def windows_for(store, provider_id: str, weekday: int) -> list[Window]:
    """Open windows for a weekday as sorted, de-duplicated minute ranges.

    Windows are unioned as given; overlapping windows are kept. Rows that
    cannot be parsed or are empty are skipped with a warning.

    Args:
        store: Persistence collaborator (``list_availability``)
        provider_id: Provider to look up
        weekday: 0 = Sunday .. 6 = Saturday

    Returns:
        [(start_minutes, end_minutes), ...] ascending by start
    """
    windows: set[Window] = set()

    for window in store.list_availability(provider_id, weekday):
        try:
            start = parse_hhmm(window.start_time)
            end = parse_hhmm(window.end_time)
        except InvalidInput as e:
            logger.warning(f"⚠️ Skipping availability {window.id}: {e}")
            continue

        if end <= start:
            logger.warning(
                f"⚠️ Skipping empty availability {window.id}: "
                f"{window.start_time}-{window.end_time}"
            )
            continue

        windows.add((start, end))

    return sorted(windows)


def candidate_starts(windows: list[Window], duration: int) -> Iterator[int]:
    """Yield every duration-aligned slot start that fits in a window.

    Starts step from the window start by ``duration`` up to and including
    ``end - duration``. Overlapping windows may yield the same start twice;
    callers de-duplicate.
    """
    if duration <= 0:
        raise InvalidInput(f"Duration must be positive: {duration}")

    for window_start, window_end in windows:
        yield from range(window_start, window_end - duration + 1, duration)


def is_candidate_start(windows: list[Window], start: int, duration: int) -> bool:
    """True if ``start`` is one of the slot starts candidate_starts yields."""
    return any(
        window_start <= start <= window_end - duration
        and (start - window_start) % duration == 0
        for window_start, window_end in windows
    )
