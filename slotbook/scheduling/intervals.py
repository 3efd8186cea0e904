"""Interval math shared by every conflict check.

All intervals are half-open ``[start, end)``. Bounds passed to one call
must share a unit: minutes-of-day or datetimes, never mixed.
"""

from slotbook.models.errors import InvalidInput


def overlaps(start_a, end_a, start_b, end_b) -> bool:
    """True if ``[start_a, end_a)`` and ``[start_b, end_b)`` intersect.

    An interval ending exactly when another begins does not overlap it.
    """
    return start_a < end_b and end_a > start_b


def parse_hhmm(value: str) -> int:
    """Convert a 24-hour ``HH:MM`` string to minutes since midnight.

    ``24:00`` is accepted as the end-of-day bound (1440).

    Raises:
        InvalidInput: If the value is not a valid time of day
    """
    try:
        hour_str, minute_str = value.split(":")
        if len(hour_str) != 2 or len(minute_str) != 2:
            raise ValueError(value)
        hour, minute = int(hour_str), int(minute_str)
    except (AttributeError, ValueError) as e:
        raise InvalidInput(f"Invalid time of day (expected HH:MM): {value!r}") from e

    if hour == 24 and minute == 0:
        return 24 * 60
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise InvalidInput(f"Time of day out of range: {value!r}")
    return hour * 60 + minute


def format_hhmm(minutes: int) -> str:
    """Inverse of parse_hhmm."""
    if not 0 <= minutes <= 24 * 60:
        raise InvalidInput(f"Minutes out of range for a time of day: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
