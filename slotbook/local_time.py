"""Local-Time Resolver

Maps between absolute UTC instants and the provider's local civil time.
Local time is always ``UTC + offset``; daylight saving is not modeled, so
every local day is exactly 24 hours long.

The same resolver instance is used for slot listing and for booking, so
both always agree on where a local day starts and ends.
"""

import re
from datetime import date, datetime, time, timedelta
from typing import Callable, NamedTuple

import pytz

from slotbook.config import UTC_OFFSET_MINUTES
from slotbook.models.errors import InvalidDate, InvalidInput

_DATE_RE = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")

MINUTES_PER_DAY = 24 * 60


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(pytz.utc)


def require_aware(instant: datetime) -> datetime:
    """Reject naive datetimes; instants must carry their offset."""
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise InvalidInput(f"Instant must be timezone-aware: {instant.isoformat()}")
    return instant


class DayRange(NamedTuple):
    """Half-open UTC interval covering one local calendar day."""

    local_date: date
    start_utc: datetime
    end_utc: datetime
    weekday: int  # 0 = Sunday .. 6 = Saturday

    def at(self, minutes: int) -> datetime:
        """UTC instant for ``minutes`` after local midnight of this day."""
        return self.start_utc + timedelta(minutes=minutes)

    def offset_minutes(self, instant: datetime) -> int:
        """Whole minutes from local midnight to ``instant`` (floored).

        Negative for instants on an earlier day, >= 1440 for later days.
        """
        return int((instant - self.start_utc).total_seconds() // 60)


class LocalTimeResolver:
    """Fixed-offset local time conversions.

    Args:
        offset_minutes: Local time minus UTC, in minutes (e.g. -180)
        clock: Callable returning "now" as an aware datetime
    """

    def __init__(
        self,
        offset_minutes: int = UTC_OFFSET_MINUTES,
        clock: Callable[[], datetime] | None = None,
    ):
        if not -MINUTES_PER_DAY < offset_minutes < MINUTES_PER_DAY:
            raise ValueError(f"UTC offset out of range: {offset_minutes} minutes")
        self.offset_minutes = offset_minutes
        self.tz = pytz.FixedOffset(offset_minutes)
        self._clock = clock or utc_now

    def now(self) -> datetime:
        """Current instant in UTC."""
        return require_aware(self._clock()).astimezone(pytz.utc)

    def parse_date(self, date_str: str) -> date:
        """Parse a strict ``YYYY-MM-DD`` local calendar date.

        Raises:
            InvalidDate: If the string is malformed or not a real date
        """
        match = _DATE_RE.fullmatch(date_str or "")
        if match is None:
            raise InvalidDate(
                f"Invalid date format (expected YYYY-MM-DD): {date_str!r}",
                date=date_str,
            )
        try:
            return date(*(int(part) for part in match.groups()))
        except ValueError as e:
            raise InvalidDate(f"Invalid calendar date: {date_str!r}", date=date_str) from e

    def day_range(self, date_str: str) -> DayRange:
        """UTC range and weekday for a ``YYYY-MM-DD`` local date."""
        return self.day_range_for_date(self.parse_date(date_str))

    def day_range_for_date(self, local_date: date) -> DayRange:
        start_local = self.tz.localize(datetime.combine(local_date, time.min))
        start_utc = start_local.astimezone(pytz.utc)
        return DayRange(
            local_date=local_date,
            start_utc=start_utc,
            end_utc=start_utc + timedelta(days=1),
            # isoweekday: Monday=1 .. Sunday=7
            weekday=local_date.isoweekday() % 7,
        )

    def day_range_for_instant(self, instant: datetime) -> DayRange:
        """Local day containing ``instant``."""
        return self.day_range_for_date(self.local_date(instant))

    def local_date(self, instant: datetime) -> date:
        return require_aware(instant).astimezone(self.tz).date()

    def minutes_since_local_midnight(self, instant: datetime) -> int:
        """Local time of day of ``instant`` in minutes, within [0, 1440)."""
        local = require_aware(instant).astimezone(self.tz)
        return local.hour * 60 + local.minute

    def day_distance_from_now(self, instant: datetime) -> int:
        """Signed local-day count from today to the day containing ``instant``.

        Both instants are floored to local midnight before differencing,
        so 23:59 today and 00:01 tomorrow are one day apart.
        """
        return (self.local_date(instant) - self.local_date(self.now())).days

    def to_utc(self, local_date: date, minutes: int) -> datetime:
        """UTC instant for ``minutes`` past local midnight of ``local_date``."""
        return self.day_range_for_date(local_date).at(minutes)
