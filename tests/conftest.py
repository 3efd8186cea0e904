"""Shared test fixtures for slotbook tests.

The clock is frozen at Sunday 2026-10-18 09:00 local (12:00 UTC) with
local time at UTC-3, so the next Monday is 2026-10-19 (one day ahead).
"""

from datetime import datetime
from typing import Generator

import pytest
import pytz

from slotbook.engine import BookingEngine
from slotbook.local_time import LocalTimeResolver
from slotbook.models import Provider, Service
from slotbook.storage import BookingStore

OFFSET_MINUTES = -180
NOW = datetime(2026, 10, 18, 12, 0, tzinfo=pytz.utc)
TODAY = "2026-10-18"  # Sunday
MONDAY = "2026-10-19"

# Unquoted 14:00 and the bare timestamp exercise YAML 1.1 implicit typing
SEED_YAML = """
providers:
  - id: barber-1
    name: Joe's Barbershop
    max_booking_days: 14
  - id: alice
    name: Alice
    is_provider: false
services:
  - id: haircut
    provider: barber-1
    name: Haircut
    duration_minutes: 30
    price: 40
availability:
  - provider: barber-1
    weekday: 1
    start: "09:00"
    end: "12:00"
  - provider: barber-1
    weekday: 1
    start: 14:00
    end: 18:30
blocks:
  - provider: barber-1
    start: 2026-10-19T13:00:00+00:00
    end: "2026-10-19T14:00:00+00:00"
    reason: Dentist
"""


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    """Aware UTC datetime shorthand."""
    return datetime(year, month, day, hour, minute, tzinfo=pytz.utc)


def local(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    """UTC instant for a wall-clock time at the test offset (UTC-3)."""
    return pytz.FixedOffset(OFFSET_MINUTES).localize(
        datetime(year, month, day, hour, minute)
    ).astimezone(pytz.utc)


@pytest.fixture
def resolver() -> LocalTimeResolver:
    """Resolver at UTC-3 with the clock frozen at NOW."""
    return LocalTimeResolver(offset_minutes=OFFSET_MINUTES, clock=lambda: NOW)


@pytest.fixture
def store() -> Generator[BookingStore, None, None]:
    """Create in-memory store for testing."""
    database = BookingStore(":memory:")
    database.init_schema()
    yield database
    database.close()


@pytest.fixture
def provider(store) -> Provider:
    """A barber accepting bookings 7 days ahead."""
    return store.create_provider(name="Joe's Barbershop", max_booking_days=7, provider_id="barber")


@pytest.fixture
def service(store, provider) -> Service:
    """30 minute haircut."""
    return store.create_service(
        provider_id=provider.id,
        name="Haircut",
        duration_minutes=30,
        price=40.0,
        service_id="haircut",
    )


@pytest.fixture
def monday_window(store, provider):
    """Monday 09:00-12:00 local."""
    return store.create_availability(provider.id, 1, "09:00", "12:00")


@pytest.fixture
def engine(store, resolver) -> BookingEngine:
    """Engine over the in-memory store and frozen clock."""
    return BookingEngine(store, resolver)
