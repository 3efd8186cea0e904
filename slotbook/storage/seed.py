"""Seed loading from YAML.

Populates a store with providers, services, weekly availability and
blocks described in a YAML file:

    providers:
      - id: barber-1
        name: Joe's Barbershop
        max_booking_days: 14
    services:
      - id: haircut
        provider: barber-1
        name: Haircut
        duration_minutes: 30
    availability:
      - provider: barber-1
        weekday: 1          # 0 = Sunday
        start: "09:00"
        end: "12:00"
    blocks:
      - provider: barber-1
        start: "2026-10-19T13:00:00+00:00"
        end: "2026-10-19T14:00:00+00:00"
        reason: Dentist
"""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

import pytz
import yaml
from pydantic import ValidationError

from slotbook.config import DEFAULT_MAX_BOOKING_DAYS
from slotbook.models import BookingError, CreateService
from slotbook.scheduling.intervals import format_hhmm
from slotbook.scheduling.settings import add_availability, add_block

logger = logging.getLogger(__name__)


class SeedLoadError(Exception):
    """Error loading or applying a seed YAML file."""

    pass


def load_seed(path: str | Path) -> dict[str, Any]:
    """Load and parse a seed YAML file.

    Raises:
        SeedLoadError: If file not found, invalid YAML, or not a mapping
    """
    path = Path(path)

    if not path.exists():
        raise SeedLoadError(f"Seed file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SeedLoadError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SeedLoadError(f"Seed file must contain a mapping: {path}")
    return data


def _time_of_day(value: Any) -> str:
    # YAML 1.1 reads unquoted 10:30 as the base-60 integer 630,
    # which is already minutes since midnight
    if isinstance(value, int):
        return format_hhmm(value)
    return str(value)


def _instant(value: Any) -> datetime:
    if isinstance(value, datetime):
        instant = value
    else:
        try:
            instant = datetime.fromisoformat(str(value))
        except ValueError as e:
            raise SeedLoadError(f"Invalid timestamp: {value!r}") from e
    # Timestamps without an offset are UTC
    if instant.tzinfo is None:
        instant = pytz.utc.localize(instant)
    return instant


def apply_seed(store, data: dict[str, Any]) -> dict[str, int]:
    """Insert seed records into ``store`` as one atomic unit.

    Returns:
        Count of records created per section
    """
    counts = {"providers": 0, "services": 0, "availability": 0, "blocks": 0}

    try:
        with store.transaction():
            for item in data.get("providers") or []:
                store.create_provider(
                    name=item["name"],
                    is_provider=item.get("is_provider", True),
                    max_booking_days=item.get("max_booking_days", DEFAULT_MAX_BOOKING_DAYS),
                    provider_id=item.get("id"),
                )
                counts["providers"] += 1

            for item in data.get("services") or []:
                request = CreateService(
                    name=item["name"],
                    duration_minutes=item["duration_minutes"],
                    price=item.get("price"),
                )
                store.create_service(
                    provider_id=item["provider"],
                    name=request.name,
                    duration_minutes=request.duration_minutes,
                    price=request.price,
                    service_id=item.get("id"),
                )
                counts["services"] += 1

            for item in data.get("availability") or []:
                add_availability(
                    store,
                    item["provider"],
                    weekday=item["weekday"],
                    start_time=_time_of_day(item["start"]),
                    end_time=_time_of_day(item["end"]),
                )
                counts["availability"] += 1

            for item in data.get("blocks") or []:
                add_block(
                    store,
                    item["provider"],
                    start_utc=_instant(item["start"]),
                    end_utc=_instant(item["end"]),
                    reason=item.get("reason"),
                )
                counts["blocks"] += 1

    except KeyError as e:
        raise SeedLoadError(f"Missing field in seed record: {e}") from e
    except (BookingError, ValidationError, sqlite3.IntegrityError) as e:
        raise SeedLoadError(f"Invalid seed record: {e}") from e

    logger.info(
        "✅ Seeded "
        + ", ".join(f"{count} {section}" for section, count in counts.items())
    )
    return counts
