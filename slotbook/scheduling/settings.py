"""Provider-managed scheduling data: horizon, weekly windows, blocks.

Requests are validated with the request models before they reach the
store; validation failures surface as InvalidInput.
"""

import logging
from datetime import datetime

from pydantic import BaseModel, ValidationError

from slotbook.models import (
    AvailabilityWindow,
    Block,
    BookingSettings,
    CreateAvailability,
    CreateBlock,
    Forbidden,
    InvalidInput,
    Provider,
)
from slotbook.scheduling.validators import resolve_provider

logger = logging.getLogger(__name__)


def _validate(model: type[BaseModel], **data) -> BaseModel:
    try:
        return model(**data)
    except ValidationError as e:
        messages = "; ".join(err["msg"] for err in e.errors())
        raise InvalidInput(f"Invalid {model.__name__}: {messages}", **data) from e


def set_max_booking_days(
    store, provider_id: str, requester_id: str, days: int
) -> Provider:
    """Change how many local days ahead a provider accepts bookings.

    Raises:
        ProviderNotFound, Forbidden, InvalidInput
    """
    if requester_id != provider_id:
        raise Forbidden("Only providers can configure booking settings")
    provider = resolve_provider(store, provider_id)

    settings = _validate(BookingSettings, max_booking_days=days)
    store.update_provider(provider.id, max_booking_days=settings.max_booking_days)
    logger.info(f"Provider {provider.id} max_booking_days={settings.max_booking_days}")
    return store.get_provider(provider.id)


def add_availability(
    store, provider_id: str, weekday: int, start_time: str, end_time: str
) -> AvailabilityWindow:
    """Add a weekly open window. Several windows per weekday are allowed."""
    provider = resolve_provider(store, provider_id)
    request = _validate(
        CreateAvailability, weekday=weekday, start_time=start_time, end_time=end_time
    )
    return store.create_availability(
        provider_id=provider.id,
        weekday=request.weekday,
        start_time=request.start_time,
        end_time=request.end_time,
    )


def add_block(
    store,
    provider_id: str,
    start_utc: datetime,
    end_utc: datetime,
    reason: str | None = None,
) -> Block:
    """Block out an absolute interval. Blocks may overlap each other."""
    provider = resolve_provider(store, provider_id)
    request = _validate(CreateBlock, start_utc=start_utc, end_utc=end_utc, reason=reason)
    return store.create_block(
        provider_id=provider.id,
        start_utc=request.start_utc,
        end_utc=request.end_utc,
        reason=request.reason,
    )
