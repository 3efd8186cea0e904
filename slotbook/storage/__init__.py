"""Storage utilities for persistence and seeding."""

from slotbook.storage.database import BookingStore, generate_id
from slotbook.storage.seed import SeedLoadError, apply_seed, load_seed

__all__ = [
    "BookingStore",
    "generate_id",
    "SeedLoadError",
    "apply_seed",
    "load_seed",
]
