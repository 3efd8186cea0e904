"""Centralized configuration for the slotbook package.

Provides paths, settings, and environment configuration
used across all modules.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Package root (slotbook/ directory)
PACKAGE_ROOT = Path(__file__).parent

# Working directory (where the user runs the CLI from)
WORKING_DIR = Path.cwd()

# Load environment variables from current working directory
load_dotenv(WORKING_DIR / ".env")

# Database
DATABASE_PATH = os.getenv("SLOTBOOK_DATABASE_PATH", str(WORKING_DIR / "slotbook.db"))
LOCK_TIMEOUT_SECONDS = float(os.getenv("SLOTBOOK_LOCK_TIMEOUT", "5.0"))

# Local civil time is always UTC + offset (no daylight saving).
# Default: São Paulo, UTC-3.
UTC_OFFSET_MINUTES = int(os.getenv("SLOTBOOK_UTC_OFFSET_MINUTES", "-180"))

# Booking horizon (local days ahead)
DEFAULT_MAX_BOOKING_DAYS = int(os.getenv("SLOTBOOK_DEFAULT_MAX_BOOKING_DAYS", "7"))
MIN_BOOKING_DAYS = 1
MAX_BOOKING_DAYS = 60

# Logging
LOG_LEVEL = os.getenv("SLOTBOOK_LOG_LEVEL", "INFO").upper()
