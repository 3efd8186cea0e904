"""SQLite storage for the booking engine.

Provides reads and writes for providers, services, availability windows,
blocks and appointments, plus the transaction used to commit bookings.

Instants are stored as integer UTC epoch seconds so overlap queries can
run in SQL. Appointments persist their own duration and end instant.
"""

import math
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator

import pytz

from slotbook.config import DATABASE_PATH, DEFAULT_MAX_BOOKING_DAYS, LOCK_TIMEOUT_SECONDS
from slotbook.local_time import require_aware
from slotbook.models import (
    Appointment,
    AppointmentStatus,
    AvailabilityWindow,
    Block,
    Provider,
    Service,
    SlotConflict,
)


def generate_id(prefix: str) -> str:
    """Generate a prefixed UUID."""
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


def to_epoch(instant: datetime, round_up: bool = False) -> int:
    """Whole UTC epoch seconds, floored unless ``round_up``."""
    seconds = require_aware(instant).timestamp()
    return math.ceil(seconds) if round_up else math.floor(seconds)


def from_epoch(value: int) -> datetime:
    return datetime.fromtimestamp(value, tz=pytz.utc)


SCHEMA = """
    -- Providers (read-only to the engine apart from settings)
    CREATE TABLE IF NOT EXISTS providers (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        is_provider INTEGER NOT NULL DEFAULT 1,
        max_booking_days INTEGER NOT NULL DEFAULT 7,
        created_at TEXT NOT NULL
    );

    -- Services
    CREATE TABLE IF NOT EXISTS services (
        id TEXT PRIMARY KEY,
        provider_id TEXT NOT NULL REFERENCES providers(id) ON DELETE CASCADE,
        name TEXT NOT NULL,
        duration_minutes INTEGER NOT NULL CHECK(duration_minutes > 0),
        price REAL
    );

    -- Weekly availability windows (local HH:MM)
    CREATE TABLE IF NOT EXISTS availability (
        id TEXT PRIMARY KEY,
        provider_id TEXT NOT NULL REFERENCES providers(id) ON DELETE CASCADE,
        weekday INTEGER NOT NULL CHECK(weekday BETWEEN 0 AND 6),
        start_time TEXT NOT NULL,
        end_time TEXT NOT NULL,
        UNIQUE(provider_id, weekday, start_time, end_time)
    );

    -- Blocks (UTC epoch seconds)
    CREATE TABLE IF NOT EXISTS blocks (
        id TEXT PRIMARY KEY,
        provider_id TEXT NOT NULL REFERENCES providers(id) ON DELETE CASCADE,
        start_utc INTEGER NOT NULL,
        end_utc INTEGER NOT NULL CHECK(end_utc > start_utc),
        reason TEXT
    );
    CREATE INDEX IF NOT EXISTS idx_blocks_provider_start
        ON blocks(provider_id, start_utc);

    -- Appointments are never deleted; cancelled rows are kept for history
    CREATE TABLE IF NOT EXISTS appointments (
        id TEXT PRIMARY KEY,
        provider_id TEXT NOT NULL,
        customer_id TEXT NOT NULL,
        service_id TEXT NOT NULL,
        start_utc INTEGER NOT NULL,
        end_utc INTEGER NOT NULL,
        duration_minutes INTEGER NOT NULL CHECK(duration_minutes > 0),
        status TEXT NOT NULL DEFAULT 'SCHEDULED'
            CHECK(status IN ('SCHEDULED', 'CANCELLED')),
        notes TEXT,
        created_at TEXT NOT NULL
    );
    CREATE INDEX IF NOT EXISTS idx_appointments_provider_start
        ON appointments(provider_id, start_utc);
    CREATE INDEX IF NOT EXISTS idx_appointments_customer
        ON appointments(customer_id);
    -- At most one scheduled appointment per provider and start instant
    CREATE UNIQUE INDEX IF NOT EXISTS idx_appointments_scheduled_start
        ON appointments(provider_id, start_utc) WHERE status = 'SCHEDULED';
"""


class BookingStore:
    """SQLite database for booking resources.

    One connection per store, guarded by a re-entrant lock. Writes run in
    ``BEGIN IMMEDIATE`` transactions, which also serializes writers from
    other connections or processes sharing the same database file.
    """

    def __init__(self, db_path: str | None = None, timeout: float = LOCK_TIMEOUT_SECONDS):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite file, or ":memory:" for in-memory.
                     Defaults to SLOTBOOK_DATABASE_PATH or "./slotbook.db"
            timeout: Seconds to wait for another writer's lock
        """
        self.db_path = db_path or DATABASE_PATH
        # isolation_level=None: transactions are opened explicitly
        self.conn = sqlite3.connect(
            self.db_path,
            timeout=timeout,
            isolation_level=None,
            check_same_thread=False,
        )
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")
        self._lock = threading.RLock()

    def init_schema(self) -> None:
        """Create tables if they don't exist."""
        with self._lock:
            self.conn.executescript(SCHEMA)

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            self.conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run the enclosed reads and writes as one atomic unit.

        Nested use joins the outer transaction. Any exception rolls back.

        Yields:
            The store's connection
        """
        with self._lock:
            if self.conn.in_transaction:
                yield self.conn
                return

            self.conn.execute("BEGIN IMMEDIATE")
            try:
                yield self.conn
            except BaseException:
                self.conn.rollback()
                raise
            else:
                self.conn.commit()

    def _fetchone(self, query: str, params: tuple = ()) -> sqlite3.Row | None:
        with self._lock:
            return self.conn.execute(query, params).fetchone()

    def _fetchall(self, query: str, params: tuple = ()) -> list[sqlite3.Row]:
        with self._lock:
            return self.conn.execute(query, params).fetchall()

    # =========================================================================
    # Provider operations
    # =========================================================================

    @staticmethod
    def _provider(row: sqlite3.Row) -> Provider:
        return Provider(
            id=row["id"],
            name=row["name"],
            is_provider=bool(row["is_provider"]),
            max_booking_days=row["max_booking_days"],
        )

    def create_provider(
        self,
        name: str,
        is_provider: bool = True,
        max_booking_days: int = DEFAULT_MAX_BOOKING_DAYS,
        provider_id: str | None = None,
    ) -> Provider:
        """Create a provider (or, with is_provider=False, a plain account)."""
        provider_id = provider_id or generate_id("prov")

        with self.transaction() as conn:
            conn.execute(
                """INSERT INTO providers (id, name, is_provider, max_booking_days, created_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (
                    provider_id,
                    name,
                    int(is_provider),
                    max_booking_days,
                    datetime.now().isoformat(),
                ),
            )

        return Provider(
            id=provider_id,
            name=name,
            is_provider=is_provider,
            max_booking_days=max_booking_days,
        )

    def get_provider(self, provider_id: str) -> Provider | None:
        """Get provider by ID."""
        row = self._fetchone("SELECT * FROM providers WHERE id = ?", (provider_id,))
        return None if row is None else self._provider(row)

    def list_providers(self) -> list[Provider]:
        """List all providers."""
        rows = self._fetchall("SELECT * FROM providers ORDER BY name")
        return [self._provider(row) for row in rows]

    def update_provider(
        self,
        provider_id: str,
        name: str | None = None,
        max_booking_days: int | None = None,
    ) -> bool:
        """Update provider fields. Returns True if the provider exists."""
        with self.transaction() as conn:
            cursor = conn.execute(
                """UPDATE providers
                   SET name = COALESCE(?, name),
                       max_booking_days = COALESCE(?, max_booking_days)
                   WHERE id = ?""",
                (name, max_booking_days, provider_id),
            )
        return cursor.rowcount > 0

    # =========================================================================
    # Service operations
    # =========================================================================

    @staticmethod
    def _service(row: sqlite3.Row) -> Service:
        return Service(
            id=row["id"],
            provider_id=row["provider_id"],
            name=row["name"],
            duration_minutes=row["duration_minutes"],
            price=row["price"],
        )

    def create_service(
        self,
        provider_id: str,
        name: str,
        duration_minutes: int,
        price: float | None = None,
        service_id: str | None = None,
    ) -> Service:
        """Create a new service for a provider."""
        service = Service(
            id=service_id or generate_id("svc"),
            provider_id=provider_id,
            name=name,
            duration_minutes=duration_minutes,
            price=price,
        )

        with self.transaction() as conn:
            conn.execute(
                """INSERT INTO services (id, provider_id, name, duration_minutes, price)
                   VALUES (?, ?, ?, ?, ?)""",
                (service.id, provider_id, name, duration_minutes, price),
            )

        return service

    def get_service(self, service_id: str) -> Service | None:
        """Get service by ID."""
        row = self._fetchone("SELECT * FROM services WHERE id = ?", (service_id,))
        return None if row is None else self._service(row)

    def list_services(self, provider_id: str) -> list[Service]:
        """List a provider's services."""
        rows = self._fetchall(
            "SELECT * FROM services WHERE provider_id = ? ORDER BY name", (provider_id,)
        )
        return [self._service(row) for row in rows]

    def update_service(
        self,
        service_id: str,
        name: str | None = None,
        duration_minutes: int | None = None,
        price: float | None = None,
    ) -> bool:
        """Update service fields. Existing appointments keep their duration."""
        with self.transaction() as conn:
            cursor = conn.execute(
                """UPDATE services
                   SET name = COALESCE(?, name),
                       duration_minutes = COALESCE(?, duration_minutes),
                       price = COALESCE(?, price)
                   WHERE id = ?""",
                (name, duration_minutes, price, service_id),
            )
        return cursor.rowcount > 0

    def delete_service(self, service_id: str) -> bool:
        """Delete service by ID."""
        with self.transaction() as conn:
            cursor = conn.execute("DELETE FROM services WHERE id = ?", (service_id,))
        return cursor.rowcount > 0

    # =========================================================================
    # Availability operations
    # =========================================================================

    @staticmethod
    def _availability(row: sqlite3.Row) -> AvailabilityWindow:
        return AvailabilityWindow(
            id=row["id"],
            provider_id=row["provider_id"],
            weekday=row["weekday"],
            start_time=row["start_time"],
            end_time=row["end_time"],
        )

    def create_availability(
        self, provider_id: str, weekday: int, start_time: str, end_time: str
    ) -> AvailabilityWindow:
        """Add a weekly window. An identical existing window is returned as is."""
        with self.transaction() as conn:
            conn.execute(
                """INSERT OR IGNORE INTO availability
                   (id, provider_id, weekday, start_time, end_time)
                   VALUES (?, ?, ?, ?, ?)""",
                (generate_id("avail"), provider_id, weekday, start_time, end_time),
            )
            row = conn.execute(
                """SELECT * FROM availability
                   WHERE provider_id = ? AND weekday = ?
                     AND start_time = ? AND end_time = ?""",
                (provider_id, weekday, start_time, end_time),
            ).fetchone()

        return self._availability(row)

    def list_availability(
        self, provider_id: str, weekday: int | None = None
    ) -> list[AvailabilityWindow]:
        """List windows for a provider, optionally for one weekday."""
        query = "SELECT * FROM availability WHERE provider_id = ?"
        params: list = [provider_id]

        if weekday is not None:
            query += " AND weekday = ?"
            params.append(weekday)

        query += " ORDER BY weekday, start_time"
        return [self._availability(row) for row in self._fetchall(query, tuple(params))]

    def delete_availability(self, availability_id: str) -> bool:
        """Delete an availability window by ID."""
        with self.transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM availability WHERE id = ?", (availability_id,)
            )
        return cursor.rowcount > 0

    # =========================================================================
    # Block operations
    # =========================================================================

    @staticmethod
    def _block(row: sqlite3.Row) -> Block:
        return Block(
            id=row["id"],
            provider_id=row["provider_id"],
            start_utc=from_epoch(row["start_utc"]),
            end_utc=from_epoch(row["end_utc"]),
            reason=row["reason"],
        )

    def create_block(
        self,
        provider_id: str,
        start_utc: datetime,
        end_utc: datetime,
        reason: str | None = None,
    ) -> Block:
        """Create a new block.

        Sub-second bounds round outward to whole seconds.
        """
        block_id = generate_id("blk")
        start = to_epoch(start_utc)
        end = to_epoch(end_utc, round_up=True)

        with self.transaction() as conn:
            conn.execute(
                """INSERT INTO blocks (id, provider_id, start_utc, end_utc, reason)
                   VALUES (?, ?, ?, ?, ?)""",
                (block_id, provider_id, start, end, reason),
            )

        return Block(
            id=block_id,
            provider_id=provider_id,
            start_utc=from_epoch(start),
            end_utc=from_epoch(end),
            reason=reason,
        )

    def list_blocks(self, provider_id: str) -> list[Block]:
        """List all blocks for a provider."""
        rows = self._fetchall(
            "SELECT * FROM blocks WHERE provider_id = ? ORDER BY start_utc",
            (provider_id,),
        )
        return [self._block(row) for row in rows]

    def list_blocks_overlapping(
        self, provider_id: str, start_utc: datetime, end_utc: datetime
    ) -> list[Block]:
        """Blocks with start < end_utc and end > start_utc."""
        rows = self._fetchall(
            """SELECT * FROM blocks
               WHERE provider_id = ? AND start_utc < ? AND end_utc > ?
               ORDER BY start_utc""",
            (provider_id, to_epoch(end_utc), to_epoch(start_utc)),
        )
        return [self._block(row) for row in rows]

    def delete_block(self, block_id: str) -> bool:
        """Delete block by ID."""
        with self.transaction() as conn:
            cursor = conn.execute("DELETE FROM blocks WHERE id = ?", (block_id,))
        return cursor.rowcount > 0

    # =========================================================================
    # Appointment operations
    # =========================================================================

    @staticmethod
    def _appointment(row: sqlite3.Row) -> Appointment:
        return Appointment(
            id=row["id"],
            provider_id=row["provider_id"],
            customer_id=row["customer_id"],
            service_id=row["service_id"],
            start_utc=from_epoch(row["start_utc"]),
            duration_minutes=row["duration_minutes"],
            status=row["status"],
            notes=row["notes"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def create_appointment(
        self,
        provider_id: str,
        customer_id: str,
        service_id: str,
        start_utc: datetime,
        duration_minutes: int,
        notes: str | None = None,
    ) -> Appointment:
        """Insert a SCHEDULED appointment.

        Raises:
            SlotConflict: If the provider already has a scheduled
                appointment starting at the same instant
        """
        appointment = Appointment(
            id=generate_id("appt"),
            provider_id=provider_id,
            customer_id=customer_id,
            service_id=service_id,
            start_utc=require_aware(start_utc).astimezone(pytz.utc),
            duration_minutes=duration_minutes,
            notes=notes,
        )

        try:
            with self.transaction() as conn:
                conn.execute(
                    """INSERT INTO appointments
                       (id, provider_id, customer_id, service_id, start_utc,
                        end_utc, duration_minutes, status, notes, created_at)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        appointment.id,
                        provider_id,
                        customer_id,
                        service_id,
                        to_epoch(appointment.start_utc),
                        to_epoch(appointment.end_utc),
                        duration_minutes,
                        AppointmentStatus.SCHEDULED.value,
                        notes,
                        appointment.created_at.isoformat(),
                    ),
                )
        except sqlite3.IntegrityError as e:
            raise SlotConflict(
                f"Time slot already taken: {start_utc.isoformat()}",
                provider_id=provider_id,
            ) from e

        return appointment

    def get_appointment(self, appointment_id: str) -> Appointment | None:
        """Get appointment by ID."""
        row = self._fetchone(
            "SELECT * FROM appointments WHERE id = ?", (appointment_id,)
        )
        return None if row is None else self._appointment(row)

    def list_scheduled_appointments(
        self, provider_id: str, start_utc: datetime, end_utc: datetime
    ) -> list[Appointment]:
        """SCHEDULED appointments whose interval overlaps [start_utc, end_utc)."""
        rows = self._fetchall(
            """SELECT * FROM appointments
               WHERE provider_id = ? AND status = 'SCHEDULED'
                 AND start_utc < ? AND end_utc > ?
               ORDER BY start_utc""",
            (provider_id, to_epoch(end_utc), to_epoch(start_utc)),
        )
        return [self._appointment(row) for row in rows]

    def list_customer_appointments(self, customer_id: str) -> list[Appointment]:
        """All appointments of a customer, newest start first."""
        rows = self._fetchall(
            "SELECT * FROM appointments WHERE customer_id = ? ORDER BY start_utc DESC",
            (customer_id,),
        )
        return [self._appointment(row) for row in rows]

    def update_appointment_status(
        self,
        appointment_id: str,
        status: AppointmentStatus,
        expected: AppointmentStatus | None = None,
    ) -> bool:
        """Set an appointment's status.

        Args:
            appointment_id: Appointment to update
            status: New status
            expected: If given, only update when the current status matches

        Returns:
            True if a row was updated
        """
        query = "UPDATE appointments SET status = ? WHERE id = ?"
        params: list = [status.value, appointment_id]

        if expected is not None:
            query += " AND status = ?"
            params.append(expected.value)

        with self.transaction() as conn:
            cursor = conn.execute(query, tuple(params))
        return cursor.rowcount > 0
