"""Tests for slotbook.scheduling.availability module."""

from types import SimpleNamespace

import pytest

from slotbook.models import InvalidInput
from slotbook.scheduling.availability import (
    candidate_starts,
    is_candidate_start,
    windows_for,
)


class FakeAvailabilityStore:
    """Store stub returning raw availability rows."""

    def __init__(self, rows):
        self.rows = rows

    def list_availability(self, provider_id, weekday):
        return [r for r in self.rows if r.weekday == weekday]


def _row(id, weekday, start, end):
    return SimpleNamespace(id=id, weekday=weekday, start_time=start, end_time=end)


class TestWindowsFor:
    """Tests for windows_for."""

    def test_sorted_and_deduplicated(self):
        """Windows come back sorted by start with duplicates removed."""
        store = FakeAvailabilityStore([
            _row("a", 1, "14:00", "18:00"),
            _row("b", 1, "09:00", "12:00"),
            _row("c", 1, "14:00", "18:00"),
        ])

        assert windows_for(store, "barber", 1) == [(540, 720), (840, 1080)]

    def test_only_requested_weekday(self):
        store = FakeAvailabilityStore([_row("a", 1, "09:00", "12:00"), _row("b", 2, "10:00", "11:00")])

        assert windows_for(store, "barber", 2) == [(600, 660)]

    def test_no_windows(self):
        assert windows_for(FakeAvailabilityStore([]), "barber", 3) == []

    def test_skips_malformed_and_empty(self, caplog):
        """Unparseable and zero-length rows are skipped with a warning."""
        store = FakeAvailabilityStore([
            _row("bad", 1, "9am", "12:00"),
            _row("empty", 1, "12:00", "12:00"),
            _row("ok", 1, "13:00", "15:00"),
        ])

        with caplog.at_level("WARNING"):
            windows = windows_for(store, "barber", 1)

        assert windows == [(780, 900)]
        assert "bad" in caplog.text
        assert "empty" in caplog.text

    def test_overlapping_windows_kept(self):
        """Overlapping windows are unioned as given, not merged."""
        store = FakeAvailabilityStore([_row("a", 1, "09:00", "11:00"), _row("b", 1, "10:00", "12:00")])

        assert windows_for(store, "barber", 1) == [(540, 660), (600, 720)]

    def test_reads_real_store(self, store, provider, monday_window):
        assert windows_for(store, provider.id, 1) == [(540, 720)]


class TestCandidateStarts:
    """Tests for candidate_starts and is_candidate_start."""

    def test_steps_by_duration(self):
        assert list(candidate_starts([(540, 720)], 30)) == [540, 570, 600, 630, 660, 690]

    def test_last_start_must_fit(self):
        """A 45 minute service in a 2 hour window gets two starts, not three."""
        assert list(candidate_starts([(540, 660)], 45)) == [540, 585]

    def test_window_shorter_than_duration(self):
        assert list(candidate_starts([(540, 560)], 30)) == []

    def test_zero_duration_rejected(self):
        with pytest.raises(InvalidInput):
            list(candidate_starts([(540, 720)], 0))

    def test_is_candidate_start(self):
        windows = [(540, 720), (840, 1080)]

        assert is_candidate_start(windows, 540, 30) is True
        assert is_candidate_start(windows, 690, 30) is True
        assert is_candidate_start(windows, 870, 30) is True

    def test_is_not_candidate_start(self):
        windows = [(540, 720)]

        assert is_candidate_start(windows, 555, 30) is False  # misaligned
        assert is_candidate_start(windows, 720, 30) is False  # past the window
        assert is_candidate_start(windows, 510, 30) is False  # before the window

    def test_candidate_start_matches_enumeration(self):
        """Membership agrees with enumeration for every minute of the day."""
        windows = [(540, 660), (600, 735)]
        enumerated = set(candidate_starts(windows, 45))

        for minute in range(0, 1440):
            assert is_candidate_start(windows, minute, 45) == (minute in enumerated)
