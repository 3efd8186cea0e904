"""Tests for slotbook.cli module."""

import sys

import pytest

from slotbook.cli import create_parser, main
from slotbook.storage import BookingStore
from tests.conftest import NOW, SEED_YAML


@pytest.fixture
def frozen_clock(monkeypatch):
    """Freeze the system clock used by the CLI's resolver."""
    monkeypatch.setattr("slotbook.local_time.utc_now", lambda: NOW)


@pytest.fixture
def seeded_db(tmp_path, frozen_clock):
    """Database file loaded from the sample seed."""
    seed_path = tmp_path / "seed.yaml"
    seed_path.write_text(SEED_YAML)
    db_path = str(tmp_path / "cli.db")

    _run(["seed", str(seed_path), "--db", db_path])
    return db_path


def _run(argv):
    parser = create_parser()
    args = parser.parse_args(argv)
    args.func(args)


class TestParser:
    """Tests for create_parser."""

    def test_slots_args(self):
        args = create_parser().parse_args(
            ["slots", "-p", "barber-1", "-s", "haircut", "-d", "2026-10-19", "--db", "x.db"]
        )

        assert args.provider == "barber-1"
        assert args.service == "haircut"
        assert args.date == "2026-10-19"
        assert args.db == "x.db"
        assert args.utc_offset is None

    def test_utc_offset(self):
        args = create_parser().parse_args(
            ["agenda", "-p", "barber-1", "-d", "2026-10-19", "--utc-offset", "-180"]
        )

        assert args.utc_offset == -180

    def test_book_requires_start(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["book", "-p", "barber-1", "-c", "alice", "-s", "haircut"])

    def test_no_command_prints_help(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["slotbook"])

        main()

        assert "usage" in capsys.readouterr().out.lower()


class TestCommands:
    """Tests for cmd_* functions against a seeded database file."""

    def test_seed_output(self, tmp_path, capsys):
        """Seeding should print per-section counts."""
        seed_path = tmp_path / "seed.yaml"
        seed_path.write_text(SEED_YAML)

        _run(["seed", str(seed_path), "--db", str(tmp_path / "out.db")])

        out = capsys.readouterr().out

        assert "🌱 Seeded" in out
        assert "availability: 2" in out

    def test_seed_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            _run(["seed", str(tmp_path / "nope.yaml"), "--db", str(tmp_path / "x.db")])

        assert exc_info.value.code == 1
        assert "❌" in capsys.readouterr().out

    def test_slots(self, seeded_db, capsys):
        capsys.readouterr()

        _run(["slots", "-p", "barber-1", "-s", "haircut", "-d", "2026-10-19", "--db", seeded_db, "--utc-offset", "-180"])

        out = capsys.readouterr().out
        assert "13 slots on 2026-10-19" in out
        assert "09:00" in out
        assert "10:00  (" not in out

    def test_slots_unknown_provider(self, seeded_db, capsys):
        capsys.readouterr()

        with pytest.raises(SystemExit) as exc_info:
            _run(["slots", "-p", "ghost", "-s", "haircut", "-d", "2026-10-19", "--db", seeded_db])

        assert exc_info.value.code == 1
        assert "❌ not_found" in capsys.readouterr().out

    def test_book_and_conflict(self, seeded_db, capsys):
        argv = [
            "book", "-p", "barber-1", "-c", "alice", "-s", "haircut",
            "--start", "2026-10-19T12:00:00+00:00", "--db", seeded_db,
        ]
        _run(argv)
        assert "✅ Booked" in capsys.readouterr().out

        with pytest.raises(SystemExit):
            _run(argv)
        assert "❌ slot_conflict" in capsys.readouterr().out

    def test_book_naive_start(self, seeded_db, capsys):
        with pytest.raises(SystemExit):
            _run([
                "book", "-p", "barber-1", "-c", "alice", "-s", "haircut",
                "--start", "2026-10-19T12:00:00", "--db", seeded_db,
            ])

        assert "❌ invalid_input" in capsys.readouterr().out

    def test_cancel_and_agenda(self, seeded_db, capsys):
        _run([
            "book", "-p", "barber-1", "-c", "alice", "-s", "haircut",
            "--start", "2026-10-19T12:30:00+00:00", "--db", seeded_db,
        ])
        store = BookingStore(seeded_db)
        (appt,) = store.list_customer_appointments("alice")
        store.close()

        _run(["agenda", "-p", "barber-1", "-d", "2026-10-19", "--db", seeded_db])
        assert "1 appointments on 2026-10-19" in capsys.readouterr().out

        with pytest.raises(SystemExit):
            _run(["cancel", "-a", appt.id, "-r", "mallory", "--db", seeded_db])
        assert "❌ forbidden" in capsys.readouterr().out

        _run(["cancel", "-a", appt.id, "-r", "alice", "--db", seeded_db])
        assert f"✅ Cancelled {appt.id}" in capsys.readouterr().out

        _run(["agenda", "-p", "barber-1", "-d", "2026-10-19", "--db", seeded_db])
        assert "0 appointments" in capsys.readouterr().out

    def test_utc_offset_out_of_range(self, seeded_db, capsys):
        """An impossible offset should be reported, not raised."""
        capsys.readouterr()

        with pytest.raises(SystemExit) as exc_info:
            _run([
                "slots", "-p", "barber-1", "-s", "haircut", "-d", "2026-10-19",
                "--db", seeded_db, "--utc-offset", "1440",
            ])

        assert exc_info.value.code == 1
        assert "❌ invalid_input" in capsys.readouterr().out
