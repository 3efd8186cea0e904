"""slotbook CLI - Command-line interface for the booking engine.

Usage:
    slotbook seed schedule.yaml
    slotbook slots --provider barber-1 --service haircut --date 2026-10-19
    slotbook book --provider barber-1 --customer alice --service haircut \\
        --start 2026-10-19T12:00:00+00:00
    slotbook cancel --appointment appt_1a2b3c4d --requester alice
    slotbook agenda --provider barber-1 --date 2026-10-19
"""

import argparse
import logging

from slotbook.cli.commands import (
    cmd_agenda,
    cmd_book,
    cmd_cancel,
    cmd_seed,
    cmd_slots,
)
from slotbook.config import DATABASE_PATH, LOG_LEVEL

__all__ = [
    "main",
    "create_parser",
]


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the CLI argument parser.

    Returns:
        Configured ArgumentParser for testing and main().
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--db", default=DATABASE_PATH, help="SQLite database path"
    )
    common.add_argument(
        "--utc-offset",
        type=int,
        default=None,
        help="Local time offset from UTC in minutes (default: configured)",
    )

    parser = argparse.ArgumentParser(
        description="slotbook - appointment availability and booking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Seed command
    seed_parser = subparsers.add_parser(
        "seed", parents=[common], help="Load schedule data from YAML"
    )
    seed_parser.add_argument("seed_path", help="Path to seed YAML file")
    seed_parser.set_defaults(func=cmd_seed)

    # Slots command
    slots_parser = subparsers.add_parser(
        "slots", parents=[common], help="List bookable slots for a day"
    )
    slots_parser.add_argument("--provider", "-p", required=True, help="Provider ID")
    slots_parser.add_argument("--service", "-s", required=True, help="Service ID")
    slots_parser.add_argument("--date", "-d", required=True, help="Local date YYYY-MM-DD")
    slots_parser.set_defaults(func=cmd_slots)

    # Book command
    book_parser = subparsers.add_parser(
        "book", parents=[common], help="Book a slot"
    )
    book_parser.add_argument("--provider", "-p", required=True, help="Provider ID")
    book_parser.add_argument("--customer", "-c", required=True, help="Customer ID")
    book_parser.add_argument("--service", "-s", required=True, help="Service ID")
    book_parser.add_argument(
        "--start", required=True, help="Start instant, ISO 8601 with offset"
    )
    book_parser.add_argument("--notes", "-n", default=None, help="Booking notes")
    book_parser.set_defaults(func=cmd_book)

    # Cancel command
    cancel_parser = subparsers.add_parser(
        "cancel", parents=[common], help="Cancel an appointment"
    )
    cancel_parser.add_argument(
        "--appointment", "-a", required=True, help="Appointment ID"
    )
    cancel_parser.add_argument(
        "--requester", "-r", required=True, help="Customer or provider ID"
    )
    cancel_parser.set_defaults(func=cmd_cancel)

    # Agenda command
    agenda_parser = subparsers.add_parser(
        "agenda", parents=[common], help="Show a provider's appointments for a day"
    )
    agenda_parser.add_argument("--provider", "-p", required=True, help="Provider ID")
    agenda_parser.add_argument("--date", "-d", required=True, help="Local date YYYY-MM-DD")
    agenda_parser.set_defaults(func=cmd_agenda)

    return parser


def main():
    """Main CLI entry point."""
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    args.func(args)


if __name__ == "__main__":
    main()
