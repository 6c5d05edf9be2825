"""Submit and list room bookings from the terminal.

Usage:
    # Book a room for today
    python -m roombooking.cli book --name Alice --department IT \
        --slot 09:00-10:00 --room CR-101

    # List bookings for a date
    python -m roombooking.cli list --day 2026-03-15

    # Show the room and slot catalog
    python -m roombooking.cli rooms

Uses the same configuration (.env / environment) as the web service.
"""

import argparse
import asyncio
import sys

from roombooking.app import build_recorder
from roombooking.catalog import ROOMS, TIME_SLOTS, room_label
from roombooking.ledger.base import StorageError
from roombooking.models.booking import BookingCandidate
from roombooking.status import status_line
from roombooking.validation import BookingValidationError, parse_day


async def book(args: argparse.Namespace) -> int:
    recorder = build_recorder()
    candidate = BookingCandidate(
        name=args.name,
        department=args.department,
        day_to_use=args.day or recorder.form_defaults()["dayToUse"],
        time_slot=args.slot,
        room_id=args.room,
    )
    try:
        result = await recorder.submit(candidate)
    except (BookingValidationError, StorageError) as e:
        print(status_line(e), file=sys.stderr)
        return 1
    finally:
        await recorder.close()

    b = result.booking
    print(f"#{b.seq} {room_label(b.room_id)} • {b.time_slot} on {b.day_to_use}")
    print(status_line(result))
    return 0


async def list_bookings(args: argparse.Namespace) -> int:
    day = None
    if args.day:
        day = parse_day(args.day)
        if day is None:
            print(f"Invalid date {args.day!r}. Use YYYY-MM-DD.", file=sys.stderr)
            return 1

    recorder = build_recorder()
    try:
        bookings = await recorder.list_bookings(day)
    except StorageError as e:
        print(str(e), file=sys.stderr)
        return 1
    finally:
        await recorder.close()

    if not bookings:
        print("No bookings yet.")
        return 0
    for b in bookings:
        print(
            f"#{b.seq:<4} {b.day_to_use}  {b.time_slot}  {room_label(b.room_id):<22} "
            f"{b.name} ({b.department})  {b.created_at.strftime('%H:%M:%S')}"
        )
    return 0


def show_catalog() -> int:
    print("Rooms:")
    for room in ROOMS:
        print(f"  {room.id:<8} {room.label}")
    print("Time slots:")
    for slot in TIME_SLOTS:
        print(f"  {slot}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Conference room booking ledger",
        prog="python -m roombooking.cli",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_book = sub.add_parser("book", help="Submit a booking")
    p_book.add_argument("--name", required=True)
    p_book.add_argument("--department", required=True)
    p_book.add_argument("--day", help="YYYY-MM-DD (default: today)")
    p_book.add_argument("--slot", default=TIME_SLOTS[0], choices=TIME_SLOTS)
    p_book.add_argument("--room", default=ROOMS[0].id, choices=[r.id for r in ROOMS])

    p_list = sub.add_parser("list", help="List recorded bookings")
    p_list.add_argument("--day", help="Only bookings for this YYYY-MM-DD")

    sub.add_parser("rooms", help="Show rooms and time slots")

    args = parser.parse_args(argv)
    if args.command == "book":
        return asyncio.run(book(args))
    if args.command == "list":
        return asyncio.run(list_bookings(args))
    return show_catalog()


if __name__ == "__main__":
    sys.exit(main())
