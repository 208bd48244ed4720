"""
Command line entry point for the meeting planner.

Subcommands:
- demo: register ten people, book a set of meetings and print suggestions
- suggest: suggest free slots for people booked from the command line
- parse: check a "HH-dd-MM-yyyy" slot string

Run with: python main.py demo [--now 08-20-02-2024]
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

# Load .env.local first (if exists), then .env as fallback
project_root = Path(__file__).parent
load_dotenv(project_root / ".env.local")
load_dotenv()

import sentry_sdk

from planner import (
    SchedulingError,
    Scheduler,
    config,
    describe_time_slot,
    parse_time_slot,
)

logger = logging.getLogger(__name__)

DEMO_PEOPLE = [(f"Test{i}", f"test{i}@person.com") for i in range(10)]

GROUP_0_1 = ["test0@person.com", "test1@person.com"]
GROUP_2_3_4 = ["test2@person.com", "test3@person.com", "test4@person.com"]
GROUP_0_2 = ["test0@person.com", "test2@person.com"]
GROUP_0_TO_4 = GROUP_0_1 + GROUP_2_3_4

DEMO_BOOKINGS = [
    ("09-21-02-2024", GROUP_0_1),
    ("09-21-02-2024", GROUP_2_3_4),
    ("10-21-02-2024", GROUP_0_2),
    ("13-21-02-2024", GROUP_0_2),
    ("14-21-02-2024", GROUP_0_2),
]

DEMO_LATER_BOOKINGS = [
    ("09-14-02-2024", GROUP_2_3_4),
    ("10-14-02-2024", GROUP_2_3_4),
    ("13-14-02-2024", GROUP_2_3_4),
    ("14-14-02-2024", GROUP_2_3_4),
    ("09-15-02-2024", GROUP_2_3_4),
    ("10-14-02-2024", GROUP_2_3_4),  # duplicate, rejected as unavailable
    ("10-15-02-2024", GROUP_2_3_4),
    ("13-15-02-2024", GROUP_2_3_4),
    ("14-15-02-2024", GROUP_2_3_4),
]


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, config.get_log_level(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def init_sentry() -> None:
    """Enable Sentry error reporting when SENTRY_DSN is set."""
    dsn = config.get_sentry_dsn()
    if dsn:
        sentry_sdk.init(dsn=dsn)
        logger.info("Sentry error reporting enabled")


def make_clock(now: str | None):
    """Fixed clock from a slot string, or the system clock."""
    if now:
        fixed = parse_time_slot(now)
        return lambda: fixed
    return datetime.now


def run_demo(scheduler: Scheduler) -> None:
    for name, email in DEMO_PEOPLE:
        scheduler.create_person(name, email)

    for slot, emails in DEMO_BOOKINGS:
        scheduler.create_meeting(slot, emails)
    print(scheduler.format_schedule("test0@person.com"))

    scheduler.suggest_time_slots(GROUP_0_TO_4, 10)

    for slot, emails in DEMO_LATER_BOOKINGS:
        scheduler.create_meeting(slot, emails)
    scheduler.suggest_time_slots(GROUP_0_2, 5)

    # Same inputs as the defaults, through each form
    scheduler.suggest_time_slots(GROUP_0_2)
    scheduler.suggest_time_slots(GROUP_0_2, 5)
    scheduler.suggest_time_slots(
        GROUP_0_2, 5,
        preferred_days=["MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY"],
        preferred_hours=[9, 10, 13, 14],
    )


def run_suggest(scheduler: Scheduler, args: argparse.Namespace) -> None:
    for email in args.emails:
        scheduler.create_person(email.split("@")[0], email)
    for booking in args.book or []:
        slot, _, email = booking.partition(":")
        scheduler.create_meeting(slot, [email])

    days = config.parse_day_codes(args.days) if args.days else None
    hours = config.parse_hours(args.hours) if args.hours else None
    slots = scheduler.suggest_time_slots(args.emails, args.count, days, hours)
    for slot in slots:
        print(describe_time_slot(slot))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Meeting planner")
    parser.add_argument(
        "--now",
        help="Fixed current time as HH-dd-MM-yyyy (default: system clock)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("demo", help="Run the demonstration scenario")

    suggest_parser = subparsers.add_parser("suggest", help="Suggest free slots")
    suggest_parser.add_argument("emails", nargs="+", help="Participant emails")
    suggest_parser.add_argument("--count", type=int, default=1)
    suggest_parser.add_argument("--days", help="Day codes, e.g. MTWRF")
    suggest_parser.add_argument("--hours", help="Hours, e.g. 9,10,13,14")
    suggest_parser.add_argument(
        "--book",
        action="append",
        help="Existing booking as SLOT:EMAIL (repeatable)",
    )

    parse_parser = subparsers.add_parser("parse", help="Parse a HH-dd-MM-yyyy slot")
    parse_parser.add_argument("slot")

    args = parser.parse_args(argv)

    configure_logging()
    init_sentry()

    try:
        if args.command == "parse":
            print(describe_time_slot(parse_time_slot(args.slot)))
            return 0

        scheduler = Scheduler(clock=make_clock(args.now))
        if args.command == "demo":
            run_demo(scheduler)
        else:
            run_suggest(scheduler, args)
    except SchedulingError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
