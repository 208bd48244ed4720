"""
Time slot utilities.

A time slot is a naive datetime truncated to the whole hour. Callers at
the boundary pass slots as "HH-dd-MM-yyyy" text (e.g. "09-21-02-2024"
is 2024-02-21 09:00).
"""

import re
from datetime import datetime

from .constants import DAY_NAMES, TIME_SLOT_FORMAT
from .exceptions import InvalidInputError

# strptime alone accepts single-digit fields, the boundary format does not
_TIME_SLOT_PATTERN = re.compile(r"^\d{2}-\d{2}-\d{2}-\d{4}$")


def to_time_slot(value: datetime) -> datetime:
    """Truncate a datetime to its whole hour."""
    if not isinstance(value, datetime):
        raise InvalidInputError(f"Expected a datetime, got {type(value).__name__}")
    return value.replace(minute=0, second=0, microsecond=0)


def parse_time_slot(text: str) -> datetime:
    """
    Parse "HH-dd-MM-yyyy" into a time slot.

    Args:
        text: Slot string using the 24-hour clock, e.g. "14-01-01-2024"

    Returns:
        datetime at the whole hour, e.g. datetime(2024, 1, 1, 14, 0)

    Raises:
        InvalidInputError: If the text is not a valid slot
    """
    if not isinstance(text, str):
        raise InvalidInputError("Time slot must be a string in HH-dd-MM-yyyy format")
    text = text.strip()
    if not _TIME_SLOT_PATTERN.match(text):
        raise InvalidInputError(f"Time slot {text!r} is not in HH-dd-MM-yyyy format")
    try:
        return datetime.strptime(text, TIME_SLOT_FORMAT)
    except ValueError as e:
        raise InvalidInputError(f"Invalid time slot {text!r}: {e}") from None


def coerce_time_slot(value) -> datetime:
    """Accept either slot text or a datetime and return a time slot."""
    if isinstance(value, str):
        return parse_time_slot(value)
    return to_time_slot(value)


def format_time_slot(slot: datetime) -> str:
    """Format a time slot back into "HH-dd-MM-yyyy"."""
    return slot.strftime(TIME_SLOT_FORMAT)


def describe_time_slot(slot: datetime) -> str:
    """Human-readable slot, e.g. "2024-02-21 09:00 (Wednesday)"."""
    return f"{slot:%Y-%m-%d %H:%M} ({DAY_NAMES[slot.weekday()]})"
