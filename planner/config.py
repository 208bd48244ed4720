"""
Centralized configuration for the meeting planner.

Values come from the environment (main.py and conftest.py load .env and
.env.local through python-dotenv first). Nothing is read at import time.
"""

import os

from .constants import (
    DAY_CODE_TO_WEEKDAY,
    DEFAULT_PREFERRED_DAYS,
    DEFAULT_PREFERRED_HOURS,
    DEFAULT_SEARCH_HORIZON_DAYS,
)
from .enums import Weekday
from .exceptions import InvalidInputError


def is_dev_mode() -> bool:
    """Check if running in development mode (DEV_MODE env)."""
    return os.getenv("DEV_MODE", "").lower() in ("true", "1", "yes")


def get_log_level() -> str:
    """Get log level name for the CLI, DEBUG in dev mode."""
    if is_dev_mode():
        return "DEBUG"
    return os.getenv("PLANNER_LOG_LEVEL", "INFO").upper()


def get_sentry_dsn() -> str | None:
    """Sentry DSN, or None when error reporting is disabled."""
    return os.getenv("SENTRY_DSN") or None


def parse_day_codes(value: str) -> tuple[Weekday, ...]:
    """
    Parse a string of day codes into weekdays.

    Args:
        value: Day codes like "MTWRF" (commas and spaces are ignored)

    Returns:
        Tuple of Weekday values in the order given, without repeats
    """
    days = []
    for code in value.replace(",", "").replace(" ", "").upper():
        if code not in DAY_CODE_TO_WEEKDAY:
            raise InvalidInputError(f"Unknown day code: {code!r}")
        day = DAY_CODE_TO_WEEKDAY[code]
        if day not in days:
            days.append(day)
    return tuple(days)


def parse_hours(value: str) -> tuple[int, ...]:
    """
    Parse a comma separated hour list like "9,10,13,14".

    Order is kept: the first hour seeds the suggestion search.
    """
    hours = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            hour = int(part)
        except ValueError:
            raise InvalidInputError(f"Invalid hour: {part!r}") from None
        if hour not in hours:
            hours.append(hour)
    return tuple(hours)


def get_default_preferred_days() -> tuple[Weekday, ...]:
    """Default allowed days for suggestions (Mon-Fri unless overridden)."""
    value = os.getenv("PLANNER_PREFERRED_DAYS", DEFAULT_PREFERRED_DAYS)
    try:
        return parse_day_codes(value)
    except InvalidInputError as e:
        raise InvalidInputError(f"PLANNER_PREFERRED_DAYS: {e}") from None


def get_default_preferred_hours() -> tuple[int, ...]:
    """Default allowed hours for suggestions (9, 10, 13, 14 unless overridden)."""
    value = os.getenv("PLANNER_PREFERRED_HOURS", DEFAULT_PREFERRED_HOURS)
    try:
        return parse_hours(value)
    except InvalidInputError as e:
        raise InvalidInputError(f"PLANNER_PREFERRED_HOURS: {e}") from None


def get_search_horizon_days() -> int:
    """How many days past the first candidate the suggestion search may look."""
    value = os.getenv("PLANNER_SEARCH_HORIZON_DAYS", str(DEFAULT_SEARCH_HORIZON_DAYS))
    try:
        days = int(value)
    except ValueError:
        raise InvalidInputError(
            f"PLANNER_SEARCH_HORIZON_DAYS must be an integer, got {value!r}"
        ) from None
    if days < 1:
        raise InvalidInputError("PLANNER_SEARCH_HORIZON_DAYS must be >= 1")
    return days
