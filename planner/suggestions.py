"""
Slot Suggestion Engine

Searches forward in time for whole-hour slots where every participant is
free, constrained by allowed days of the week and allowed hours of the day.

Algorithm:
- First candidate: as_of plus one day, at the FIRST preferred hour as given
  (order matters, it is not the smallest hour)
- Move the candidate forward by whole days until its weekday is allowed
- Accept it if nobody is booked then and it was not already collected
- Otherwise step forward hour by hour to the next allowed hour, possibly
  rolling into the next day
- Stop when `count` slots are collected, or fail with NoSlotFoundError once
  the candidate passes the search horizon
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable

from .directory import Directory
from .enums import Weekday
from .exceptions import InvalidInputError, NoSlotFoundError
from .timeslots import describe_time_slot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Preferences:
    """Allowed days and hours for suggestions."""
    days: tuple  # tuple of Weekday
    hours: tuple  # tuple of int, first entry seeds the search

    @classmethod
    def build(cls, days: Iterable, hours: Iterable) -> "Preferences":
        """
        Validate and normalise a days/hours pair.

        Raises:
            InvalidInputError: Empty days, empty hours, unknown weekday or
                an hour outside 0-23
        """
        days = list(days) if days is not None else []
        hours = list(hours) if hours is not None else []
        if not days:
            raise InvalidInputError("preferred_days must be non-empty")
        if not hours:
            raise InvalidInputError("preferred_hours must be non-empty")

        weekdays = []
        for day in days:
            try:
                weekday = Weekday[day.upper()] if isinstance(day, str) else Weekday(day)
            except (KeyError, ValueError):
                raise InvalidInputError(f"Unknown weekday: {day!r}") from None
            if weekday not in weekdays:
                weekdays.append(weekday)

        ordered_hours = []
        for hour in hours:
            if isinstance(hour, bool) or not isinstance(hour, int) or not 0 <= hour <= 23:
                raise InvalidInputError(f"Preferred hour must be an integer 0-23, got {hour!r}")
            if hour not in ordered_hours:
                ordered_hours.append(hour)

        return cls(days=tuple(weekdays), hours=tuple(ordered_hours))

    def allows(self, slot: datetime) -> bool:
        return slot.weekday() in self.days and slot.hour in self.hours


def initial_candidate(as_of: datetime, first_hour: int) -> datetime:
    """The day after as_of, at first_hour sharp."""
    return (as_of + timedelta(days=1)).replace(
        hour=first_hour, minute=0, second=0, microsecond=0
    )


def align_to_preferred_day(candidate: datetime, days: Iterable[int]) -> datetime:
    """Advance by whole days (hour unchanged) until the weekday is allowed."""
    allowed = set(days)
    while candidate.weekday() not in allowed:
        candidate += timedelta(days=1)
    return candidate


def next_preferred_hour(candidate: datetime, hours: Iterable[int]) -> datetime:
    """Advance at least one hour, stopping at the next allowed hour."""
    allowed = set(hours)
    candidate += timedelta(hours=1)
    while candidate.hour not in allowed:
        candidate += timedelta(hours=1)
    return candidate


def find_free_slots(
    busy: list[set],
    count: int,
    preferences: Preferences,
    as_of: datetime,
    horizon_days: int,
) -> list[datetime]:
    """
    Core search over already-snapshotted bookings.

    Args:
        busy: One set of booked slots per participant
        count: Number of slots wanted
        preferences: Allowed days/hours
        as_of: Search starts the day after this
        horizon_days: Give up once the candidate is this many days past
            the first candidate

    Returns:
        Slots in the order found (chronological)

    Raises:
        NoSlotFoundError: Horizon (or the end of the calendar) reached
            before `count` slots were found
    """
    slots: list[datetime] = []
    collected: set = set()
    try:
        candidate = initial_candidate(as_of, preferences.hours[0])
        # Near datetime.max the horizon is cut short by the calendar itself
        limit = candidate + min(timedelta(days=horizon_days), datetime.max - candidate)
        logger.debug("Checking forward starting at %s", describe_time_slot(candidate))

        while len(slots) < count:
            candidate = align_to_preferred_day(candidate, preferences.days)
            if candidate > limit:
                break

            if candidate not in collected and all(candidate not in booked for booked in busy):
                slots.append(candidate)
                collected.add(candidate)
                logger.debug(
                    "%s is available for all participants (%d / %d)",
                    describe_time_slot(candidate), len(slots), count,
                )
            else:
                candidate = next_preferred_hour(candidate, preferences.hours)
    except OverflowError:
        logger.debug("Search ran past the last representable date")

    if len(slots) < count:
        raise NoSlotFoundError(
            f"Found {len(slots)} of {count} slots within {horizon_days} days",
            found=slots,
            requested=count,
        )
    return slots


def suggest_slots(
    directory: Directory,
    emails: list[str],
    count: int,
    preferred_days: Iterable,
    preferred_hours: Iterable,
    as_of: datetime,
    horizon_days: int,
) -> list[datetime]:
    """
    Suggest `count` slots at which every listed participant is free.

    Raises:
        InvalidInputError: Empty participants, count < 1, empty days or
            hours (each checked in that order), or a missing as_of
        NotFoundError: Any email is not registered
        NoSlotFoundError: Search horizon reached
    """
    if not emails:
        raise InvalidInputError("emails must be non-empty")
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise InvalidInputError("count must be > 0")
    preferences = Preferences.build(preferred_days, preferred_hours)
    if as_of is None:
        raise InvalidInputError("as_of must be provided")

    participants = directory.resolve_all(emails)

    # Copy bookings under the ledger locks so the search never sees a
    # booking that is half committed.
    with directory.ledgers.lock(p.email for p in participants) as ledgers:
        busy = [set(ledger.booked_slots()) for ledger in ledgers.values()]

    logger.debug(
        "Preferred days: %s, preferred hours: %s",
        [d.name for d in preferences.days], list(preferences.hours),
    )
    return find_free_slots(busy, count, preferences, as_of, horizon_days)
