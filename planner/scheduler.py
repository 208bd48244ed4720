"""
Scheduler facade.

Composes the directory, the ledgers, the meeting store and the suggestion
engine into the four operations callers use: register a person, book a
meeting, query a schedule and suggest slots. Owns the default preferences
and the injected clock; nothing below this layer reads the time.
"""

import logging
from datetime import datetime
from typing import Callable, Iterable, Optional, Union

from . import config
from .directory import Directory, Person
from .enums import EventType
from .events import Reporter, SchedulerEvent, log_event
from .exceptions import InvalidInputError
from .ledger import LedgerArena
from .meetings import BookingResult, Meeting, MeetingStore, upcoming_meetings
from .suggestions import Preferences, suggest_slots
from .timeslots import coerce_time_slot, describe_time_slot

logger = logging.getLogger(__name__)

TimeSlotInput = Union[str, datetime]


def default_preferences() -> Preferences:
    """Preferences from the environment (Mon-Fri, 9/10/13/14 by default)."""
    return Preferences.build(
        config.get_default_preferred_days(),
        config.get_default_preferred_hours(),
    )


class Scheduler:
    """In-memory registry of people and meetings."""

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        preferences: Optional[Preferences] = None,
        reporter: Optional[Reporter] = None,
        search_horizon_days: Optional[int] = None,
    ):
        self.clock = clock
        self.reporter = reporter or log_event
        self.default_preferences = preferences or default_preferences()
        if search_horizon_days is None:
            search_horizon_days = config.get_search_horizon_days()
        elif isinstance(search_horizon_days, bool) or not isinstance(search_horizon_days, int):
            raise InvalidInputError("search_horizon_days must be an integer")
        elif search_horizon_days < 1:
            raise InvalidInputError("search_horizon_days must be >= 1")
        self.search_horizon_days = search_horizon_days

        self.ledgers = LedgerArena()
        self.directory = Directory(self.ledgers)
        self.meetings = MeetingStore(self.directory, reporter=self.reporter)

    # People

    def create_person(self, name: str, email: str) -> Person:
        person = self.directory.register(name, email)
        self._report(
            EventType.person_registered,
            f"Successfully added new person: {name} {email}",
            email=email,
        )
        return person

    def rename_person(self, email: str, name: str) -> Person:
        return self.directory.rename(email, name)

    def get_person(self, email: str) -> Person:
        return self.directory.resolve(email)

    # Meetings

    def create_meeting(self, time_slot: TimeSlotInput, emails: list[str]) -> BookingResult:
        """
        Book a meeting at a slot for the given participants.

        Returns a BookingResult; an unavailable slot is not an exception.
        """
        if time_slot is None or emails is None:
            raise InvalidInputError("time_slot and emails must be provided")
        return self.meetings.create_meeting(coerce_time_slot(time_slot), emails)

    def is_free_at(self, email: str, time_slot: TimeSlotInput) -> bool:
        return self.directory.resolve(email).is_free_at(coerce_time_slot(time_slot))

    def get_schedule(
        self,
        person: Union[Person, str],
        as_of: Optional[datetime] = None,
    ) -> list[Meeting]:
        """Upcoming meetings (strictly after as_of, default now) for a person or email."""
        return upcoming_meetings(self._to_person(person), self._now(as_of))

    def format_schedule(
        self,
        person: Union[Person, str],
        as_of: Optional[datetime] = None,
    ) -> str:
        person = self._to_person(person)
        lines = [f"## Upcoming meetings for {person} ##"]
        for meeting in self.get_schedule(person, as_of):
            lines.append(meeting.describe())
        return "\n".join(lines)

    # Suggestions

    def suggest_time_slots(
        self,
        emails: list[str],
        count: int = 1,
        preferred_days: Optional[Iterable] = None,
        preferred_hours: Optional[Iterable] = None,
        as_of: Optional[datetime] = None,
    ) -> list[datetime]:
        """
        Suggest `count` slots where every participant is free.

        Days and hours left as None fall back to the default preferences
        (each independently). Passing an empty collection is an error.
        """
        if preferred_days is None:
            preferred_days = self.default_preferences.days
        if preferred_hours is None:
            preferred_hours = self.default_preferences.hours

        slots = suggest_slots(
            self.directory,
            emails,
            count,
            preferred_days,
            preferred_hours,
            as_of=self._now(as_of),
            horizon_days=self.search_horizon_days,
        )
        self._report(
            EventType.slots_suggested,
            f"Suggesting time slots for meeting with participants {list(emails)}: "
            + ", ".join(describe_time_slot(slot) for slot in slots),
            participants=list(emails),
            slots=slots,
        )
        return slots

    # Helpers

    def _to_person(self, person: Union[Person, str]) -> Person:
        if person is None:
            raise InvalidInputError("person must be provided")
        if isinstance(person, Person):
            return person
        return self.directory.resolve(person)

    def _now(self, as_of: Optional[datetime]) -> datetime:
        return as_of if as_of is not None else self.clock()

    def _report(self, event_type: EventType, message: str, **data) -> None:
        self.reporter(SchedulerEvent(type=event_type, message=message, data=data))
