"""
Meeting store and booking.

Booking is all-or-nothing: either every participant's ledger gets the
slot and the meeting is stored, or nothing changes. A participant who is
already busy is a normal outcome, reported through BookingResult rather
than raised.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, Optional

import sentry_sdk

from .directory import Directory, Person
from .enums import BookingStatus, EventType
from .events import Reporter, SchedulerEvent, log_event
from .exceptions import ConflictError, InvalidInputError
from .timeslots import describe_time_slot, to_time_slot

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Meeting:
    """A booked slot and the people attending it."""
    time_slot: datetime
    participants: list  # list of Person, not owned

    def __post_init__(self):
        if not self.participants:
            raise InvalidInputError("Meeting must have at least 1 participant")

    def add_participant(self, person: Person) -> None:
        """
        Add a person to an existing meeting.

        The meeting's slot is booked in the person's ledger first, so a
        busy person raises ConflictError and the meeting is unchanged.
        Adding someone already attending is a no-op.
        """
        if any(p is person for p in self.participants):
            return
        with person.ledger.lock:
            person.ledger.book(self.time_slot, self)
            self.participants.append(person)
        logger.info("Added %s to meeting at %s", person, self.time_slot.isoformat())

    def describe(self) -> str:
        """Multi-line description: slot, then one name|email line per participant."""
        lines = [f"Meeting at {describe_time_slot(self.time_slot)}", "    Participants:"]
        for person in self.participants:
            lines.append(f"    {person}")
        return "\n".join(lines)


@dataclass
class BookingResult:
    """Outcome of create_meeting. Falsy when the slot was unavailable."""
    status: BookingStatus
    time_slot: datetime
    meeting: Optional[Meeting] = None
    unavailable: list = field(default_factory=list)  # list of Person

    @property
    def created(self) -> bool:
        return self.status == BookingStatus.created

    def __bool__(self) -> bool:
        return self.created


class MeetingStore:
    """All created meetings, in creation order."""

    def __init__(self, directory: Directory, reporter: Reporter = None):
        self.directory = directory
        self.reporter = reporter or log_event
        self._meetings: list[Meeting] = []
        self._guard = threading.Lock()

    def create_meeting(self, time_slot: datetime, emails: list[str]) -> BookingResult:
        """
        Book a meeting for every listed participant at one slot.

        Args:
            time_slot: Slot to book (truncated to the hour)
            emails: Participant emails; repeats are collapsed

        Returns:
            BookingResult with status "created" and the new meeting, or
            status "unavailable" and the busy participants

        Raises:
            InvalidInputError: No participants
            NotFoundError: Any email is not registered
        """
        if time_slot is None or emails is None:
            raise InvalidInputError("time_slot and emails must be provided")
        if not emails:
            raise InvalidInputError("Meeting must have at least 1 participant")
        slot = to_time_slot(time_slot)
        participants = self.directory.resolve_all(emails)

        # Reporters may call back into the scheduler, so events are only
        # emitted once the ledger locks are released.
        with self.directory.ledgers.lock(p.email for p in participants):
            busy = [p for p in participants if not p.is_free_at(slot)]
            if not busy:
                meeting = Meeting(time_slot=slot, participants=list(participants))
                self._commit(meeting)

        if busy:
            logger.info(
                "Rejected meeting at %s: %d of %d participants busy",
                slot.isoformat(), len(busy), len(participants),
            )
            self._report(
                EventType.meeting_rejected,
                f"Attempted meeting at {describe_time_slot(slot)} - "
                "some participants not available at time slot",
                time_slot=slot,
                unavailable=[p.email for p in busy],
            )
            return BookingResult(
                status=BookingStatus.unavailable,
                time_slot=slot,
                unavailable=busy,
            )

        self._report(
            EventType.meeting_created,
            f"Created new meeting.\n{meeting.describe()}",
            time_slot=slot,
            participants=[p.email for p in participants],
        )
        return BookingResult(status=BookingStatus.created, time_slot=slot, meeting=meeting)

    def _commit(self, meeting: Meeting) -> None:
        """Book every ledger then store the meeting. Caller holds the ledger locks."""
        booked = []
        try:
            for person in meeting.participants:
                person.ledger.book(meeting.time_slot, meeting)
                booked.append(person)
        except ConflictError as e:
            # Availability was checked under the same locks; reaching this
            # means a ledger was written without holding its lock.
            for person in booked:
                person.ledger.discard(meeting.time_slot)
            logger.error("Ledger conflict while committing meeting: %s", e)
            sentry_sdk.capture_exception(e)
            raise

        with self._guard:
            self._meetings.append(meeting)
        logger.info(
            "Booked meeting at %s for %d participants",
            meeting.time_slot.isoformat(), len(meeting.participants),
        )

    def _report(self, event_type: EventType, message: str, **data) -> None:
        self.reporter(SchedulerEvent(type=event_type, message=message, data=data))

    def __len__(self) -> int:
        return len(self._meetings)

    def __iter__(self) -> Iterator[Meeting]:
        return iter(list(self._meetings))


def upcoming_meetings(person: Person, as_of: datetime) -> list[Meeting]:
    """
    Meetings on the person's ledger strictly after as_of.

    Returned in booking order. as_of is supplied by the caller; this
    function never reads the clock.
    """
    if as_of is None:
        raise InvalidInputError("as_of must be provided")
    return [m for m in person.ledger.meetings() if m.time_slot > as_of]
