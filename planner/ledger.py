"""
Per-person availability ledgers.

Each registered person has one ledger: the set of whole-hour slots they
are booked at, mapped to the meeting holding the slot. Ledgers live in a
LedgerArena keyed by identifier so they can be locked independently of
the Person records that own them.
"""

import logging
import threading
from contextlib import ExitStack, contextmanager
from datetime import datetime
from typing import Iterable, Iterator, Optional

from .exceptions import ConflictError, DuplicateIdentifierError, NotFoundError
from .timeslots import describe_time_slot, to_time_slot

logger = logging.getLogger(__name__)


class AvailabilityLedger:
    """Booked time slots for one person."""

    def __init__(self, owner: str):
        self.owner = owner
        self.lock = threading.Lock()
        # slot -> Meeting (insertion ordered)
        self._bookings: dict[datetime, object] = {}

    def is_free_at(self, time_slot: datetime) -> bool:
        """True iff nothing is booked at this slot."""
        return to_time_slot(time_slot) not in self._bookings

    def book(self, time_slot: datetime, meeting=None) -> None:
        """
        Book a slot.

        Raises:
            ConflictError: If the slot is already booked for this person
        """
        slot = to_time_slot(time_slot)
        if slot in self._bookings:
            raise ConflictError(
                f"Time slot is unavailable for {self.owner} at {describe_time_slot(slot)}"
            )
        self._bookings[slot] = meeting
        logger.debug("Booked %s for %s", slot.isoformat(), self.owner)

    def discard(self, time_slot: datetime) -> None:
        """Drop a booking. Only used to undo a partially committed booking."""
        self._bookings.pop(to_time_slot(time_slot), None)

    def meeting_at(self, time_slot: datetime) -> Optional[object]:
        """Meeting booked at the slot, or None."""
        return self._bookings.get(to_time_slot(time_slot))

    def booked_slots(self) -> list[datetime]:
        """Booked slots in booking order."""
        return list(self._bookings)

    def meetings(self) -> list:
        """Meetings in booking order (slots booked without a meeting are skipped)."""
        return [m for m in self._bookings.values() if m is not None]

    def __contains__(self, time_slot: datetime) -> bool:
        return not self.is_free_at(time_slot)

    def __len__(self) -> int:
        return len(self._bookings)

    def __iter__(self) -> Iterator[datetime]:
        return iter(list(self._bookings))

    def __repr__(self) -> str:
        return f"AvailabilityLedger(owner={self.owner!r}, booked={len(self._bookings)})"


class LedgerArena:
    """All ledgers, indexed by person identifier."""

    def __init__(self):
        self._ledgers: dict[str, AvailabilityLedger] = {}
        self._guard = threading.Lock()

    def create(self, identifier: str) -> AvailabilityLedger:
        """Create the ledger for a newly registered person."""
        with self._guard:
            if identifier in self._ledgers:
                raise DuplicateIdentifierError(
                    f"A ledger already exists for {identifier}"
                )
            ledger = AvailabilityLedger(identifier)
            self._ledgers[identifier] = ledger
            return ledger

    def get(self, identifier: str) -> AvailabilityLedger:
        with self._guard:
            ledger = self._ledgers.get(identifier)
        if ledger is None:
            raise NotFoundError(f"No ledger for {identifier}")
        return ledger

    @contextmanager
    def lock(self, identifiers: Iterable[str]):
        """
        Hold the locks of several ledgers at once.

        Locks are taken in sorted identifier order so two bookings that
        share participants can never deadlock.

        Yields:
            Dict mapping identifier -> ledger for the locked ledgers
        """
        ordered = sorted(set(identifiers))
        ledgers = {identifier: self.get(identifier) for identifier in ordered}
        with ExitStack() as stack:
            for identifier in ordered:
                stack.enter_context(ledgers[identifier].lock)
            yield ledgers

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._ledgers

    def __len__(self) -> int:
        return len(self._ledgers)
