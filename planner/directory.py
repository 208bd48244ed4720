"""
Directory of registered people, keyed by email.
"""

import logging
import re
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Iterator

from .exceptions import DuplicateIdentifierError, InvalidInputError, NotFoundError
from .ledger import AvailabilityLedger, LedgerArena

logger = logging.getLogger(__name__)

# Anything shaped like local@domain; no deeper email validation
EMAIL_PATTERN = re.compile(r"(.+)@(\S+)")


def is_valid_identifier(identifier) -> bool:
    """Check that an identifier is email-shaped."""
    return isinstance(identifier, str) and bool(EMAIL_PATTERN.fullmatch(identifier))


def validate_identifier(identifier) -> str:
    if identifier is None:
        raise InvalidInputError("Email must be provided")
    if not is_valid_identifier(identifier):
        raise InvalidInputError(f"Invalid email: {identifier!r}")
    return identifier


def validate_name(name) -> str:
    if not isinstance(name, str) or not name:
        raise InvalidInputError("Name must be a non-empty string")
    return name


@dataclass(eq=False)
class Person:
    """A registered person. The email never changes, the name may."""
    name: str
    email: str
    ledger: AvailabilityLedger = field(repr=False)

    def is_free_at(self, time_slot: datetime) -> bool:
        return self.ledger.is_free_at(time_slot)

    def __str__(self) -> str:
        return f"{self.name}|{self.email}"


class Directory:
    """Registered people in registration order."""

    def __init__(self, ledgers: LedgerArena):
        self.ledgers = ledgers
        self._people: list[Person] = []
        self._guard = threading.Lock()

    def register(self, name: str, email: str) -> Person:
        """
        Register a new person with an empty ledger.

        Raises:
            InvalidInputError: Empty name or malformed email
            DuplicateIdentifierError: Email already registered
        """
        validate_name(name)
        validate_identifier(email)

        with self._guard:
            for person in self._people:
                if person.email == email:
                    raise DuplicateIdentifierError(f"Email already in use: {email}")
            person = Person(name=name, email=email, ledger=self.ledgers.create(email))
            self._people.append(person)

        logger.info("Registered %s", person)
        return person

    def resolve(self, email: str) -> Person:
        """
        Look up a person by email.

        Raises:
            InvalidInputError: Malformed email
            NotFoundError: Nobody registered with this email
        """
        validate_identifier(email)
        with self._guard:
            for person in self._people:
                if person.email == email:
                    return person
        raise NotFoundError(f"Email: {email} does not exist")

    def resolve_all(self, emails: Iterable[str]) -> list[Person]:
        """
        Resolve several emails, keeping first-occurrence order.

        Repeated emails resolve to a single Person. Fails on the first
        unknown email, before the caller has changed anything.
        """
        people = []
        seen = set()
        for email in emails:
            person = self.resolve(email)
            if person.email not in seen:
                seen.add(person.email)
                people.append(person)
        return people

    def rename(self, email: str, name: str) -> Person:
        """Change the display name of a registered person."""
        validate_name(name)
        person = self.resolve(email)
        old_name = person.name
        person.name = name
        logger.info("Renamed %s from %r to %r", email, old_name, name)
        return person

    def __contains__(self, email: str) -> bool:
        return any(person.email == email for person in self._people)

    def __len__(self) -> int:
        return len(self._people)

    def __iter__(self) -> Iterator[Person]:
        return iter(list(self._people))
