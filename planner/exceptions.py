"""
Error kinds raised by the scheduling core.

A slot that is already taken when booking is NOT an error; see
BookingResult in meetings.py.
"""


class SchedulingError(Exception):
    """Base exception for scheduling errors."""
    pass


class InvalidInputError(SchedulingError, ValueError):
    """Malformed or missing arguments."""
    pass


class DuplicateIdentifierError(SchedulingError):
    """A person with this identifier is already registered."""
    pass


class NotFoundError(SchedulingError, LookupError):
    """No person carries the given identifier."""
    pass


class ConflictError(SchedulingError):
    """A time slot was booked twice for the same person."""
    pass


class NoSlotFoundError(SchedulingError):
    """Suggestion search reached its horizon before collecting enough slots."""

    def __init__(self, message: str, found: list = None, requested: int = 0):
        super().__init__(message)
        self.found = list(found or [])
        self.requested = requested
