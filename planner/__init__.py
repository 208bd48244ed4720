"""
Meeting planner core - platform-agnostic.
Keeps a registry of people and their meetings and suggests whole-hour
slots where a group is free. Can be driven from main.py or any other
interface.
"""

# Constants
from .constants import DAY_CODES, DAY_NAMES

# Enums
from .enums import Weekday, BookingStatus, EventType

# Errors
from .exceptions import (
    SchedulingError, InvalidInputError, DuplicateIdentifierError,
    NotFoundError, ConflictError, NoSlotFoundError,
)

# Time slots
from .timeslots import (
    to_time_slot, parse_time_slot, coerce_time_slot,
    format_time_slot, describe_time_slot,
)

# Directory and ledgers
from .ledger import AvailabilityLedger, LedgerArena
from .directory import Person, Directory, is_valid_identifier

# Events
from .events import SchedulerEvent, log_event

# Meetings
from .meetings import Meeting, BookingResult, MeetingStore, upcoming_meetings

# Suggestion engine
from .suggestions import (
    Preferences, initial_candidate, align_to_preferred_day,
    next_preferred_hour, find_free_slots, suggest_slots,
)

# Facade
from .scheduler import Scheduler, default_preferences

__all__ = [
    # Constants
    'DAY_CODES', 'DAY_NAMES',
    # Enums
    'Weekday', 'BookingStatus', 'EventType',
    # Errors
    'SchedulingError', 'InvalidInputError', 'DuplicateIdentifierError',
    'NotFoundError', 'ConflictError', 'NoSlotFoundError',
    # Time slots
    'to_time_slot', 'parse_time_slot', 'coerce_time_slot',
    'format_time_slot', 'describe_time_slot',
    # Directory and ledgers
    'AvailabilityLedger', 'LedgerArena', 'Person', 'Directory', 'is_valid_identifier',
    # Events
    'SchedulerEvent', 'log_event',
    # Meetings
    'Meeting', 'BookingResult', 'MeetingStore', 'upcoming_meetings',
    # Suggestion engine
    'Preferences', 'initial_candidate', 'align_to_preferred_day',
    'next_preferred_hour', 'find_free_slots', 'suggest_slots',
    # Facade
    'Scheduler', 'default_preferences',
]
