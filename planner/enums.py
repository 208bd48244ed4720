"""Enum definitions shared across the scheduling core."""

import enum


class Weekday(enum.IntEnum):
    # Values match datetime.weekday()
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


class BookingStatus(str, enum.Enum):
    created = "created"
    unavailable = "unavailable"


class EventType(str, enum.Enum):
    person_registered = "person_registered"
    meeting_created = "meeting_created"
    meeting_rejected = "meeting_rejected"
    slots_suggested = "slots_suggested"
