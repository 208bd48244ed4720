"""
Shared constants used across the scheduling core.
"""

from .enums import Weekday

# Day codes mapping for compact display and config values
DAY_CODES = {
    "Monday": "M",
    "Tuesday": "T",
    "Wednesday": "W",
    "Thursday": "R",
    "Friday": "F",
    "Saturday": "S",
    "Sunday": "U",
}

# Day name list for ordering (index == Weekday value)
DAY_NAMES = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]

# Reverse mapping: day code -> Weekday
DAY_CODE_TO_WEEKDAY = {
    code: Weekday(DAY_NAMES.index(name)) for name, code in DAY_CODES.items()
}

# Default preferences used when the caller supplies none
DEFAULT_PREFERRED_DAYS = "MTWRF"
DEFAULT_PREFERRED_HOURS = "9,10,13,14"

# Suggestion search bound, in days past the first candidate
DEFAULT_SEARCH_HORIZON_DAYS = 365

# Boundary text format for time slots: 24-hour hour, day, month, year
TIME_SLOT_FORMAT = "%H-%d-%m-%Y"
