"""
Scheduler notifications.

The core reports what it did as SchedulerEvent values passed to a sink
callable. The default sink writes them to the "planner.events" logger;
callers can pass their own (a list's append works for tests).
"""

import logging
from dataclasses import dataclass, field
from typing import Callable

from .enums import EventType

logger = logging.getLogger(__name__)

Reporter = Callable[["SchedulerEvent"], None]


@dataclass(frozen=True)
class SchedulerEvent:
    """Something the scheduler did, with a human-readable message."""
    type: EventType
    message: str
    data: dict = field(default_factory=dict)


def log_event(event: SchedulerEvent) -> None:
    """Default reporter: log the event message at INFO."""
    logger.info("[%s] %s", event.type.value, event.message)
