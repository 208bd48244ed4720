"""Pytest fixtures for planner tests."""

from datetime import datetime

import pytest

from planner import Scheduler

# Wednesday
FIXED_NOW = datetime(2024, 2, 7, 12, 30)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def events():
    """Collects every SchedulerEvent the scheduler reports."""
    return []


@pytest.fixture
def scheduler(events):
    """Scheduler with a fixed clock and a collecting reporter."""
    return Scheduler(clock=lambda: FIXED_NOW, reporter=events.append)


@pytest.fixture
def two_people(scheduler):
    """Register a@x.com and b@x.com."""
    return [
        scheduler.create_person("Alice", "a@x.com"),
        scheduler.create_person("Bob", "b@x.com"),
    ]
