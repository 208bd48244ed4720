"""Root pytest configuration."""

from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load environment variables before tests run
_root = Path(__file__).parent
load_dotenv(_root / ".env")
load_dotenv(_root / ".env.local", override=True)

# Settings read by planner.config; tests must see the built-in defaults
PLANNER_ENV_VARS = (
    "PLANNER_PREFERRED_DAYS",
    "PLANNER_PREFERRED_HOURS",
    "PLANNER_SEARCH_HORIZON_DAYS",
    "PLANNER_LOG_LEVEL",
    "DEV_MODE",
    "SENTRY_DSN",
)


@pytest.fixture(autouse=True)
def clean_planner_env(monkeypatch):
    """Ignore planner overrides from the developer's .env files."""
    for name in PLANNER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
