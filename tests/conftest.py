"""Pytest configuration and shared fixtures."""

import sys
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from taskboard.config import Config, ConfigModel  # noqa: E402
from taskboard.task import Task  # noqa: E402
from taskboard.utils.datetime import FixedClock  # noqa: E402


@pytest.fixture(autouse=True)
def default_config(tmp_path):
    """Every test runs against the default configuration, never the user's file."""
    Config._instance = ConfigModel(data_dir=str(tmp_path / "taskboard"))
    yield Config._instance
    Config.reset()


@pytest.fixture
def today():
    return date(2025, 3, 12)  # a Wednesday


@pytest.fixture
def clock():
    """Clock pinned to 2025-03-12 15:00 UTC."""
    return FixedClock(datetime(2025, 3, 12, 15, 0, tzinfo=timezone.utc))


@pytest.fixture
def make_task():
    """Factory for tasks with sensible timestamps."""
    counter = {"n": 0}

    def _make(
        title=None,
        completed=False,
        due=None,
        priority="MEDIUM",
        category_id=None,
        created="2025-03-01T09:00:00+00:00",
        updated=None,
    ):
        counter["n"] += 1
        created_at = datetime.fromisoformat(created)
        updated_at = datetime.fromisoformat(updated) if updated else created_at
        return Task(
            id=f"t{counter['n']}",
            title=title or f"Task {counter['n']}",
            completed=completed,
            priority=priority,
            due_date=due,
            category_id=category_id,
            created_at=created_at,
            updated_at=updated_at,
        )

    return _make
