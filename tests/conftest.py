"""Pytest configuration and shared fixtures."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from progress_insights.config import Config  # noqa: E402
from progress_insights.domain import (  # noqa: E402
    Activity,
    Goal,
    ProgressEntry,
    TimeSession,
    Todo,
)

# Wednesday
NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture(autouse=True)
def reset_config_singleton():
    """Keep the module-level config from leaking between tests."""
    Config._instance = None
    yield
    Config._instance = None


def make_goal(id="g1", title="Learn Spanish", days_ago=10, target_in=None, completed=False,
              description=None):
    return Goal(
        id=id,
        title=title,
        description=description,
        created_at=NOW - timedelta(days=days_ago),
        target_date=NOW + timedelta(days=target_in) if target_in is not None else None,
        is_completed=completed,
    )


def make_todo(id="t1", title="Task", days_ago=1, completed=False, due_in=None, priority="medium",
              description=None):
    return Todo(
        id=id,
        title=title,
        description=description,
        created_at=NOW - timedelta(days=days_ago),
        due_date=NOW + timedelta(days=due_in) if due_in is not None else None,
        priority=priority,
        is_completed=completed,
    )


def make_activity(id="a1", title="Work"):
    return Activity(id=id, title=title)


def make_session(id="s1", activity_id="a1", hours_ago=2, duration=1000, active=False):
    start = NOW - timedelta(hours=hours_ago)
    return TimeSession(
        id=id,
        activity_id=activity_id,
        start_time=start,
        end_time=None if active else start + timedelta(seconds=duration or 0),
        duration=duration,
        is_active=active,
    )


def make_entry(id="p1", days_ago=0, mood=None, productivity=None, health=None, sleep=None):
    return ProgressEntry(
        id=id,
        entry_date=NOW - timedelta(days=days_ago),
        mood=mood,
        productivity_satisfaction=productivity,
        health_feeling=health,
        sleep_hours=sleep,
    )
