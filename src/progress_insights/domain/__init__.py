"""Domain models for the progress insights engine."""

from .records import (
    Goal,
    Todo,
    Priority,
    Activity,
    TimeSession,
    LoggedActivity,
    ProgressEntry,
    Note,
    UserSnapshot,
)
from .wellbeing import (
    WellbeingScale,
    WellbeingDimension,
    MoodLevel,
    ProductivityLevel,
    HealthLevel,
    get_emoticon_score,
    NEUTRAL_SCORE,
)

__all__ = [
    "Goal",
    "Todo",
    "Priority",
    "Activity",
    "TimeSession",
    "LoggedActivity",
    "ProgressEntry",
    "Note",
    "UserSnapshot",
    "WellbeingScale",
    "WellbeingDimension",
    "MoodLevel",
    "ProductivityLevel",
    "HealthLevel",
    "get_emoticon_score",
    "NEUTRAL_SCORE",
]
