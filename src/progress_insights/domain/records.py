"""Tracker record models consumed by the analytics engine.

These mirror what the tracker persists for one user: goals, todos,
activities with their timed sessions, daily progress journal entries and
notes. The analytics engine only ever reads them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ..utils.datetime import ensure_aware
from ..utils.validation import RecordValidator
from .wellbeing import HealthLevel, MoodLevel, ProductivityLevel


class Priority(Enum):
    """Todo priority levels."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "Priority":
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.MEDIUM


@dataclass
class Goal:
    """A long-running goal with optional target date."""
    id: str
    title: str
    created_at: datetime
    description: Optional[str] = None
    target_date: Optional[datetime] = None
    progress: int = 0
    max_progress: int = 100
    is_completed: bool = False
    tags: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.created_at = ensure_aware(self.created_at)
        self.target_date = ensure_aware(self.target_date)

    @property
    def progress_ratio(self) -> float:
        """Share of ``max_progress`` reached, 0.0 when no maximum is set."""
        if self.max_progress <= 0:
            return 0.0
        return self.progress / self.max_progress

    @classmethod
    def from_dict(cls, data: Dict[str, Any], strict: bool = False) -> "Goal":
        reader = RecordValidator("goal", data, strict)
        return cls(
            id=reader.string("id", required=True),
            title=reader.string("title", required=True),
            created_at=reader.timestamp("created_at", required=True),
            description=reader.string("description"),
            target_date=reader.timestamp("target_date"),
            progress=reader.integer("progress", default=0),
            max_progress=reader.integer("max_progress", default=100),
            is_completed=reader.boolean("is_completed"),
            tags=reader.string_list("tags"),
        )


@dataclass
class Todo:
    """A single task.

    The tracker does not record when a todo was completed. ``completed_at``
    is honoured when an export provides it; otherwise the creation time
    stands in for the completion time.
    """
    id: str
    title: str
    created_at: datetime
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Priority = Priority.MEDIUM
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    tags: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.created_at = ensure_aware(self.created_at)
        self.due_date = ensure_aware(self.due_date)
        self.completed_at = ensure_aware(self.completed_at)
        if not isinstance(self.priority, Priority):
            self.priority = Priority.parse(self.priority)

    @property
    def completion_date(self) -> Optional[datetime]:
        """Best known completion time, None for open todos."""
        if not self.is_completed:
            return None
        return self.completed_at or self.created_at

    def is_overdue(self, now: datetime) -> bool:
        return not self.is_completed and self.due_date is not None and self.due_date < now

    @classmethod
    def from_dict(cls, data: Dict[str, Any], strict: bool = False) -> "Todo":
        reader = RecordValidator("todo", data, strict)
        return cls(
            id=reader.string("id", required=True),
            title=reader.string("title", required=True),
            created_at=reader.timestamp("created_at", required=True),
            description=reader.string("description"),
            due_date=reader.timestamp("due_date"),
            priority=Priority.parse(reader.raw("priority", "medium")),
            is_completed=reader.boolean("is_completed"),
            completed_at=reader.timestamp("completed_at"),
            tags=reader.string_list("tags"),
        )


@dataclass
class Activity:
    """A label that time sessions are tracked against."""
    id: str
    title: str
    description: Optional[str] = None
    hours_per_week: Optional[int] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        self.created_at = ensure_aware(self.created_at)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], strict: bool = False) -> "Activity":
        reader = RecordValidator("activity", data, strict)
        return cls(
            id=reader.string("id", required=True),
            title=reader.string("title", required=True),
            description=reader.string("description"),
            hours_per_week=reader.integer("hours_per_week"),
            created_at=reader.timestamp("created_at"),
        )


@dataclass
class TimeSession:
    """A timed work session on an activity. Duration is in seconds."""
    id: str
    activity_id: str
    start_time: datetime
    end_time: Optional[datetime] = None
    duration: Optional[int] = None
    description: Optional[str] = None
    is_active: bool = False

    def __post_init__(self):
        self.start_time = ensure_aware(self.start_time)
        self.end_time = ensure_aware(self.end_time)

    @property
    def is_completed(self) -> bool:
        """Stopped sessions with a recorded, non-zero duration."""
        return not self.is_active and bool(self.duration)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], strict: bool = False) -> "TimeSession":
        reader = RecordValidator("time session", data, strict)
        return cls(
            id=reader.string("id", required=True),
            activity_id=reader.string("activity_id", required=True),
            start_time=reader.timestamp("start_time", required=True),
            end_time=reader.timestamp("end_time"),
            duration=reader.integer("duration"),
            description=reader.string("description"),
            is_active=reader.boolean("is_active"),
        )


@dataclass
class LoggedActivity:
    """Time the user reported spending on something in a journal entry."""
    activity: str
    hours: int = 0
    minutes: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any], strict: bool = False) -> "LoggedActivity":
        reader = RecordValidator("logged activity", data, strict)
        return cls(
            activity=reader.string("activity", required=True),
            hours=reader.integer("hours", default=0),
            minutes=reader.integer("minutes", default=0),
        )


@dataclass
class ProgressEntry:
    """A daily journal entry with optional wellbeing ratings."""
    id: str
    entry_date: datetime
    activities: List[LoggedActivity] = field(default_factory=list)
    journal_entry: Optional[str] = None
    sleep_hours: Optional[float] = None
    mood: Optional[str] = None
    health_feeling: Optional[str] = None
    productivity_satisfaction: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        self.entry_date = ensure_aware(self.entry_date)
        self.created_at = ensure_aware(self.created_at)

    @property
    def mood_level(self) -> Optional[MoodLevel]:
        return MoodLevel.parse(self.mood) if self.mood else None

    @property
    def productivity_level(self) -> Optional[ProductivityLevel]:
        if not self.productivity_satisfaction:
            return None
        return ProductivityLevel.parse(self.productivity_satisfaction)

    @property
    def health_level(self) -> Optional[HealthLevel]:
        return HealthLevel.parse(self.health_feeling) if self.health_feeling else None

    def has_wellbeing_data(self) -> bool:
        """True when any rating or a non-zero sleep value was logged."""
        return bool(self.mood or self.productivity_satisfaction
                    or self.health_feeling or self.sleep_hours)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], strict: bool = False) -> "ProgressEntry":
        reader = RecordValidator("progress entry", data, strict)
        return cls(
            id=reader.string("id", required=True),
            entry_date=reader.timestamp("entry_date", required=True),
            activities=[LoggedActivity.from_dict(item, strict) for item in reader.raw("activities") or []],
            journal_entry=reader.string("journal_entry"),
            sleep_hours=reader.number("sleep_hours"),
            mood=reader.string("mood"),
            health_feeling=reader.string("health_feeling"),
            productivity_satisfaction=reader.string("productivity_satisfaction"),
            created_at=reader.timestamp("created_at"),
        )


@dataclass
class Note:
    """A free-form note. Only counted by analytics."""
    id: str
    title: str
    content: str = ""
    is_important: bool = False
    created_at: Optional[datetime] = None

    def __post_init__(self):
        self.created_at = ensure_aware(self.created_at)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], strict: bool = False) -> "Note":
        reader = RecordValidator("note", data, strict)
        return cls(
            id=reader.string("id", required=True),
            title=reader.string("title", required=True),
            content=reader.string("content", default=""),
            is_important=reader.boolean("is_important"),
            created_at=reader.timestamp("created_at"),
        )


@dataclass
class UserSnapshot:
    """Every record one user owns, loaded at a single point in time."""
    goals: List[Goal] = field(default_factory=list)
    activities: List[Activity] = field(default_factory=list)
    todos: List[Todo] = field(default_factory=list)
    notes: List[Note] = field(default_factory=list)
    progress_entries: List[ProgressEntry] = field(default_factory=list)
    time_sessions: List[TimeSession] = field(default_factory=list)

    def counts(self) -> Dict[str, int]:
        return {
            'goals': len(self.goals),
            'activities': len(self.activities),
            'todos': len(self.todos),
            'notes': len(self.notes),
            'progress_entries': len(self.progress_entries),
            'time_sessions': len(self.time_sessions),
        }
