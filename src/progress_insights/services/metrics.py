"""Metric aggregation over a user's tracker records.

Each calculation is a plain function of the record slices it needs and the
reference ``now``; nothing is cached or shared between calls.
"""

import statistics
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Sequence

from ..domain import Activity, Goal, Note, ProgressEntry, TimeSession, Todo
from ..utils.datetime import date_key, days_ceil, end_of_day, start_of_day
from ..utils.numbers import apportion_percentages, percentage, round_half_up
from .time_windows import (
    DAY_NAMES,
    hour_of_day,
    last_n_days,
    local_date,
    month_window_start,
    rolling_window,
    sunday_first_weekday,
)

ACTIVITY_BREAKDOWN_LIMIT = 10
UNKNOWN_ACTIVITY_TITLE = "Unknown Activity"


@dataclass
class Overview:
    """Headline counts and completion rates."""
    total_goals: int
    completed_goals: int
    goal_completion_rate: int
    total_todos: int
    completed_todos: int
    todo_completion_rate: int
    overdue_todos: int
    total_activities: int
    total_notes: int
    total_progress_entries: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ActivityTime:
    activity_id: str
    activity_title: str
    total_time: int  # seconds
    percentage: int


@dataclass
class TimeTrackingStats:
    """Tracked time totals. All durations are in seconds."""
    total_time_today: int
    total_time_this_week: int
    total_time_this_month: int
    average_session_duration: float
    most_productive_time_of_day: str
    activity_breakdown: List[ActivityTime] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class DailyTodoCompletion:
    date: str
    completed: int
    created: int
    completion_rate: int


@dataclass
class GoalProgress:
    goal_id: str
    title: str
    progress_percentage: int  # share of the goal's time window already elapsed
    days_until_target: int


@dataclass
class ProgressTrend:
    this_week: int
    last_week: int
    change_percentage: int
    trend: str  # "up", "down" or "stable"


@dataclass
class ProductivityStats:
    weekly_todo_completion: List[DailyTodoCompletion]
    goal_progress: List[GoalProgress]
    progress_trend: ProgressTrend

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class HourlyActivity:
    hour: int
    sessions_count: int = 0
    total_minutes: int = 0


@dataclass
class WeekdayActivity:
    day_of_week: str
    total_sessions: int = 0
    total_time: int = 0


@dataclass
class Streaks:
    current_progress_streak: int
    longest_progress_streak: int
    current_todo_streak: int
    longest_todo_streak: int


@dataclass
class EngagementStats:
    daily_active_hours: List[HourlyActivity]
    weekly_pattern: List[WeekdayActivity]
    streaks: Streaks

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def completed_sessions(sessions: Iterable[TimeSession]) -> List[TimeSession]:
    return [s for s in sessions if s.is_completed]


def completion_rate(completed: int, total: int) -> int:
    return percentage(completed, total)


def calculate_overview(goals: Sequence[Goal], todos: Sequence[Todo], activities: Sequence[Activity],
                       notes: Sequence[Note], progress_entries: Sequence[ProgressEntry],
                       now: datetime) -> Overview:
    completed_goals = sum(1 for g in goals if g.is_completed)
    completed_todos = sum(1 for t in todos if t.is_completed)

    return Overview(
        total_goals=len(goals),
        completed_goals=completed_goals,
        goal_completion_rate=completion_rate(completed_goals, len(goals)),
        total_todos=len(todos),
        completed_todos=completed_todos,
        todo_completion_rate=completion_rate(completed_todos, len(todos)),
        overdue_todos=sum(1 for t in todos if t.is_overdue(now)),
        total_activities=len(activities),
        total_notes=len(notes),
        total_progress_entries=len(progress_entries),
    )


def _total_duration(sessions: Iterable[TimeSession]) -> int:
    return sum(s.duration or 0 for s in sessions)


def most_productive_hour(sessions: Iterable[TimeSession], now: datetime) -> int:
    """Hour of day with the most tracked time; the earliest hour wins ties."""
    hourly = [0] * 24
    for session in sessions:
        hourly[hour_of_day(session.start_time, now)] += session.duration or 0
    return hourly.index(max(hourly))


def calculate_activity_breakdown(sessions: Iterable[TimeSession],
                                 activities: Sequence[Activity]) -> List[ActivityTime]:
    """Tracked time per activity, largest first, top ten.

    Percentages are shares of all tracked time and add up to 100 before the
    list is cut to ten rows.
    """
    titles = {activity.id: activity.title for activity in activities}
    time_by_activity: Dict[str, int] = {}
    for session in sessions:
        if session.activity_id and session.duration:
            time_by_activity[session.activity_id] = time_by_activity.get(session.activity_id, 0) + session.duration

    ranked = sorted(time_by_activity.items(), key=lambda item: item[1], reverse=True)
    shares = apportion_percentages([total_time for _, total_time in ranked])
    breakdown = [
        ActivityTime(
            activity_id=activity_id,
            activity_title=titles.get(activity_id, UNKNOWN_ACTIVITY_TITLE),
            total_time=total_time,
            percentage=share,
        )
        for (activity_id, total_time), share in zip(ranked, shares)
    ]
    return breakdown[:ACTIVITY_BREAKDOWN_LIMIT]


def calculate_time_tracking(sessions: Sequence[TimeSession], activities: Sequence[Activity],
                            now: datetime) -> TimeTrackingStats:
    finished = completed_sessions(sessions)

    today = now.date()
    week_start = rolling_window(now, days=7).start
    month_start = month_window_start(now)

    today_sessions = [s for s in finished if local_date(s.start_time, now) == today]
    week_sessions = [s for s in finished if s.start_time >= week_start]
    month_sessions = [s for s in finished if s.start_time >= month_start]

    average = statistics.mean(s.duration for s in finished) if finished else 0
    hour = most_productive_hour(finished, now)

    return TimeTrackingStats(
        total_time_today=_total_duration(today_sessions),
        total_time_this_week=_total_duration(week_sessions),
        total_time_this_month=_total_duration(month_sessions),
        average_session_duration=average,
        most_productive_time_of_day=f"{hour}:00-{hour + 1}:00",
        activity_breakdown=calculate_activity_breakdown(finished, activities),
    )


def calculate_weekly_todo_completion(todos: Sequence[Todo], now: datetime) -> List[DailyTodoCompletion]:
    """Todos created on each of the last seven days and how many of them are done.

    Completion is read from the todo's current state, not from when it was
    completed.
    """
    trends = []
    for day in last_n_days(now, 7):
        day_start, day_end = start_of_day(day), end_of_day(day)
        created = [t for t in todos if day_start <= t.created_at <= day_end]
        completed = [t for t in created if t.is_completed]
        trends.append(DailyTodoCompletion(
            date=date_key(day),
            completed=len(completed),
            created=len(created),
            completion_rate=completion_rate(len(completed), len(created)),
        ))
    return trends


def calculate_goal_progress(goals: Sequence[Goal], now: datetime) -> List[GoalProgress]:
    """Elapsed share of each open goal's time window, soonest deadline first."""
    progress = []
    for goal in goals:
        if goal.is_completed or goal.target_date is None:
            continue

        start = goal.created_at or now
        days_until_target = days_ceil(goal.target_date - now)
        total_days = days_ceil(goal.target_date - start)
        elapsed_days = days_ceil(now - start)

        if total_days > 0:
            time_progress = min(int(round_half_up(elapsed_days / total_days * 100)), 100)
        else:
            time_progress = 0

        progress.append(GoalProgress(
            goal_id=goal.id,
            title=goal.title,
            progress_percentage=time_progress,
            days_until_target=max(days_until_target, 0),
        ))

    progress.sort(key=lambda item: item.days_until_target)
    return progress


def calculate_progress_trend(progress_entries: Sequence[ProgressEntry], now: datetime) -> ProgressTrend:
    """Journal entries in the last seven days against the seven before."""
    one_week_ago = now - timedelta(days=7)
    two_weeks_ago = now - timedelta(days=14)

    this_week = sum(1 for e in progress_entries if e.entry_date >= one_week_ago)
    last_week = sum(1 for e in progress_entries if two_weeks_ago <= e.entry_date < one_week_ago)

    if last_week > 0:
        change = int(round_half_up((this_week - last_week) / last_week * 100))
    else:
        change = 100 if this_week > 0 else 0

    if change > 10:
        trend = "up"
    elif change < -10:
        trend = "down"
    else:
        trend = "stable"

    return ProgressTrend(this_week=this_week, last_week=last_week, change_percentage=change, trend=trend)


def calculate_productivity(todos: Sequence[Todo], goals: Sequence[Goal],
                           progress_entries: Sequence[ProgressEntry], now: datetime) -> ProductivityStats:
    return ProductivityStats(
        weekly_todo_completion=calculate_weekly_todo_completion(todos, now),
        goal_progress=calculate_goal_progress(goals, now),
        progress_trend=calculate_progress_trend(progress_entries, now),
    )


def calculate_daily_active_hours(sessions: Sequence[TimeSession], now: datetime) -> List[HourlyActivity]:
    hourly = [HourlyActivity(hour=hour) for hour in range(24)]
    for session in completed_sessions(sessions):
        bucket = hourly[hour_of_day(session.start_time, now)]
        bucket.sessions_count += 1
        bucket.total_minutes += int(round_half_up((session.duration or 0) / 60))
    return hourly


def calculate_weekly_pattern(sessions: Sequence[TimeSession], now: datetime) -> List[WeekdayActivity]:
    """Sessions and seconds per calendar weekday, Sunday first."""
    weekly = [WeekdayActivity(day_of_week=name) for name in DAY_NAMES]
    for session in completed_sessions(sessions):
        bucket = weekly[sunday_first_weekday(session.start_time.astimezone(now.tzinfo))]
        bucket.total_sessions += 1
        bucket.total_time += session.duration or 0
    return weekly


def current_streak(days: Iterable, today) -> int:
    """Consecutive qualifying days ending today."""
    qualifying = set(days)
    streak = 0
    check = today
    while check in qualifying:
        streak += 1
        check -= timedelta(days=1)
    return streak


def longest_streak(days: Iterable) -> int:
    """Longest run of qualifying days exactly one calendar day apart."""
    ordered = sorted(set(days))
    if not ordered:
        return 0

    longest = run = 1
    for previous, current in zip(ordered, ordered[1:]):
        if (current - previous).days == 1:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
    return longest


def calculate_streaks(progress_entries: Sequence[ProgressEntry], todos: Sequence[Todo],
                      now: datetime) -> Streaks:
    today = now.date()
    progress_days = [local_date(e.entry_date, now) for e in progress_entries]
    # Without a completion timestamp the creation day counts as the completion day
    todo_days = [local_date(t.completion_date, now) for t in todos if t.is_completed]

    return Streaks(
        current_progress_streak=current_streak(progress_days, today),
        longest_progress_streak=longest_streak(progress_days),
        current_todo_streak=current_streak(todo_days, today),
        longest_todo_streak=longest_streak(todo_days),
    )


def calculate_engagement(sessions: Sequence[TimeSession], progress_entries: Sequence[ProgressEntry],
                         todos: Sequence[Todo], now: datetime) -> EngagementStats:
    return EngagementStats(
        daily_active_hours=calculate_daily_active_hours(sessions, now),
        weekly_pattern=calculate_weekly_pattern(sessions, now),
        streaks=calculate_streaks(progress_entries, todos, now),
    )
