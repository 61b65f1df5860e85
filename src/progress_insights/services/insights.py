"""Rule-based productivity insights.

Insights are produced by an ordered list of independent heuristic rules.
Every rule looks at the user's records through a shared :class:`InsightContext`
and may add recommendations, achievements or patterns to an
:class:`InsightCollector`. After all rules ran, each list is cut to its cap.
By default the cut keeps the first entries in rule order; a priority-sorted
cut for recommendations can be selected in the configuration.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..config import AnalyticsSettings, InsightTruncation
from ..domain import (
    Activity,
    Goal,
    ProgressEntry,
    TimeSession,
    Todo,
    WellbeingDimension,
    get_emoticon_score,
)
from ..utils.datetime import days_ceil, ensure_aware, to_iso_string
from .correlation import build_correlation_population, calculate_correlation, correlate_dimensions, mean_or_zero
from .time_windows import day_name

logger = logging.getLogger(__name__)

PRIORITY_RANK = {"high": 0, "medium": 1, "low": 2}

# Activity title fragments used by the title-count balance rule
WORK_TITLE_FRAGMENTS = ("work", "project", "meeting")
PERSONAL_TITLE_FRAGMENTS = ("personal", "hobby", "exercise")

SHORT_SESSION_SECONDS = 15 * 60
LONG_SESSION_SECONDS = 2 * 60 * 60


@dataclass
class Recommendation:
    """Something the user could act on"""
    type: str  # goal, todo, time, progress, balance
    title: str
    description: str
    priority: str  # high, medium, low
    actionable: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'title': self.title,
            'description': self.description,
            'priority': self.priority,
            'actionable': self.actionable,
        }


@dataclass
class Achievement:
    title: str
    description: str
    earned_date: str

    def to_dict(self) -> Dict[str, Any]:
        return {'title': self.title, 'description': self.description, 'earned_date': self.earned_date}


@dataclass
class Pattern:
    pattern: str
    description: str
    significance: str  # positive, negative, neutral

    def to_dict(self) -> Dict[str, Any]:
        return {'pattern': self.pattern, 'description': self.description, 'significance': self.significance}


@dataclass
class ProductivityInsights:
    """Capped insight feed"""
    recommendations: List[Recommendation] = field(default_factory=list)
    achievements: List[Achievement] = field(default_factory=list)
    patterns: List[Pattern] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'recommendations': [r.to_dict() for r in self.recommendations],
            'achievements': [a.to_dict() for a in self.achievements],
            'patterns': [p.to_dict() for p in self.patterns],
        }


@dataclass
class InsightsData:
    """Records the insight rules read, all belonging to one user."""
    goals: Sequence[Goal]
    activities: Sequence[Activity]
    todos: Sequence[Todo]
    progress_entries: Sequence[ProgressEntry]
    time_sessions: Sequence[TimeSession]
    current_date: datetime


class InsightContext:
    """Records plus the derived values several rules share."""

    def __init__(self, data: InsightsData, settings: AnalyticsSettings):
        self.now = ensure_aware(data.current_date)
        self.settings = settings
        self.goals = list(data.goals)
        self.activities = list(data.activities)
        self.todos = list(data.todos)
        self.time_sessions = list(data.time_sessions)
        self.progress_entries = sorted(data.progress_entries, key=lambda e: e.entry_date)

        self.one_week_ago = self.now - timedelta(days=7)
        self.active_goals = [g for g in self.goals if not g.is_completed]
        self.pending_todos = [t for t in self.todos if not t.is_completed]
        self.recent_sessions = [
            s for s in self.time_sessions
            if s.start_time >= self.one_week_ago and not s.is_active
        ]

    def entries_since(self, days: int) -> List[ProgressEntry]:
        cutoff = self.now - timedelta(days=days)
        return [e for e in self.progress_entries if e.entry_date >= cutoff]

    def activity_by_id(self, activity_id: str) -> Optional[Activity]:
        for activity in self.activities:
            if activity.id == activity_id:
                return activity
        return None


class InsightCollector:
    """Accumulates rule output before truncation."""

    def __init__(self, now: datetime):
        self.now = now
        self.recommendations: List[Recommendation] = []
        self.achievements: List[Achievement] = []
        self.patterns: List[Pattern] = []

    def recommend(self, type: str, title: str, description: str, priority: str) -> None:
        self.recommendations.append(Recommendation(type, title, description, priority))

    def achieve(self, title: str, description: str) -> None:
        self.achievements.append(Achievement(title, description, to_iso_string(self.now)))

    def notice(self, pattern: str, description: str, significance: str, unique: bool = False) -> None:
        if unique and any(p.pattern == pattern for p in self.patterns):
            return
        self.patterns.append(Pattern(pattern, description, significance))

    def finalize(self, settings: AnalyticsSettings) -> ProductivityInsights:
        recommendations = self.recommendations
        if settings.truncation == InsightTruncation.PRIORITY:
            recommendations = sorted(recommendations, key=lambda r: PRIORITY_RANK.get(r.priority, len(PRIORITY_RANK)))

        return ProductivityInsights(
            recommendations=recommendations[:settings.max_recommendations],
            achievements=self.achievements[:settings.max_achievements],
            patterns=self.patterns[:settings.max_patterns],
        )


InsightRule = Callable[[InsightContext, InsightCollector], None]


def _rate(part: int, whole: int) -> float:
    return part / whole * 100 if whole > 0 else 0


def _first_word(text: Optional[str]) -> Optional[str]:
    words = (text or "").lower().split()
    return words[0] if words else None


def goal_completion_rule(ctx: InsightContext, out: InsightCollector) -> None:
    rate = _rate(sum(1 for g in ctx.goals if g.is_completed), len(ctx.goals))
    if rate < 30:
        out.recommend(
            "goal", "Focus on Smaller Goals",
            "Your goal completion rate is low. Try breaking larger goals into smaller, more achievable milestones.",
            "high",
        )


def todo_completion_rule(ctx: InsightContext, out: InsightCollector) -> None:
    rate = _rate(sum(1 for t in ctx.todos if t.is_completed), len(ctx.todos))
    if rate > 80:
        out.achieve("Task Master", f"Excellent work! You've completed {rate:.1f}% of your tasks.")


def time_tracking_rule(ctx: InsightContext, out: InsightCollector) -> None:
    if not ctx.recent_sessions:
        out.recommend(
            "time", "Start Time Tracking",
            "Begin tracking your time to understand how you spend your day and identify areas for improvement.",
            "medium",
        )


def overdue_todos_rule(ctx: InsightContext, out: InsightCollector) -> None:
    overdue = [t for t in ctx.todos if t.is_overdue(ctx.now)]
    if len(overdue) > 5:
        out.recommend(
            "todo", "Address Overdue Tasks",
            f"You have {len(overdue)} overdue tasks. Consider rescheduling or breaking them into smaller pieces.",
            "high",
        )


def progress_consistency_rule(ctx: InsightContext, out: InsightCollector) -> None:
    logged = len(ctx.entries_since(7))
    if logged >= 5:
        out.achieve("Consistent Progress", "Great job logging your progress regularly this week!")
    elif logged < 2:
        out.recommend(
            "progress", "Log Daily Progress",
            "Regular progress logging helps maintain momentum and track your improvement over time.",
            "medium",
        )


def wellbeing_correlation_rule(ctx: InsightContext, out: InsightCollector) -> None:
    """Correlations between mood, productivity, health and sleep."""
    with_wellbeing = [e for e in ctx.progress_entries if e.has_wellbeing_data()]
    if len(with_wellbeing) < 5:
        return

    samples = build_correlation_population(with_wellbeing)
    if len(samples) < 3:
        return

    corr = correlate_dimensions(samples)
    logger.debug("Wellbeing correlations over %d samples: %s", len(samples), corr.to_dict())

    if corr.mood_productivity > 0.6:
        out.notice(
            "Strong Mood-Productivity Link",
            "Your mood and productivity are highly correlated. Focus on mood-boosting activities to increase productivity.",
            "positive",
        )
    if corr.health_productivity > 0.5:
        out.notice(
            "Health Drives Productivity",
            "Your physical health strongly impacts productivity. Prioritize wellness activities.",
            "positive",
        )
    if corr.sleep_mood > 0.4:
        out.notice(
            "Sleep Affects Mood",
            "Better sleep correlates with improved mood. Aim for consistent sleep schedules.",
            "positive",
        )
    if corr.sleep_health > 0.4:
        out.notice(
            "Sleep-Health Connection",
            "Quality sleep is linked to how healthy you feel. Prioritize sleep hygiene.",
            "positive",
        )

    average_sleep = mean_or_zero(s.sleep for s in samples)
    if average_sleep < 7:
        out.recommend(
            "balance", "Improve Sleep Duration",
            f"Your average sleep is {average_sleep:.1f} hours. Aim for 7-9 hours for optimal wellbeing.",
            "high",
        )

    recent_health = mean_or_zero(s.health for s in samples[-3:])
    early_health = mean_or_zero(s.health for s in samples[:3])
    if recent_health < early_health - 0.5:
        out.recommend(
            "balance", "Health Attention Needed",
            "Your health scores have been declining. Consider adjusting your routine or consulting healthcare.",
            "high",
        )


def work_life_time_rule(ctx: InsightContext, out: InsightCollector) -> None:
    """Share of tracked time spent on work-like versus life-like activities."""
    time_by_title: Dict[str, int] = {}
    for session in ctx.time_sessions:
        if session.is_active or not session.activity_id:
            continue
        activity = ctx.activity_by_id(session.activity_id)
        if activity is not None:
            time_by_title[activity.title] = time_by_title.get(activity.title, 0) + (session.duration or 0)

    total = sum(time_by_title.values())
    if total <= 0:
        return

    work_time = life_time = 0
    for title, seconds in time_by_title.items():
        name = title.lower()
        if any(keyword in name for keyword in ctx.settings.work_keywords):
            work_time += seconds
        elif any(keyword in name for keyword in ctx.settings.life_keywords):
            life_time += seconds

    work_share = work_time / total * 100
    life_share = life_time / total * 100

    if work_share > 70:
        out.recommend(
            "balance", "Work-Life Balance",
            f"{work_share:.0f}% of your time is work-focused. Consider scheduling more personal activities.",
            "medium",
        )
    if life_share < 20 and work_share > 50:
        out.recommend(
            "balance", "Schedule Personal Time",
            "You might be overworking. Block time for hobbies, relationships, and self-care.",
            "high",
        )


def _related_todos(goal: Goal, todos: Sequence[Todo]) -> List[Todo]:
    title_word = _first_word(goal.title)
    description_word = _first_word(goal.description)
    related = []
    for todo in todos:
        if title_word and title_word in todo.title.lower():
            related.append(todo)
        elif description_word and todo.description and description_word in todo.description.lower():
            related.append(todo)
    return related


def goal_risk_rule(ctx: InsightContext, out: InsightCollector) -> None:
    """Flag open goals nearing their target with little related todo progress."""
    for goal in ctx.active_goals:
        if goal.target_date is None:
            continue

        days_until_due = days_ceil(goal.target_date - ctx.now)
        related = _related_todos(goal, ctx.todos)
        rate = _rate(sum(1 for t in related if t.is_completed), len(related))

        if days_until_due <= 7 and rate < 50:
            out.recommend(
                "goal", f"Goal At Risk: {goal.title}",
                f"This goal is due soon with {rate:.0f}% related tasks completed. Focus efforts here.",
                "high",
            )
        elif days_until_due <= 30 and rate > 80:
            out.notice(
                "Goal On Track",
                f"{goal.title} is progressing well with most related tasks completed.",
                "positive",
            )


def activity_preference_rule(ctx: InsightContext, out: InsightCollector) -> None:
    engagement: List[Tuple[str, int]] = []
    for activity in ctx.activities:
        sessions = [s for s in ctx.time_sessions if s.activity_id == activity.id and not s.is_active]
        if sessions:
            engagement.append((activity.title, sum(s.duration or 0 for s in sessions)))

    if not engagement:
        return

    engagement.sort(key=lambda item: item[1], reverse=True)
    most_title, most_time = engagement[0]
    least_title, least_time = engagement[-1]
    if most_time > least_time * 3:
        out.notice(
            "Activity Preference",
            f'You spend 3x more time on "{most_title}" than "{least_title}".',
            "neutral",
        )


def mood_direction_rule(ctx: InsightContext, out: InsightCollector) -> None:
    """Compare the first and last mood among the seven latest entries."""
    scores = [
        get_emoticon_score(e.mood, WellbeingDimension.MOOD)
        for e in ctx.progress_entries[-7:]
        if e.mood
    ]
    if len(scores) < 3:
        return

    change = scores[-1] - scores[0]
    if change > 1:
        out.achieve("Mood Improvement", "Your mood has been consistently improving this week!")
    elif change < -1:
        out.recommend(
            "balance", "Mood Support",
            "Your mood has been declining. Consider stress-reduction activities or talking to someone.",
            "high",
        )


def overwhelm_rule(ctx: InsightContext, out: InsightCollector) -> None:
    active_goals = len(ctx.active_goals)
    pending_todos = len(ctx.pending_todos)
    if active_goals > 0 and pending_todos > 10 and len(ctx.entries_since(3)) < 2:
        out.recommend(
            "balance", "Overwhelm Prevention",
            f"You have {active_goals} active goals and {pending_todos} pending tasks. "
            "Consider focusing on fewer priorities and logging daily progress.",
            "high",
        )


def goal_alignment_rule(ctx: InsightContext, out: InsightCollector) -> None:
    if not ctx.activities or not ctx.active_goals:
        return

    goal_keywords = [word for goal in ctx.goals for word in goal.title.lower().split()]
    aligned = [
        a for a in ctx.activities
        if any(keyword in a.title.lower() for keyword in goal_keywords)
    ]
    if len(aligned) < min(len(ctx.activities) * 0.5, len(ctx.active_goals) * 0.5):
        out.recommend(
            "goal", "Align Activities with Goals",
            "Consider adding activities that directly support your current goals for better progress tracking.",
            "medium",
        )


def _recent_average(entries: Sequence[ProgressEntry], dimension: WellbeingDimension,
                    rating: Callable[[ProgressEntry], Optional[str]]) -> Optional[float]:
    """Mean score over the entries, None when fewer than seven rated it."""
    scores = [get_emoticon_score(rating(e), dimension) for e in entries if rating(e)]
    if len(scores) < 7:
        return None
    return sum(scores) / len(scores)


def mood_productivity_rule(ctx: InsightContext, out: InsightCollector) -> None:
    """Mood and productivity relationship, recent averages and weekday pattern."""
    paired = [e for e in ctx.progress_entries if e.mood and e.productivity_satisfaction]
    if len(paired) < 5:
        return

    mood_scores = [get_emoticon_score(e.mood, WellbeingDimension.MOOD) for e in paired]
    productivity_scores = [
        get_emoticon_score(e.productivity_satisfaction, WellbeingDimension.PRODUCTIVITY) for e in paired
    ]
    correlation = calculate_correlation(mood_scores, productivity_scores)

    if correlation > 0.6:
        out.notice(
            "Strong Mood-Productivity Link",
            "Your mood and productivity are highly correlated. Better mood days tend to be more productive.",
            "positive",
            unique=True,
        )
    elif correlation < -0.3:
        out.notice(
            "Inverse Mood-Productivity Pattern",
            "Interesting pattern: you seem to be more productive on lower mood days. "
            "This might indicate pushing through challenges.",
            "neutral",
        )

    last_two_weeks = ctx.entries_since(14)

    average_mood = _recent_average(last_two_weeks, WellbeingDimension.MOOD, lambda e: e.mood)
    if average_mood is not None:
        if average_mood >= 4.0:
            out.achieve(
                "Positive Wellbeing",
                "Your mood has been consistently positive lately. Keep up the great work!",
            )
        elif average_mood <= 2.5:
            out.recommend(
                "balance", "Focus on Wellbeing",
                "Your mood has been lower recently. Consider activities that boost your wellbeing "
                "like exercise, rest, or connecting with others.",
                "high",
            )

    average_productivity = _recent_average(last_two_weeks, WellbeingDimension.PRODUCTIVITY,
                                           lambda e: e.productivity_satisfaction)
    if average_productivity is not None and average_productivity <= 2.5:
        out.recommend(
            "progress", "Improve Productivity Satisfaction",
            "Your productivity satisfaction has been low. Try setting smaller, achievable goals "
            "or adjusting your daily routine.",
            "medium",
        )

    by_weekday: Dict[str, List[int]] = {}
    for entry, mood, productivity in zip(paired, mood_scores, productivity_scores):
        totals = by_weekday.setdefault(day_name(entry.entry_date.astimezone(ctx.now.tzinfo)), [0, 0])
        totals[0] += mood + productivity
        totals[1] += 1

    best_day = worst_day = None
    best_score, worst_score = 0.0, 10.0
    for weekday, (score_sum, count) in by_weekday.items():
        if count < 2:
            continue
        average = score_sum / (count * 2)
        if average > best_score:
            best_score, best_day = average, weekday
        if average < worst_score:
            worst_score, worst_day = average, weekday

    if best_day and worst_day and best_day != worst_day:
        out.notice(
            "Weekly Wellbeing Pattern",
            f"{best_day}s tend to be your best days for mood and productivity, "
            f"while {worst_day}s are more challenging.",
            "neutral",
        )


def session_length_rule(ctx: InsightContext, out: InsightCollector) -> None:
    if not ctx.recent_sessions:
        return

    average = mean_or_zero(s.duration or 0 for s in ctx.recent_sessions)
    if average < SHORT_SESSION_SECONDS:
        out.notice(
            "Short Focus Sessions",
            "Your average work session is quite short. This might indicate frequent interruptions.",
            "negative",
        )
    elif average > LONG_SESSION_SECONDS:
        out.notice(
            "Extended Focus Sessions",
            "You have excellent focus with long work sessions. Consider taking breaks to maintain productivity.",
            "positive",
        )


def activity_titles_rule(ctx: InsightContext, out: InsightCollector) -> None:
    """Work-titled activities against personal ones, by count."""
    def titled(fragments):
        return [a for a in ctx.activities if any(f in a.title.lower() for f in fragments)]

    work = titled(WORK_TITLE_FRAGMENTS)
    personal = titled(PERSONAL_TITLE_FRAGMENTS)
    if len(work) > len(personal) * 3:
        out.recommend(
            "balance", "Consider Work-Life Balance",
            "You have significantly more work-related activities. Consider adding personal and wellness activities.",
            "medium",
        )


INSIGHT_RULES: Tuple[InsightRule, ...] = (
    goal_completion_rule,
    todo_completion_rule,
    time_tracking_rule,
    overdue_todos_rule,
    progress_consistency_rule,
    wellbeing_correlation_rule,
    work_life_time_rule,
    goal_risk_rule,
    activity_preference_rule,
    mood_direction_rule,
    overwhelm_rule,
    goal_alignment_rule,
    mood_productivity_rule,
    session_length_rule,
    activity_titles_rule,
)


def generate_productivity_insights(data: InsightsData,
                                   settings: Optional[AnalyticsSettings] = None,
                                   rules: Sequence[InsightRule] = INSIGHT_RULES) -> ProductivityInsights:
    """Run every insight rule over the user's records and cap the results."""
    settings = settings or AnalyticsSettings()
    ctx = InsightContext(data, settings)
    out = InsightCollector(ctx.now)

    for rule in rules:
        rule(ctx, out)

    logger.debug(
        "Insight rules produced %d recommendations, %d achievements, %d patterns",
        len(out.recommendations), len(out.achievements), len(out.patterns),
    )
    return out.finalize(settings)
