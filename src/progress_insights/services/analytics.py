"""Analytics entry points.

``calculate_comprehensive_stats`` and ``generate_productivity_insights`` are
the two calls the surrounding application makes. Both are pure: they take a
user's full record collections and a reference ``current_date`` and build a
fresh result on every call.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..config import AnalyticsSettings
from ..domain import Activity, Goal, Note, ProgressEntry, TimeSession, Todo, UserSnapshot
from ..utils.datetime import ensure_aware, now_utc
from .insights import InsightsData, ProductivityInsights, generate_productivity_insights
from .metrics import (
    EngagementStats,
    Overview,
    ProductivityStats,
    TimeTrackingStats,
    calculate_engagement,
    calculate_overview,
    calculate_productivity,
    calculate_time_tracking,
)
from .time_windows import Period, date_range_for, filter_by_date_range
from .wellbeing_metrics import WellbeingStats, calculate_wellbeing_metrics

logger = logging.getLogger(__name__)


@dataclass
class AnalyticsData:
    """Unfiltered record collections of one user plus the reporting period."""
    goals: Sequence[Goal]
    activities: Sequence[Activity]
    todos: Sequence[Todo]
    notes: Sequence[Note]
    progress_entries: Sequence[ProgressEntry]
    time_sessions: Sequence[TimeSession]
    period: str
    current_date: datetime


@dataclass
class ComprehensiveStats:
    """Complete stats snapshot"""
    overview: Overview
    time_tracking: TimeTrackingStats
    productivity: ProductivityStats
    engagement: EngagementStats
    wellbeing: WellbeingStats
    insights: Optional[ProductivityInsights] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        data = {
            'overview': self.overview.to_dict(),
            'time_tracking': self.time_tracking.to_dict(),
            'productivity': self.productivity.to_dict(),
            'engagement': self.engagement.to_dict(),
            'wellbeing': self.wellbeing.to_dict(),
        }
        if self.insights is not None:
            data['insights'] = self.insights.to_dict()
        return data


def calculate_comprehensive_stats(data: AnalyticsData) -> ComprehensiveStats:
    """Build every metric group for the reporting period.

    Only the wellbeing summary is restricted to the period window; the other
    groups use their own fixed windows relative to ``current_date``.
    """
    now = ensure_aware(data.current_date)
    period = Period.parse(data.period)
    window = date_range_for(period, now)

    period_entries = filter_by_date_range(data.progress_entries, window.start, window.end)
    logger.debug("Computing %s stats at %s (%d of %d progress entries in window)",
                 period.value, now.isoformat(), len(period_entries), len(data.progress_entries))

    return ComprehensiveStats(
        overview=calculate_overview(data.goals, data.todos, data.activities, data.notes,
                                    data.progress_entries, now),
        time_tracking=calculate_time_tracking(data.time_sessions, data.activities, now),
        productivity=calculate_productivity(data.todos, data.goals, data.progress_entries, now),
        engagement=calculate_engagement(data.time_sessions, data.progress_entries, data.todos, now),
        wellbeing=calculate_wellbeing_metrics(period_entries, now),
    )


def build_stats_report(snapshot: UserSnapshot, period: str = "week",
                       current_date: Optional[datetime] = None,
                       include_insights: bool = False,
                       settings: Optional[AnalyticsSettings] = None) -> ComprehensiveStats:
    """Stats for a loaded snapshot, with the insight feed attached on request."""
    settings = settings or AnalyticsSettings()
    now = ensure_aware(current_date) if current_date is not None else now_utc()

    stats = calculate_comprehensive_stats(AnalyticsData(
        goals=snapshot.goals,
        activities=snapshot.activities,
        todos=snapshot.todos,
        notes=snapshot.notes,
        progress_entries=snapshot.progress_entries,
        time_sessions=snapshot.time_sessions,
        period=period,
        current_date=now,
    ))

    if include_insights:
        stats.insights = generate_productivity_insights(insights_data_for(snapshot, now), settings)
    return stats


def insights_data_for(snapshot: UserSnapshot, current_date: datetime) -> InsightsData:
    return InsightsData(
        goals=snapshot.goals,
        activities=snapshot.activities,
        todos=snapshot.todos,
        progress_entries=snapshot.progress_entries,
        time_sessions=snapshot.time_sessions,
        current_date=current_date,
    )


__all__ = [
    "AnalyticsData",
    "ComprehensiveStats",
    "InsightsData",
    "build_stats_report",
    "calculate_comprehensive_stats",
    "generate_productivity_insights",
    "insights_data_for",
]
