"""Wellbeing distributions, averages and trends from progress journal entries."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..domain import ProgressEntry, WellbeingDimension, get_emoticon_score
from ..utils.datetime import date_key
from ..utils.numbers import percentage, round_half_up
from .correlation import (
    SCORE_TREND_THRESHOLD,
    SLEEP_TREND_THRESHOLD,
    Trend,
    classify_trend,
    mean_or_zero,
)

DAILY_PATTERN_LENGTH = 14


@dataclass
class DistributionBucket:
    value: str
    count: int
    percentage: int

    def to_dict(self) -> Dict[str, Any]:
        return {'value': self.value, 'count': self.count, 'percentage': self.percentage}


@dataclass
class DailyWellbeing:
    """One chart point; scores are 0 where the entry skipped the rating."""
    date: str
    mood: str
    productivity: str
    health: str
    sleep_hours: float
    mood_score: int
    productivity_score: int
    health_score: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date,
            'mood': self.mood,
            'productivity': self.productivity,
            'health': self.health,
            'sleep_hours': self.sleep_hours,
            'mood_score': self.mood_score,
            'productivity_score': self.productivity_score,
            'health_score': self.health_score,
        }


@dataclass
class WellbeingStats:
    """Wellbeing summary for the reporting period"""
    mood_distribution: List[DistributionBucket] = field(default_factory=list)
    average_mood_score: float = 0
    mood_trend: Trend = Trend.STABLE
    productivity_satisfaction: List[DistributionBucket] = field(default_factory=list)
    average_productivity_score: float = 0
    productivity_trend: Trend = Trend.STABLE
    health_distribution: List[DistributionBucket] = field(default_factory=list)
    average_health_score: float = 0
    health_trend: Trend = Trend.STABLE
    average_sleep_hours: float = 0
    sleep_trend: Trend = Trend.STABLE
    daily_wellbeing_pattern: List[DailyWellbeing] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'mood_distribution': [b.to_dict() for b in self.mood_distribution],
            'average_mood_score': self.average_mood_score,
            'mood_trend': self.mood_trend.value,
            'productivity_satisfaction': [b.to_dict() for b in self.productivity_satisfaction],
            'average_productivity_score': self.average_productivity_score,
            'productivity_trend': self.productivity_trend.value,
            'health_distribution': [b.to_dict() for b in self.health_distribution],
            'average_health_score': self.average_health_score,
            'health_trend': self.health_trend.value,
            'average_sleep_hours': self.average_sleep_hours,
            'sleep_trend': self.sleep_trend.value,
            'daily_wellbeing_pattern': [d.to_dict() for d in self.daily_wellbeing_pattern],
        }


_DIMENSION_FIELDS: Dict[WellbeingDimension, Callable[[ProgressEntry], Optional[str]]] = {
    WellbeingDimension.MOOD: lambda e: e.mood,
    WellbeingDimension.PRODUCTIVITY: lambda e: e.productivity_satisfaction,
    WellbeingDimension.HEALTH: lambda e: e.health_feeling,
}


def rating_of(entry: ProgressEntry, dimension: WellbeingDimension) -> Optional[str]:
    return _DIMENSION_FIELDS[dimension](entry) or None


def dimension_scores(entries: Sequence[ProgressEntry], dimension: WellbeingDimension) -> List[int]:
    """Scores of the entries that rated ``dimension``, in entry order."""
    return [
        get_emoticon_score(rating_of(e, dimension), dimension)
        for e in entries
        if rating_of(e, dimension)
    ]


def rating_distribution(entries: Sequence[ProgressEntry],
                        dimension: WellbeingDimension) -> List[DistributionBucket]:
    """Frequency of each stored rating among entries that have one."""
    ratings = [rating_of(e, dimension) for e in entries if rating_of(e, dimension)]
    counts = Counter(ratings)
    return [
        DistributionBucket(value=value, count=count, percentage=percentage(count, len(ratings)))
        for value, count in counts.items()
    ]


def average_score(scores: Sequence[float]) -> float:
    if not scores:
        return 0
    return round_half_up(sum(scores) / len(scores), 1)


def _daily_point(entry: ProgressEntry, now: Optional[datetime]) -> DailyWellbeing:
    moment = entry.entry_date.astimezone(now.tzinfo) if now is not None else entry.entry_date
    return DailyWellbeing(
        date=date_key(moment),
        mood=entry.mood or "",
        productivity=entry.productivity_satisfaction or "",
        health=entry.health_feeling or "",
        sleep_hours=entry.sleep_hours or 0,
        mood_score=entry.mood_level.score if entry.mood else 0,
        productivity_score=entry.productivity_level.score if entry.productivity_satisfaction else 0,
        health_score=entry.health_level.score if entry.health_feeling else 0,
    )


def calculate_wellbeing_metrics(progress_entries: Sequence[ProgressEntry],
                                now: Optional[datetime] = None) -> WellbeingStats:
    """Summarize wellbeing ratings of the (already period-filtered) entries.

    Daily pattern dates are calendar days in the timezone of ``now``; without
    it each entry keeps its own offset.
    """
    entries = sorted(progress_entries, key=lambda e: e.entry_date)

    mood_scores = dimension_scores(entries, WellbeingDimension.MOOD)
    productivity_scores = dimension_scores(entries, WellbeingDimension.PRODUCTIVITY)
    health_scores = dimension_scores(entries, WellbeingDimension.HEALTH)

    positive_sleep = [e.sleep_hours for e in entries if e.sleep_hours is not None and e.sleep_hours > 0]
    average_sleep = round_half_up(mean_or_zero(positive_sleep), 1) if positive_sleep else 0

    # Trends compare the later half of the period against the earlier half
    midpoint = len(entries) // 2
    earlier, recent = entries[:midpoint], entries[midpoint:]

    def dimension_trend(dimension: WellbeingDimension) -> Trend:
        return classify_trend(dimension_scores(recent, dimension),
                              dimension_scores(earlier, dimension),
                              SCORE_TREND_THRESHOLD)

    sleep_trend = classify_trend(
        [e.sleep_hours for e in recent if e.sleep_hours is not None],
        [e.sleep_hours for e in earlier if e.sleep_hours is not None],
        SLEEP_TREND_THRESHOLD,
    )

    daily_pattern = [_daily_point(e, now) for e in entries if e.has_wellbeing_data()]

    return WellbeingStats(
        mood_distribution=rating_distribution(entries, WellbeingDimension.MOOD),
        average_mood_score=average_score(mood_scores),
        mood_trend=dimension_trend(WellbeingDimension.MOOD),
        productivity_satisfaction=rating_distribution(entries, WellbeingDimension.PRODUCTIVITY),
        average_productivity_score=average_score(productivity_scores),
        productivity_trend=dimension_trend(WellbeingDimension.PRODUCTIVITY),
        health_distribution=rating_distribution(entries, WellbeingDimension.HEALTH),
        average_health_score=average_score(health_scores),
        health_trend=dimension_trend(WellbeingDimension.HEALTH),
        average_sleep_hours=average_sleep,
        sleep_trend=sleep_trend,
        daily_wellbeing_pattern=daily_pattern[-DAILY_PATTERN_LENGTH:],
    )
