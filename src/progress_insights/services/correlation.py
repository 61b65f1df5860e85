"""Cross-dimension correlation and trend classification for wellbeing data."""

import math
import statistics
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Sequence

from ..domain import ProgressEntry


class Trend(Enum):
    """Direction of a wellbeing dimension between two halves of a period."""
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


# Minimum change in mean score before a trend is called
SCORE_TREND_THRESHOLD = 0.3
SLEEP_TREND_THRESHOLD = 0.5


def calculate_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson correlation coefficient of two equal-length series.

    Returns 0 for series of different length, empty series, or when either
    series has no variance.
    """
    if len(x) != len(y) or len(x) == 0:
        return 0.0

    n = len(x)
    sum_x = sum(x)
    sum_y = sum(y)
    sum_xy = sum(a * b for a, b in zip(x, y))
    sum_xx = sum(a * a for a in x)
    sum_yy = sum(b * b for b in y)

    numerator = n * sum_xy - sum_x * sum_y
    spread = (n * sum_xx - sum_x * sum_x) * (n * sum_yy - sum_y * sum_y)
    if spread <= 0:
        return 0.0

    denominator = math.sqrt(spread)
    if denominator == 0:
        return 0.0

    return max(-1.0, min(1.0, numerator / denominator))


def mean_or_zero(values: Iterable[float]) -> float:
    values = list(values)
    return statistics.mean(values) if values else 0.0


def classify_trend(recent: Sequence[float], earlier: Sequence[float],
                   threshold: float = SCORE_TREND_THRESHOLD) -> Trend:
    """Compare mean of the recent half against the earlier half."""
    recent_avg = mean_or_zero(recent)
    earlier_avg = mean_or_zero(earlier)

    if recent_avg > earlier_avg + threshold:
        return Trend.IMPROVING
    if recent_avg < earlier_avg - threshold:
        return Trend.DECLINING
    return Trend.STABLE


@dataclass(frozen=True)
class WellbeingSample:
    """All four wellbeing dimensions of one journal entry."""
    mood: int
    productivity: int
    health: int
    sleep: float


@dataclass(frozen=True)
class DimensionCorrelations:
    """Pairwise correlations across the correlation population."""
    mood_productivity: float
    health_productivity: float
    sleep_mood: float
    sleep_health: float

    def to_dict(self):
        return {
            'mood_productivity': self.mood_productivity,
            'health_productivity': self.health_productivity,
            'sleep_mood': self.sleep_mood,
            'sleep_health': self.sleep_health,
        }


def build_correlation_population(entries: Iterable[ProgressEntry]) -> List[WellbeingSample]:
    """Entries that rate mood, productivity and health and slept a positive amount."""
    samples = []
    for entry in entries:
        if not (entry.mood and entry.productivity_satisfaction and entry.health_feeling):
            continue
        if not entry.sleep_hours or entry.sleep_hours <= 0:
            continue
        samples.append(WellbeingSample(
            mood=entry.mood_level.score,
            productivity=entry.productivity_level.score,
            health=entry.health_level.score,
            sleep=entry.sleep_hours,
        ))
    return samples


def correlate_dimensions(samples: Sequence[WellbeingSample]) -> DimensionCorrelations:
    mood = [s.mood for s in samples]
    productivity = [s.productivity for s in samples]
    health = [s.health for s in samples]
    sleep = [s.sleep for s in samples]

    return DimensionCorrelations(
        mood_productivity=calculate_correlation(mood, productivity),
        health_productivity=calculate_correlation(health, productivity),
        sleep_mood=calculate_correlation(sleep, mood),
        sleep_health=calculate_correlation(sleep, health),
    )
