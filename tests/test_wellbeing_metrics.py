"""Tests for wellbeing scales and wellbeing metric aggregation."""

from datetime import datetime, timedelta, timezone

import pytest

from progress_insights.domain import (
    HealthLevel,
    MoodLevel,
    ProductivityLevel,
    ProgressEntry,
    WellbeingDimension,
    get_emoticon_score,
)
from progress_insights.services.correlation import Trend
from progress_insights.services.wellbeing_metrics import calculate_wellbeing_metrics

from conftest import NOW, make_entry

MOOD_BY_SCORE = {5: "very_happy", 4: "happy", 3: "neutral", 2: "sad", 1: "very_sad"}


class TestWellbeingScales:
    """Test token parsing into wellbeing scales"""

    @pytest.mark.parametrize("token", ["😄", "very_happy", "Very Happy", "VERY HAPPY"])
    def test_mood_spellings(self, token):
        assert MoodLevel.parse(token) == MoodLevel.VERY_HAPPY
        assert MoodLevel.parse(token).score == 5

    def test_variation_selector_is_ignored(self):
        assert HealthLevel.parse("\U0001F4AA\ufe0f") == HealthLevel.EXCELLENT

    def test_unknown_token_is_neutral(self):
        assert MoodLevel.parse("🦄") == MoodLevel.NEUTRAL
        assert get_emoticon_score("whatever", WellbeingDimension.PRODUCTIVITY) == 3

    def test_scales_are_independent(self):
        assert ProductivityLevel.parse("😔").score == 2
        assert HealthLevel.parse("😷").score == 2
        assert get_emoticon_score("🤩", WellbeingDimension.PRODUCTIVITY) == 5
        assert get_emoticon_score("🤒", WellbeingDimension.HEALTH) == 1


class TestWellbeingMetrics:
    """Test distributions, averages, trends and the daily pattern"""

    def test_empty_entries(self):
        stats = calculate_wellbeing_metrics([])
        assert stats.mood_distribution == []
        assert stats.average_mood_score == 0
        assert stats.average_sleep_hours == 0
        assert stats.mood_trend == Trend.STABLE
        assert stats.productivity_trend == Trend.STABLE
        assert stats.health_trend == Trend.STABLE
        assert stats.sleep_trend == Trend.STABLE
        assert stats.daily_wellbeing_pattern == []

    def test_distribution_over_entries_with_field(self):
        entries = [
            make_entry(id="p1", days_ago=3, mood="happy"),
            make_entry(id="p2", days_ago=2, mood="happy"),
            make_entry(id="p3", days_ago=1, mood="sad"),
            make_entry(id="p4", days_ago=0, sleep=7),
        ]
        stats = calculate_wellbeing_metrics(entries)
        buckets = {b.value: (b.count, b.percentage) for b in stats.mood_distribution}
        assert buckets == {"happy": (2, 67), "sad": (1, 33)}
        assert stats.average_mood_score == pytest.approx(3.3)
        assert stats.health_distribution == []

    def test_sleep_average_ignores_non_positive(self):
        entries = [
            make_entry(id="p1", days_ago=2, sleep=6.5),
            make_entry(id="p2", days_ago=1, sleep=8),
            make_entry(id="p3", days_ago=0, sleep=0),
        ]
        assert calculate_wellbeing_metrics(entries).average_sleep_hours == pytest.approx(7.3)

    def test_increasing_mood_is_improving(self):
        scores = [2, 2, 3, 3, 4, 4, 5, 5]
        entries = [
            make_entry(id=f"p{i}", days_ago=len(scores) - i, mood=MOOD_BY_SCORE[score])
            for i, score in enumerate(scores)
        ]
        assert calculate_wellbeing_metrics(entries).mood_trend == Trend.IMPROVING

    def test_trend_uses_entry_date_order(self):
        scores = [5, 5, 4, 4, 2, 2, 1, 1]
        entries = [
            make_entry(id=f"p{i}", days_ago=len(scores) - i, mood=MOOD_BY_SCORE[score])
            for i, score in enumerate(scores)
        ]
        stats = calculate_wellbeing_metrics(list(reversed(entries)))
        assert stats.mood_trend == Trend.DECLINING

    def test_sleep_trend_threshold(self):
        entries = [
            make_entry(id="p1", days_ago=4, sleep=6),
            make_entry(id="p2", days_ago=3, sleep=6),
            make_entry(id="p3", days_ago=2, sleep=6.4),
            make_entry(id="p4", days_ago=1, sleep=6.4),
        ]
        assert calculate_wellbeing_metrics(entries).sleep_trend == Trend.STABLE
        entries[3].sleep_hours = 8
        assert calculate_wellbeing_metrics(entries).sleep_trend == Trend.IMPROVING

    def test_daily_pattern_keeps_last_fourteen(self):
        entries = [make_entry(id=f"p{i}", days_ago=20 - i, mood="happy", health="💪") for i in range(20)]
        entries.append(make_entry(id="blank", days_ago=0))
        pattern = calculate_wellbeing_metrics(entries).daily_wellbeing_pattern
        assert len(pattern) == 14
        assert pattern[-1].date == "2024-05-14"
        assert pattern[-1].mood_score == 4
        assert pattern[-1].health_score == 5
        assert pattern[-1].productivity_score == 0
        assert pattern[-1].productivity == ""

    def test_daily_pattern_dates_follow_reference_timezone(self):
        evening = datetime(2024, 5, 14, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        entries = [ProgressEntry(id="p1", entry_date=evening, mood="happy")]
        assert calculate_wellbeing_metrics(entries, NOW).daily_wellbeing_pattern[0].date == "2024-05-15"
        assert calculate_wellbeing_metrics(entries).daily_wellbeing_pattern[0].date == "2024-05-14"

    def test_to_dict_serializes_trends(self):
        data = calculate_wellbeing_metrics([]).to_dict()
        assert data['mood_trend'] == "stable"
        assert data['daily_wellbeing_pattern'] == []
