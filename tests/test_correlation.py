"""Tests for Pearson correlation, trend classification and the correlation population."""

import pytest

from progress_insights.services.correlation import (
    Trend,
    build_correlation_population,
    calculate_correlation,
    classify_trend,
    correlate_dimensions,
)

from conftest import make_entry


class TestCalculateCorrelation:
    """Test calculate_correlation"""

    def test_identical_series(self):
        x = [1, 3, 2, 5, 4]
        assert calculate_correlation(x, x) == pytest.approx(1.0)

    def test_inverse_series(self):
        assert calculate_correlation([1, 2, 3, 4], [8, 6, 4, 2]) == pytest.approx(-1.0)

    def test_mismatched_or_empty(self):
        assert calculate_correlation([1, 2, 3], [1, 2]) == 0
        assert calculate_correlation([], []) == 0

    def test_no_variance(self):
        assert calculate_correlation([3, 3, 3], [1, 2, 3]) == 0

    def test_known_value(self):
        # r = 0.8 for this textbook pair
        assert calculate_correlation([1, 2, 3, 4, 5], [2, 1, 4, 3, 5]) == pytest.approx(0.8)

    @pytest.mark.parametrize("x,y", [
        ([0.1, 0.2, 0.30000000000000004], [0.1, 0.2, 0.3]),
        ([1e9, 1e9 + 1, 1e9 + 2], [5, 4, 6]),
        ([7.5, 6, 8, 5.5], [4, 3, 5, 2]),
    ])
    def test_always_in_range(self, x, y):
        assert -1.0 <= calculate_correlation(x, y) <= 1.0


class TestClassifyTrend:
    """Test classify_trend"""

    def test_improving_declining_stable(self):
        assert classify_trend([4, 4], [3, 3]) == Trend.IMPROVING
        assert classify_trend([3, 3], [4, 4]) == Trend.DECLINING
        assert classify_trend([3.2], [3.0]) == Trend.STABLE

    def test_custom_threshold(self):
        assert classify_trend([7.4], [7.0], threshold=0.5) == Trend.STABLE
        assert classify_trend([7.6], [7.0], threshold=0.5) == Trend.IMPROVING

    def test_empty_halves_are_stable(self):
        assert classify_trend([], []) == Trend.STABLE


class TestCorrelationPopulation:
    """Test build_correlation_population and correlate_dimensions"""

    def test_requires_all_dimensions_and_positive_sleep(self):
        entries = [
            make_entry(id="full", mood="happy", productivity="satisfied", health="good", sleep=7),
            make_entry(id="no-sleep", mood="happy", productivity="satisfied", health="good", sleep=0),
            make_entry(id="no-health", mood="happy", productivity="satisfied", sleep=7),
        ]
        samples = build_correlation_population(entries)
        assert len(samples) == 1
        assert (samples[0].mood, samples[0].productivity, samples[0].health, samples[0].sleep) == (4, 4, 4, 7)

    def test_correlate_dimensions(self):
        rows = [("very_sad", "very_unsatisfied", "very_unwell", 5),
                ("sad", "not_satisfied", "unwell", 6),
                ("happy", "satisfied", "good", 7),
                ("very_happy", "very_satisfied", "excellent", 8)]
        entries = [
            make_entry(id=f"p{i}", days_ago=4 - i, mood=m, productivity=p, health=h, sleep=s)
            for i, (m, p, h, s) in enumerate(rows)
        ]
        corr = correlate_dimensions(build_correlation_population(entries))
        assert corr.mood_productivity == pytest.approx(1.0)
        assert corr.health_productivity == pytest.approx(1.0)
        assert corr.sleep_mood > 0.9
        assert corr.to_dict()['sleep_health'] == corr.sleep_health
