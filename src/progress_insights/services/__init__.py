"""Analytics services for progress insights."""

from .time_windows import Period, DateRange, date_range_for, filter_by_date_range
from .correlation import Trend, calculate_correlation, classify_trend
from .metrics import (
    Overview,
    TimeTrackingStats,
    ProductivityStats,
    EngagementStats,
)
from .wellbeing_metrics import WellbeingStats, calculate_wellbeing_metrics
from .insights import (
    Recommendation,
    Achievement,
    Pattern,
    ProductivityInsights,
    InsightsData,
    generate_productivity_insights,
)
from .analytics import (
    AnalyticsData,
    ComprehensiveStats,
    build_stats_report,
    calculate_comprehensive_stats,
)

__all__ = [
    "Period",
    "DateRange",
    "date_range_for",
    "filter_by_date_range",
    "Trend",
    "calculate_correlation",
    "classify_trend",
    "Overview",
    "TimeTrackingStats",
    "ProductivityStats",
    "EngagementStats",
    "WellbeingStats",
    "calculate_wellbeing_metrics",
    "Recommendation",
    "Achievement",
    "Pattern",
    "ProductivityInsights",
    "InsightsData",
    "generate_productivity_insights",
    "AnalyticsData",
    "ComprehensiveStats",
    "build_stats_report",
    "calculate_comprehensive_stats",
]
