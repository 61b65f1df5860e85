"""Progress Insights - analytics and insight engine for a personal productivity tracker."""

__version__ = "0.1.0"
__author__ = "Progress Insights Team"

from .services import (
    AnalyticsData,
    InsightsData,
    calculate_comprehensive_stats,
    generate_productivity_insights,
)

__all__ = [
    "AnalyticsData",
    "InsightsData",
    "calculate_comprehensive_stats",
    "generate_productivity_insights",
    "__version__",
]
