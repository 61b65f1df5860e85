"""CLI commands for running the analytics engine over a record snapshot.

Provides:
- ``stats``: comprehensive stats for a reporting period, optionally with insights
- ``insights``: the recommendation / achievement / pattern feed on its own
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
import tabulate
from rich.console import Console
from rich.markup import escape

from ..config import PERIOD_CHOICES, ConfigModel, get_config, load_config
from ..services.analytics import (
    ComprehensiveStats,
    build_stats_report,
    generate_productivity_insights,
    insights_data_for,
)
from ..services.insights import ProductivityInsights
from ..storage import SnapshotError, load_snapshot
from ..utils.datetime import now_utc, parse_datetime
from ..utils.validation import RecordValidationError

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

error_console = Console(stderr=True)


class IsoDateTime(click.ParamType):
    """Click parameter accepting ISO 8601 dates and datetimes."""
    name = "iso-datetime"

    def convert(self, value, param, ctx):
        if isinstance(value, datetime):
            return value
        try:
            return parse_datetime(value)
        except ValueError:
            self.fail(f"{value!r} is not an ISO 8601 date or datetime", param, ctx)


# Console formatting helpers
def format_duration(seconds: float) -> str:
    """Format seconds as hours and minutes"""
    minutes = int(seconds // 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes}m"


def format_table(data: List[Dict], tablefmt: str = "simple") -> str:
    """Format data as a table"""
    if not data:
        return "No data available"
    return tabulate.tabulate(data, headers="keys", tablefmt=tablefmt)


def section(title: str, icon: str, config: ConfigModel) -> str:
    heading = f"{icon} {title}" if config.use_emoji else title
    return f"\n{heading}\n{'-' * 50}"


def _format_stats_report(stats: ComprehensiveStats, period: str, now: datetime,
                         config: ConfigModel) -> str:
    """Format the stats snapshot for console display"""
    fmt = config.table_style
    output = [
        "=" * 60,
        f"PROGRESS STATS ({period.upper()})".center(60),
        f"as of {now.strftime(config.date_format)}".center(60),
        "=" * 60,
    ]

    overview = stats.overview
    output.append(section("OVERVIEW", "📊", config))
    output.append(format_table([
        {"Metric": "Goals", "Value": f"{overview.completed_goals}/{overview.total_goals} "
                                     f"({overview.goal_completion_rate}%)"},
        {"Metric": "Todos", "Value": f"{overview.completed_todos}/{overview.total_todos} "
                                     f"({overview.todo_completion_rate}%)"},
        {"Metric": "Overdue todos", "Value": overview.overdue_todos},
        {"Metric": "Activities", "Value": overview.total_activities},
        {"Metric": "Notes", "Value": overview.total_notes},
        {"Metric": "Progress entries", "Value": overview.total_progress_entries},
    ], fmt))

    tracking = stats.time_tracking
    output.append(section("TIME TRACKING", "⏰", config))
    output.append(format_table([
        {"Window": "Today", "Tracked": format_duration(tracking.total_time_today)},
        {"Window": "Last 7 days", "Tracked": format_duration(tracking.total_time_this_week)},
        {"Window": "Last month", "Tracked": format_duration(tracking.total_time_this_month)},
        {"Window": "Average session", "Tracked": format_duration(tracking.average_session_duration)},
        {"Window": "Most productive hour", "Tracked": tracking.most_productive_time_of_day},
    ], fmt))
    if tracking.activity_breakdown:
        output.append("")
        output.append(format_table([
            {"Activity": item.activity_title, "Time": format_duration(item.total_time),
             "Share": f"{item.percentage}%"}
            for item in tracking.activity_breakdown
        ], fmt))

    productivity = stats.productivity
    output.append(section("PRODUCTIVITY", "📈", config))
    output.append(format_table([
        {"Date": day.date, "Created": day.created, "Completed": day.completed,
         "Rate": f"{day.completion_rate}%"}
        for day in productivity.weekly_todo_completion
    ], fmt))
    if productivity.goal_progress:
        output.append("")
        output.append(format_table([
            {"Goal": goal.title, "Time elapsed": f"{goal.progress_percentage}%",
             "Days left": goal.days_until_target}
            for goal in productivity.goal_progress
        ], fmt))
    trend = productivity.progress_trend
    output.append(f"\nProgress entries: {trend.this_week} this week, {trend.last_week} last week "
                  f"({trend.change_percentage:+d}%, {trend.trend})")

    streaks = stats.engagement.streaks
    output.append(section("ENGAGEMENT", "🔥", config))
    output.append(format_table([
        {"Streak": "Progress", "Current": streaks.current_progress_streak,
         "Longest": streaks.longest_progress_streak},
        {"Streak": "Todos", "Current": streaks.current_todo_streak,
         "Longest": streaks.longest_todo_streak},
    ], fmt))
    busy_days = [day for day in stats.engagement.weekly_pattern if day.total_sessions]
    if busy_days:
        output.append("")
        output.append(format_table([
            {"Day": day.day_of_week, "Sessions": day.total_sessions,
             "Time": format_duration(day.total_time)}
            for day in busy_days
        ], fmt))

    wellbeing = stats.wellbeing
    output.append(section("WELLBEING", "😊", config))
    output.append(format_table([
        {"Dimension": "Mood", "Average": wellbeing.average_mood_score,
         "Trend": wellbeing.mood_trend.value},
        {"Dimension": "Productivity", "Average": wellbeing.average_productivity_score,
         "Trend": wellbeing.productivity_trend.value},
        {"Dimension": "Health", "Average": wellbeing.average_health_score,
         "Trend": wellbeing.health_trend.value},
        {"Dimension": "Sleep (hours)", "Average": wellbeing.average_sleep_hours,
         "Trend": wellbeing.sleep_trend.value},
    ], fmt))

    if stats.insights is not None:
        output.append(_format_insights(stats.insights, config))

    return "\n".join(output)


def _format_insights(insights: ProductivityInsights, config: ConfigModel) -> str:
    """Format the insight feed for console display"""
    output = []

    output.append(section("RECOMMENDATIONS", "🎯", config))
    if insights.recommendations:
        for i, rec in enumerate(insights.recommendations, 1):
            output.append(f"{i}. [{rec.priority}] {rec.title}: {rec.description}")
    else:
        output.append("No recommendations right now")

    if insights.achievements:
        output.append(section("ACHIEVEMENTS", "🏆", config))
        for achievement in insights.achievements:
            output.append(f"- {achievement.title}: {achievement.description}")

    if insights.patterns:
        output.append(section("PATTERNS", "🔍", config))
        icon_map = {"positive": "+", "negative": "-", "neutral": "~"}
        for pattern in insights.patterns:
            marker = icon_map.get(pattern.significance, "~")
            output.append(f"{marker} {pattern.pattern}: {pattern.description}")

    return "\n".join(output)


def _emit(data: Dict[str, Any], text: str, output_format: str) -> None:
    if output_format == 'json':
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        click.echo(text)


def _fail(message: str) -> None:
    error_console.print(f"[bold red]Error:[/bold red] {escape(message)}")
    sys.exit(1)


def _load(snapshot_path: str, strict: bool):
    try:
        return load_snapshot(snapshot_path, strict=strict)
    except SnapshotError as e:
        _fail(str(e))
    except RecordValidationError as e:
        hint = f" ({'; '.join(e.suggestions)})" if e.suggestions else ""
        _fail(f"Invalid {e.record_type} record, field '{e.field_name}': {e}{hint}")


@click.group()
@click.option("--config", type=click.Path(dir_okay=False), help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def main(ctx, config, verbose):
    """Progress Insights - stats and insights from your tracker records."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose

    settings = load_config(Path(config)) if config else get_config()
    ctx.obj['config'] = settings

    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


@main.command(name='stats')
@click.argument('snapshot', type=click.Path(exists=True, dir_okay=False))
@click.option('--period', '-p', type=click.Choice(PERIOD_CHOICES), default=None,
              help='Reporting period (defaults to the configured period)')
@click.option('--now', 'now', type=IsoDateTime(), default=None,
              help='Reference time as ISO 8601 (defaults to the current time)')
@click.option('--insights/--no-insights', 'include_insights', default=None,
              help='Attach the insight feed to the report')
@click.option('--format', '-f', 'output_format', type=click.Choice(['text', 'json']),
              default='text', help='Output format')
@click.option('--strict', is_flag=True, help='Reject records with malformed optional fields')
@click.pass_context
def stats_command(ctx, snapshot, period: Optional[str], now: Optional[datetime],
                  include_insights: Optional[bool], output_format: str, strict: bool):
    """Comprehensive stats for a record snapshot"""
    config: ConfigModel = ctx.obj['config']
    period = period or config.default_period
    now = now or now_utc()
    if include_insights is None:
        include_insights = config.include_insights

    records = _load(snapshot, strict)
    report = build_stats_report(records, period, now, include_insights, config.analytics_settings())
    logger.debug("Built %s report for %s", period, snapshot)

    _emit(report.to_dict(), _format_stats_report(report, period, now, config), output_format)


@main.command(name='insights')
@click.argument('snapshot', type=click.Path(exists=True, dir_okay=False))
@click.option('--now', 'now', type=IsoDateTime(), default=None,
              help='Reference time as ISO 8601 (defaults to the current time)')
@click.option('--format', '-f', 'output_format', type=click.Choice(['text', 'json']),
              default='text', help='Output format')
@click.option('--strict', is_flag=True, help='Reject records with malformed optional fields')
@click.pass_context
def insights_command(ctx, snapshot, now: Optional[datetime], output_format: str, strict: bool):
    """Recommendations, achievements and patterns for a record snapshot"""
    config: ConfigModel = ctx.obj['config']
    now = now or now_utc()

    records = _load(snapshot, strict)
    insights = generate_productivity_insights(insights_data_for(records, now), config.analytics_settings())

    _emit(insights.to_dict(), _format_insights(insights, config), output_format)
