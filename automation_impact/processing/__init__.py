"""Event log assembly, metrics, and per-project aggregation."""
from automation_impact.processing.aggregator import ProjectAggregator, ProjectEventLog
from automation_impact.processing.event_log import build_event_log
from automation_impact.processing.metrics import (
    automation_coverage,
    automation_coverage_previous,
    automation_growth_trend,
    estimated_cost_saved_usd,
    estimated_returns_by_app,
    estimated_time_saved_hours,
    estimated_time_saved_hours_by_app,
    estimated_total_returns_usd,
    events_in_window,
    manual_vs_automated_by_app,
    savings_investment_trend,
    total_automations,
)

__all__ = [
    "ProjectAggregator",
    "ProjectEventLog",
    "automation_coverage",
    "automation_coverage_previous",
    "automation_growth_trend",
    "build_event_log",
    "estimated_cost_saved_usd",
    "estimated_returns_by_app",
    "estimated_time_saved_hours",
    "estimated_time_saved_hours_by_app",
    "estimated_total_returns_usd",
    "events_in_window",
    "manual_vs_automated_by_app",
    "savings_investment_trend",
    "total_automations",
]
