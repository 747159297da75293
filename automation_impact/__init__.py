"""Normalize SaaS usage exports into one event log and compute automation-impact metrics."""
from automation_impact.core import (
    SOURCE_APPS,
    AppCounts,
    AutomationImpactError,
    AutomationTrendPoint,
    DateWindow,
    DurationHeuristics,
    ImpactConfig,
    InvalidRangeError,
    MetricsResponse,
    NormalizedEvent,
    ProjectInfo,
    ProjectNotFoundError,
    configure_logging,
)
from automation_impact.ingestion import (
    discover_projects,
    load_project_rows,
    normalize_asana,
    normalize_hubspot,
    normalize_jira,
    normalize_microsoft365,
    normalize_zapier,
)
from automation_impact.processing import ProjectAggregator, build_event_log

__all__ = [
    "AppCounts",
    "AutomationImpactError",
    "AutomationTrendPoint",
    "DateWindow",
    "DurationHeuristics",
    "ImpactConfig",
    "InvalidRangeError",
    "MetricsResponse",
    "NormalizedEvent",
    "ProjectAggregator",
    "ProjectInfo",
    "ProjectNotFoundError",
    "SOURCE_APPS",
    "build_event_log",
    "configure_logging",
    "discover_projects",
    "load_project_rows",
    "normalize_asana",
    "normalize_hubspot",
    "normalize_jira",
    "normalize_microsoft365",
    "normalize_zapier",
]
