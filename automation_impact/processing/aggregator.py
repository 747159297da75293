"""Orchestrate loading, normalization, and metrics for one project."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Dict, List, Optional

from automation_impact.core.config import ImpactConfig
from automation_impact.core.models import (
    SOURCE_APPS,
    DateWindow,
    MetricsResponse,
    NormalizedEvent,
    ProjectInfo,
    utc_day_start,
)
from automation_impact.ingestion.loader import SOURCE_SPECS, discover_projects, find_project, load_project_rows
from automation_impact.processing import metrics
from automation_impact.processing.event_log import build_event_log

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectEventLog:
    """The ordered events of one project plus what ingestion had to skip."""

    project: ProjectInfo
    events: List[NormalizedEvent]
    dropped_rows: Dict[str, int]
    sources_available: List[str]
    alerts: List[str] = field(default_factory=list)


class ProjectAggregator:
    """Entry point used by the CLI and any request-handling layer.

    Holds only immutable settings; each call loads and computes from scratch,
    so one instance can serve concurrent requests.
    """

    def __init__(self, data_dir: Path, config: ImpactConfig | None = None) -> None:
        self.data_dir = Path(data_dir)
        self.config = config or ImpactConfig()

    def list_projects(self) -> List[ProjectInfo]:
        return discover_projects(self.data_dir)

    def get_event_log(self, project_id: str) -> ProjectEventLog:
        """Load, normalize, and merge every available source of a project.

        Raises ``ProjectNotFoundError`` for an unknown project.
        """

        project = find_project(self.data_dir, project_id)
        rows_by_app, alerts = load_project_rows(self.data_dir / project.id, project.id, self.config)

        events_by_app: Dict[str, List[NormalizedEvent]] = {}
        dropped: Dict[str, int] = {}
        for spec in SOURCE_SPECS:
            events, dropped_count = spec.normalizer(rows_by_app.get(spec.app, []))
            events_by_app[spec.app] = events
            dropped[spec.app] = dropped_count

        log = build_event_log(events_by_app)
        logger.info("Built event log of %d events for project %s", len(log), project.id)
        return ProjectEventLog(
            project=project,
            events=log,
            dropped_rows=dropped,
            sources_available=[app for app in SOURCE_APPS if rows_by_app.get(app)],
            alerts=alerts,
        )

    def get_metrics(
        self,
        project_id: str,
        window: Optional[DateWindow] = None,
        comparison: Optional[DateWindow] = None,
        bucketing: Optional[str] = None,
    ) -> MetricsResponse:
        """Compute the metrics response for one project.

        ``window`` defaults to the day-aligned span of the event log and
        ``comparison`` to the window of equal length just before it. Raises
        ``ProjectNotFoundError`` for an unknown project; invalid windows are
        rejected when the ``DateWindow`` is constructed.
        """

        bucketing = bucketing or self.config.trend_bucketing
        if bucketing not in metrics.BUCKET_WIDTHS:
            raise ValueError(f"Unknown bucketing '{bucketing}'")

        project_log = self.get_event_log(project_id)
        log = project_log.events

        if window is None and log:
            window = DateWindow(
                utc_day_start(log[0].timestamp),
                utc_day_start(log[-1].timestamp) + timedelta(days=1),
            )
        if comparison is None and window is not None:
            comparison = window.preceding()

        scoped = metrics.events_in_window(log, window)
        heuristics = self.config.duration_heuristics
        rate = self.config.hourly_rate_usd
        tool_costs = self.config.tool_costs_usd

        coverage = metrics.automation_coverage(log, window) if window else 0.0
        previous = metrics.automation_coverage_previous(log, window, comparison) if comparison else 0.0
        time_saved = metrics.estimated_time_saved_hours(log, heuristics)
        time_saved_by_app = metrics.estimated_time_saved_hours_by_app(log, heuristics)

        response = MetricsResponse(
            project_id=project_id,
            window=window,
            comparison_window=comparison,
            automation_coverage=coverage,
            automation_coverage_previous=previous,
            automation_coverage_delta=coverage - previous,
            total_automations=metrics.total_automations(log),
            total_events=len(log),
            window_events=len(scoped),
            window_automations=metrics.total_automations(scoped),
            estimated_time_saved_hours=time_saved,
            time_saved_hours_by_app=time_saved_by_app,
            estimated_cost_saved_usd=metrics.estimated_cost_saved_usd(time_saved, rate),
            hourly_rate_used_usd=rate,
            returns_by_app=metrics.estimated_returns_by_app(time_saved_by_app, rate, tool_costs),
            total_returns_usd=metrics.estimated_total_returns_usd(time_saved_by_app, rate, tool_costs),
            automation_trend=metrics.automation_growth_trend(log, bucketing, window) if window else [],
            manual_vs_automated=metrics.manual_vs_automated_by_app(log),
            savings_investment_trend=metrics.savings_investment_trend(
                log, rate, sum(tool_costs.values()), heuristics
            ),
            sources_available=project_log.sources_available,
            dropped_rows=project_log.dropped_rows,
            ingestion_alerts=project_log.alerts,
        )
        logger.info(
            "Computed metrics for project %s: coverage %.1f%%, %d automations",
            project_id,
            response.automation_coverage,
            response.total_automations,
        )
        return response
