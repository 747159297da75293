"""Data models for the unified event log and the metrics built from it."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple

from automation_impact.core.errors import InvalidRangeError

SourceApp = Literal["Asana", "Jira", "Zapier", "HubSpot", "Microsoft365"]

# Order doubles as the tie-break precedence when merging sources.
SOURCE_APPS: Tuple[str, ...] = ("Asana", "Jira", "Zapier", "HubSpot", "Microsoft365")

UNASSIGNED_ACTOR = "unassigned"


@dataclass(frozen=True)
class NormalizedEvent:
    """Represents a single activity from any source in the canonical shape."""

    source_app: str
    timestamp: datetime
    actor: str
    automation_flag: bool
    category: str
    duration_hours: Optional[float] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain dictionary with an ISO timestamp."""

        payload = asdict(self)
        payload["timestamp"] = self.timestamp.isoformat()
        payload["metadata"] = dict(self.metadata)
        return payload


@dataclass(frozen=True)
class DateWindow:
    """Half-open ``[start, end)`` interval of timezone-aware datetimes."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise InvalidRangeError("Window bounds must be timezone-aware")
        if self.end <= self.start:
            raise InvalidRangeError(
                f"Window end {self.end.isoformat()} must be after start {self.start.isoformat()}"
            )

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    @property
    def length(self) -> timedelta:
        return self.end - self.start

    def preceding(self) -> "DateWindow":
        """Return the window of equal length that ends where this one starts."""

        return DateWindow(self.start - self.length, self.start)

    def to_dict(self) -> Dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


def utc_day_start(moment: datetime) -> datetime:
    """Floor a timestamp to midnight UTC."""

    moment = moment.astimezone(timezone.utc)
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


@dataclass(frozen=True)
class AutomationTrendPoint:
    bucket_start: datetime
    automations: int

    def to_dict(self) -> Dict[str, Any]:
        return {"bucket_start": self.bucket_start.date().isoformat(), "automations": self.automations}


@dataclass(frozen=True)
class AppCounts:
    """Manual and automated event counts for one source app."""

    manual: int = 0
    automated: int = 0

    @property
    def total(self) -> int:
        return self.manual + self.automated


@dataclass(frozen=True)
class SavingsInvestmentPoint:
    label: str
    savings_usd: float
    investment_usd: float


@dataclass(frozen=True)
class ProjectInfo:
    """A project known to the registry."""

    id: str
    name: str
    category: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class MetricsResponse:
    """Aggregate automation-impact metrics for one project query."""

    project_id: str
    window: Optional[DateWindow]
    comparison_window: Optional[DateWindow]
    automation_coverage: float
    automation_coverage_previous: float
    automation_coverage_delta: float
    total_automations: int
    total_events: int
    window_events: int
    window_automations: int
    estimated_time_saved_hours: float
    time_saved_hours_by_app: Dict[str, float]
    estimated_cost_saved_usd: float
    hourly_rate_used_usd: float
    returns_by_app: Dict[str, float]
    total_returns_usd: float
    automation_trend: List[AutomationTrendPoint]
    manual_vs_automated: Dict[str, AppCounts]
    savings_investment_trend: List[SavingsInvestmentPoint]
    sources_available: List[str]
    dropped_rows: Dict[str, int]
    ingestion_alerts: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Return a field-keyed, JSON-ready representation."""

        return {
            "project_id": self.project_id,
            "window": self.window.to_dict() if self.window else None,
            "comparison_window": self.comparison_window.to_dict() if self.comparison_window else None,
            "automation_coverage": self.automation_coverage,
            "automation_coverage_previous": self.automation_coverage_previous,
            "automation_coverage_delta": self.automation_coverage_delta,
            "total_automations": self.total_automations,
            "total_events": self.total_events,
            "window_events": self.window_events,
            "window_automations": self.window_automations,
            "estimated_time_saved_hours": self.estimated_time_saved_hours,
            "time_saved_hours_by_app": dict(self.time_saved_hours_by_app),
            "estimated_cost_saved_usd": self.estimated_cost_saved_usd,
            "hourly_rate_used_usd": self.hourly_rate_used_usd,
            "returns_by_app": dict(self.returns_by_app),
            "total_returns_usd": self.total_returns_usd,
            "automation_trend": [point.to_dict() for point in self.automation_trend],
            "manual_vs_automated": {
                app: {"manual": counts.manual, "automated": counts.automated}
                for app, counts in self.manual_vs_automated.items()
            },
            "savings_investment_trend": [asdict(point) for point in self.savings_investment_trend],
            "sources_available": list(self.sources_available),
            "dropped_rows": dict(self.dropped_rows),
            "ingestion_alerts": list(self.ingestion_alerts),
        }
