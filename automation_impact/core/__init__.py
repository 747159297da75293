"""Core building blocks for the automation_impact package."""
from automation_impact.core.config import ImpactConfig
from automation_impact.core.errors import (
    AutomationImpactError,
    InvalidRangeError,
    ProjectNotFoundError,
    RowValidationError,
)
from automation_impact.core.heuristics import DurationHeuristics
from automation_impact.core.logging import configure_logging
from automation_impact.core.models import (
    SOURCE_APPS,
    UNASSIGNED_ACTOR,
    AppCounts,
    AutomationTrendPoint,
    DateWindow,
    MetricsResponse,
    NormalizedEvent,
    ProjectInfo,
    SavingsInvestmentPoint,
)

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
    "ProjectInfo",
    "ProjectNotFoundError",
    "RowValidationError",
    "SOURCE_APPS",
    "SavingsInvestmentPoint",
    "UNASSIGNED_ACTOR",
    "configure_logging",
]
