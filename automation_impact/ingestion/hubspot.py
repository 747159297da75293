"""Row schema, automation rules, and normalizer for HubSpot deal exports."""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterable, List, Mapping, Tuple

from automation_impact.core.models import NormalizedEvent
from automation_impact.ingestion.common import (
    ClassificationRule,
    actor_or_unassigned,
    category_from,
    is_automated,
    normalize_rows,
    parse_duration,
    parse_timestamp,
    require,
)

SOURCE_APP = "HubSpot"
FILE_STEM = "hubspot_events"
DATE_FORMAT = "%Y-%m-%d %H:%M"

# Values of the deal "source" property written by HubSpot workflows.
WORKFLOW_SOURCES = ("workflow", "workflows", "automation", "automated")

RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule("workflow-source", mode="equals", field="source", values=WORKFLOW_SOURCES),
)


@dataclass(frozen=True)
class HubSpotRow:
    """One deal from a HubSpot CRM export."""

    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "deal_id", "deal_name", "owner", "deal_stage", "source", "category",
        "create_date", "close_date", "duration_hours",
    )
    REQUIRED_COLUMNS: ClassVar[Tuple[str, ...]] = ("deal_id", "deal_name", "source", "create_date")

    row_number: int
    deal_id: str
    deal_name: str
    owner: str = ""
    deal_stage: str = ""
    source: str = ""
    category: str = ""
    create_date: str = ""
    close_date: str = ""
    duration_hours: str = ""

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str], row_number: int) -> "HubSpotRow":
        return cls(row_number=row_number, **{column: mapping.get(column, "") for column in cls.COLUMNS})


def _to_event(row: HubSpotRow) -> NormalizedEvent:
    deal_id = require(row.deal_id, "deal_id")
    return NormalizedEvent(
        source_app=SOURCE_APP,
        timestamp=parse_timestamp(row.create_date, DATE_FORMAT, "create_date"),
        actor=actor_or_unassigned(row.owner),
        automation_flag=is_automated(row, RULES),
        category=category_from(row.category, row.deal_stage, "deal"),
        duration_hours=parse_duration(row.duration_hours, "duration_hours"),
        metadata={"id": deal_id, "name": row.deal_name, "status": row.deal_stage, "source": row.source},
    )


def normalize_hubspot(rows: Iterable[HubSpotRow]) -> Tuple[List[NormalizedEvent], int]:
    """Map HubSpot rows to events; returns the events and the number of dropped rows."""

    return normalize_rows(rows, _to_event, SOURCE_APP)
