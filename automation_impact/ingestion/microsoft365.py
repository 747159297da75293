"""Row schema, automation rules, and normalizer for Microsoft 365 activity logs."""
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

SOURCE_APP = "Microsoft365"
FILE_STEM = "microsoft365_events"
DATE_FORMAT = "%m/%d/%Y %I:%M:%S %p"

COPILOT_MARKERS = ("copilot", "ai-assisted", "ai_assisted")

RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule("copilot-activity", mode="contains", field="activity_type", values=COPILOT_MARKERS),
)


@dataclass(frozen=True)
class Microsoft365Row:
    """One activity record from the Microsoft 365 usage/audit export."""

    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "activity_id", "user", "workload", "activity_type", "item_name",
        "activity_time", "duration_hours",
    )
    REQUIRED_COLUMNS: ClassVar[Tuple[str, ...]] = ("activity_id", "activity_type", "activity_time")

    row_number: int
    activity_id: str
    activity_type: str
    user: str = ""
    workload: str = ""
    item_name: str = ""
    activity_time: str = ""
    duration_hours: str = ""

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str], row_number: int) -> "Microsoft365Row":
        return cls(row_number=row_number, **{column: mapping.get(column, "") for column in cls.COLUMNS})


def _to_event(row: Microsoft365Row) -> NormalizedEvent:
    activity_id = require(row.activity_id, "activity_id")
    return NormalizedEvent(
        source_app=SOURCE_APP,
        timestamp=parse_timestamp(row.activity_time, DATE_FORMAT, "activity_time"),
        actor=actor_or_unassigned(row.user),
        automation_flag=is_automated(row, RULES),
        category=category_from(row.workload, "activity"),
        duration_hours=parse_duration(row.duration_hours, "duration_hours"),
        metadata={
            "id": activity_id,
            "name": row.item_name,
            "activity_type": row.activity_type,
            "tool": row.workload,
        },
    )


def normalize_microsoft365(rows: Iterable[Microsoft365Row]) -> Tuple[List[NormalizedEvent], int]:
    """Map Microsoft 365 rows to events; returns the events and the number of dropped rows."""

    return normalize_rows(rows, _to_event, SOURCE_APP)
