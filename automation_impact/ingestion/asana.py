"""Row schema, automation rules, and normalizer for Asana task exports."""
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

SOURCE_APP = "Asana"
FILE_STEM = "asana_events"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

# Sections that teams use for rule-driven or bot-created tasks.
AUTOMATION_SECTIONS = ("automation", "automations", "automated", "rules", "bots", "ai assist")

RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule("automation-section", mode="equals", field="section", values=AUTOMATION_SECTIONS),
)


@dataclass(frozen=True)
class AsanaRow:
    """One task from an Asana project export."""

    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "gid", "name", "assignee", "section", "status", "category",
        "created_at", "due_on", "duration_hours",
    )
    REQUIRED_COLUMNS: ClassVar[Tuple[str, ...]] = ("gid", "name", "section", "created_at")

    row_number: int
    gid: str
    name: str
    assignee: str = ""
    section: str = ""
    status: str = ""
    category: str = ""
    created_at: str = ""
    due_on: str = ""
    duration_hours: str = ""

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str], row_number: int) -> "AsanaRow":
        return cls(row_number=row_number, **{column: mapping.get(column, "") for column in cls.COLUMNS})


def _to_event(row: AsanaRow) -> NormalizedEvent:
    gid = require(row.gid, "gid")
    return NormalizedEvent(
        source_app=SOURCE_APP,
        timestamp=parse_timestamp(row.created_at, DATE_FORMAT, "created_at"),
        actor=actor_or_unassigned(row.assignee),
        automation_flag=is_automated(row, RULES),
        category=category_from(row.category, "task"),
        duration_hours=parse_duration(row.duration_hours, "duration_hours"),
        metadata={"id": gid, "name": row.name, "status": row.status, "section": row.section},
    )


def normalize_asana(rows: Iterable[AsanaRow]) -> Tuple[List[NormalizedEvent], int]:
    """Map Asana rows to events; returns the events and the number of dropped rows."""

    return normalize_rows(rows, _to_event, SOURCE_APP)
