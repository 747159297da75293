"""Row schema, automation rules, and normalizer for Jira issue exports."""
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

SOURCE_APP = "Jira"
FILE_STEM = "jira_events"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"

AUTOMATION_MARKERS = ("automation",)

RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule("automation-label", mode="contains", field="labels", values=AUTOMATION_MARKERS),
    ClassificationRule("automation-issue-type", mode="contains", field="issue_type", values=AUTOMATION_MARKERS),
)


@dataclass(frozen=True)
class JiraRow:
    """One issue from a Jira export or the issues proxy."""

    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "issue_key", "summary", "assignee", "status", "issue_type", "labels",
        "created", "resolved", "time_spent_hours",
    )
    REQUIRED_COLUMNS: ClassVar[Tuple[str, ...]] = ("issue_key", "summary", "labels", "created")

    row_number: int
    issue_key: str
    summary: str
    assignee: str = ""
    status: str = ""
    issue_type: str = ""
    labels: str = ""
    created: str = ""
    resolved: str = ""
    time_spent_hours: str = ""

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str], row_number: int) -> "JiraRow":
        return cls(row_number=row_number, **{column: mapping.get(column, "") for column in cls.COLUMNS})


def _to_event(row: JiraRow) -> NormalizedEvent:
    key = require(row.issue_key, "issue_key")
    return NormalizedEvent(
        source_app=SOURCE_APP,
        timestamp=parse_timestamp(row.created, DATE_FORMAT, "created"),
        actor=actor_or_unassigned(row.assignee),
        automation_flag=is_automated(row, RULES),
        category=category_from(row.issue_type, "issue"),
        duration_hours=parse_duration(row.time_spent_hours, "time_spent_hours"),
        metadata={"id": key, "name": row.summary, "status": row.status, "labels": row.labels},
    )


def normalize_jira(rows: Iterable[JiraRow]) -> Tuple[List[NormalizedEvent], int]:
    """Map Jira rows to events; returns the events and the number of dropped rows."""

    return normalize_rows(rows, _to_event, SOURCE_APP)
