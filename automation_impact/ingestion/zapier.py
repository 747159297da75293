"""Row schema and normalizer for Zapier task history exports.

Zapier only records zap executions, so every row is automation.
"""
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

SOURCE_APP = "Zapier"
FILE_STEM = "zapier_events"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

RULES: Tuple[ClassificationRule, ...] = (ClassificationRule("zap-execution", mode="always"),)


@dataclass(frozen=True)
class ZapierRow:
    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "id", "zap_name", "owner", "status", "category", "action_app",
        "created_at", "duration_hours",
    )
    REQUIRED_COLUMNS: ClassVar[Tuple[str, ...]] = ("id", "zap_name", "created_at")

    row_number: int
    id: str
    zap_name: str
    owner: str = ""
    status: str = ""
    category: str = ""
    action_app: str = ""
    created_at: str = ""
    duration_hours: str = ""

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str], row_number: int) -> "ZapierRow":
        return cls(row_number=row_number, **{column: mapping.get(column, "") for column in cls.COLUMNS})


def _to_event(row: ZapierRow) -> NormalizedEvent:
    run_id = require(row.id, "id")
    return NormalizedEvent(
        source_app=SOURCE_APP,
        timestamp=parse_timestamp(row.created_at, DATE_FORMAT, "created_at"),
        actor=actor_or_unassigned(row.owner),
        automation_flag=is_automated(row, RULES),
        category=category_from(row.category, row.action_app, "zap"),
        duration_hours=parse_duration(row.duration_hours, "duration_hours"),
        metadata={"id": run_id, "name": row.zap_name, "status": row.status, "tool": row.action_app},
    )


def normalize_zapier(rows: Iterable[ZapierRow]) -> Tuple[List[NormalizedEvent], int]:
    return normalize_rows(rows, _to_event, SOURCE_APP)
