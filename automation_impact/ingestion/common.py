"""Shared helpers for reading source files and mapping rows into events."""
from __future__ import annotations

import csv
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

from openpyxl import load_workbook

from automation_impact.core.errors import RowValidationError
from automation_impact.core.models import UNASSIGNED_ACTOR, NormalizedEvent
from automation_impact.core.utils import clean_text

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT")

RULE_MODES = ("always", "equals", "contains")


@dataclass(frozen=True)
class ClassificationRule:
    """One named test that marks a raw row as automated.

    ``field`` names the row attribute to inspect; comparisons are
    case-insensitive on stripped text. ``always`` rules ignore the row.
    """

    name: str
    mode: str
    field: Optional[str] = None
    values: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.mode not in RULE_MODES:
            raise ValueError(f"Rule {self.name}: unknown mode '{self.mode}'")
        if self.mode != "always" and (not self.field or not self.values):
            raise ValueError(f"Rule {self.name}: '{self.mode}' rules need a field and values")

    def matches(self, row: Any) -> bool:
        if self.mode == "always":
            return True
        text = clean_text(getattr(row, self.field, "")).lower()
        if not text:
            return False
        if self.mode == "equals":
            return text in self.values
        return any(value in text for value in self.values)


def is_automated(row: Any, rules: Iterable[ClassificationRule]) -> bool:
    """Return True when any rule in the source's table matches the row."""

    return any(rule.matches(row) for rule in rules)


def parse_timestamp(raw: str, fmt: str, column: str) -> datetime:
    """Parse ``raw`` with exactly one literal format and return a UTC datetime.

    Naive results are taken to be UTC. No alternative formats are tried.
    """

    if not raw:
        raise RowValidationError(f"missing {column}")
    try:
        parsed = datetime.strptime(raw, fmt)
    except ValueError as exc:
        raise RowValidationError(f"{column} '{raw}' does not match {fmt}") from exc
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_duration(raw: str, column: str) -> Optional[float]:
    """Return explicit hours clamped at zero, or ``None`` when the cell is empty."""

    if not raw:
        return None
    try:
        hours = float(raw)
    except ValueError as exc:
        raise RowValidationError(f"{column} '{raw}' is not a number") from exc
    if not math.isfinite(hours):
        raise RowValidationError(f"{column} '{raw}' is not a finite number")
    return max(hours, 0.0)


def require(value: str, column: str) -> str:
    if not value:
        raise RowValidationError(f"missing {column}")
    return value


def actor_or_unassigned(value: str) -> str:
    return value or UNASSIGNED_ACTOR


def category_from(*candidates: str) -> str:
    """Pick the first non-empty candidate, lower-cased for heuristic lookups."""

    for candidate in candidates:
        if candidate:
            return candidate.strip().lower()
    return ""


def normalize_rows(
    rows: Iterable[RowT],
    convert: Callable[[RowT], NormalizedEvent],
    source_app: str,
) -> Tuple[List[NormalizedEvent], int]:
    """Convert rows one by one, dropping and counting those that fail validation."""

    events: List[NormalizedEvent] = []
    dropped = 0
    for row in rows:
        try:
            events.append(convert(row))
        except RowValidationError as exc:
            dropped += 1
            logger.warning(
                "Dropped %s row %s: %s", source_app, getattr(row, "row_number", "?"), exc
            )
    if dropped:
        logger.info("Normalized %d %s rows, dropped %d", len(events), source_app, dropped)
    return events, dropped


def read_table(path: Path) -> Tuple[List[str], List[Dict[str, str]]]:
    """Read a ``.csv`` or ``.xlsx`` file into a header and header-keyed rows.

    Every cell value is returned as stripped text. Fully empty rows are
    skipped.
    """

    if path.suffix.lower() == ".xlsx":
        return _read_workbook(path)

    with path.open(newline="", encoding="utf-8-sig") as handle:
        reader = csv.DictReader(handle)
        header = [clean_text(name) for name in reader.fieldnames or []]
        rows = []
        for raw in reader:
            row = {clean_text(key): clean_text(value) for key, value in raw.items() if key is not None}
            if any(row.values()):
                rows.append(row)
        return header, rows


def _read_workbook(path: Path) -> Tuple[List[str], List[Dict[str, str]]]:
    workbook = load_workbook(path, read_only=True, data_only=True)
    try:
        sheet = workbook.active
        values = sheet.iter_rows(values_only=True)
        first = next(values, None)
        if first is None:
            return [], []
        header = [clean_text(cell) for cell in first]
        rows = []
        for raw in values:
            row = {name: clean_text(cell) for name, cell in zip(header, raw) if name}
            if any(row.values()):
                rows.append(row)
        return header, rows
    finally:
        workbook.close()


def missing_columns(header: Sequence[str], required: Iterable[str]) -> List[str]:
    present = set(header)
    return sorted(column for column in required if column not in present)
