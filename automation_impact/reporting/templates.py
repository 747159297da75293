"""Flatten the event log into display rows for the normalization debug view."""
import csv
from typing import Any, Dict, Iterable, List, TextIO

from automation_impact.core.models import NormalizedEvent
from automation_impact.core.utils import clean_text


EVENT_HEADERS = [
    "Timestamp",
    "App",
    "Type",
    "Actor",
    "Category",
    "Duration_Hours",
    "Item_Id",
    "Item_Name",
    "Status",
]


def _format_hours(value: float | None) -> str:
    if value is None:
        return ""
    return f"{value:.2f}"


def event_to_row(event: NormalizedEvent) -> Dict[str, Any]:
    """Convert a NormalizedEvent into the debug-table dictionary."""

    metadata = event.metadata or {}
    row = {
        "Timestamp": event.timestamp.isoformat(),
        "App": event.source_app,
        "Type": "AUTOMATED" if event.automation_flag else "MANUAL",
        "Actor": clean_text(event.actor),
        "Category": event.category,
        "Duration_Hours": _format_hours(event.duration_hours),
        "Item_Id": clean_text(metadata.get("id")),
        "Item_Name": clean_text(metadata.get("name")),
        "Status": clean_text(metadata.get("status") or metadata.get("activity_type")),
    }
    return row


def events_to_rows(events: Iterable[NormalizedEvent]) -> List[Dict[str, Any]]:
    """Convert an iterable of NormalizedEvent objects into debug-table rows."""

    return [event_to_row(event) for event in events]


def write_rows_csv(rows: Iterable[Dict[str, Any]], stream: TextIO) -> None:
    """Write rows to an open text stream with the debug-table headers."""

    writer = csv.DictWriter(stream, fieldnames=EVENT_HEADERS)
    writer.writeheader()
    writer.writerows(rows)
