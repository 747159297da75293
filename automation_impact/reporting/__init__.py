"""Display-oriented conversions of the event log."""
from automation_impact.reporting.templates import EVENT_HEADERS, event_to_row, events_to_rows, write_rows_csv

__all__ = ["EVENT_HEADERS", "event_to_row", "events_to_rows", "write_rows_csv"]
