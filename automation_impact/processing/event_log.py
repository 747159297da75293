"""Merge per-source event sequences into one ordered event log."""
from __future__ import annotations

from typing import Iterable, List, Mapping

from automation_impact.core.models import SOURCE_APPS, NormalizedEvent

_PRECEDENCE = {app: index for index, app in enumerate(SOURCE_APPS)}


def build_event_log(events_by_app: Mapping[str, Iterable[NormalizedEvent]]) -> List[NormalizedEvent]:
    """Return all events sorted by timestamp.

    Ties are broken by source precedence (the order of ``SOURCE_APPS``) and
    then by position within that source's sequence, so identical input always
    yields an identical log.
    """

    keyed = []
    for app, events in events_by_app.items():
        precedence = _PRECEDENCE.get(app, len(_PRECEDENCE))
        for position, event in enumerate(events):
            keyed.append(((event.timestamp, precedence, app, position), event))

    keyed.sort(key=lambda item: item[0])
    return [event for _, event in keyed]
