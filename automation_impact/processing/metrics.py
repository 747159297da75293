"""Automation-impact metrics computed over a normalized event log.

Every function is pure: it reads the events it is given, never mutates them,
and returns the arithmetic identity (zero counts, 0% coverage, fully keyed
zero mappings) for an empty log.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from automation_impact.core.heuristics import DurationHeuristics
from automation_impact.core.models import (
    SOURCE_APPS,
    AppCounts,
    AutomationTrendPoint,
    DateWindow,
    NormalizedEvent,
    SavingsInvestmentPoint,
    utc_day_start,
)

logger = logging.getLogger(__name__)

BUCKET_WIDTHS = {
    "day": timedelta(days=1),
    "week": timedelta(weeks=1),
}


def events_in_window(events: Iterable[NormalizedEvent], window: Optional[DateWindow]) -> List[NormalizedEvent]:
    if window is None:
        return list(events)
    return [event for event in events if window.contains(event.timestamp)]


def automation_coverage(events: Sequence[NormalizedEvent], window: Optional[DateWindow] = None) -> float:
    """Percentage (0-100) of events inside ``window`` that are automated."""

    scoped = events_in_window(events, window)
    if not scoped:
        return 0.0
    automated = sum(1 for event in scoped if event.automation_flag)
    return automated / len(scoped) * 100.0


def automation_coverage_previous(
    events: Sequence[NormalizedEvent],
    current_window: Optional[DateWindow],
    previous_window: DateWindow,
) -> float:
    """Coverage over ``previous_window``.

    ``current_window`` is accepted so callers can pass both windows together;
    the relationship between the two is not checked here.
    """

    return automation_coverage(events, previous_window)


def total_automations(events: Iterable[NormalizedEvent]) -> int:
    return sum(1 for event in events if event.automation_flag)


def _event_hours(event: NormalizedEvent, heuristics: DurationHeuristics) -> float:
    if event.duration_hours is not None:
        return event.duration_hours
    return heuristics.hours_for(event.source_app, event.category)


def estimated_time_saved_hours(
    events: Iterable[NormalizedEvent],
    heuristics: Optional[DurationHeuristics] = None,
) -> float:
    """Sum hours over automated events, using heuristic defaults where duration is missing."""

    heuristics = heuristics or DurationHeuristics()
    return sum(_event_hours(event, heuristics) for event in events if event.automation_flag)


def estimated_time_saved_hours_by_app(
    events: Iterable[NormalizedEvent],
    heuristics: Optional[DurationHeuristics] = None,
) -> Dict[str, float]:
    heuristics = heuristics or DurationHeuristics()
    totals = {app: 0.0 for app in SOURCE_APPS}
    for event in events:
        if not event.automation_flag or event.source_app not in totals:
            continue
        totals[event.source_app] += _event_hours(event, heuristics)
    return totals


def _week_start(moment: datetime) -> datetime:
    day = utc_day_start(moment)
    return day - timedelta(days=day.weekday())


def _bucket_start(moment: datetime, bucketing: str) -> datetime:
    if bucketing == "week":
        return _week_start(moment)
    return utc_day_start(moment)


def automation_growth_trend(
    events: Iterable[NormalizedEvent],
    bucketing: str,
    window: DateWindow,
) -> List[AutomationTrendPoint]:
    """Count automated events per bucket across the whole window.

    Buckets are aligned (midnight UTC for days, Monday midnight UTC for
    weeks). The first bucket is the one containing ``window.start`` and
    buckets continue while they start before ``window.end``; every bucket is
    returned, including empty ones. Only events inside the window are
    counted.
    """

    if bucketing not in BUCKET_WIDTHS:
        raise ValueError(f"Unknown bucketing '{bucketing}', expected one of {sorted(BUCKET_WIDTHS)}")
    width = BUCKET_WIDTHS[bucketing]

    first = _bucket_start(window.start, bucketing)
    starts = []
    cursor = first
    while cursor < window.end:
        starts.append(cursor)
        cursor += width

    counts = [0] * len(starts)
    for event in events:
        if not event.automation_flag or not window.contains(event.timestamp):
            continue
        index = int((event.timestamp - first) // width)
        counts[index] += 1

    return [AutomationTrendPoint(bucket_start=start, automations=count) for start, count in zip(starts, counts)]


def manual_vs_automated_by_app(events: Iterable[NormalizedEvent]) -> Dict[str, AppCounts]:
    manual = defaultdict(int)
    automated = defaultdict(int)
    for event in events:
        if event.automation_flag:
            automated[event.source_app] += 1
        else:
            manual[event.source_app] += 1
    return {app: AppCounts(manual=manual[app], automated=automated[app]) for app in SOURCE_APPS}


def estimated_cost_saved_usd(time_saved_hours: float, hourly_rate_usd: float) -> float:
    """Linear cost estimate rounded to cents."""

    return round(time_saved_hours * hourly_rate_usd, 2)


def estimated_returns_by_app(
    time_saved_hours_by_app: Mapping[str, float],
    hourly_rate_usd: float,
    tool_costs_usd: Optional[Mapping[str, float]] = None,
) -> Dict[str, float]:
    """Per-app returns: cost saved minus that app's tool cost.

    Apps without a supplied tool cost return their cost saved unchanged.
    Results may be negative when a tool costs more than it saves.
    """

    tool_costs = tool_costs_usd or {}
    returns = {}
    for app in SOURCE_APPS:
        saved = estimated_cost_saved_usd(time_saved_hours_by_app.get(app, 0.0), hourly_rate_usd)
        if app in tool_costs:
            returns[app] = round(saved - tool_costs[app], 2)
        else:
            logger.debug("No tool cost for %s; returns equal cost saved", app)
            returns[app] = saved
    return returns


def estimated_total_returns_usd(
    time_saved_hours_by_app: Mapping[str, float],
    hourly_rate_usd: float,
    tool_costs_usd: Optional[Mapping[str, float]] = None,
) -> float:
    per_app = estimated_returns_by_app(time_saved_hours_by_app, hourly_rate_usd, tool_costs_usd)
    return round(sum(per_app.values()), 2)


def savings_investment_trend(
    events: Iterable[NormalizedEvent],
    hourly_rate_usd: float,
    total_investment_usd: float = 0.0,
    heuristics: Optional[DurationHeuristics] = None,
) -> List[SavingsInvestmentPoint]:
    """Monthly savings next to an evenly spread investment, for months with events."""

    heuristics = heuristics or DurationHeuristics()
    by_month: Dict[str, List[NormalizedEvent]] = defaultdict(list)
    for event in events:
        by_month[event.timestamp.strftime("%Y-%m")].append(event)

    if not by_month:
        return []

    investment_per_month = round(total_investment_usd / len(by_month), 2)
    return [
        SavingsInvestmentPoint(
            label=month,
            savings_usd=estimated_cost_saved_usd(
                estimated_time_saved_hours(by_month[month], heuristics), hourly_rate_usd
            ),
            investment_usd=investment_per_month,
        )
        for month in sorted(by_month)
    ]
