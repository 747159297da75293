"""Metrics engine behaviour, including empty-input identities and trend buckets."""
from datetime import datetime, timedelta, timezone

import pytest

from automation_impact.core.errors import InvalidRangeError
from automation_impact.core.heuristics import DurationHeuristics
from automation_impact.core.models import SOURCE_APPS, AppCounts, DateWindow
from automation_impact.processing import metrics


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


JANUARY = DateWindow(_utc(2024, 1, 1), _utc(2024, 2, 1))


def test_single_zapier_event_scenario(make_event):
    events = [make_event(app="Zapier", category="email-automation", duration=None)]

    assert metrics.estimated_time_saved_hours(events) == 0.5
    assert metrics.total_automations(events) == 1
    assert metrics.automation_coverage(events, JANUARY) == 100.0


def test_empty_log_yields_identities():
    assert metrics.automation_coverage([], JANUARY) == 0.0
    assert metrics.automation_coverage([]) == 0.0
    assert metrics.total_automations([]) == 0
    assert metrics.estimated_time_saved_hours([]) == 0.0
    assert metrics.estimated_time_saved_hours_by_app([]) == {app: 0.0 for app in SOURCE_APPS}
    assert metrics.manual_vs_automated_by_app([]) == {app: AppCounts() for app in SOURCE_APPS}
    assert metrics.estimated_returns_by_app({}, 100.0) == {app: 0.0 for app in SOURCE_APPS}
    assert metrics.estimated_total_returns_usd({}, 100.0) == 0.0
    assert metrics.savings_investment_trend([], 100.0, 5000.0) == []


def test_coverage_counts_only_events_inside_the_window(make_event):
    events = [
        make_event(when=_utc(2023, 12, 31, 23, 59), automated=False),
        make_event(when=_utc(2024, 1, 1), automated=True),
        make_event(when=_utc(2024, 1, 15), automated=False),
        make_event(when=_utc(2024, 2, 1), automated=True),
    ]

    assert metrics.automation_coverage(events, JANUARY) == 50.0
    assert metrics.automation_coverage(events) == 50.0
    assert 0.0 <= metrics.automation_coverage(events, JANUARY) <= 100.0


def test_previous_coverage_uses_the_previous_window_only(make_event):
    events = [
        make_event(when=_utc(2023, 12, 10), automated=False),
        make_event(when=_utc(2023, 12, 11), automated=True),
        make_event(when=_utc(2023, 12, 12), automated=True),
        make_event(when=_utc(2024, 1, 10), automated=False),
    ]
    previous = DateWindow(_utc(2023, 12, 1), _utc(2024, 1, 1))

    assert metrics.automation_coverage_previous(events, JANUARY, previous) == pytest.approx(200 / 3)
    # overlapping windows are the caller's business
    assert metrics.automation_coverage_previous(events, JANUARY, JANUARY) == 0.0


def test_time_saved_prefers_explicit_duration(make_event):
    events = [
        make_event(app="Jira", category="bug", duration=2.0),
        make_event(app="Jira", category="bug", duration=None),
        make_event(app="Jira", category="bug", duration=9.0, automated=False),
        make_event(app="HubSpot", category="follow-up"),
    ]

    assert metrics.estimated_time_saved_hours(events) == pytest.approx(2.75)
    by_app = metrics.estimated_time_saved_hours_by_app(events)
    assert by_app["Jira"] == pytest.approx(2.5)
    assert by_app["HubSpot"] == pytest.approx(0.25)
    assert by_app["Asana"] == 0.0
    assert set(by_app) == set(SOURCE_APPS)


def test_time_saved_uses_custom_heuristics(make_event):
    heuristics = DurationHeuristics.from_mapping({"table": {"Zapier": {"email-automation": 2}}})

    assert metrics.estimated_time_saved_hours([make_event()], heuristics) == 2.0


def test_manual_vs_automated_counts_sum_to_app_totals(make_event):
    events = [
        make_event(app="Jira", category="bug", automated=False, labels="bug"),
        make_event(app="Jira", category="task", automated=True, labels="automation-cleanup"),
        make_event(app="Zapier"),
        make_event(app="Asana", automated=False),
    ]

    counts = metrics.manual_vs_automated_by_app(events)

    assert counts["Jira"] == AppCounts(manual=1, automated=1)
    for app in SOURCE_APPS:
        assert counts[app].total == sum(1 for event in events if event.source_app == app)


def test_weekly_trend_is_gap_free_and_aligned_to_monday(make_event):
    window = DateWindow(_utc(2024, 1, 3), _utc(2024, 1, 31))
    events = [
        make_event(when=_utc(2024, 1, 2)),  # same week as the window start but before it
        make_event(when=_utc(2024, 1, 3, 8)),
        make_event(when=_utc(2024, 1, 4), automated=False),
        make_event(when=_utc(2024, 1, 24)),
        make_event(when=_utc(2024, 1, 30, 23, 59)),
        make_event(when=_utc(2024, 1, 31)),
    ]

    trend = metrics.automation_growth_trend(events, "week", window)

    assert [point.bucket_start for point in trend] == [
        _utc(2024, 1, 1),
        _utc(2024, 1, 8),
        _utc(2024, 1, 15),
        _utc(2024, 1, 22),
        _utc(2024, 1, 29),
    ]
    assert [point.automations for point in trend] == [1, 0, 0, 1, 1]
    in_range = sum(1 for event in events if event.automation_flag and window.contains(event.timestamp))
    assert sum(point.automations for point in trend) == in_range


def test_daily_trend_bucket_count_matches_range(make_event):
    window = DateWindow(_utc(2024, 1, 1), _utc(2024, 1, 11))

    trend = metrics.automation_growth_trend([make_event(when=_utc(2024, 1, 10, 23))], "day", window)

    assert len(trend) == 10
    assert len({point.bucket_start for point in trend}) == 10
    assert trend[-1].automations == 1
    assert all(later.bucket_start - earlier.bucket_start == timedelta(days=1) for earlier, later in zip(trend, trend[1:]))


def test_trend_rejects_unknown_bucketing():
    with pytest.raises(ValueError):
        metrics.automation_growth_trend([], "month", JANUARY)


def test_cost_saved_is_linear_in_rate():
    assert metrics.estimated_cost_saved_usd(5.25, 100.0) == 525.0
    assert metrics.estimated_cost_saved_usd(1 / 3, 90.0) == 30.0
    assert metrics.estimated_cost_saved_usd(0.0, 100.0) == 0.0


def test_returns_subtract_tool_cost_or_fall_back_to_cost_saved():
    hours = {"Zapier": 10.0, "HubSpot": 2.0, "Jira": 1.0}

    returns = metrics.estimated_returns_by_app(hours, 100.0, {"Zapier": 400.0, "HubSpot": 500.0})

    assert returns["Zapier"] == 600.0
    assert returns["HubSpot"] == -300.0
    assert returns["Jira"] == 100.0
    assert returns["Asana"] == 0.0
    assert metrics.estimated_total_returns_usd(hours, 100.0, {"Zapier": 400.0, "HubSpot": 500.0}) == 400.0
    assert metrics.estimated_total_returns_usd(hours, 100.0) == 1300.0


def test_savings_investment_trend_spreads_investment_over_months(make_event):
    events = [
        make_event(when=_utc(2024, 1, 5), duration=1.0),
        make_event(when=_utc(2024, 1, 20), duration=1.0, automated=False),
        make_event(when=_utc(2024, 3, 2), duration=2.0),
    ]

    trend = metrics.savings_investment_trend(events, 100.0, 1000.0)

    assert [point.label for point in trend] == ["2024-01", "2024-03"]
    assert [point.savings_usd for point in trend] == [100.0, 200.0]
    assert [point.investment_usd for point in trend] == [500.0, 500.0]


def test_metrics_do_not_mutate_input(make_event):
    events = [make_event(when=_utc(2024, 1, 3)), make_event(when=_utc(2024, 1, 2), automated=False)]
    snapshot = list(events)

    metrics.automation_growth_trend(events, "week", JANUARY)
    metrics.manual_vs_automated_by_app(events)
    metrics.estimated_time_saved_hours(events)

    assert events == snapshot


def test_window_rejects_end_before_start():
    with pytest.raises(InvalidRangeError):
        DateWindow(_utc(2024, 2, 1), _utc(2024, 1, 1))
    with pytest.raises(InvalidRangeError):
        DateWindow(_utc(2024, 1, 1), _utc(2024, 1, 1))
    with pytest.raises(InvalidRangeError):
        DateWindow(datetime(2024, 1, 1), datetime(2024, 1, 2))
