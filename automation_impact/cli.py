"""Command-line entry point for listing projects and computing their metrics."""
import argparse
import json
import sys
from dataclasses import replace
from datetime import date, datetime, time, timedelta, timezone
from pathlib import Path

from automation_impact.core.config import ImpactConfig
from automation_impact.core.errors import AutomationImpactError, InvalidRangeError
from automation_impact.core.logging import configure_logging
from automation_impact.core.models import DateWindow
from automation_impact.processing.aggregator import ProjectAggregator
from automation_impact.processing.metrics import BUCKET_WIDTHS
from automation_impact.reporting.templates import events_to_rows, write_rows_csv


def _day(value: str) -> datetime:
    """Parse ``YYYY-MM-DD`` into midnight UTC."""

    try:
        parsed = date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a YYYY-MM-DD date, got '{value}'") from exc
    return datetime.combine(parsed, time.min, tzinfo=timezone.utc)


def _window(start: datetime | None, end: datetime | None, label: str) -> DateWindow | None:
    """Build a window whose ``end`` date is inclusive."""

    if start is None and end is None:
        return None
    if start is None or end is None:
        raise InvalidRangeError(f"{label} needs both a start and an end date")
    return DateWindow(start, end + timedelta(days=1))


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with one sub-command per operation."""

    parser = argparse.ArgumentParser(description="Compute automation-impact metrics from SaaS usage exports")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=Path("dummy_data"),
        help="Directory holding projects.csv and one folder of source files per project",
    )
    parser.add_argument(
        "--base-url",
        help="Host serving /api/issues; when set, Jira rows are fetched from it instead of local files",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("projects", help="List known projects as JSON")

    metrics_parser = subparsers.add_parser("metrics", help="Print the metrics response for a project as JSON")
    metrics_parser.add_argument("project_id")
    metrics_parser.add_argument("--start", type=_day, help="First day of the reporting window")
    metrics_parser.add_argument("--end", type=_day, help="Last day of the reporting window (inclusive)")
    metrics_parser.add_argument("--compare-start", type=_day, help="First day of the comparison window")
    metrics_parser.add_argument("--compare-end", type=_day, help="Last day of the comparison window (inclusive)")
    metrics_parser.add_argument("--bucket", choices=sorted(BUCKET_WIDTHS), help="Trend bucket width")
    metrics_parser.add_argument("--hourly-rate", type=float, help="Hourly rate in USD for cost estimates")

    events_parser = subparsers.add_parser("events", help="Print the normalized event log as CSV")
    events_parser.add_argument("project_id")

    return parser


def _config(args: argparse.Namespace) -> ImpactConfig:
    config = ImpactConfig.from_env()
    if args.base_url:
        config = replace(config, base_url=args.base_url.rstrip("/"))
    if getattr(args, "hourly_rate", None) is not None:
        config = replace(config, hourly_rate_usd=args.hourly_rate)
    return config


def main() -> None:
    """Entrypoint for running the pipeline from the command line."""

    configure_logging()
    args = build_parser().parse_args()

    try:
        aggregator = ProjectAggregator(args.data_dir, _config(args))
        if args.command == "projects":
            payload = [project.to_dict() for project in aggregator.list_projects()]
            print(json.dumps(payload, indent=2))
        elif args.command == "metrics":
            window = _window(args.start, args.end, "--start/--end")
            comparison = _window(args.compare_start, args.compare_end, "--compare-start/--compare-end")
            response = aggregator.get_metrics(args.project_id, window, comparison, bucketing=args.bucket)
            print(json.dumps(response.to_dict(), indent=2))
        else:
            project_log = aggregator.get_event_log(args.project_id)
            write_rows_csv(events_to_rows(project_log.events), sys.stdout)
    except (AutomationImpactError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
