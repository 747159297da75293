"""Project discovery and per-source row loading."""
from __future__ import annotations

import csv
import logging
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import requests
from openpyxl.utils.exceptions import InvalidFileException

from automation_impact.core.config import ImpactConfig
from automation_impact.core.errors import ProjectNotFoundError
from automation_impact.core.models import NormalizedEvent, ProjectInfo
from automation_impact.ingestion import asana, hubspot, jira, microsoft365, zapier
from automation_impact.ingestion.common import missing_columns, read_table
from automation_impact.ingestion.jira_api import fetch_jira_rows

logger = logging.getLogger(__name__)

PROJECTS_FILE = "projects.csv"
TABLE_SUFFIXES = (".csv", ".xlsx")


@dataclass(frozen=True)
class SourceSpec:
    """Everything needed to read and normalize one source."""

    app: str
    file_stem: str
    row_type: Any
    normalizer: Callable[[List[Any]], Tuple[List[NormalizedEvent], int]]


# Listed in tie-break precedence order.
SOURCE_SPECS: Tuple[SourceSpec, ...] = (
    SourceSpec(asana.SOURCE_APP, asana.FILE_STEM, asana.AsanaRow, asana.normalize_asana),
    SourceSpec(jira.SOURCE_APP, jira.FILE_STEM, jira.JiraRow, jira.normalize_jira),
    SourceSpec(zapier.SOURCE_APP, zapier.FILE_STEM, zapier.ZapierRow, zapier.normalize_zapier),
    SourceSpec(hubspot.SOURCE_APP, hubspot.FILE_STEM, hubspot.HubSpotRow, hubspot.normalize_hubspot),
    SourceSpec(
        microsoft365.SOURCE_APP,
        microsoft365.FILE_STEM,
        microsoft365.Microsoft365Row,
        microsoft365.normalize_microsoft365,
    ),
)


def discover_projects(data_dir: Path) -> List[ProjectInfo]:
    """List projects from ``projects.csv`` or, without one, from sub-directories."""

    registry = data_dir / PROJECTS_FILE
    if registry.exists():
        header, rows = read_table(registry)
        if "id" in header:
            projects = []
            seen = set()
            for row in rows:
                project_id = row.get("id", "")
                if not project_id or project_id in seen:
                    continue
                seen.add(project_id)
                projects.append(
                    ProjectInfo(
                        id=project_id,
                        name=row.get("name") or project_id,
                        category=row.get("category", ""),
                    )
                )
            return projects
        logger.warning("%s has no 'id' column; falling back to project directories", registry)

    if not data_dir.is_dir():
        return []
    return [
        ProjectInfo(id=path.name, name=path.name)
        for path in sorted(data_dir.iterdir())
        if path.is_dir() and not path.name.startswith(".")
    ]


def find_project(data_dir: Path, project_id: str) -> ProjectInfo:
    for project in discover_projects(data_dir):
        if project.id == project_id:
            return project
    raise ProjectNotFoundError(project_id)


def _source_file(project_dir: Path, file_stem: str) -> Optional[Path]:
    for suffix in TABLE_SUFFIXES:
        candidate = project_dir / f"{file_stem}{suffix}"
        if candidate.is_file():
            return candidate
    return None


def load_source_rows(path: Path, spec: SourceSpec) -> Tuple[List[Any], Optional[str]]:
    """Read one source file into typed rows.

    Returns the rows and an alert message. A file that cannot be read or lacks
    a required column yields no rows at all.
    """

    try:
        header, raw_rows = read_table(path)
    except (OSError, UnicodeDecodeError, csv.Error, InvalidFileException, zipfile.BadZipFile, KeyError):
        logger.exception("Failed to read %s source %s", spec.app, path)
        return [], f"Failed to read {spec.app} file {path.name}"

    missing = missing_columns(header, spec.row_type.REQUIRED_COLUMNS)
    if missing:
        logger.warning("Ignoring %s file %s: missing columns %s", spec.app, path, missing)
        return [], f"{spec.app} file {path.name} is missing columns {', '.join(missing)}"

    rows = [spec.row_type.from_mapping(raw, row_number) for row_number, raw in enumerate(raw_rows, start=2)]
    return rows, None


def load_project_rows(
    project_dir: Path,
    project_id: str,
    config: ImpactConfig | None = None,
) -> Tuple[Dict[str, List[Any]], List[str]]:
    """Load raw rows for every source of one project.

    Every app key is present in the result; unavailable sources map to an
    empty list. The second element lists alerts for sources that existed but
    could not be used.
    """

    config = config or ImpactConfig()
    rows_by_app: Dict[str, List[Any]] = {}
    alerts: List[str] = []

    logger.info("Loading source rows for project %s from %s", project_id, project_dir)

    for spec in SOURCE_SPECS:
        if spec.app == jira.SOURCE_APP and config.base_url:
            rows_by_app[spec.app] = _fetch_remote_jira(config, project_id, alerts)
            continue

        path = _source_file(project_dir, spec.file_stem)
        if path is None:
            logger.info("No %s data for project %s", spec.app, project_id)
            rows_by_app[spec.app] = []
            continue

        rows, alert = load_source_rows(path, spec)
        if alert:
            alerts.append(alert)
        rows_by_app[spec.app] = rows

    logger.info(
        "Loaded %d raw rows for project %s",
        sum(len(rows) for rows in rows_by_app.values()),
        project_id,
    )
    return rows_by_app, alerts


def _fetch_remote_jira(config: ImpactConfig, project_id: str, alerts: List[str]) -> List[Any]:
    try:
        return fetch_jira_rows(config.base_url, project_id, timeout=config.request_timeout)
    except (requests.RequestException, ValueError):
        logger.exception("Failed to fetch Jira issues for project %s", project_id)
        alerts.append(f"Jira issues unavailable from {config.base_url}")
        return []
