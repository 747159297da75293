"""Fetch Jira issues from the issues proxy and shape them as Jira rows."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from automation_impact.core.utils import clean_text
from automation_impact.ingestion.jira import JiraRow

logger = logging.getLogger(__name__)

ISSUES_PATH = "/api/issues"


def _display_name(value: Any) -> str:
    if isinstance(value, dict):
        return clean_text(value.get("displayName") or value.get("name"))
    return clean_text(value)


def _hours_from_seconds(value: Any) -> str:
    if value in (None, ""):
        return ""
    try:
        return str(float(value) / 3600.0)
    except (TypeError, ValueError):
        return clean_text(value)


def issue_to_row(issue: Dict[str, Any], row_number: int) -> JiraRow:
    """Map one issue payload (REST ``fields`` shape or flattened proxy shape) to a row."""

    fields = issue.get("fields") or {}
    labels = fields.get("labels", issue.get("labels")) or []
    if isinstance(labels, (list, tuple)):
        labels = ",".join(clean_text(label) for label in labels)

    return JiraRow(
        row_number=row_number,
        issue_key=clean_text(issue.get("key") or issue.get("id")),
        summary=clean_text(fields.get("summary") or issue.get("summary")),
        assignee=_display_name(fields.get("assignee") or issue.get("assignee")),
        status=_display_name(fields.get("status") or issue.get("status")),
        issue_type=_display_name(fields.get("issuetype") or issue.get("issue_type")),
        labels=clean_text(labels),
        created=clean_text(fields.get("created") or issue.get("created")),
        resolved=clean_text(fields.get("resolutiondate") or issue.get("resolved")),
        time_spent_hours=_hours_from_seconds(fields.get("timespent", issue.get("timespent"))),
    )


def _get_json(http: requests.Session, url: str, project_key: str, timeout: float) -> Any:
    response = http.get(url, params={"projectKey": project_key}, timeout=timeout)
    response.raise_for_status()
    return response.json()


def fetch_jira_rows(
    base_url: str,
    project_key: str,
    session: Optional[requests.Session] = None,
    timeout: float = 10.0,
) -> List[JiraRow]:
    """Request the project's issues and return them as ``JiraRow`` objects.

    Network and payload errors propagate; the loader decides how to treat an
    unreachable source.
    """

    url = f"{base_url.rstrip('/')}{ISSUES_PATH}"
    logger.info("Fetching Jira issues for %s from %s", project_key, url)
    if session is None:
        with requests.Session() as owned:
            payload = _get_json(owned, url, project_key, timeout)
    else:
        payload = _get_json(session, url, project_key, timeout)

    issues = payload.get("issues") if isinstance(payload, dict) else payload
    if not isinstance(issues, list):
        raise ValueError("Jira issues payload must contain a list of issues")

    rows = [issue_to_row(issue, index) for index, issue in enumerate(issues, start=1) if isinstance(issue, dict)]
    logger.info("Fetched %d Jira issues for %s", len(rows), project_key)
    return rows
