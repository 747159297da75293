"""Data ingestion package: source readers, row schemas, and normalizers."""
from automation_impact.ingestion.asana import AsanaRow, normalize_asana
from automation_impact.ingestion.common import ClassificationRule, is_automated, read_table
from automation_impact.ingestion.hubspot import HubSpotRow, normalize_hubspot
from automation_impact.ingestion.jira import JiraRow, normalize_jira
from automation_impact.ingestion.jira_api import fetch_jira_rows
from automation_impact.ingestion.loader import (
    SOURCE_SPECS,
    discover_projects,
    find_project,
    load_project_rows,
)
from automation_impact.ingestion.microsoft365 import Microsoft365Row, normalize_microsoft365
from automation_impact.ingestion.zapier import ZapierRow, normalize_zapier

__all__ = [
    "AsanaRow",
    "ClassificationRule",
    "HubSpotRow",
    "JiraRow",
    "Microsoft365Row",
    "SOURCE_SPECS",
    "ZapierRow",
    "discover_projects",
    "fetch_jira_rows",
    "find_project",
    "is_automated",
    "load_project_rows",
    "normalize_asana",
    "normalize_hubspot",
    "normalize_jira",
    "normalize_microsoft365",
    "normalize_zapier",
    "read_table",
]
