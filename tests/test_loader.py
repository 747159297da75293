"""Project discovery and reading source files from disk."""
from pathlib import Path

from openpyxl import Workbook

from automation_impact.core.config import ImpactConfig
from automation_impact.ingestion import loader
from automation_impact.ingestion.zapier import ZapierRow


def test_projects_come_from_registry(dummy_data_dir: Path):
    projects = loader.discover_projects(dummy_data_dir)

    assert [project.id for project in projects] == ["apollo", "hermes", "atlas"]
    assert projects[0].name == "Apollo Retail Ops"
    assert projects[0].category == "Operations"


def test_projects_fall_back_to_directories(tmp_path: Path):
    (tmp_path / "beta").mkdir()
    (tmp_path / "alpha").mkdir()
    (tmp_path / ".cache").mkdir()
    (tmp_path / "notes.txt").write_text("x", encoding="utf-8")

    assert [project.id for project in loader.discover_projects(tmp_path)] == ["alpha", "beta"]
    assert loader.discover_projects(tmp_path / "missing") == []


def test_registry_skips_blank_and_duplicate_ids(tmp_path: Path):
    (tmp_path / "projects.csv").write_text("id,name\nalpha,Alpha\n,Nameless\nalpha,Again\nbeta,\n", encoding="utf-8")

    projects = loader.discover_projects(tmp_path)

    assert [(project.id, project.name) for project in projects] == [("alpha", "Alpha"), ("beta", "beta")]


def test_every_app_key_is_present_even_without_files(tmp_path: Path):
    rows_by_app, alerts = loader.load_project_rows(tmp_path / "empty", "empty")

    assert set(rows_by_app) == {"Asana", "Jira", "Zapier", "HubSpot", "Microsoft365"}
    assert all(rows == [] for rows in rows_by_app.values())
    assert alerts == []


def test_missing_required_column_makes_source_unavailable(write_source, tmp_path: Path):
    write_source("p1", "zapier_events", "id,zap_name,duration_hours\nz-1,Zap,1\n")

    rows_by_app, alerts = loader.load_project_rows(tmp_path / "data" / "p1", "p1")

    assert rows_by_app["Zapier"] == []
    assert alerts == ["Zapier file zapier_events.csv is missing columns created_at"]


def test_rows_are_numbered_from_the_first_data_line(write_source, tmp_path: Path):
    write_source(
        "p1",
        "zapier_events",
        "id,zap_name,created_at\nz-1,First,2024-01-02 10:00:00\n,,\nz-2,Second,2024-01-03 10:00:00\n",
    )

    rows_by_app, _ = loader.load_project_rows(tmp_path / "data" / "p1", "p1")

    assert [(row.id, row.row_number) for row in rows_by_app["Zapier"]] == [("z-1", 2), ("z-2", 3)]
    assert isinstance(rows_by_app["Zapier"][0], ZapierRow)


def test_xlsx_sources_are_read(tmp_path: Path):
    project_dir = tmp_path / "p1"
    project_dir.mkdir()
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(["deal_id", "deal_name", "source", "create_date", "category"])
    sheet.append(["d-1", "Renewal", "Workflow", "2024-01-03 09:00", "follow-up"])
    sheet.append([None, None, None, None, None])
    workbook.save(project_dir / "hubspot_events.xlsx")

    rows_by_app, alerts = loader.load_project_rows(project_dir, "p1")

    assert alerts == []
    assert len(rows_by_app["HubSpot"]) == 1
    assert rows_by_app["HubSpot"][0].source == "Workflow"


def test_unreadable_file_is_reported_and_skipped(tmp_path: Path, caplog):
    project_dir = tmp_path / "p1"
    project_dir.mkdir()
    (project_dir / "asana_events.xlsx").write_bytes(b"not a workbook")
    (project_dir / "zapier_events.csv").write_text("id,zap_name,created_at\nz-1,Zap,2024-01-02 10:00:00\n", encoding="utf-8")

    caplog.set_level("ERROR")
    rows_by_app, alerts = loader.load_project_rows(project_dir, "p1")

    assert rows_by_app["Asana"] == []
    assert len(rows_by_app["Zapier"]) == 1
    assert alerts == ["Failed to read Asana file asana_events.xlsx"]
    assert "asana_events.xlsx" in caplog.text


def test_remote_jira_replaces_local_file(write_source, tmp_path: Path, monkeypatch):
    write_source("p1", "jira_events", "issue_key,summary,labels,created\nL-1,Local,,2024-01-02T11:00:00.000+0000\n")
    calls = []

    def fake_fetch(base_url, project_key, timeout):
        calls.append((base_url, project_key, timeout))
        return []

    monkeypatch.setattr(loader, "fetch_jira_rows", fake_fetch)
    config = ImpactConfig(base_url="http://proxy:4000", request_timeout=3.0)

    rows_by_app, alerts = loader.load_project_rows(tmp_path / "data" / "p1", "p1", config)

    assert calls == [("http://proxy:4000", "p1", 3.0)]
    assert rows_by_app["Jira"] == []
    assert alerts == []
