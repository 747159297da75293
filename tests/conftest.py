"""Pytest configuration to make the local package importable without installation."""
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Ensure repository root is on sys.path for module resolution
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from automation_impact.cli import main as cli_main
from automation_impact.core.models import NormalizedEvent


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep developer IMPACT_* settings and env files out of the tests."""

    for key in (
        "IMPACT_BASE_URL",
        "IMPACT_HOURLY_RATE_USD",
        "IMPACT_TOOL_COSTS",
        "IMPACT_HEURISTICS_FILE",
        "IMPACT_TREND_BUCKETING",
        "IMPACT_REQUEST_TIMEOUT",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("IMPACT_ENV_FILE", str(tmp_path / "no-such.env"))


@pytest.fixture
def dummy_data_dir() -> Path:
    """Return the built-in dummy data directory for tests."""

    return ROOT / "dummy_data"


@pytest.fixture
def write_source(tmp_path: Path):
    """Write a CSV source file for a project under a temporary data dir."""

    def _write(project_id: str, stem: str, content: str) -> Path:
        project_dir = tmp_path / "data" / project_id
        project_dir.mkdir(parents=True, exist_ok=True)
        path = project_dir / f"{stem}.csv"
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_event():
    """Build a NormalizedEvent with sensible defaults."""

    def _make(
        app: str = "Zapier",
        when: datetime = datetime(2024, 1, 2, 10, 0, tzinfo=timezone.utc),
        automated: bool = True,
        category: str = "email-automation",
        duration: float | None = None,
        actor: str = "unassigned",
        **metadata,
    ) -> NormalizedEvent:
        return NormalizedEvent(
            source_app=app,
            timestamp=when,
            actor=actor,
            automation_flag=automated,
            category=category,
            duration_hours=duration,
            metadata=metadata,
        )

    return _make


@pytest.fixture
def run_cli(monkeypatch: pytest.MonkeyPatch):
    """Helper to invoke the CLI with custom arguments inside tests."""

    def _run(args: list[str]) -> None:
        monkeypatch.setattr(sys, "argv", ["automation_impact.cli", *args])
        cli_main()

    return _run
