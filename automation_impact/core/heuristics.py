"""Default time-saved estimates used when a source row carries no duration."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping

# Hours a person would spend doing the same work by hand, keyed by app then category.
DEFAULT_DURATION_TABLE: Dict[str, Dict[str, float]] = {
    "Asana": {
        "task": 0.25,
        "approval": 0.5,
        "status-update": 0.25,
        "triage": 0.5,
    },
    "Jira": {
        "bug": 0.5,
        "task": 0.25,
        "story": 0.5,
        "automation": 0.25,
    },
    "Zapier": {
        "email-automation": 0.5,
        "data-sync": 1.0,
        "lead-routing": 0.25,
        "notification": 0.1,
        "reporting": 0.75,
    },
    "HubSpot": {
        "lead-nurture": 0.5,
        "follow-up": 0.25,
        "deal-update": 0.1,
        "qualification": 0.5,
    },
    "Microsoft365": {
        "outlook": 0.25,
        "teams": 0.5,
        "word": 0.75,
        "excel": 0.75,
        "powerpoint": 1.0,
    },
}

DEFAULT_APP_HOURS: Dict[str, float] = {
    "Asana": 0.25,
    "Jira": 0.25,
    "Zapier": 0.25,
    "HubSpot": 0.2,
    "Microsoft365": 0.25,
}

DEFAULT_FALLBACK_HOURS = 0.25


@dataclass(frozen=True)
class DurationHeuristics:
    """Lookup of default durations by ``(source_app, category)``.

    Resolution order is the exact category entry, then the per-app default,
    then ``fallback_hours``. Categories are matched case-insensitively.
    """

    table: Mapping[str, Mapping[str, float]] = field(default_factory=lambda: _copy_table(DEFAULT_DURATION_TABLE))
    app_defaults: Mapping[str, float] = field(default_factory=lambda: dict(DEFAULT_APP_HOURS))
    fallback_hours: float = DEFAULT_FALLBACK_HOURS

    def hours_for(self, source_app: str, category: str | None) -> float:
        categories = self.table.get(source_app, {})
        key = (category or "").strip().lower()
        if key in categories:
            return float(categories[key])
        return float(self.app_defaults.get(source_app, self.fallback_hours))

    @classmethod
    def from_mapping(cls, overrides: Mapping[str, Any]) -> "DurationHeuristics":
        """Merge ``table``/``app_defaults``/``fallback_hours`` overrides over the defaults."""

        table = _copy_table(DEFAULT_DURATION_TABLE)
        for app, categories in (overrides.get("table") or {}).items():
            merged = table.setdefault(app, {})
            for category, hours in categories.items():
                merged[category.strip().lower()] = _non_negative(hours, f"table.{app}.{category}")

        app_defaults = dict(DEFAULT_APP_HOURS)
        for app, hours in (overrides.get("app_defaults") or {}).items():
            app_defaults[app] = _non_negative(hours, f"app_defaults.{app}")

        fallback = overrides.get("fallback_hours", DEFAULT_FALLBACK_HOURS)
        return cls(
            table=table,
            app_defaults=app_defaults,
            fallback_hours=_non_negative(fallback, "fallback_hours"),
        )

    @classmethod
    def from_json_file(cls, path: Path) -> "DurationHeuristics":
        payload = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise ValueError(f"Heuristics file {path} must contain a JSON object")
        return cls.from_mapping(payload)


def _non_negative(value: Any, name: str) -> float:
    try:
        hours = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Heuristic {name} must be a number, got {value!r}") from exc
    if hours < 0:
        raise ValueError(f"Heuristic {name} must not be negative")
    return hours


def _copy_table(table: Mapping[str, Mapping[str, float]]) -> Dict[str, Dict[str, float]]:
    return {app: dict(categories) for app, categories in table.items()}
