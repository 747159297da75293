"""Runtime configuration for the aggregator and its data sources."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

from automation_impact.core.heuristics import DurationHeuristics
from automation_impact.core.models import SOURCE_APPS
from automation_impact.core.utils import load_env_file

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = Path("secrets/impact.env")
DEFAULT_HOURLY_RATE_USD = 100.0
DEFAULT_REQUEST_TIMEOUT = 10.0
TREND_BUCKETINGS = ("day", "week")


@dataclass(frozen=True)
class ImpactConfig:
    """Explicit settings passed to the aggregator at construction.

    ``base_url`` is the host used for remote data retrieval (currently the
    Jira issues proxy). When it is ``None`` every source is read from local
    files.
    """

    base_url: Optional[str] = None
    hourly_rate_usd: float = DEFAULT_HOURLY_RATE_USD
    tool_costs_usd: Mapping[str, float] = field(default_factory=dict)
    duration_heuristics: DurationHeuristics = field(default_factory=DurationHeuristics)
    trend_bucketing: str = "week"
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def __post_init__(self) -> None:
        if self.hourly_rate_usd < 0:
            raise ValueError("hourly_rate_usd must not be negative")
        if self.trend_bucketing not in TREND_BUCKETINGS:
            raise ValueError(f"trend_bucketing must be one of {TREND_BUCKETINGS}")
        unknown = set(self.tool_costs_usd) - set(SOURCE_APPS)
        if unknown:
            raise ValueError(f"Tool costs given for unknown apps: {sorted(unknown)}")

    @classmethod
    def from_env(cls) -> "ImpactConfig":
        """Build a config from ``IMPACT_*`` environment variables.

        ``KEY=value`` lines from ``IMPACT_ENV_FILE`` (default
        ``secrets/impact.env``) are loaded first without overriding
        variables that are already set.
        """

        env_file = Path(os.getenv("IMPACT_ENV_FILE", DEFAULT_ENV_FILE))
        added = load_env_file(env_file)
        if added:
            logger.info("Loaded %s from %s", ", ".join(sorted(added)), env_file)

        heuristics_path = os.getenv("IMPACT_HEURISTICS_FILE")
        heuristics = (
            DurationHeuristics.from_json_file(Path(heuristics_path).expanduser())
            if heuristics_path
            else DurationHeuristics()
        )

        config = cls(
            base_url=(os.getenv("IMPACT_BASE_URL") or "").rstrip("/") or None,
            hourly_rate_usd=_env_float("IMPACT_HOURLY_RATE_USD", DEFAULT_HOURLY_RATE_USD),
            tool_costs_usd=parse_tool_costs(os.getenv("IMPACT_TOOL_COSTS", "")),
            duration_heuristics=heuristics,
            trend_bucketing=os.getenv("IMPACT_TREND_BUCKETING", "week").strip().lower(),
            request_timeout=_env_float("IMPACT_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
        )
        logger.debug(
            "Resolved config: base_url=%s hourly_rate=%.2f tool_costs=%s",
            config.base_url,
            config.hourly_rate_usd,
            dict(config.tool_costs_usd),
        )
        return config


def parse_tool_costs(raw: str) -> Dict[str, float]:
    """Parse ``App=amount,App=amount`` into a mapping of tool costs in USD."""

    costs: Dict[str, float] = {}
    for chunk in raw.split(","):
        if not chunk.strip():
            continue
        if "=" not in chunk:
            raise ValueError(f"IMPACT_TOOL_COSTS entry '{chunk.strip()}' must look like App=amount")
        app, amount = (part.strip() for part in chunk.split("=", 1))
        try:
            costs[app] = float(amount)
        except ValueError as exc:
            raise ValueError(f"IMPACT_TOOL_COSTS amount for {app} is not a number: {amount!r}") from exc
    return costs


def _env_float(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be a number, got {raw!r}") from exc
