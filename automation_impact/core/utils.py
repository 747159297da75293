"""Shared utility functions for the automation_impact package."""
import logging
import os
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


def load_env_file(path: Path) -> List[str]:
    """Export ``KEY=value`` lines from ``path`` into ``os.environ``.

    Variables that are already set win over the file. Returns the keys that
    were added; a missing or unreadable file adds none.
    """
    if not path.is_file():
        return []

    added = []
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        logger.debug("Could not load env file %s: %s", path, exc)
        return []

    for raw_line in lines:
        line = raw_line.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if not key or key in os.environ:
            continue
        os.environ[key] = value.strip('"').strip("'")
        added.append(key)
    return added


def clean_text(value: object) -> str:
    """Return a stripped string for any cell value, mapping ``None`` to ``""``."""
    if value is None:
        return ""
    return " ".join(str(value).split())
