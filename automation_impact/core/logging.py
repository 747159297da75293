"""Logging setup shared by the CLI and anything embedding the aggregator."""
from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Connection-pool chatter from the remote Jira fetch.
NOISY_LOGGERS = ("urllib3",)


def configure_logging(level: str | None = None) -> None:
    """Initialize basic logging for the ingestion and metrics run.

    The level comes from ``level`` or the ``LOG_LEVEL`` environment variable
    (defaults to ``INFO``). Below ``DEBUG`` the HTTP client loggers are held
    at ``WARNING``.
    """

    resolved_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=resolved_level, format=LOG_FORMAT)
    if resolved_level != "DEBUG":
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
