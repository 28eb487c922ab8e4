"""Logging utilities shared across the renewals package."""
from __future__ import annotations

import logging
import os
from typing import Iterable

# Transport libraries log every connection at DEBUG/INFO.
NOISY_LOGGERS = ("urllib3", "google.auth", "gspread")


def configure_logging(level: str | None = None, quiet: Iterable[str] = NOISY_LOGGERS) -> None:
    """Initialize basic logging with a shared format and log level.

    The level can be provided directly or via the ``LOG_LEVEL`` environment
    variable (defaults to ``INFO``). Loggers named in ``quiet`` are held at
    ``WARNING`` so sheet traffic does not drown out write-back reports.
    """

    resolved_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=resolved_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)
