"""Shared utility functions for the renewals package."""
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def get_config_value(key: str, default: str = "") -> str:
    """Get a configuration value from the environment, ignoring blank values."""

    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip()


def get_int_config(key: str, default: int) -> int:
    """Read an integer setting, falling back to ``default`` when malformed."""

    raw = get_config_value(key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r; using %d", key, raw, default)
        return default


def load_env_file(path: Path) -> None:
    """Load KEY=VALUE lines from ``path`` without overriding the environment.

    Missing files are ignored; shell-style ``export`` prefixes are accepted so
    the same file can be sourced by deployment scripts.
    """
    if not path.exists():
        return

    try:
        with path.open(encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if line.startswith("export "):
                    line = line[len("export "):].lstrip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                if not key or key in os.environ:
                    continue
                os.environ[key] = value.strip().strip('"').strip("'")
    except OSError as exc:
        logger.debug("Could not load env file %s: %s", path, exc)
