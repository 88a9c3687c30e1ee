"""Logging setup for oracle.

The CLI picks its level from, in order, ``--log-level``, the
``ORACLE_LOG_LEVEL`` environment variable and the ``log_level`` config key.
HTTP and image-decoding libraries are held at WARNING unless oracle itself
runs at DEBUG, so a completion's debug output is not buried under urllib3
connection chatter and Pillow chunk traces.
"""

from __future__ import annotations

import logging
import os
from typing import Final

DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_LOG_LEVEL: Final[str] = "WARNING"
LOG_LEVEL_ENV_VAR: Final[str] = "ORACLE_LOG_LEVEL"
LIBRARY_LOGGERS: Final[tuple[str, ...]] = ("urllib3", "PIL")
_LEVELS: Final[dict[str, int]] = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def resolve_log_level(cli_level: str | None = None, configured: str | None = None) -> str:
    """Return the level name to use: CLI flag, then environment, then config."""

    for level in (cli_level, os.getenv(LOG_LEVEL_ENV_VAR), configured):
        if level and level.strip():
            return level.strip().upper()
    return DEFAULT_LOG_LEVEL


def configure_logging(level: str = DEFAULT_LOG_LEVEL, fmt: str | None = None) -> None:
    """Configure application logging.

    Args:
        level: Logging level name (e.g., "INFO", "DEBUG").
        fmt: Optional logging format string.
    """

    numeric = normalize_level(level)
    logging.basicConfig(level=numeric, format=fmt or DEFAULT_LOG_FORMAT)
    logging.getLogger().setLevel(numeric)
    library_level = logging.DEBUG if numeric <= logging.DEBUG else max(numeric, logging.WARNING)
    for name in LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module or component."""

    return logging.getLogger(name)


def normalize_level(level: str) -> int:
    """Map a level name to its numeric value, defaulting to WARNING."""

    return _LEVELS.get(level.strip().upper(), logging.WARNING)
