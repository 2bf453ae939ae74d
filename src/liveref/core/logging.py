# liveref/core/logging.py
"""
Process-wide logging setup.

Production runs emit one JSON object per line on stdout; local development
can switch to plain text with ``LOG_JSON=false``. HTTP client chatter is held
at WARNING unless the service itself runs at DEBUG.
"""
from __future__ import annotations

import logging
import sys

from pythonjsonlogger import jsonlogger

LOG_FIELDS = "%(asctime)s %(levelname)s %(name)s %(message)s"
PLAIN_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Third-party loggers that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def resolve_level(level: str | int) -> int:
    """Turn ``"info"``, ``"WARNING"`` or ``10`` into a logging level number.

    Raises:
        ValueError: If ``level`` names no known level.
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level '{level}'")
    return value


def build_formatter(json_format: bool = True, app_env: str | None = None) -> logging.Formatter:
    if not json_format:
        return logging.Formatter(PLAIN_FORMAT)
    static = {"app_env": app_env} if app_env else {}
    return jsonlogger.JsonFormatter(LOG_FIELDS, static_fields=static)


def configure_logging(
    level: str | int = "INFO",
    *,
    json_format: bool = True,
    app_env: str | None = None,
) -> None:
    """Route all records to stdout, replacing any existing root handlers."""
    numeric = resolve_level(level)

    root = logging.getLogger()
    root.setLevel(numeric)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(json_format, app_env))
    root.handlers = [handler]

    noisy_level = numeric if numeric <= logging.DEBUG else max(numeric, logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)
