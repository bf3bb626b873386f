"""Logging configuration for depgraph-extractor.

Log output goes to stderr so that stdout stays free for the console
summaries. LOG_LEVEL selects the level and LOG_FORMAT=json switches to one
JSON object per line, which CI log processors can ingest directly.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict

LOGGER_NAME = "depgraph_extractor"

_TEXT_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"
_TEXT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: str) -> int:
    """Map a level name to its numeric value, defaulting to INFO for unknown names."""
    numeric = getattr(logging, str(level).upper(), None)
    return numeric if isinstance(numeric, int) else logging.INFO


def setup_logging(level: str = "INFO", structured: bool = False) -> logging.Logger:
    """
    Set up the package logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        structured: Whether to emit JSON lines instead of text

    Returns:
        Configured logger instance
    """
    package_logger = logging.getLogger(LOGGER_NAME)

    # Re-imports must not stack handlers
    if package_logger.handlers:
        return package_logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        StructuredFormatter() if structured else logging.Formatter(_TEXT_FORMAT, datefmt=_TEXT_DATE_FORMAT)
    )
    package_logger.addHandler(handler)
    _apply_level(package_logger, resolve_level(level))
    return package_logger


def _apply_level(target: logging.Logger, numeric: int) -> None:
    target.setLevel(numeric)
    for handler in target.handlers:
        handler.setLevel(numeric)


def set_log_level(level: str) -> None:
    """Change the level of the package logger and all of its handlers (used by --log-level)."""
    _apply_level(logger, resolve_level(level))


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, with a UTC timestamp in the snapshot's ISO-8601 form."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


logger = setup_logging(
    level=os.getenv("LOG_LEVEL", "INFO"),
    structured=os.getenv("LOG_FORMAT", "").lower() == "json",
)
