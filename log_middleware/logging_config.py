"""Local logging setup shared by the shortener, the web app and the log middleware.

Everything logs under the "url_shortener" logger. Console output is plain
text by default; with json_format each record is one JSON object per line,
and trace records marked as success carry "success": true.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import List, Optional


LOGGER_NAME = "url_shortener"
TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        if getattr(record, "success", False):
            entry["success"] = True
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _build_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return JsonFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """Configure the "url_shortener" logger.

    Replaces any handlers from an earlier call, so it is safe to call again
    (the CLI and the tests do).

    Args:
        level: Level name; unknown names fall back to INFO
        log_file: Also append to this file when given
        json_format: Emit JSON lines instead of text

    Returns:
        The configured logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = _build_formatter(json_format)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(component: Optional[str] = None) -> logging.Logger:
    """Logger for a component, nested under "url_shortener"."""
    if not component:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{component}")
