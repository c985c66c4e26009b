"""Logging setup for applications embedding beycloud."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from beycloud.config.settings import Settings


LOGGER_NAME = "beycloud"


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info and record.exc_info[0] is not None:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "value": str(record.exc_info[1]),
            }

        return json.dumps(log_data, ensure_ascii=False)


def configure_logging(
    level: Optional[str] = None,
    fmt: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> logging.Logger:
    """
    Attach a single stderr handler to the beycloud logger.

    Args:
        level: Log level name; defaults to Settings.LOG_LEVEL
        fmt: "json" or "text"; defaults to Settings.LOG_FORMAT
        settings: Optional settings instance (creates new if not provided)

    Returns:
        The configured "beycloud" logger
    """
    if level is None or fmt is None:
        settings = settings or Settings()
        level = level or settings.LOG_LEVEL
        fmt = fmt or settings.LOG_FORMAT

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"
        ))

    logger.addHandler(handler)
    logger.setLevel(level.upper())
    return logger
