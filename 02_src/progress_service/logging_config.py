"""JSON logging for the progress service.

Pipeline and stream code log with ``extra={"context": {...}}`` (run id,
trace id, collector endpoint) so a log line can be matched to its trace.
"""

import json
import logging
import logging.config
import logging.handlers
import os
from datetime import datetime, timezone
from pathlib import Path

from .config import DEFAULT_LOG_PATH


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with run/trace correlation under ``context``."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Stage failures are logged with logger.exception()
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "context"):
            log_data["context"] = record.context

        # trace ids may be None, payload echoes may hold arbitrary JSON
        return json.dumps(log_data, default=str)


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
) -> None:
    """
    Route service logs to stdout and a rotating file, both as JSON.

    Called once from ``main`` before the app starts; tests leave logging
    unconfigured and rely on pytest capture.

    Args:
        log_level: Root level name, case-insensitive. Falls back to LOG_LEVEL, then INFO.
        log_file: Destination file. Falls back to 04_logs/app.log.
    """
    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO")

    if log_file is None:
        log_file = str(DEFAULT_LOG_PATH)

    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logging_config = {
        "version": 1,
        # uvicorn and opentelemetry loggers exist before this runs
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "progress_service.logging_config.JSONFormatter",
            },
        },
        "handlers": {
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": log_file,
                "maxBytes": 10 * 1024 * 1024,  # 10 MB
                "backupCount": 5,
                "formatter": "json",
                "encoding": "utf-8",
            },
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {
            "level": log_level.upper(),
            "handlers": ["file", "console"],
        },
    }

    logging.config.dictConfig(logging_config)


def get_logger(name: str) -> logging.Logger:
    """Module logger; every service module calls this with ``__name__``."""
    return logging.getLogger(name)
