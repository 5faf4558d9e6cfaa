"""
Centralized logging configuration.

Plain text on the console for development, optional JSON lines for log
shippers, and rotating ``combined.log`` / ``error.log`` files under LOG_DIR.
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict

from .config import Settings

SERVICE_NAME = "fire-tracker"

_RESERVED_ATTRS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
    'levelno', 'lineno', 'module', 'msecs', 'pathname', 'process',
    'processName', 'relativeCreated', 'stack_info', 'exc_info', 'exc_text',
    'thread', 'threadName', 'message', 'taskName'
}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, extra fields included."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": SERVICE_NAME,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info) if record.exc_info[0] else None
            }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith('_'):
                log_data[key] = value

        return json.dumps(log_data, default=str)


def configure_logging(settings: Settings) -> None:
    """Install handlers on the root logger. Safe to call more than once."""
    root = logging.getLogger()
    root.setLevel(settings.LOG_LEVEL.upper())

    for handler in list(root.handlers):
        if getattr(handler, "_fire_tracker", False):
            root.removeHandler(handler)
            handler.close()

    if settings.LOG_JSON:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s [%(name)s] %(message)s"
        )

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    console._fire_tracker = True
    root.addHandler(console)

    if settings.LOG_TO_FILE:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)

        combined = RotatingFileHandler(
            log_dir / "combined.log", maxBytes=10 * 1024 * 1024, backupCount=10
        )
        combined.setFormatter(JSONFormatter())
        combined._fire_tracker = True
        root.addHandler(combined)

        errors = RotatingFileHandler(
            log_dir / "error.log", maxBytes=10 * 1024 * 1024, backupCount=10
        )
        errors.setLevel(logging.ERROR)
        errors.setFormatter(JSONFormatter())
        errors._fire_tracker = True
        root.addHandler(errors)
