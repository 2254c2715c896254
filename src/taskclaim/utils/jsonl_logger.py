"""
JSONL logging utility for taskclaim.

This module provides JSONL (JSON Lines) logging for claim operations. Each
log entry is a single JSON object on its own line, written to a daily
rotating file per service.
"""

import json
import logging
import os
import sys
import time
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from ..config.settings import LoggingSettings

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s - %(message)s"


class JSONLFormatter(logging.Formatter):
    """Custom JSONL formatter for structured logging."""

    def __init__(self, service: Optional[str] = None):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSONL entry."""
        log_entry = {
            "ts": datetime.fromtimestamp(record.created).astimezone().isoformat(),
            "level": record.levelname,
            "service": self.service or "unknown",
            "logger": record.name,
            "pid": record.process,
            "msg": record.getMessage(),
        }

        # Structured fields passed as extra={"json_data": {...}}
        json_data = getattr(record, "json_data", None)
        if json_data:
            log_entry.update(json_data)

        if record.exc_info:
            log_entry["error"] = self.formatException(record.exc_info)

        log_entry["file"] = record.filename
        log_entry["line"] = record.lineno
        if record.funcName:
            log_entry["func"] = record.funcName

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class JSONLHandler(TimedRotatingFileHandler):
    """Daily rotating file handler with JSONL formatting."""

    def __init__(self, log_dir: Union[str, Path], service: str, level: int = logging.INFO):
        service_dir = Path(log_dir) / service
        service_dir.mkdir(parents=True, exist_ok=True)

        super().__init__(
            filename=str(service_dir / f"{service}.jsonl"),
            when="midnight",
            interval=1,
            backupCount=30,  # Keep 30 days of logs
            encoding="utf-8",
        )

        self.setFormatter(JSONLFormatter(service=service))
        self.setLevel(level)

    def doRollover(self) -> None:
        """Roll over to ``YYYY-MM-DD.jsonl`` instead of the stdlib suffix."""
        if self.stream:
            self.stream.close()
            self.stream = None

        if self.backupCount > 0:
            base_path = Path(self.baseFilename)
            date_str = datetime.fromtimestamp(int(time.time())).strftime("%Y-%m-%d")
            new_filename = base_path.parent / f"{date_str}.jsonl"
            if os.path.exists(self.baseFilename):
                os.replace(self.baseFilename, str(new_filename))

        if not self.delay:
            self.stream = self._open()


def setup_jsonl_logger(
    service: str, log_dir: Union[str, Path] = "logs", level: int = logging.INFO
) -> logging.Logger:
    """
    Set up a JSONL logger for a service.

    Args:
        service: Service name, also the log subdirectory (e.g. 'claims')
        log_dir: Base log directory (default: 'logs')
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("taskclaim")
    logger.setLevel(level)

    # Clear any existing file handlers to avoid duplicates
    for handler in [h for h in logger.handlers if isinstance(h, JSONLHandler)]:
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(JSONLHandler(log_dir, service, level))
    return logger


def configure_logging(
    settings: LoggingSettings, verbose: bool = False, service: str = "claims"
) -> logging.Logger:
    """
    Configure the ``taskclaim`` logger hierarchy from settings.

    A JSONL file handler is attached when ``settings.dir`` is set; a stderr
    handler is attached when ``verbose`` is true.
    """
    level = logging.DEBUG if verbose else getattr(logging, settings.level)
    logger = logging.getLogger("taskclaim")
    logger.setLevel(level)

    if settings.dir is not None:
        setup_jsonl_logger(service, settings.dir, level)

    if verbose and not any(getattr(h, "_taskclaim_stderr", False) for h in logger.handlers):
        stream_handler = logging.StreamHandler(sys.stderr)
        if settings.format == "json":
            stream_handler.setFormatter(JSONLFormatter(service=service))
        else:
            stream_handler.setFormatter(logging.Formatter(TEXT_FORMAT))
        stream_handler._taskclaim_stderr = True
        logger.addHandler(stream_handler)

    return logger
