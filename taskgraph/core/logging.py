"""Structured logging configuration for the task graph service.

This module sets up:
- JSON structured logs for files and non-debug consoles
- Colored console output while DEBUG is enabled
- A rotating file handler (10MB max, 5 backups)
- Scoped context injection through ``LogContext``

Modules attach structured data with the ``context`` extra::

    logger.info("Graph built", extra={"context": {"nodes": 4}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, ClassVar

from taskgraph import __version__
from taskgraph.core.config import settings


class LogLevel(str, Enum):
    """Log level enumeration for type-safe log level configuration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Format:
        {
            "timestamp": "2025-01-12T10:30:45.123Z",
            "level": "INFO",
            "logger": "taskgraph.services.schedule.driver",
            "message": "Schedule validated",
            "service": "Task Graph API",
            "version": "0.1.0",
            "context": {"status": "valid", "nodes": 4}
        }
    """

    def __init__(
        self,
        service_name: str = "Task Graph API",
        service_version: str = __version__,
    ) -> None:
        super().__init__()
        self.service_name = service_name
        self.service_version = service_version

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a single JSON line."""
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "version": self.service_version,
        }

        if hasattr(record, "context"):
            log_entry["context"] = record.context

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        # Source location only for ERROR and above
        if record.levelno >= logging.ERROR:
            log_entry["source"] = {
                "function": record.funcName,
                "line": record.lineno,
                "file": record.pathname,
            }

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class ColoredConsoleFormatter(logging.Formatter):
    """Human-readable, colored console formatter for development."""

    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[41m",  # Red background
    }
    RESET: ClassVar[str] = "\033[0m"

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors and inline context."""
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"

        if getattr(record, "context", None):
            record.msg = f"{record.msg} | Context: {json.dumps(record.context, default=str)}"

        return super().format(record)


def setup_logging(
    log_level: LogLevel | str | None = None,
    log_file: str | None = None,
    service_name: str = "Task Graph API",
    enable_json: bool = True,
    enable_console: bool = True,
) -> logging.Logger:
    """Configure the root logger with file and console handlers.

    Args:
        log_level: Logging level (enum member or name). Defaults to
            ``settings.LOG_LEVEL``. Unknown names fall back to INFO.
        log_file: Path to log file. Defaults to ``logs/app.log``.
        service_name: Service name stamped on JSON records.
        enable_json: Use JSON formatting for the file handler.
        enable_console: Attach a stdout handler.

    Returns:
        The configured root logger.
    """
    if log_level is None:
        log_level = settings.LOG_LEVEL

    log_file_path: Path
    if log_file is None:
        log_dir = Path("logs")
        log_dir.mkdir(exist_ok=True)
        log_file_path = log_dir / "app.log"
    else:
        log_file_path = Path(log_file)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)

    level_name = log_level.value if isinstance(log_level, LogLevel) else log_level.upper()
    level = getattr(logging, level_name) if level_name in LogLevel.__members__ else logging.INFO

    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    file_handler = RotatingFileHandler(
        filename=str(log_file_path),
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    if enable_json:
        file_handler.setFormatter(JSONFormatter(service_name=service_name))
    else:
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    logger.addHandler(file_handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        if settings.DEBUG:
            console_handler.setFormatter(ColoredConsoleFormatter())
        else:
            console_handler.setFormatter(JSONFormatter(service_name=service_name))
        logger.addHandler(console_handler)

    logger.info(
        f"Logging initialized - Level: {level_name}, File: {log_file_path}",
        extra={
            "context": {
                "log_level": level_name,
                "log_file": str(log_file_path),
                "service": service_name,
            }
        },
    )

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger that inherits the configuration from setup_logging().

    Examples:
        >>> from taskgraph.core.logging import get_logger
        >>> logger = get_logger(__name__)
    """
    return logging.getLogger(name)


class LogContext:
    """Attach structured context to every record a logger emits inside a scope.

    Context passed explicitly through ``extra={"context": ...}`` is merged on
    top of the scoped values.

    Examples:
        >>> logger = get_logger(__name__)
        >>> with LogContext(logger, action="validate"):
        ...     logger.info("Parsing rules")
    """

    def __init__(self, logger: logging.Logger, **context: Any) -> None:
        self.logger = logger
        self.context = context
        self._filter = _ContextFilter(context)

    def __enter__(self) -> LogContext:
        self.logger.addFilter(self._filter)
        return self

    def __exit__(self, *args: Any) -> None:
        self.logger.removeFilter(self._filter)


class _ContextFilter(logging.Filter):
    def __init__(self, context: dict[str, Any]) -> None:
        super().__init__()
        self.context = context

    def filter(self, record: logging.LogRecord) -> bool:
        existing = getattr(record, "context", None) or {}
        record.context = {**self.context, **existing}
        return True


__all__ = [
    "ColoredConsoleFormatter",
    "JSONFormatter",
    "LogContext",
    "LogLevel",
    "get_logger",
    "setup_logging",
]
