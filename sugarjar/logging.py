"""SugarJar logging with coloured console output and optional JSON files."""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

# Per-invocation context added to every record (command name, repo, ...)
_command_context: dict[str, Any] = {}

_LEVEL_ALIASES = {"warn": "WARNING"}


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_data = {
            "ts": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }

        if _command_context:
            log_data.update(_command_context)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key in ["branch", "check_type", "check", "base", "strategy"]:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        return json.dumps(log_data)


class ConsoleFormatter(logging.Formatter):
    """Console formatter for human-readable output."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, color: bool = True) -> None:
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        """Format log record, coloured by level when enabled.

        Args:
            record: Log record to format

        Returns:
            Formatted log string
        """
        message = record.getMessage()
        if record.levelno == logging.INFO:
            return message
        if not self.color:
            return f"{record.levelname}: {message}"
        color = self.COLORS.get(record.levelname, "")
        return f"{color}{record.levelname}{self.RESET}: {message}"


def set_command_context(command: str | None = None, **kwargs: Any) -> None:
    """Set context for all subsequent log messages.

    Args:
        command: Name of the running command
        **kwargs: Additional context fields
    """
    global _command_context
    _command_context = {}

    if command is not None:
        _command_context["command"] = command
    _command_context.update(kwargs)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the sugarjar namespace.

    Args:
        name: Logger name (typically the component name)

    Returns:
        Logger instance
    """
    if name.startswith("sugarjar"):
        return logging.getLogger(name)
    return logging.getLogger(f"sugarjar.{name}")


def setup_logging(
    level: str = "info",
    log_dir: str | Path | None = None,
    json_output: bool = True,
    console_output: bool = True,
    color: bool = True,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> None:
    """Set up logging configuration.

    Args:
        level: Log level (debug, info, warn, error)
        log_dir: Directory for log files
        json_output: Whether to output JSON logs to file
        console_output: Whether to output to console
        color: Whether console output is coloured
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of backup files to keep
    """
    level_name = _LEVEL_ALIASES.get(level.lower(), level.upper())
    log_level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger("sugarjar")
    root_logger.setLevel(log_level)
    root_logger.handlers = []

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(ConsoleFormatter(color=color))
        root_logger.addHandler(console_handler)

    if log_dir and json_output:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path / "sugarjar.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(JsonFormatter())
        root_logger.addHandler(file_handler)

    root_logger.propagate = False


# Initialize default logging on import
setup_logging(console_output=True, json_output=False)
