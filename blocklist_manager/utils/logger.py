"""
Logging configuration module for the Zoraxy blocklist manager.

Zoraxy captures the plugin's stdout/stderr into its own log view, so everything
goes to a single console handler on the root logger:

- Colored console output in development (ENV=dev)
- JSON lines everywhere else, with structured fields passed via
  ``extra={"extra_fields": {...}}``
- Deduplication of root handlers so uvicorn reloads don't double every line
- Performance timing decorator for development/QA environments
"""

import inspect
import logging
import sys
import os
import json
import time
from typing import Optional, Dict, Any, Callable
from functools import wraps
from datetime import datetime, timezone


class ColoredFormatter(logging.Formatter):
    """Custom formatter with color support for log levels and logger names in development environments."""

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "CRITICAL": "\033[1;31m", # Bold Red
    }
    GREY = "\033[90m"  # Grey for logger names
    RESET = "\033[0m"

    def formatTime(self, record, datefmt=None):
        """Override to include milliseconds in the timestamp."""
        ct = self.converter(record.created)
        s = time.strftime(datefmt or "%Y-%m-%d %H:%M:%S", ct)
        return f"{s},{int(record.msecs):03d}"

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colored level, grey logger name and trailing structured fields."""
        original_levelname = record.levelname
        original_name = record.name

        log_color = self.COLORS.get(record.levelname, "")
        if log_color:
            record.levelname = f"{log_color}{record.levelname}{self.RESET}"
        record.name = f"{self.GREY}{record.name}{self.RESET}"

        formatted = super().format(record)

        # Restore original values for next handler
        record.levelname = original_levelname
        record.name = original_name

        fields = getattr(record, "extra_fields", None)
        if fields:
            pairs = " ".join(f"{k}={v}" for k, v in fields.items())
            formatted = f"{formatted} {self.GREY}{pairs}{self.RESET}"
        return formatted


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging in production environments."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add any extra fields
        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


def _get_log_level() -> str:
    """
    Get log level from environment variable.

    Returns:
        str: Logging level name (defaults to INFO if not set or invalid)
    """
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    return level if isinstance(logging.getLevelName(level), int) else "INFO"


def _get_environment() -> str:
    """
    Get current environment from ENV variable.

    Returns:
        str: Environment name (dev, qa, prod, etc.)
    """
    return os.getenv("ENV", "prod").lower()


def setup_logging() -> None:
    """
    Install a single console handler on the root logger.

    Safe to call more than once: existing StreamHandlers on the root logger are
    replaced, so the plugin never prints a line twice. uvicorn's own loggers are
    pointed at the root handler for the same reason.
    """
    if _get_environment() == "dev":
        formatter: logging.Formatter = ColoredFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = JSONFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    # Keep FileHandlers and anything else a host may have attached
    root_logger.handlers = [
        h for h in root_logger.handlers
        if not isinstance(h, logging.StreamHandler) or isinstance(h, logging.FileHandler)
    ]
    root_logger.addHandler(handler)
    root_logger.setLevel(_get_log_level())

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers.clear()
        uv_logger.propagate = True

    # httpx logs every request at INFO, which drowns out import progress
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get or create a logger with the specified name.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        logging.Logger: Configured logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Plugin started")
    """
    return logging.getLogger(name)


def log_execution_time(func: Optional[Callable] = None, *, level: str = "DEBUG") -> Callable:
    """
    Decorator to log function execution time.

    Wraps coroutine functions only. Active in dev and qa environments; in
    production it does nothing.

    Args:
        func: Function to decorate
        level: Log level for timing message (default: DEBUG)

    Returns:
        Callable: Decorated function

    Example:
        >>> @log_execution_time(level="INFO")
        ... async def run_import():
        ...     pass
    """
    def _log_elapsed(f: Callable, start_time: float) -> None:
        elapsed = time.perf_counter() - start_time
        logger = get_logger(f.__module__)
        log_method = getattr(logger, level.lower(), logger.debug)
        log_method(f"Function '{f.__name__}' executed in {elapsed:.4f}s")

    def decorator(f: Callable) -> Callable:
        if not inspect.iscoroutinefunction(f):
            raise TypeError(f"log_execution_time expects a coroutine function, got {f.__name__}")

        @wraps(f)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            if _get_environment() not in ("dev", "qa"):
                return await f(*args, **kwargs)
            start_time = time.perf_counter()
            try:
                return await f(*args, **kwargs)
            finally:
                _log_elapsed(f, start_time)

        return wrapper

    # Allow usage with or without parentheses
    if func is None:
        return decorator
    return decorator(func)
