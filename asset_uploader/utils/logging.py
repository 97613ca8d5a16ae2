"""
Logging utilities for the asset uploader.

Provides structured logging with entry/exit decorators, JSON formatting,
correlation IDs, and consistent formatting across the upload workflow.

Features:
    - Structured JSON logging for CI environments (LOG_FORMAT=json)
    - Correlation ID tracking across a single build
    - Entry/exit decorators with timing, for sync and async functions
    - Colorized console output for local builds

Example usage:
    >>> from asset_uploader.utils.logging import get_logger, log_function_call
    >>>
    >>> logger = get_logger(__name__)
    >>>
    >>> @log_function_call
    >>> def filter_assets(names: list) -> list:
    >>>     logger.info("Filtering assets", extra={"count": len(names)})
    >>>     return names
"""

import logging
import functools
import inspect
import json
import os
import uuid
from typing import Any, Callable, TypeVar, cast, Optional, Dict
from datetime import datetime, timezone
from contextvars import ContextVar

import coloredlogs

# Type variable for generic decorator typing
F = TypeVar("F", bound=Callable[..., Any])

# Context variable for correlation ID (one per build)
_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

# Global logging configuration
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Argument names and mapping keys whose values never reach the log
_SENSITIVE_MARKERS = ("secret", "token", "password", "credential", "access_key")
REDACTED = "***"

# Attributes present on every LogRecord; anything else came in via ``extra``
_STANDARD_RECORD_ATTRS = frozenset(
    [
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
        "getMessage",
        "message",
        "asctime",
    ]
)


# ============================================================================
# Correlation ID Management
# ============================================================================

def get_correlation_id() -> str:
    """
    Get current correlation ID or generate new one.

    Returns:
        Current correlation ID (generates UUID if not set)
    """
    corr_id = _correlation_id.get()
    if corr_id is None:
        corr_id = str(uuid.uuid4())
        _correlation_id.set(corr_id)
    return corr_id


def set_correlation_id(corr_id: str) -> None:
    """
    Set correlation ID for current context.

    Args:
        corr_id: Correlation ID to set

    Example:
        >>> set_correlation_id("build-12345")
        >>> # All subsequent logs will include this correlation ID
    """
    _correlation_id.set(corr_id)


def clear_correlation_id() -> None:
    """Clear correlation ID for current context."""
    _correlation_id.set(None)


# ============================================================================
# JSON Formatter
# ============================================================================

class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Example output:
        {
            "timestamp": "2026-01-04T10:30:15.123456Z",
            "level": "INFO",
            "logger": "asset_uploader.uploader",
            "message": "Uploading file",
            "correlation_id": "build-12345",
            "extra": {"key": "static/app.js"}
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": get_correlation_id(),
        }

        log_data["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_ATTRS
        }
        if extra_fields:
            log_data["extra"] = extra_fields

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        log_data["environment"] = {
            "hostname": os.getenv("HOSTNAME", "unknown"),
            "ci": os.getenv("CI", ""),
        }

        return json.dumps(log_data, default=str)


def setup_logging(level: str = "INFO", enable_colors: bool = True) -> None:
    """
    Configure global logging settings for the application.

    Sets up structured JSON logging when LOG_FORMAT=json, colorized text
    otherwise.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_colors: Whether to enable colorized console output (default: True)

    Example:
        >>> os.environ["LOG_FORMAT"] = "json"
        >>> setup_logging(level="INFO")
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    json_format = os.getenv("LOG_FORMAT", "text").lower() == "json"

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)

    if json_format:
        console_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(console_handler)
    elif enable_colors:
        coloredlogs.install(
            level=log_level,
            fmt=LOG_FORMAT,
            datefmt=LOG_DATE_FORMAT,
            logger=root_logger,
        )
    else:
        console_handler.setFormatter(
            logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
        )
        root_logger.addHandler(console_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def _is_sensitive(name: Any) -> bool:
    lowered = str(name).lower()
    return any(marker in lowered for marker in _SENSITIVE_MARKERS)


def _redact(name: str, value: Any) -> Any:
    """Mask credential-like arguments and mapping entries before they are logged."""
    if _is_sensitive(name):
        return REDACTED
    if isinstance(value, dict):
        return {
            key: REDACTED if _is_sensitive(key) else item for key, item in value.items()
        }
    return value


def _format_arguments(func: Callable[..., Any], args: tuple, kwargs: dict) -> str:
    arg_names = func.__code__.co_varnames[: func.__code__.co_argcount]
    args_repr = [f"{name}={_redact(name, value)!r}" for name, value in zip(arg_names, args)]
    kwargs_repr = [f"{key}={_redact(key, value)!r}" for key, value in kwargs.items()]
    return ", ".join(args_repr + kwargs_repr)


def log_function_call(func: F) -> F:
    """
    Decorator that logs function entry and exit with parameters and return values.

    Works on plain functions and on coroutine functions. Entry and exit are
    logged at DEBUG level, exceptions at ERROR level with traceback. The
    exception is always re-raised.

    Args:
        func: Function to be decorated

    Returns:
        Wrapped function with logging

    Example:
        >>> @log_function_call
        >>> async def upload_all(files):
        >>>     ...
        >>>
        >>> # 2026-01-04 10:30:15 - module - DEBUG - ENTER upload_all(...)
        >>> # 2026-01-04 10:30:16 - module - DEBUG - EXIT upload_all -> [...] (1.23s)
    """
    logger = get_logger(func.__module__)

    def _log_entry(args: tuple, kwargs: dict) -> str:
        correlation_id = get_correlation_id()
        if not logger.isEnabledFor(logging.DEBUG):
            return correlation_id
        logger.debug(
            f"ENTER {func.__name__}",
            extra={
                "function": func.__name__,
                "arguments": _format_arguments(func, args, kwargs),
                "correlation_id": correlation_id,
                "event": "function_entry",
            },
        )
        return correlation_id

    def _log_exit(result: Any, start_time: datetime, correlation_id: str) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        execution_time = (datetime.now() - start_time).total_seconds()
        logger.debug(
            f"EXIT {func.__name__} -> {result!r} ({execution_time:.2f}s)",
            extra={
                "function": func.__name__,
                "duration_seconds": execution_time,
                "correlation_id": correlation_id,
                "event": "function_exit",
                "status": "success",
            },
        )

    def _log_error(error: Exception, start_time: datetime, correlation_id: str) -> None:
        execution_time = (datetime.now() - start_time).total_seconds()
        logger.error(
            f"ERROR {func.__name__} raised {type(error).__name__}: {error}",
            extra={
                "function": func.__name__,
                "duration_seconds": execution_time,
                "correlation_id": correlation_id,
                "event": "function_error",
                "status": "error",
                "error_type": type(error).__name__,
                "error_message": str(error),
            },
            exc_info=True,
        )

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            correlation_id = _log_entry(args, kwargs)
            start_time = datetime.now()
            try:
                result = await func(*args, **kwargs)
            except Exception as error:
                _log_error(error, start_time, correlation_id)
                raise
            _log_exit(result, start_time, correlation_id)
            return result

        return cast(F, async_wrapper)

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        correlation_id = _log_entry(args, kwargs)
        start_time = datetime.now()
        try:
            result = func(*args, **kwargs)
        except Exception as error:
            _log_error(error, start_time, correlation_id)
            raise
        _log_exit(result, start_time, correlation_id)
        return result

    return cast(F, wrapper)
