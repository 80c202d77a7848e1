"""Logging configuration and utilities using Loguru.

This module provides centralized logging setup for playsource, including
structured logging with Loguru and an error handling decorator for calls
that cross into external services and tools.

Public API:
----------
setup_loguru_logger(verbose: bool = False) -> None
    Configure Loguru logger for the application

get_logger(name: str) -> Logger
    Get a context-aware logger for your module
    Usage: logger = get_logger(__name__)

@resilient_operation(operation_name: str)
    Decorator for logging errors raised by external calls
    Usage: @resilient_operation("ytdlp_resolve")

Quick Start:
-----------
1. Get a logger for your module:
    ```python
    from playsource.config import get_logger
    logger = get_logger(__name__)
    ```

2. Log with structured context:
    ```python
    logger.info("Resolved album", url=url, track_count=12)
    ```
"""

import functools
from pathlib import Path
import sys
from typing import Any

from loguru import logger

from .settings import settings

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================


def setup_loguru_logger(verbose: bool = False) -> None:
    """Configure Loguru logger for the application.

    Args:
        verbose: Enable verbose logging with debug level and detailed tracebacks

    Note:
        - Removes default logger and sets up console and file handlers
        - Console format is colorized and simplified
        - File format is serialized JSON with rotation and retention
    """
    # Remove default logger
    logger.remove()

    log_file_path = Path(settings.logging.log_file)
    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    # Add contextual info to all log records
    logger.configure(extra={"service": "playsource", "module": "root"})

    # -------------------------------------------------------------------------
    # Console Handler
    # -------------------------------------------------------------------------
    console_level = "DEBUG" if verbose else settings.logging.console_level
    logger.add(
        sink=sys.stderr,
        level=console_level,
        format=(
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:"
            "<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
        backtrace=verbose,
        diagnose=verbose,
    )

    # -------------------------------------------------------------------------
    # File Handler
    # -------------------------------------------------------------------------
    logger.add(
        sink=str(log_file_path),
        level=settings.logging.file_level,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[service]} | {extra[module]} | {name}:{function}:{line} | {message}",
        rotation="10 MB",
        retention="1 week",
        compression="zip",
        backtrace=True,
        diagnose=True,
        enqueue=not settings.logging.real_time_debug,
        catch=True,
        serialize=True,
    )


# =============================================================================
# LOGGER FACTORY
# =============================================================================


def get_logger(name: str) -> Any:  # Use Any for Loguru logger type
    """Get a pre-configured logger instance for the given module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Loguru logger bound with module context

    Example:
        ```python
        logger = get_logger(__name__).bind(service="bandcamp")
        logger.debug("Fetching page", url=url)
        ```
    """
    return logger.bind(
        module=name,
        service="playsource",
    )


# =============================================================================
# ERROR HANDLING DECORATORS
# =============================================================================


def resilient_operation(operation_name=None):
    """Decorator for service boundary operations with standardized error logging.

    Logs any exception raised by the wrapped coroutine with its traceback and
    re-raises it unchanged, so callers keep their own error handling.

    Args:
        operation_name: Optional name for the operation (defaults to function name)

    Example:
        >>> @resilient_operation("ytdlp_resolve")
        >>> async def resolve(self, url):
        >>>     return await ytdlp_json(url)
    """

    def decorator(func):
        op_name = operation_name or func.__name__

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                logger.opt(exception=e).error(f"Error in {op_name}: {e!s}")
                raise

        return wrapper

    return decorator
