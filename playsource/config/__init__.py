"""Configuration module for playsource.

Public API:
----------
settings: Settings instance
    Pydantic settings object with nested configuration

get_logger(name: str) -> Logger
    Get a context-aware logger for your module

setup_loguru_logger(verbose: bool = False) -> None
    Configure Loguru logger for the application

resilient_operation(operation_name: str)
    Decorator for logging errors in external calls

Usage:
------
```python
from playsource.config import settings, get_logger

limit = settings.bandcamp.default_search_limit
logger = get_logger(__name__)
logger.info("Starting search")
```
"""

from .logging import get_logger, resilient_operation, setup_loguru_logger
from .settings import Settings, settings

__all__ = [
    "Settings",
    "get_logger",
    "resilient_operation",
    "settings",
    "setup_loguru_logger",
]
