"""Extractor plugin connectors for external music sources."""

import importlib
import pkgutil
import sys

from playsource.config import get_logger
from playsource.domain.plugins import ExtractorPlugin, PlayableExtractorPlugin
from playsource.infrastructure.connectors.bandcamp import BandcampPlugin
from playsource.infrastructure.connectors.direct import DirectPlugin
from playsource.infrastructure.connectors.protocols import ConnectorConfig
from playsource.infrastructure.connectors.ytdlp import YtDlpPlugin

logger = get_logger(__name__)

# Connector registry cache
_CONNECTORS: dict[str, ConnectorConfig] = {}


def discover_connectors() -> dict[str, ConnectorConfig]:
    """Discover and register connector configurations.

    Loads every module and subpackage of this package and registers the ones
    exposing `get_connector_config()`, so a new source only needs a new module.

    Returns:
        Dictionary mapping connector names to their configurations
    """
    if _CONNECTORS:
        return _CONNECTORS

    module = sys.modules[__name__]
    package_path = module.__name__

    for _, name, _ispkg in pkgutil.iter_modules(
        module.__path__,
        prefix=f"{package_path}.",
    ):
        module_name = name.split(".")[-1]

        try:
            connector_module = importlib.import_module(name)
        except ImportError as e:
            logger.warning(f"Could not import connector module {module_name}: {e}")
            continue

        if hasattr(connector_module, "get_connector_config"):
            _CONNECTORS[module_name] = connector_module.get_connector_config()
            logger.debug(f"Registered connector: {module_name}")

    logger.debug(
        f"Discovered {len(_CONNECTORS)} connectors: {', '.join(_CONNECTORS.keys())}",
    )
    return _CONNECTORS


def build_plugins() -> list[PlayableExtractorPlugin]:
    """Instantiate every discovered connector in host order.

    The catch-all yt-dlp plugin has the highest priority value and ends up last.
    """
    configs = sorted(discover_connectors().values(), key=lambda config: config["priority"])
    return [config["factory"]() for config in configs]


__all__ = [
    "BandcampPlugin",
    "DirectPlugin",
    "ExtractorPlugin",
    "PlayableExtractorPlugin",
    "YtDlpPlugin",
    "build_plugins",
    "discover_connectors",
]
