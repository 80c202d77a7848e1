"""Connector configuration types.

Every connector module exposes `get_connector_config()` returning a
ConnectorConfig, which lets the registry discover and order plugins without
factory code changes.
"""

from collections.abc import Callable
from typing import TypedDict

from playsource.domain.plugins import PlayableExtractorPlugin


class ConnectorConfig(TypedDict):
    """Type definition for connector configuration.

    Attributes:
        factory: Creates a plugin instance
        priority: Position in the host's plugin order, lower first
    """

    factory: Callable[[], PlayableExtractorPlugin]
    priority: int
