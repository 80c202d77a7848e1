"""Extractor plugin contracts.

A playback host holds an ordered list of plugins. For each user input it asks
the plugins, in order, whether they accept the URL and lets the first one
resolve it into Song, Album or Playlist entities. Plugins that also implement
search can turn free-text queries into songs and albums.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Sequence
from typing import Any

from playsource.domain.entities import Album, Playlist, ResolveOptions, Song
from playsource.domain.errors import ExtractorError


class PlayableExtractorPlugin(ABC):
    """Plugin that can resolve URLs and provide stream URLs."""

    host: Any = None

    def init(self, host: Any) -> None:
        """Attach the plugin to its host. The host exposes `plugins`."""
        self.host = host

    @abstractmethod
    def validate(self, url: str) -> bool | Awaitable[bool]:
        """Return whether this plugin accepts the URL. Never raises."""

    @abstractmethod
    async def resolve(
        self, url: str, options: ResolveOptions | None = None
    ) -> Song | Album | Playlist:
        """Resolve a validated URL into a playable entity."""

    @abstractmethod
    async def get_stream_url(self, song: Song) -> str:
        """Return a direct audio stream URL for a song this plugin produced."""

    @abstractmethod
    async def get_related_songs(self, song: Song) -> Sequence[Song]:
        """Return songs related to the given song, best effort."""


class ExtractorPlugin(PlayableExtractorPlugin):
    """Plugin that can additionally search its source."""

    @abstractmethod
    async def search_song(
        self, query: str, options: ResolveOptions | None = None
    ) -> Song:
        """Return the best matching song for a query."""

    async def search_songs(
        self, query: str, limit: int = 10, options: ResolveOptions | None = None
    ) -> list[Song]:
        raise ExtractorError(
            "NOT_SUPPORTED", f"{type(self).__name__} does not support song search"
        )

    async def search_albums(
        self, query: str, limit: int = 10, options: ResolveOptions | None = None
    ) -> list[Album]:
        raise ExtractorError(
            "NOT_SUPPORTED", f"{type(self).__name__} does not support album search"
        )
