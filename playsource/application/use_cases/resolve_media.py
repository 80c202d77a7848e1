"""Media resolution use case acting as the plugin host.

Holds an ordered list of extractor plugins and routes each request to the
first plugin able to handle it:
- URLs go to the first plugin whose `validate` accepts them
- Queries go to the first plugin that implements search
- Stream URL and related-song lookups go back to the plugin that produced the song
"""

from collections.abc import Sequence
import inspect

from attrs import define, field

from playsource.config import get_logger
from playsource.domain.entities import Album, Playlist, ResolveOptions, Song
from playsource.domain.errors import ExtractorError, UnsupportedURLError
from playsource.domain.plugins import ExtractorPlugin, PlayableExtractorPlugin

logger = get_logger(__name__)


@define(slots=True)
class ResolveMediaUseCase:
    """Plugin host resolving URLs and queries into playable entities."""

    plugins: list[PlayableExtractorPlugin] = field(factory=list)

    def __attrs_post_init__(self) -> None:
        for plugin in self.plugins:
            plugin.init(self)

    async def find_plugin(self, url: str) -> PlayableExtractorPlugin:
        """First plugin accepting the URL.

        Raises:
            UnsupportedURLError: If no plugin accepts it
        """
        for plugin in self.plugins:
            accepted = plugin.validate(url)
            if inspect.isawaitable(accepted):
                accepted = await accepted
            if accepted:
                logger.debug(f"{type(plugin).__name__} accepted URL", url=url)
                return plugin
        raise UnsupportedURLError(url, f"No plugin can resolve {url!r}")

    async def resolve(
        self, url: str, options: ResolveOptions | None = None
    ) -> Song | Album | Playlist:
        plugin = await self.find_plugin(url)
        return await plugin.resolve(url, options)

    def search_plugin(self) -> ExtractorPlugin:
        for plugin in self.plugins:
            if isinstance(plugin, ExtractorPlugin):
                return plugin
        raise ExtractorError("NOT_SUPPORTED", "No plugin supports search")

    async def search(
        self,
        query: str,
        limit: int = 10,
        albums: bool = False,
        options: ResolveOptions | None = None,
    ) -> Sequence[Song | Album]:
        plugin = self.search_plugin()
        if albums:
            return await plugin.search_albums(query, limit, options)
        return await plugin.search_songs(query, limit, options)

    async def get_stream_url(self, song: Song) -> str:
        return await self._plugin_for(song).get_stream_url(song)

    async def get_related_songs(self, song: Song) -> Sequence[Song]:
        return await self._plugin_for(song).get_related_songs(song)

    def _plugin_for(self, song: Song) -> PlayableExtractorPlugin:
        if isinstance(song.plugin, PlayableExtractorPlugin):
            return song.plugin
        raise ExtractorError(
            "INVALID_SONG", f"Song {song.name!r} was not produced by a plugin"
        )
