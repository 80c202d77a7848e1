"""Bandcamp extractor plugin.

Resolves Bandcamp track and album URLs by scraping the tralbum record embedded
in the page, streams the 128kbps MP3 Bandcamp exposes, and searches through the
public autocomplete endpoint.

Key operations:
- validate: Classify a URL as a Bandcamp track/album page
- resolve: Fetch and parse a track or album page
- search_songs / search_albums: One search call fanned out into concurrent
  page fetches; failing candidates are dropped, never fatal
- get_related_songs: Best-effort sibling tracks from the artist's page
"""

from typing import Any
from urllib.parse import urlparse

from attrs import define, field

from playsource.config import get_logger, settings
from playsource.domain.entities import ResolveOptions, Song
from playsource.domain.errors import (
    ExtractorError,
    InvalidArgumentError,
    InvalidSongError,
    NoResultError,
    UnsupportedURLError,
)
from playsource.domain.plugins import ExtractorPlugin
from playsource.infrastructure.connectors.bandcamp import mapper
from playsource.infrastructure.connectors.bandcamp.models import (
    BandcampAlbum,
    BandcampSong,
    SearchResultCandidate,
    SearchResultType,
)
from playsource.infrastructure.connectors.bandcamp.page import TralbumPage
from playsource.infrastructure.connectors.base_connector import (
    gather_isolated,
    normalize_stream_url,
)
from playsource.infrastructure.connectors.http import HttpSession
from playsource.infrastructure.connectors.protocols import ConnectorConfig

logger = get_logger(__name__).bind(service="bandcamp")

HOST_SUFFIX = ".bandcamp.com"
TRACK_MARKER = "/track/"
ALBUM_MARKER = "/album/"

_KIND_LABELS: dict[SearchResultType, str] = {"t": "tracks", "a": "albums", "b": "artists"}


def _check_search_args(query: Any, limit: Any) -> None:
    if not isinstance(query, str):
        raise InvalidArgumentError("string", query, "query")
    if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
        raise InvalidArgumentError("natural number", limit, "limit")


@define(slots=True)
class BandcampPlugin(ExtractorPlugin):
    """Bandcamp storefront plugin.

    Attributes:
        http: HTTP session used for page fetches and search
        user_agent: Desktop browser user agent sent with page fetches
        search_url: Autocomplete search endpoint
        related_limit: Maximum number of related songs returned
        search_concurrency: Maximum in-flight page fetches per search, None for all
    """

    http: HttpSession = field(factory=HttpSession)
    user_agent: str = field(factory=lambda: settings.bandcamp.user_agent)
    search_url: str = field(factory=lambda: settings.bandcamp.search_url)
    related_limit: int = field(factory=lambda: settings.bandcamp.related_limit)
    search_concurrency: int | None = field(
        factory=lambda: settings.bandcamp.search_concurrency
    )
    connector_name: str = "bandcamp"

    # -------------------------------------------------------------------------
    # URL classification and page access
    # -------------------------------------------------------------------------

    def validate(self, url: Any) -> bool:
        """Whether the URL is a Bandcamp track or album page. Never raises."""
        if not isinstance(url, str):
            return False
        try:
            parsed = urlparse(url)
            hostname = parsed.hostname
        except ValueError:
            return False
        if not hostname or not hostname.endswith(HOST_SUFFIX):
            return False
        return TRACK_MARKER in parsed.path or ALBUM_MARKER in parsed.path

    async def fetch_page(self, url: str) -> str:
        """GET a Bandcamp page as a desktop browser would."""
        logger.debug("Fetching page", url=url)
        return await self.http.get_text(url, headers={"User-Agent": self.user_agent})

    async def _load_track(
        self, url: str, options: ResolveOptions | None = None
    ) -> BandcampSong:
        page = TralbumPage.parse(await self.fetch_page(url))
        return mapper.to_song(mapper.parse_track_page(page, url), self, options)

    async def _load_album(
        self, url: str, options: ResolveOptions | None = None
    ) -> BandcampAlbum:
        page = TralbumPage.parse(await self.fetch_page(url))
        info = mapper.parse_album_page(page, url)
        if info.dropped_tracks:
            logger.debug(
                f"Dropped {info.dropped_tracks} album track(s) without a stream",
                url=url,
            )
        return mapper.to_album(info, self, options)

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    async def resolve(
        self, url: str, options: ResolveOptions | None = None
    ) -> BandcampSong | BandcampAlbum:
        """Resolve a Bandcamp track URL to a song or an album URL to an album.

        Raises:
            UnsupportedURLError: If the URL fails validation
            ExtractorError: BANDCAMP_PLUGIN_RESOLVE_ERROR wrapping any other failure
        """
        if not self.validate(url):
            raise UnsupportedURLError(url, f"Expected a Bandcamp URL, but got {url!r}")

        try:
            if TRACK_MARKER in urlparse(url).path:
                return await self._load_track(url, options)
            return await self._load_album(url, options)
        except Exception as e:
            raise ExtractorError("BANDCAMP_PLUGIN_RESOLVE_ERROR", str(e)) from e

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    async def _search(
        self, query: str, kind: SearchResultType
    ) -> list[SearchResultCandidate]:
        """Call the search endpoint once and keep candidates of one kind.

        Raises:
            NoResultError: If no candidate of the requested kind came back
        """
        data = await self.http.post_json(
            self.search_url,
            {"search_text": query, "search_filter": kind, "full_page": False},
        )
        auto = data.get("auto") if isinstance(data, dict) else None
        results = auto.get("results") if isinstance(auto, dict) else None

        candidates = [
            SearchResultCandidate.from_api(result)
            for result in results or []
            if isinstance(result, dict) and result.get("type") == kind
        ]
        if not candidates:
            raise NoResultError(
                "BANDCAMP_PLUGIN_NO_RESULT",
                f'Cannot find any "{query}" {_KIND_LABELS[kind]} on Bandcamp!',
            )
        logger.debug(
            f"Search returned {len(candidates)} {_KIND_LABELS[kind]}", query=query
        )
        return candidates

    async def search_songs(
        self, query: str, limit: int = 10, options: ResolveOptions | None = None
    ) -> list[Song]:
        """Search Bandcamp tracks and resolve up to `limit` of them concurrently."""
        _check_search_args(query, limit)

        async def load(candidate: SearchResultCandidate) -> BandcampSong | None:
            url = candidate.page_url
            if not url:
                return None
            return await self._load_track(url, options)

        try:
            candidates = await self._search(query, "t")
            return await gather_isolated(
                candidates[:limit],
                load,
                concurrency_limit=self.search_concurrency,
                logger_instance=logger,
                description="track",
            )
        except NoResultError:
            raise
        except Exception as e:
            raise ExtractorError("BANDCAMP_PLUGIN_SEARCH_ERROR", str(e)) from e

    async def search_albums(
        self, query: str, limit: int = 10, options: ResolveOptions | None = None
    ) -> list[BandcampAlbum]:
        """Search Bandcamp albums and resolve up to `limit` of them concurrently."""
        _check_search_args(query, limit)

        async def load(candidate: SearchResultCandidate) -> BandcampAlbum | None:
            url = candidate.page_url
            if not url:
                return None
            return await self._load_album(url, options)

        try:
            candidates = await self._search(query, "a")
            return await gather_isolated(
                candidates[:limit],
                load,
                concurrency_limit=self.search_concurrency,
                logger_instance=logger,
                description="album",
            )
        except NoResultError:
            raise
        except Exception as e:
            raise ExtractorError("BANDCAMP_PLUGIN_SEARCH_ERROR", str(e)) from e

    async def search_song(
        self, query: str, options: ResolveOptions | None = None
    ) -> Song:
        songs = await self.search_songs(query, 1, options)
        if not songs:
            raise NoResultError(
                "BANDCAMP_PLUGIN_NO_RESULT", f'Cannot find "{query}" on Bandcamp!'
            )
        return songs[0]

    # -------------------------------------------------------------------------
    # Playback support
    # -------------------------------------------------------------------------

    async def get_stream_url(self, song: Song) -> str:
        stream_url = getattr(song, "stream_url", None)
        if not stream_url:
            raise InvalidSongError(
                "BANDCAMP_PLUGIN_INVALID_SONG",
                "Cannot get stream URL from invalid song.",
            )
        return normalize_stream_url(stream_url)

    async def get_related_songs(self, song: Song) -> list[Song]:
        """Other tracks from the page the song's track lives under.

        Best effort: any failure yields an empty list.
        """
        if not song.url:
            return []

        base_url = song.url.split(TRACK_MARKER)[0]
        if not base_url:
            return []

        try:
            page = TralbumPage.parse(await self.fetch_page(base_url))
            tracks, _ = mapper.playable_tracks(page, base_url)
            related = [track for track in tracks if track.id != song.id]
            return [
                mapper.to_song(track, self) for track in related[: self.related_limit]
            ]
        except Exception as e:
            logger.warning(f"Error getting related songs: {e}", url=song.url)
            return []


def get_connector_config() -> ConnectorConfig:
    """Bandcamp connector configuration."""
    return {
        "factory": BandcampPlugin,
        "priority": 10,
    }
