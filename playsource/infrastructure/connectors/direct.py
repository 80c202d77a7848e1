"""Direct media link plugin.

Plays audio or video files served directly over HTTP. A URL is accepted when a
HEAD request answers 200 with a media content type; metadata comes from
ffprobe when it is installed.
"""

import json
from typing import Any
from urllib.parse import urlparse

from attrs import define, field

from playsource.config import get_logger, resilient_operation, settings
from playsource.domain.entities import ResolveOptions, Song, Uploader
from playsource.domain.errors import InvalidSongError, UnsupportedURLError
from playsource.domain.plugins import PlayableExtractorPlugin
from playsource.infrastructure.connectors.http import HttpSession
from playsource.infrastructure.connectors.process import binary_available, run_process
from playsource.infrastructure.connectors.protocols import ConnectorConfig

logger = get_logger(__name__).bind(service="direct")

SOURCE = "direct_link"

DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_href(url: str) -> str:
    """Canonical form of an absolute URL.

    Lowercases the host, drops the scheme's default port and gives an empty
    path the root `/`.

    Raises:
        UnsupportedURLError: If the URL is malformed or has no scheme or host
    """
    try:
        parsed = urlparse(url)
        port = parsed.port
    except ValueError as e:
        raise UnsupportedURLError(url, f"Malformed URL: {url!r}") from e
    if not parsed.scheme or not parsed.hostname:
        raise UnsupportedURLError(url)

    host = parsed.hostname
    if ":" in host:
        host = f"[{host}]"
    if port is not None and port != DEFAULT_PORTS.get(parsed.scheme):
        host = f"{host}:{port}"
    userinfo = parsed.netloc.rpartition("@")[0]
    netloc = f"{userinfo}@{host}" if userinfo else host

    return parsed._replace(netloc=netloc, path=parsed.path or "/").geturl()


@define(frozen=True, slots=True)
class MediaMetadata:
    """Tags read from a media file."""

    title: str | None = None
    artist: str | None = None
    thumbnail: str | None = None

    @classmethod
    def from_ffprobe(cls, data: dict[str, Any]) -> "MediaMetadata":
        format_info = data.get("format") or {}
        tags = format_info.get("tags") or {}
        picture = tags.get("METADATA_BLOCK_PICTURE")
        return cls(
            title=tags.get("title") or None,
            artist=tags.get("artist") or tags.get("ARTIST") or None,
            thumbnail=f"data:image/;base64,{picture}" if picture else None,
        )


@define(slots=True)
class DirectPlugin(PlayableExtractorPlugin):
    """Plugin for direct links to media files.

    Attributes:
        http: HTTP session used for HEAD validation
        ffprobe_binary: ffprobe executable name or path
        accepted_content_types: Content type prefixes treated as playable
    """

    http: HttpSession = field(factory=HttpSession)
    ffprobe_binary: str = field(factory=lambda: settings.direct.ffprobe_binary)
    accepted_content_types: list[str] = field(
        factory=lambda: list(settings.direct.accepted_content_types)
    )
    connector_name: str = "direct"
    _ffprobe_available: bool | None = field(default=None, init=False, repr=False)

    def ffprobe_available(self) -> bool:
        """Look ffprobe up on PATH once per plugin instance."""
        if self._ffprobe_available is None:
            self._ffprobe_available = binary_available(self.ffprobe_binary)
        return self._ffprobe_available

    async def validate(self, url: str) -> bool:
        try:
            response = await self.http.head(url)
        except Exception as e:
            logger.debug(f"HEAD request failed: {e}", url=url)
            return False

        if response.status_code != 200:
            return False
        content_type = response.headers.get("content-type", "")
        return any(content_type.startswith(prefix) for prefix in self.accepted_content_types)

    async def probe(self, url: str) -> MediaMetadata:
        """Read tags with ffprobe. Missing tool or failed probe gives no tags."""
        if not self.ffprobe_available():
            return MediaMetadata()

        try:
            result = await run_process(
                self.ffprobe_binary,
                "-v",
                "error",
                "-print_format",
                "json",
                "-show_format",
                "-show_streams",
                url,
            )
            if not result.ok:
                logger.debug(f"ffprobe exited with {result.returncode}", url=url)
                return MediaMetadata()
            return MediaMetadata.from_ffprobe(json.loads(result.stdout))
        except (OSError, json.JSONDecodeError, AttributeError) as e:
            logger.debug(f"ffprobe failed: {e}", url=url)
            return MediaMetadata()

    @resilient_operation("direct_resolve")
    async def resolve(self, url: str, options: ResolveOptions | None = None) -> Song:
        href = normalize_href(url)
        parsed = urlparse(href)

        metadata = await self.probe(url)
        last_segment = parsed.path.rstrip("/").split("/")[-1]

        return Song(
            source=SOURCE,
            plugin=self,
            play_from_source=True,
            id=href,
            name=metadata.title or last_segment or href,
            url=url,
            uploader=Uploader(name=metadata.artist) if metadata.artist else Uploader(),
            thumbnail=metadata.thumbnail,
            metadata=options.metadata if options else None,
        )

    async def get_stream_url(self, song: Song) -> str:
        if not song.url:
            raise InvalidSongError(
                "DIRECT_LINK_PLUGIN_INVALID_SONG",
                "Cannot get stream url from invalid song.",
            )
        return song.url

    async def get_related_songs(self, song: Song) -> list[Song]:
        return []


def get_connector_config() -> ConnectorConfig:
    """Direct link connector configuration."""
    return {
        "factory": DirectPlugin,
        "priority": 50,
    }
