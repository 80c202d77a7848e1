"""yt-dlp extractor plugin.

Delegates extraction to the yt-dlp command line tool, reading its JSON output.
Because yt-dlp accepts almost any URL, this plugin validates everything and is
meant to sit last in the host's plugin list.
"""

import json
from typing import Any

from attrs import define, field

from playsource.config import get_logger, resilient_operation, settings
from playsource.domain.entities import Playlist, ResolveOptions, Song, Uploader
from playsource.domain.errors import InvalidSongError, YtDlpError
from playsource.domain.plugins import PlayableExtractorPlugin
from playsource.infrastructure.connectors.process import run_process
from playsource.infrastructure.connectors.protocols import ConnectorConfig

logger = get_logger(__name__).bind(service="ytdlp")


def is_playlist(info: dict[str, Any]) -> bool:
    return isinstance(info.get("entries"), list)


def build_args(
    url: str,
    *,
    dump_single_json: bool = False,
    no_warnings: bool = False,
    prefer_free_formats: bool = False,
    skip_download: bool = False,
    simulate: bool = False,
    format: str | None = None,
) -> list[str]:
    """Command line flags for a JSON-only yt-dlp run."""
    # --dump-single-json keeps playlist entries inside one document
    args = ["--dump-single-json" if dump_single_json else "--dump-json"]
    if no_warnings:
        args.append("--no-warnings")
    if prefer_free_formats:
        args.append("--prefer-free-formats")
    if skip_download:
        args.append("--skip-download")
    if simulate:
        args.append("--simulate")
    if format:
        args.extend(["--format", format])
    args.append(url)
    return args


def parse_output(stdout: str, dump_single_json: bool) -> dict[str, Any]:
    """Decode yt-dlp JSON output.

    With --dump-json a playlist is printed as one document per line; only the
    first one is used.
    """
    trimmed = stdout.strip()
    if not trimmed:
        raise YtDlpError("yt-dlp returned empty output")

    try:
        if dump_single_json:
            info = json.loads(trimmed)
        else:
            lines = [line for line in trimmed.splitlines() if line.strip()]
            info = json.loads(lines[0])
    except json.JSONDecodeError as e:
        raise YtDlpError(f"yt-dlp returned invalid JSON: {e}") from e

    if not isinstance(info, dict):
        raise YtDlpError("yt-dlp returned an unexpected document")
    return info


async def ytdlp_json(
    url: str,
    binary: str = "yt-dlp",
    **flags: Any,
) -> dict[str, Any]:
    """Run yt-dlp for one URL and return its decoded info document.

    Raises:
        YtDlpError: If the process fails or its output cannot be decoded
    """
    args = build_args(url, **flags)
    try:
        result = await run_process(binary, *args)
    except OSError as e:
        raise YtDlpError(f"Cannot run {binary}: {e}") from e

    if not result.ok:
        raise YtDlpError(result.stderr.strip() or f"{binary} exited with {result.returncode}")
    if result.stderr and not flags.get("no_warnings"):
        logger.warning(f"yt-dlp stderr: {result.stderr.strip()}")

    return parse_output(result.stdout, flags.get("dump_single_json", False))


def _first_thumbnail(info: dict[str, Any]) -> str | None:
    thumbnails = info.get("thumbnails") or []
    if thumbnails and isinstance(thumbnails[0], dict):
        return thumbnails[0].get("url")
    return None


def to_song(
    info: dict[str, Any],
    plugin: Any = None,
    options: ResolveOptions | None = None,
) -> Song:
    """Map a yt-dlp video document to a Song."""
    is_live = bool(info.get("is_live"))
    age_limit = info.get("age_limit") or 0
    return Song(
        source=f"{info.get('extractor', 'generic')} [yt-dlp]",
        plugin=plugin,
        play_from_source=True,
        id=str(info["id"]) if info.get("id") is not None else None,
        name=info.get("title") or info.get("fulltitle"),
        url=info.get("webpage_url") or info.get("original_url"),
        is_live=is_live,
        thumbnail=info.get("thumbnail") or _first_thumbnail(info),
        duration=0 if is_live else info.get("duration") or 0,
        uploader=Uploader(name=info.get("uploader"), url=info.get("uploader_url")),
        views=info.get("view_count"),
        likes=info.get("like_count"),
        dislikes=info.get("dislike_count"),
        reposts=info.get("repost_count"),
        age_restricted=age_limit >= 18,
        metadata=options.metadata if options else None,
    )


def to_playlist(
    info: dict[str, Any],
    plugin: Any = None,
    options: ResolveOptions | None = None,
) -> Playlist:
    """Map a yt-dlp playlist document to a Playlist."""
    entries = [entry for entry in info["entries"] if isinstance(entry, dict)]
    if not entries:
        raise YtDlpError("The playlist is empty")
    return Playlist(
        source=f"{info.get('extractor', 'generic')} [yt-dlp]",
        id=str(info.get("id")),
        name=info.get("title"),
        url=info.get("webpage_url"),
        thumbnail=_first_thumbnail(info),
        songs=[to_song(entry, plugin, options) for entry in entries],
        metadata=options.metadata if options else None,
    )


@define(slots=True)
class YtDlpPlugin(PlayableExtractorPlugin):
    """Catch-all plugin backed by the yt-dlp binary.

    Attributes:
        binary: yt-dlp executable name or path
        stream_format: Format selector used for stream URLs
    """

    binary: str = field(factory=lambda: settings.ytdlp.binary)
    stream_format: str = field(factory=lambda: settings.ytdlp.stream_format)
    connector_name: str = "ytdlp"

    def init(self, host: Any) -> None:
        super().init(host)
        plugins = getattr(host, "plugins", None) or []
        if plugins and plugins[-1] is not self:
            logger.warning(
                f"[{type(self).__name__}] This plugin is not the last plugin in the host. "
                "This is not recommended."
            )

    def validate(self, url: str) -> bool:
        return True

    @resilient_operation("ytdlp_resolve")
    async def resolve(
        self, url: str, options: ResolveOptions | None = None
    ) -> Song | Playlist:
        info = await ytdlp_json(
            url,
            binary=self.binary,
            dump_single_json=True,
            no_warnings=True,
            prefer_free_formats=True,
            skip_download=True,
            simulate=True,
        )
        if is_playlist(info):
            return to_playlist(info, self, options)
        return to_song(info, self, options)

    @resilient_operation("ytdlp_stream_url")
    async def get_stream_url(self, song: Song) -> str:
        if not song.url:
            raise InvalidSongError(
                "YTDLP_PLUGIN_INVALID_SONG", "Cannot get stream url from invalid song."
            )
        info = await ytdlp_json(
            song.url,
            binary=self.binary,
            dump_single_json=True,
            no_warnings=True,
            prefer_free_formats=True,
            skip_download=True,
            simulate=True,
            format=self.stream_format,
        )
        if is_playlist(info):
            raise YtDlpError("Cannot get stream URL of a entire playlist")
        stream_url = info.get("url")
        if not stream_url:
            raise YtDlpError("yt-dlp did not return a stream URL")
        return stream_url

    async def get_related_songs(self, song: Song) -> list[Song]:
        return []


def get_connector_config() -> ConnectorConfig:
    """yt-dlp connector configuration."""
    return {
        "factory": YtDlpPlugin,
        "priority": 100,
    }
