"""Mapping from decoded Bandcamp pages to domain entities.

Builds BandcampTrackInfo / BandcampAlbumInfo records from a TralbumPage and
turns them into the BandcampSong / BandcampAlbum entities the host plays.
"""

from typing import Any

from playsource.domain.entities import ResolveOptions, Uploader
from playsource.domain.errors import ParseError
from playsource.infrastructure.connectors.bandcamp.models import (
    BandcampAlbum,
    BandcampAlbumInfo,
    BandcampSong,
    BandcampTrackInfo,
)
from playsource.infrastructure.connectors.bandcamp.page import TralbumPage

SOURCE = "bandcamp"
STREAM_QUALITY = "mp3-128"
UNKNOWN_ALBUM = "Unknown Album"


def stream_url_of(entry: dict[str, Any]) -> str | None:
    """The 128kbps MP3 URL of a trackinfo entry, if it has one."""
    files = entry.get("file")
    if not isinstance(files, dict):
        return None
    stream_url = files.get(STREAM_QUALITY)
    return stream_url if isinstance(stream_url, str) and stream_url else None


def track_id_of(entry: dict[str, Any]) -> str:
    track_id = entry.get("track_id")
    if track_id is not None:
        return str(track_id)
    return entry.get("title_link") or ""


def track_page_url(page_url: str, slug: str | None) -> str:
    """Per-track URL derived from an album (or artist) page URL."""
    if not slug:
        return page_url
    base = page_url.split("/album/")[0].rstrip("/")
    return f"{base}/track/{slug.removeprefix('/track/').lstrip('/')}"


def uploader_url(url: str) -> str:
    """Artist root of a track or album URL."""
    for marker in ("/track/", "/album/"):
        if marker in url:
            return url.split(marker)[0]
    return url


def track_info_from_entry(
    entry: dict[str, Any],
    page: TralbumPage,
    url: str,
    stream_url: str,
) -> BandcampTrackInfo:
    return BandcampTrackInfo(
        id=track_id_of(entry),
        title=entry.get("title") or "",
        artist=page.artist,
        album=page.album_title,
        duration=float(entry.get("duration") or 0),
        url=url,
        thumbnail=page.thumbnail,
        stream_url=stream_url,
        track_number=entry.get("track_num"),
    )


def parse_track_page(page: TralbumPage, url: str) -> BandcampTrackInfo:
    """The subject track of a track page: the first trackinfo entry.

    Raises:
        ParseError: If that entry has no MP3 stream
    """
    entries = page.tracks
    entry = entries[0] if entries else {}
    stream_url = stream_url_of(entry)
    if not stream_url:
        raise ParseError("Could not find MP3 stream URL")
    return track_info_from_entry(entry, page, url, stream_url)


def playable_tracks(
    page: TralbumPage, page_url: str
) -> tuple[list[BandcampTrackInfo], int]:
    """Entries with a stream URL, in page order, and the number dropped."""
    tracks: list[BandcampTrackInfo] = []
    dropped = 0
    for entry in page.tracks:
        stream_url = stream_url_of(entry)
        if not stream_url:
            dropped += 1
            continue
        url = track_page_url(page_url, entry.get("title_link"))
        tracks.append(track_info_from_entry(entry, page, url, stream_url))
    return tracks, dropped


def parse_album_page(page: TralbumPage, url: str) -> BandcampAlbumInfo:
    tracks, dropped = playable_tracks(page, url)
    return BandcampAlbumInfo(
        id=page.album_id or url,
        title=page.album_title or UNKNOWN_ALBUM,
        artist=page.artist,
        url=url,
        thumbnail=page.thumbnail,
        tracks=tracks,
        dropped_tracks=dropped,
    )


def to_song(
    info: BandcampTrackInfo,
    plugin: Any = None,
    options: ResolveOptions | None = None,
) -> BandcampSong:
    return BandcampSong(
        source=SOURCE,
        plugin=plugin,
        play_from_source=True,
        id=info.id,
        name=info.title,
        url=info.url,
        thumbnail=info.thumbnail,
        duration=info.duration,
        uploader=Uploader(name=info.artist, url=uploader_url(info.url)),
        metadata=options.metadata if options else None,
        stream_url=info.stream_url,
        track_number=info.track_number,
    )


def to_album(
    info: BandcampAlbumInfo,
    plugin: Any = None,
    options: ResolveOptions | None = None,
) -> BandcampAlbum:
    return BandcampAlbum(
        source=SOURCE,
        id=info.id,
        name=info.title,
        url=info.url,
        thumbnail=info.thumbnail,
        artist=info.artist,
        songs=[to_song(track, plugin, options) for track in info.tracks],
        metadata=options.metadata if options else None,
        dropped_tracks=info.dropped_tracks,
    )
