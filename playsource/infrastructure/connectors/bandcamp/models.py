"""Bandcamp records and Bandcamp-specific song/album entities."""

from typing import Any, Literal
from urllib.parse import urljoin

from attrs import define, field

from playsource.domain.entities import Album, Song
from playsource.infrastructure.connectors.base_connector import normalize_stream_url

BANDCAMP_ROOT = "https://bandcamp.com"

SearchResultType = Literal["t", "a", "b"]  # track, album, band


@define(frozen=True, slots=True)
class BandcampTrackInfo:
    """One playable track decoded from a track or album page.

    Attributes:
        id: Numeric track id as a string, or the title slug when absent
        title: Track title
        artist: Resolved artist name
        album: Title of the containing album, if known
        duration: Duration in seconds
        url: Canonical track page URL
        thumbnail: Artwork URL, if any
        stream_url: 128kbps MP3 URL as emitted by the page (may lack a scheme)
        track_number: Position within the album, if known
    """

    id: str
    title: str
    artist: str
    url: str
    stream_url: str
    album: str | None = None
    duration: float = 0
    thumbnail: str | None = None
    track_number: int | None = None


@define(frozen=True, slots=True)
class BandcampAlbumInfo:
    """One album decoded from an album page.

    `tracks` keeps only entries with a stream URL, in page order.
    `dropped_tracks` counts the entries that had none.
    """

    id: str
    title: str
    artist: str
    url: str
    thumbnail: str | None = None
    tracks: list[BandcampTrackInfo] = field(factory=list)
    dropped_tracks: int = 0


@define(frozen=True, slots=True)
class SearchResultCandidate:
    """One autocomplete search result, consumed right after the search call."""

    type: str
    name: str
    id: int | None = None
    item_url_path: str | None = None
    item_url_root: str | None = None
    band_name: str | None = None
    band_id: int | None = None
    img: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "SearchResultCandidate":
        return cls(
            type=str(data.get("type", "")),
            name=str(data.get("name", "")),
            id=data.get("id"),
            item_url_path=data.get("item_url_path") or None,
            item_url_root=data.get("item_url_root") or None,
            band_name=data.get("band_name"),
            band_id=data.get("band_id"),
            img=data.get("img"),
        )

    @property
    def page_url(self) -> str | None:
        """Absolute page URL, resolving a source-relative path."""
        if not self.item_url_path:
            return None
        if self.item_url_path.startswith(("http://", "https://")):
            return self.item_url_path
        base = self.item_url_root or BANDCAMP_ROOT
        return urljoin(f"{base.rstrip('/')}/", self.item_url_path.lstrip("/"))


@define(frozen=True, slots=True)
class BandcampSong(Song):
    """Song carrying a Bandcamp stream URL, always with an explicit scheme."""

    stream_url: str | None = field(default=None, converter=normalize_stream_url)
    track_number: int | None = field(default=None)


@define(frozen=True, slots=True)
class BandcampAlbum(Album):
    """Album whose songs are BandcampSong instances."""

    dropped_tracks: int = field(default=0)
