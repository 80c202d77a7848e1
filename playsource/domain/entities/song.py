"""Playable media entities handed to the playback host.

Pure value records with zero external dependencies beyond attrs.
"""

from typing import Any

from attrs import define, field, validators


@define(frozen=True, slots=True)
class Uploader:
    """Name and page of whoever published a song."""

    name: str | None = field(default=None)
    url: str | None = field(default=None)


@define(frozen=True, slots=True)
class ResolveOptions:
    """Caller options threaded through resolve and search calls."""

    metadata: Any = field(default=None)


def _format_duration(seconds: float) -> str:
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


@define(frozen=True, slots=True)
class Song:
    """Immutable playable song.

    The plugin that produced the song is kept for stream URL lookup but does
    not take part in equality.
    """

    source: str = field(validator=validators.instance_of(str))
    id: str | None = field(default=None)
    name: str | None = field(default=None)
    url: str | None = field(default=None)
    plugin: Any = field(default=None, eq=False, repr=False)
    play_from_source: bool = field(default=True)
    is_live: bool = field(default=False)
    thumbnail: str | None = field(default=None)
    duration: float = field(default=0, converter=lambda v: float(v or 0))
    uploader: Uploader = field(factory=Uploader)
    views: int | None = field(default=None)
    likes: int | None = field(default=None)
    dislikes: int | None = field(default=None)
    reposts: int | None = field(default=None)
    age_restricted: bool = field(default=False)
    metadata: Any = field(default=None)

    @property
    def formatted_duration(self) -> str:
        """Duration as M:SS or H:MM:SS."""
        if self.is_live:
            return "Live"
        return _format_duration(self.duration)


@define(frozen=True, slots=True)
class Album:
    """Immutable album owning an ordered list of songs."""

    source: str = field(validator=validators.instance_of(str))
    id: str | None = field(default=None)
    name: str | None = field(default=None)
    url: str | None = field(default=None)
    thumbnail: str | None = field(default=None)
    artist: str | None = field(default=None)
    songs: list[Song] = field(
        factory=list,
        validator=validators.deep_iterable(
            member_validator=validators.instance_of(Song),
        ),
    )
    metadata: Any = field(default=None)

    @property
    def duration(self) -> float:
        return sum(song.duration for song in self.songs)


@define(frozen=True, slots=True)
class Playlist:
    """Immutable playlist owning an ordered list of songs."""

    source: str = field(validator=validators.instance_of(str))
    id: str | None = field(default=None)
    name: str | None = field(default=None)
    url: str | None = field(default=None)
    thumbnail: str | None = field(default=None)
    songs: list[Song] = field(
        factory=list,
        validator=validators.deep_iterable(
            member_validator=validators.instance_of(Song),
        ),
    )
    metadata: Any = field(default=None)

    @property
    def duration(self) -> float:
        return sum(song.duration for song in self.songs)
