"""Core domain entities handed to the playback host."""

from .song import Album, Playlist, ResolveOptions, Song, Uploader

__all__ = [
    "Album",
    "Playlist",
    "ResolveOptions",
    "Song",
    "Uploader",
]
