"""Bandcamp storefront connector."""

from .connector import BandcampPlugin, get_connector_config
from .models import (
    BandcampAlbum,
    BandcampAlbumInfo,
    BandcampSong,
    BandcampTrackInfo,
    SearchResultCandidate,
)
from .page import TralbumPage, decode_entities, extract_tralbum, meta_property

__all__ = [
    "BandcampAlbum",
    "BandcampAlbumInfo",
    "BandcampPlugin",
    "BandcampSong",
    "BandcampTrackInfo",
    "SearchResultCandidate",
    "TralbumPage",
    "decode_entities",
    "extract_tralbum",
    "get_connector_config",
    "meta_property",
]
