"""Bandcamp page markup access.

Bandcamp embeds the track/album ("tralbum") record in a `data-tralbum`
attribute holding entity-encoded JSON. Everything that knows about the page
markup lives here, so the scraping strategy can change without touching
entity assembly.
"""

import json
import re
from typing import Any

from attrs import define, field

from playsource.domain.errors import ParseError

TRALBUM_PATTERN = re.compile(r'data-tralbum="([^"]+)"')

# The five escapes Bandcamp applies to attribute values
HTML_ENTITIES: dict[str, str] = {
    "&quot;": '"',
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&#39;": "'",
}
_ENTITY_PATTERN = re.compile("|".join(re.escape(entity) for entity in HTML_ENTITIES))


def decode_entities(text: str) -> str:
    """Reverse the attribute escapes in a single pass.

    A single pass keeps `&amp;lt;` as the literal text `&lt;`.
    """
    return _ENTITY_PATTERN.sub(lambda match: HTML_ENTITIES[match.group(0)], text)


def extract_tralbum(html: str) -> dict[str, Any]:
    """Locate and decode the embedded tralbum record.

    Raises:
        ParseError: If the attribute is absent or does not hold a JSON object
    """
    match = TRALBUM_PATTERN.search(html)
    if not match:
        raise ParseError("Could not find track/album data on page")

    # Entity-decode first: the attribute value is entity-encoded JSON text
    decoded = decode_entities(match.group(1))
    try:
        data = json.loads(decoded)
    except json.JSONDecodeError as e:
        raise ParseError(f"Could not decode track/album data: {e}") from e

    if not isinstance(data, dict):
        raise ParseError("Track/album data is not an object")
    return data


def meta_property(html: str, prop: str) -> str | None:
    """Return the content of an Open Graph `<meta property=...>` tag."""
    pattern = rf'<meta property="{re.escape(prop)}" content="([^"]+)"'
    match = re.search(pattern, html)
    return decode_entities(match.group(1)) if match else None


@define(frozen=True, slots=True)
class TralbumPage:
    """A fetched track or album page with its decoded tralbum record."""

    html: str = field(repr=False)
    data: dict[str, Any] = field(repr=False)

    @classmethod
    def parse(cls, html: str) -> "TralbumPage":
        return cls(html=html, data=extract_tralbum(html))

    @property
    def artist(self) -> str:
        """Record artist, then `og:site_name`, then a placeholder."""
        return (
            self.data.get("artist")
            or meta_property(self.html, "og:site_name")
            or "Unknown Artist"
        )

    @property
    def thumbnail(self) -> str | None:
        return (
            self.data.get("artFullsizeUrl")
            or self.data.get("artThumbURL")
            or meta_property(self.html, "og:image")
        )

    @property
    def current(self) -> dict[str, Any]:
        current = self.data.get("current")
        return current if isinstance(current, dict) else {}

    @property
    def album_title(self) -> str | None:
        return self.current.get("title")

    @property
    def album_id(self) -> str | None:
        album_id = self.current.get("id")
        return str(album_id) if album_id is not None else None

    @property
    def tracks(self) -> list[dict[str, Any]]:
        """Per-track entries in page order."""
        trackinfo = self.data.get("trackinfo")
        if not isinstance(trackinfo, list):
            return []
        return [entry for entry in trackinfo if isinstance(entry, dict)]
