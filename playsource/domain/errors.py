"""Extractor error taxonomy.

Every error raised by a plugin is an ExtractorError carrying a stable code
and a human-readable message. Subclasses exist for internal branching and
tests; public plugin operations re-wrap them into one source-tagged code
per operation.
"""

from typing import Any


class ExtractorError(Exception):
    """Base error for all extractor plugins."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class InvalidArgumentError(ExtractorError):
    """Argument of the wrong shape or type, raised before any I/O."""

    def __init__(self, expected: str, got: Any, name: str) -> None:
        super().__init__(
            "INVALID_TYPE",
            f"Expected {expected} for '{name}', but got {got!r} ({type(got).__name__})",
        )
        self.expected = expected
        self.got = got
        self.name = name


class UnsupportedURLError(ExtractorError):
    """URL rejected by a plugin's classifier."""

    def __init__(self, url: Any, message: str | None = None) -> None:
        super().__init__("UNSUPPORTED_URL", message or f"Unsupported URL: {url!r}")
        self.url = url


class FetchError(ExtractorError):
    """Non-success HTTP response."""

    def __init__(self, status: int, reason: str, url: str | None = None) -> None:
        super().__init__("FETCH_ERROR", f"Failed to fetch page: {status} {reason}")
        self.status = status
        self.reason = reason
        self.url = url


class ParseError(ExtractorError):
    """Embedded data missing, undecodable, or lacking a required field."""

    def __init__(self, message: str) -> None:
        super().__init__("PARSE_ERROR", message)


class NoResultError(ExtractorError):
    """Search returned no candidates of the requested kind."""


class InvalidSongError(ExtractorError):
    """Stream URL requested for a song that cannot provide one."""


class YtDlpError(ExtractorError):
    """yt-dlp process failed or produced unusable output."""

    def __init__(self, message: str) -> None:
        super().__init__("YTDLP_ERROR", message)
