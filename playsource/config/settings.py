"""Configuration management using Pydantic Settings.

This module provides type-safe configuration with automatic environment
variable loading and validation.

The configuration is organized into logical groups:
- LoggingConfig: Logging levels, files, and debugging options
- HttpConfig: Shared HTTP client behaviour
- BandcampConfig: Bandcamp scraping and search settings
- YtDlpConfig: yt-dlp process settings
- DirectConfig: Direct media link probing settings
"""

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingConfig(BaseModel):
    """Logging configuration for console and file output."""

    console_level: str = "INFO"
    file_level: str = "DEBUG"
    log_file: Path = Path("playsource.log")
    real_time_debug: bool = True


class HttpConfig(BaseModel):
    """Shared HTTP client configuration.

    No timeout by default: a hung request hangs the call.
    """

    timeout: float | None = None
    follow_redirects: bool = True


class BandcampConfig(BaseModel):
    """Bandcamp storefront configuration."""

    # Bandcamp serves different markup to non-browser clients
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    search_url: str = (
        "https://bandcamp.com/api/bcsearch_public_api/1/autocomplete_elastic"
    )
    default_search_limit: int = Field(default=10, ge=1)
    related_limit: int = Field(default=10, ge=0)
    # None keeps every search candidate in flight at once
    search_concurrency: int | None = Field(default=None, ge=1)


class YtDlpConfig(BaseModel):
    """yt-dlp process configuration."""

    binary: str = "yt-dlp"
    stream_format: str = "ba/ba*"


class DirectConfig(BaseModel):
    """Direct media link configuration."""

    ffprobe_binary: str = "ffprobe"
    accepted_content_types: list[str] = ["audio/", "video/", "application/"]


class Settings(BaseSettings):
    """Main application settings with environment variable support.

    Nested values use a double underscore:
    - BANDCAMP__SEARCH_CONCURRENCY=4
    - YTDLP__BINARY=/usr/local/bin/yt-dlp
    - LOGGING__CONSOLE_LEVEL=DEBUG

    The .env file is automatically loaded for development convenience.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    logging: LoggingConfig = LoggingConfig()
    http: HttpConfig = HttpConfig()
    bandcamp: BandcampConfig = BandcampConfig()
    ytdlp: YtDlpConfig = YtDlpConfig()
    direct: DirectConfig = DirectConfig()


# Singleton instance for application use
settings = Settings()
