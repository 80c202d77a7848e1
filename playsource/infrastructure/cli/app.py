"""playsource CLI - Main application entry point and app structure."""

import asyncio
from importlib.metadata import version
from typing import Annotated

from rich.console import Console
import typer

from playsource.application.use_cases import ResolveMediaUseCase
from playsource.config import get_logger, settings, setup_loguru_logger
from playsource.domain.entities import Song
from playsource.domain.errors import ExtractorError
from playsource.infrastructure.cli.ui import (
    command_error_handler,
    display_entity,
    display_results,
)
from playsource.infrastructure.connectors import build_plugins

VERSION = version("playsource")

console = Console(width=80)
logger = get_logger(__name__)

app = typer.Typer(
    help=f"🎵 playsource v{VERSION} - Resolve and search playable media",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
)


def build_host() -> ResolveMediaUseCase:
    """Host with every discovered plugin, yt-dlp last."""
    return ResolveMediaUseCase(plugins=build_plugins())


async def _resolve_song(host: ResolveMediaUseCase, url: str) -> Song:
    entity = await host.resolve(url)
    if not isinstance(entity, Song):
        raise ExtractorError(
            "NOT_A_SONG", f"{url} resolved to a {type(entity).__name__.lower()}"
        )
    return entity


@app.command(name="resolve", rich_help_panel="🎵 Media")
@command_error_handler
def resolve_command(
    url: Annotated[str, typer.Argument(help="Track, album, playlist or media URL")],
) -> None:
    """Resolve a URL into a song, album or playlist."""
    entity = asyncio.run(build_host().resolve(url))
    display_entity(entity)


@app.command(name="search", rich_help_panel="🎵 Media")
@command_error_handler
def search_command(
    query: Annotated[str, typer.Argument(help="Free-text search query")],
    albums: Annotated[
        bool, typer.Option("--albums", "-a", help="Search albums instead of tracks")
    ] = False,
    limit: Annotated[
        int, typer.Option("--limit", "-n", min=1, help="Maximum number of results")
    ] = settings.bandcamp.default_search_limit,
) -> None:
    """Search for tracks or albums."""
    results = asyncio.run(build_host().search(query, limit=limit, albums=albums))
    display_results(results, query)


@app.command(name="stream", rich_help_panel="🎵 Media")
@command_error_handler
def stream_command(
    url: Annotated[str, typer.Argument(help="Song URL")],
) -> None:
    """Print the direct audio stream URL of a song."""

    async def run() -> str:
        host = build_host()
        return await host.get_stream_url(await _resolve_song(host, url))

    console.print(asyncio.run(run()), soft_wrap=True)


@app.command(name="related", rich_help_panel="🎵 Media")
@command_error_handler
def related_command(
    url: Annotated[str, typer.Argument(help="Song URL")],
) -> None:
    """List songs related to a song."""

    async def run() -> list[Song]:
        host = build_host()
        return list(await host.get_related_songs(await _resolve_song(host, url)))

    display_results(asyncio.run(run()), url)


@app.command(name="version", rich_help_panel="⚙️ System")
def version_command() -> None:
    """Show version information."""
    console.print(
        f"[bold bright_blue]🎵 playsource[/bold bright_blue] [dim]v{VERSION}[/dim]"
    )


@app.callback()
def init_cli(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output"),
    ] = False,
) -> None:
    """Initialize playsource CLI."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    setup_loguru_logger(verbose)


def main() -> int:
    """Application entry point."""
    try:
        return app() or 0
    except Exception:
        logger.exception("Unhandled exception")
        return 1
