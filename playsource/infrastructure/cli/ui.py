"""UI helpers for CLI interaction.

This module provides reusable UI components and helpers for the CLI,
keeping the presentation logic separate from plugin logic.
"""

from collections.abc import Callable, Sequence
import functools
from typing import ParamSpec, TypeVar

from rich.console import Console
from rich.table import Table
import typer

from playsource.config import get_logger
from playsource.domain.entities import Album, Playlist, Song
from playsource.domain.errors import ExtractorError

# Initialize console and logger
console = Console()
logger = get_logger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def command_error_handler(func: Callable[P, R]) -> Callable[P, R]:
    """Decorator to standardize error handling for CLI commands.

    Logs the failure with its traceback, prints a short red message and exits
    with code 1. Extractor errors also show their code.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        operation = func.__name__.replace("_command", "").replace("_", " ")

        with logger.contextualize(operation=operation):
            try:
                logger.debug(f"Executing {operation}")
                return func(*args, **kwargs)

            except typer.Exit:
                raise

            except typer.Abort:
                logger.info(f"Operation {operation} aborted by user")
                raise

            except Exception as e:
                logger.exception(f"Error during {operation}")
                display_error(e, operation)
                raise typer.Exit(code=1) from e

    return wrapper


def display_error(error: Exception, operation: str) -> None:
    """Display error message with consistent formatting."""
    code = f" [dim]({error.code})[/dim]" if isinstance(error, ExtractorError) else ""
    console.print(f"\n[bold red]✗ Error during {operation}:[/bold red] {error}{code}")


def _songs_table(songs: Sequence[Song], title: str | None = None) -> Table:
    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Artist", style="cyan")
    table.add_column("Title", style="green")
    table.add_column("Duration", style="yellow", justify="right")
    table.add_column("URL", style="dim", overflow="fold")

    for i, song in enumerate(songs, 1):
        table.add_row(
            str(i),
            song.uploader.name or "Unknown",
            song.name or "—",
            song.formatted_duration,
            song.url or "—",
        )
    return table


def display_song(song: Song) -> None:
    """Show a single song as a key/value summary."""
    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column(style="cyan")
    summary.add_column(style="green bold")

    summary.add_row("Title", song.name or "—")
    summary.add_row("Artist", song.uploader.name or "Unknown")
    summary.add_row("Duration", song.formatted_duration)
    summary.add_row("Source", song.source)
    summary.add_row("URL", song.url or "—")
    if song.thumbnail:
        summary.add_row("Thumbnail", song.thumbnail)

    console.print(summary)


def display_collection(collection: Album | Playlist) -> None:
    """Show an album or playlist header followed by its songs."""
    kind = "Album" if isinstance(collection, Album) else "Playlist"
    console.print(f"\n[bold blue]{kind}: {collection.name or '—'}[/bold blue]")
    if isinstance(collection, Album) and collection.artist:
        console.print(f"[cyan]{collection.artist}[/cyan]")
    console.print(_songs_table(collection.songs))


def display_results(results: Sequence[Song | Album], query: str) -> None:
    """Show search results, songs as one table and albums one after another."""
    if not results:
        console.print(f"[yellow]No playable results for {query!r}[/yellow]")
        return

    songs = [item for item in results if isinstance(item, Song)]
    if songs:
        console.print(_songs_table(songs, title=f"Results for {query!r}"))
    for item in results:
        if isinstance(item, Album):
            display_collection(item)


def display_entity(entity: Song | Album | Playlist) -> None:
    if isinstance(entity, Song):
        display_song(entity)
    else:
        display_collection(entity)
