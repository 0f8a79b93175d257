"""
Typer CLI for flashdeck.

Commands:
    flashdeck study              - Open the full-screen study UI
    flashdeck study --topic NAME - Jump straight into one topic
    flashdeck topics             - List topics with their card counts
    flashdeck new NAME           - Create an empty topic

Usage:
    flashdeck --help
    flashdeck study --root ~/decks
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from config import Settings, get_settings
from flashdeck.deck import DeckError, TopicCatalog
from flashdeck.delivery import run_terminal
from flashdeck.session import SessionController

app = typer.Typer(
    name="flashdeck",
    help="Terminal flashcards organized by topic",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

RootOption = Annotated[
    Path | None,
    typer.Option("--root", "-r", help="Topic directory root (overrides FLASHDECK_DECKS_DIR)"),
]


def configure_logging(settings: Settings, interactive: bool) -> None:
    """Install loguru sinks; the full-screen UI only logs to file."""
    logger.remove()
    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            level=settings.log_level,
            rotation="1 MB",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
        )
    if not interactive:
        logger.add(sys.stderr, level="WARNING", format="<level>{message}</level>")


def _catalog(settings: Settings, root: Path | None) -> TopicCatalog:
    return TopicCatalog(
        root or settings.decks_dir,
        questions_filename=settings.questions_filename,
        answers_filename=settings.answers_filename,
    )


# =============================================================================
# Commands
# =============================================================================


@app.command()
def study(
    root: RootOption = None,
    topic: Annotated[
        str | None, typer.Option("--topic", "-t", help="Open (or create) this topic directly")
    ] = None,
) -> None:
    """
    Open the interactive study UI.

    Examples:
        flashdeck study                 # Choose a topic from the list
        flashdeck study -t networking   # Start in the networking topic
    """
    settings = get_settings()
    configure_logging(settings, interactive=True)

    controller = SessionController(
        _catalog(settings, root),
        transcripts_dir=settings.transcripts_dir,
        transcript_prefix=settings.transcript_prefix,
    )
    if topic is not None and not controller.open_topic(topic):
        console.print(f"[red]{controller.status}[/red]")
        raise typer.Exit(code=1)

    run_terminal(controller, poll_interval_ms=settings.poll_interval_ms)

    if controller.transcript_path is not None:
        console.print(f"[green]Saved session:[/green] {controller.transcript_path}")


@app.command()
def topics(root: RootOption = None) -> None:
    """List topics and how many cards each holds."""
    settings = get_settings()
    configure_logging(settings, interactive=False)
    catalog = _catalog(settings, root)

    names = catalog.list_topics()
    if not names:
        console.print(f"[yellow]No topics in {catalog.root}[/yellow]")
        return

    table = Table(title=f"Topics in {catalog.root}")
    table.add_column("Topic", style="cyan")
    table.add_column("Cards", justify="right")

    for name in names:
        try:
            count = str(catalog.card_count(name))
        except (OSError, DeckError) as e:
            count = f"[red]{e}[/red]"
        table.add_row(name, count)

    console.print(table)


@app.command()
def new(
    name: Annotated[str, typer.Argument(help="Name of the topic to create")],
    root: RootOption = None,
) -> None:
    """Create an empty topic."""
    settings = get_settings()
    configure_logging(settings, interactive=False)
    catalog = _catalog(settings, root)

    try:
        created = catalog.ensure(name)
    except (OSError, DeckError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    questions_path, _ = catalog.paths_for(created)
    console.print(f"[green]Topic ready:[/green] {created} ({questions_path.parent})")


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
