"""CLI for the Wordle ladder."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import structlog
import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from wordle_ladder import __version__
from wordle_ladder.core.config import LeaderboardConfig, load_config
from wordle_ladder.core.errors import ConfigurationError
from wordle_ladder.ingestion import load_announcements
from wordle_ladder.pipeline import LeaderboardPipeline
from wordle_ladder.ranking import PointsTable
from wordle_ladder.services.reporting import (
    export_stats_json,
    format_puzzle_score,
    render_leaderboard,
)

# Configure structlog
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=False,
)

app = typer.Typer(
    name="wordle-ladder",
    help="Wordle Ladder - pairwise Elo ratings and points from group Wordle results",
    add_completion=False,
)
console = Console()

ConfigOption = Annotated[
    Path | None, typer.Option("--config", "-c", help="Path to config YAML file")
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"wordle-ladder v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """Wordle Ladder CLI."""


def _setup_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load(config_path: Path | None) -> LeaderboardConfig:
    load_dotenv()
    return load_config(config_path)


def _fail(e: Exception, verbose: bool = False) -> typer.Exit:
    if isinstance(e, FileNotFoundError):
        console.print(f"[red]Error:[/red] {e}")
    elif isinstance(e, ConfigurationError):
        console.print(f"[red]{e}")
    else:
        console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            console.print_exception()
    return typer.Exit(1)


@app.command()
def backfill(
    export_path: Annotated[Path, typer.Argument(help="Chat export (JSON or JSON lines)")],
    config_path: ConfigOption = None,
    reset: Annotated[
        bool, typer.Option("--reset", help="Wipe all plays and ratings before replaying")
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-V", help="Verbose output")] = False,
) -> None:
    """Replay a channel's history oldest-first and print the leaderboard.

    Args:
        export_path: Exported channel messages.
        config_path: Optional YAML configuration file.
        reset: Wipe stored state before replaying.
        verbose: Enable verbose logging.
    """
    _setup_logging(verbose)

    try:
        config = _load(config_path)
        config.require_channel(str(config_path or "config"))
        if reset:
            config = config.model_copy(update={"reset_on_start": True})
        announcements = load_announcements(export_path)

        async def _run() -> None:
            pipeline = LeaderboardPipeline(config)
            try:
                await pipeline.start()
                summary = await pipeline.backfill(announcements)
                stats = await pipeline.list_stats()
            finally:
                await pipeline.close()

            console.print(
                f"\n[bold green]Backfill complete.[/bold green] "
                f"Parsed {summary.recorded} summaries "
                f"({summary.skipped} other messages, {summary.failed} rejected)."
            )
            console.print(render_leaderboard(stats, config.display_names))

        asyncio.run(_run())

    except (FileNotFoundError, ConfigurationError, ValueError) as e:
        raise _fail(e) from e
    except Exception as e:
        raise _fail(e, verbose) from e


@app.command()
def record(
    export_path: Annotated[Path, typer.Argument(help="Messages to deliver, JSON or JSON lines")],
    config_path: ConfigOption = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-V", help="Verbose output")] = False,
) -> None:
    """Deliver messages one at a time as live events, printing each scored puzzle.

    Args:
        export_path: Messages to deliver in order.
        config_path: Optional YAML configuration file.
        verbose: Enable verbose logging.
    """
    _setup_logging(verbose)

    try:
        config = _load(config_path)
        config.require_channel(str(config_path or "config"))
        announcements = load_announcements(export_path)

        async def _run() -> None:
            pipeline = LeaderboardPipeline(config)
            try:
                await pipeline.start()
                for announcement in announcements:
                    score = await pipeline.process(announcement)
                    if score is None:
                        continue
                    console.print(f"[bold]Wordle #{score.puzzle_id}[/bold]")
                    console.print(f"  {format_puzzle_score(score, config.display_names)}")
            finally:
                await pipeline.close()

        asyncio.run(_run())

    except (FileNotFoundError, ConfigurationError, ValueError) as e:
        raise _fail(e) from e
    except Exception as e:
        raise _fail(e, verbose) from e


@app.command()
def stats(
    config_path: ConfigOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON instead of a table")] = False,
    limit: Annotated[int | None, typer.Option("--limit", help="Show only the top N")] = None,
) -> None:
    """Show the current leaderboard.

    Args:
        config_path: Optional YAML configuration file.
        as_json: Print JSON rows instead of a table.
        limit: Only show the top N participants.
    """
    try:
        config = _load(config_path)

        async def _run() -> None:
            pipeline = LeaderboardPipeline(config)
            try:
                rows = await pipeline.leaderboard.list_stats(limit=limit)
            finally:
                await pipeline.close()

            if as_json:
                typer.echo(export_stats_json(rows))
            else:
                console.print(render_leaderboard(rows, config.display_names))

        asyncio.run(_run())

    except (FileNotFoundError, ConfigurationError, ValueError) as e:
        raise _fail(e) from e
    except Exception as e:
        raise _fail(e) from e


@app.command()
def reset(
    config_path: ConfigOption = None,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Wipe all plays and ratings.

    Args:
        config_path: Optional YAML configuration file.
        yes: Skip the confirmation prompt.
    """
    try:
        config = _load(config_path)
        if not yes:
            typer.confirm(f"Delete all plays and ratings in {config.database_url}?", abort=True)

        async def _run() -> None:
            pipeline = LeaderboardPipeline(config)
            try:
                await pipeline.store.reset()
            finally:
                await pipeline.close()

        asyncio.run(_run())
        console.print("[green]Wordle DB wiped: all plays and ratings cleared.[/green]")

    except typer.Abort:
        raise
    except (FileNotFoundError, ConfigurationError, ValueError) as e:
        raise _fail(e) from e
    except Exception as e:
        raise _fail(e) from e


@app.command()
def validate(
    config_path: Annotated[Path, typer.Argument(help="Path to config YAML file")],
) -> None:
    """Validate a configuration file without running.

    Args:
        config_path: Path to YAML configuration file.
    """
    try:
        config = load_config(config_path)
        console.print("[green]Configuration is valid![/green]")
        console.print(f"  Channel: {config.channel_id or '(any)'}")
        console.print(f"  Database: {config.database_url}")
        console.print(f"  Known names: {len(config.participants)}")
        console.print(
            f"  K-factor: max({config.ranking.k_base:g} - {config.ranking.k_step:g} x games, "
            f"{config.ranking.k_floor:g})"
        )
        points = PointsTable.from_config(config.points).as_dict()
        console.print("  Points: " + ", ".join(f"{k}={v}" for k, v in points.items()))

    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    except ConfigurationError as e:
        console.print(f"[red]{e}")
        raise typer.Exit(1) from e
    except Exception as e:
        console.print(f"[red]Validation error:[/red] {e}")
        raise typer.Exit(1) from e


@app.command()
def info() -> None:
    """Show tool information and example commands."""
    console.print("[bold]Wordle Ladder[/bold]")
    console.print(f"Version: {__version__}\n")

    console.print("[bold]Example Commands:[/bold]")
    console.print("  # Replay a channel export from scratch")
    console.print("  uv run wordle-ladder backfill export.json --config ladder.yaml --reset\n")

    console.print("  # Deliver new messages as live events")
    console.print("  uv run wordle-ladder record today.jsonl --config ladder.yaml\n")

    console.print("  # Show the leaderboard")
    console.print("  uv run wordle-ladder stats --config ladder.yaml\n")

    console.print("  # Validate config")
    console.print("  uv run wordle-ladder validate ladder.yaml")


if __name__ == "__main__":
    app()
