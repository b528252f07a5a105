#!/usr/bin/env python3
"""Command-line entry point for tubelist."""

import asyncio
import json
import logging
import sys
from collections.abc import Callable
from dataclasses import asdict
from functools import wraps
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from . import session
from .api.base import TransportError
from .core.models import Channel, VideoSummary
from .core.settings import Settings
from .extractor.errors import ExtractionError

app = typer.Typer(
    name="tubelist",
    help="List a YouTube channel's metadata and uploaded videos.",
    add_completion=False,
)
console = Console()
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )

    # Suppress noisy third-party loggers
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def async_command(func: Callable[..., Any]) -> Callable[..., Any]:
    """Run an async Typer command in a fresh event loop."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return asyncio.run(func(*args, **kwargs))

    return wrapper


def _to_json(data: Any) -> str:
    return json.dumps(data, indent=2, default=str, ensure_ascii=False)


def _fail(error: Exception) -> NoReturn:
    console.print(f"[red]Error: {error}[/red]")
    raise typer.Exit(code=1)


def _print_channel(channel: Channel) -> None:
    table = Table(show_header=False, box=None)
    table.add_column(style="bold")
    table.add_column()
    table.add_row("Name", channel.name)
    table.add_row("ID", channel.channel_id)
    table.add_row("URL", channel.url)
    if channel.subscribers_disabled:
        subscribers = "disabled"
    elif channel.subscribers_hidden:
        subscribers = "hidden"
    else:
        subscribers = channel.subscriber_count_str
    table.add_row("Subscribers", subscribers)
    table.add_row("Feed", channel.feed_url)
    table.add_row("Avatar", channel.avatar_url or "-")
    table.add_row("Banner", channel.banner_url or "-")
    if channel.description:
        table.add_row("Description", channel.description)
    console.print(table)


def _print_videos(videos: list[VideoSummary], page_number: int) -> None:
    table = Table(title=f"Page {page_number}")
    table.add_column("ID", no_wrap=True)
    table.add_column("Title")
    table.add_column("Length", justify="right")
    table.add_column("Views", justify="right")
    table.add_column("Uploaded")
    for video in videos:
        length = "LIVE" if video.is_live else video.duration_str
        table.add_row(
            video.video_id,
            video.name,
            length,
            video.view_count_str,
            video.textual_upload_date or "",
        )
    console.print(table)


@app.callback()
def cli(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    config: Optional[Path] = typer.Option(
        None, "--config", help="Settings file (defaults to the user config directory)"
    ),
) -> None:
    """tubelist - YouTube channel listings without an API key."""
    setup_logging(verbose)
    ctx.obj = Settings.load(config)


@app.command()
@async_command
async def channel(
    ctx: typer.Context,
    channel_ref: str = typer.Argument(..., metavar="CHANNEL", help="Channel id, @handle or URL"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """Show a channel's metadata.

    Examples:
        tubelist channel @SomeChannel
        tubelist channel https://www.youtube.com/channel/UC... --json
    """
    try:
        async with session.open_extractor(channel_ref, ctx.obj) as extractor:
            await extractor.fetch_page()
            result = extractor.get_channel()
    except (ExtractionError, TransportError, ValueError) as e:
        _fail(e)

    if as_json:
        typer.echo(_to_json(asdict(result)))
    else:
        _print_channel(result)


@app.command()
@async_command
async def videos(
    ctx: typer.Context,
    channel_ref: str = typer.Argument(..., metavar="CHANNEL", help="Channel id, @handle or URL"),
    pages: int = typer.Option(1, "--pages", "-p", min=1, help="Maximum number of pages"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON lines instead of tables"),
) -> None:
    """List a channel's uploaded videos, newest first.

    Examples:
        tubelist videos @SomeChannel
        tubelist videos @SomeChannel --pages 3 --json
    """
    try:
        async with session.open_extractor(channel_ref, ctx.obj) as extractor:
            page_number = 0
            async for page in extractor.iter_pages(max_pages=pages):
                page_number += 1
                if as_json:
                    for video in page.items:
                        typer.echo(json.dumps(asdict(video), default=str, ensure_ascii=False))
                else:
                    _print_videos(page.items, page_number)
                for error in page.errors:
                    logger.warning(f"Skipped item on page {page_number}: {error}")
    except (ExtractionError, TransportError, ValueError) as e:
        _fail(e)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
