"""Progress tracking utilities for backfill runs."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from typing import Any, TypeVar

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
)

T = TypeVar("T")


class BackfillProgress:
    """Progress tracking for replaying announcement history."""

    def __init__(self, console: Console | None = None, disable: bool = False) -> None:
        """Initialize progress tracker.

        Args:
            console: Optional console instance. If None, creates a new one.
            disable: Hide the progress bar (tests, piped output).
        """
        self.console = console or Console()
        self.disable = disable

    async def track(
        self,
        items: Sequence[T],
        func: Callable[[T], Awaitable[Any]],
        description: str = "Replaying",
    ) -> AsyncIterator[tuple[T, Any]]:
        """Run ``func`` over items in order, advancing a progress bar.

        Args:
            items: Items to process, already in processing order.
            func: Async function to call for each item.
            description: Description of the operation.

        Yields:
            Tuples of (item, result) as each completes.
        """
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            console=self.console,
            disable=self.disable,
        ) as progress:
            task = progress.add_task(f"[cyan]{description}...", total=len(items))

            for item in items:
                result = await func(item)
                progress.update(task, advance=1)
                yield item, result
