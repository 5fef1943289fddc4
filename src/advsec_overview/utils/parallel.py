"""
Concurrent fan-out utilities for the pipeline.
"""

import asyncio
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn, TimeRemainingColumn

console = Console(stderr=True)

T = TypeVar("T")
R = TypeVar("R")


class ParallelProcessor:
    """
    Applies an async function to many items concurrently.

    Results always come back in input order, whatever the completion
    order. A ``max_workers`` of 0 issues every call at once.
    """

    def __init__(
        self,
        max_workers: int = 0,
        show_progress: bool = False,
    ):
        """
        Initialize parallel processor.

        Args:
            max_workers: Maximum concurrent calls (0 = unbounded)
            show_progress: Show progress bar
        """
        if max_workers < 0:
            raise ValueError("max_workers must be >= 0")
        self.max_workers = max_workers
        self.show_progress = show_progress

    async def map_async(
        self,
        func: Callable[[T], Awaitable[R]],
        items: Sequence[T],
        description: str = "Processing",
    ) -> list[R]:
        """
        Apply async function to items concurrently.

        The first exception raised by ``func`` propagates once every
        call has settled; callers that must tolerate failures fold them
        into a result inside ``func``.

        Args:
            func: Async function to apply
            items: Items to process
            description: Progress bar description

        Returns:
            List of results, in the order of ``items``
        """
        if not items:
            return []

        semaphore: Optional[asyncio.Semaphore] = (
            asyncio.Semaphore(self.max_workers) if self.max_workers else None
        )

        async def process_item(item: T) -> R:
            if semaphore is None:
                return await func(item)
            async with semaphore:
                return await func(item)

        if not self.show_progress:
            return await _gather_ordered([process_item(item) for item in items])

        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task(description, total=len(items))

            async def tracked(item: T) -> R:
                try:
                    return await process_item(item)
                finally:
                    progress.advance(task)

            return await _gather_ordered([tracked(item) for item in items])


async def _gather_ordered(coros: list[Awaitable[R]]) -> list[R]:
    # Every branch settles before the first error is raised.
    results = await asyncio.gather(*coros, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)
