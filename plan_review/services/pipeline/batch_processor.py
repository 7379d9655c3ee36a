"""Bounded-concurrency batch utilities for the review pipeline.

Batches run strictly one after another; inside a batch, calls run
concurrently behind a semaphore, so outbound concurrency to the reasoning
service never exceeds the batch size regardless of how many chunks a
document has.
"""

import asyncio
from typing import Awaitable, Callable, List, Optional, TypeVar

from plan_review.utils.logging import get_logger

LOGGER = get_logger(__name__)

T = TypeVar('T')
R = TypeVar('R')


class BatchProcessor:
    """Utilities for batch processing in the review pipeline."""

    @staticmethod
    def create_batches(items: List[T], batch_size: int) -> List[List[T]]:
        """Create batches from a list of items.

        Args:
            items: List of items to batch
            batch_size: Number of items per batch

        Returns:
            List of batches, each containing up to batch_size items

        Example:
            >>> BatchProcessor.create_batches([1, 2, 3, 4, 5], 2)
            [[1, 2], [3, 4], [5]]
        """
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")

        batches = [items[i:i + batch_size] for i in range(0, len(items), batch_size)]

        LOGGER.debug(
            f"Created {len(batches)} batches from {len(items)} items "
            f"(batch_size={batch_size})"
        )
        return batches

    @staticmethod
    async def run_batches(
        items: List[T],
        worker: Callable[[T], Awaitable[R]],
        batch_size: int,
        max_concurrency: Optional[int] = None,
    ) -> List[R]:
        """Run ``worker`` over items in sequential, bounded batches.

        Args:
            items: Items to process
            worker: Coroutine function applied to each item; expected not to raise
            batch_size: Number of items per batch
            max_concurrency: In-flight cap inside a batch (defaults to batch_size)

        Returns:
            Worker results in input order
        """
        batches = BatchProcessor.create_batches(items, batch_size)
        semaphore = asyncio.Semaphore(max_concurrency or batch_size)

        async def guarded(item: T) -> R:
            async with semaphore:
                return await worker(item)

        results: List[R] = []
        for batch_number, batch in enumerate(batches, start=1):
            LOGGER.info(
                f"Processing batch {batch_number}/{len(batches)} ({len(batch)} items)",
                extra={"batch_number": batch_number, "total_batches": len(batches)}
            )
            batch_results = await asyncio.gather(*(guarded(item) for item in batch))
            results.extend(batch_results)

        return results
