"""Base connector module providing shared functionality for extractor plugins.

Key Components:
- gather_isolated: Concurrent fan-out/fan-in where one failing item never
  aborts the others
- normalize_stream_url: Scheme normalization applied to every stream URL
  handed to a player
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

from playsource.config import get_logger

logger = get_logger(__name__).bind(service="connectors")

T = TypeVar("T")
R = TypeVar("R")


async def gather_isolated(
    items: Sequence[T],
    process_func: Callable[[T], Awaitable[R | None]],
    concurrency_limit: int | None = None,
    logger_instance: Any = None,
    description: str = "item",
) -> list[R]:
    """Process items concurrently and keep the ones that succeed.

    All items are dispatched at once (or through a semaphore when
    concurrency_limit is set) and joined before filtering. Exceptions and
    None results are dropped; failures are logged.

    Args:
        items: Items to process
        process_func: Async function processing a single item
        concurrency_limit: Maximum in-flight items, None for unbounded
        logger_instance: Logger for failures (defaults to this module's)
        description: Item label used in log messages

    Returns:
        Successful results in the same relative order as the input items
    """
    if not items:
        return []

    log = logger_instance or logger
    semaphore = asyncio.Semaphore(concurrency_limit) if concurrency_limit else None

    async def run(item: T) -> R | None:
        if semaphore is None:
            return await process_func(item)
        async with semaphore:
            return await process_func(item)

    # return_exceptions keeps one failure from cancelling its siblings
    outcomes = await asyncio.gather(
        *(run(item) for item in items),
        return_exceptions=True,
    )

    results: list[R] = []
    failures = 0
    for index, outcome in enumerate(outcomes):
        if isinstance(outcome, Exception):
            failures += 1
            log.warning(
                f"Failed to process {description} {index + 1}/{len(items)}: {outcome}",
                error_type=type(outcome).__name__,
            )
        elif isinstance(outcome, BaseException):
            raise outcome
        elif outcome is not None:
            results.append(outcome)

    log.debug(
        f"Processed {len(items)} {description}(s)",
        succeeded=len(results),
        failed=failures,
    )
    return results


def normalize_stream_url(url: str | None) -> str | None:
    """Give protocol-relative or scheme-less stream URLs an https scheme."""
    if not url:
        return url
    if url.startswith(("http://", "https://")):
        return url
    return f"https:{url}"
