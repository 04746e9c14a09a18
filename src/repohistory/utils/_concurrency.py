"""Bounded concurrency for batches of asynchronous operations."""

from collections.abc import Awaitable, Callable, Sequence

import anyio

from repohistory.exceptions import BatchOperationError


async def gather_bounded[T, R](
    items: Sequence[T],
    max_parallel: int,
    operation: Callable[[T], Awaitable[R]],
) -> list[R]:
    """Run `operation` over `items` with at most `max_parallel` in flight.

    Results are returned in input order. If any operation raises, the
    remaining operations are cancelled and the whole batch fails.

    Args:
        items: Inputs to process.
        max_parallel: Maximum number of concurrently running operations.
        operation: Async callable applied to each item.

    Returns:
        Results aligned with `items`.

    Raises:
        ValueError: If `max_parallel` is less than 1.
        BatchOperationError: If any operation raises.
    """
    if max_parallel < 1:
        msg = f"max_parallel must be at least 1, got {max_parallel}"
        raise ValueError(msg)

    results: list[R | None] = [None] * len(items)
    failures: list[tuple[int, Exception]] = []
    limiter = anyio.CapacityLimiter(max_parallel)

    async with anyio.create_task_group() as tg:

        async def _run(index: int, item: T) -> None:
            async with limiter:
                try:
                    results[index] = await operation(item)
                except Exception as e:  # noqa: BLE001
                    failures.append((index, e))
                    tg.cancel_scope.cancel()

        for index, item in enumerate(items):
            tg.start_soon(_run, index, item)

    if failures:
        index, cause = failures[0]
        msg = f"Batch operation failed on item {index}: {cause}"
        raise BatchOperationError(msg, index=index, cause=cause)

    return results  # pyright: ignore[reportReturnType]
