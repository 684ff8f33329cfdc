"""
Concurrent combinators
======================

Пачка независимых операций: каждая в своём Result, порядок сохраняется,
конкурентность ограничивается чанками размера max_concurrent.
"""

from __future__ import annotations

import asyncio
import inspect
import itertools
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass

from kungfu import Result

from .._logging import get_logger
from .._types import Thunk
from ..lift.down import is_failure
from ..lift.up import try_catch_async
from ..time.timeout import TimeoutOptions, race_with_timeout

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ConcurrentOptions(TimeoutOptions):
    """
    Configuration for concurrent: in-flight cap and fail-fast switch.

    `timeout_ms` applies to each operation separately.
    """

    max_concurrent: int | None = None
    stop_on_error: bool = False

    def __post_init__(self) -> None:
        TimeoutOptions.__post_init__(self)
        if self.max_concurrent is not None and self.max_concurrent < 1:
            raise ValueError("ConcurrentOptions.max_concurrent must be >= 1")


def _first_failure[T](
    results: Sequence[Result[T, Exception]],
) -> tuple[int, Result[T, Exception]] | None:
    return next(((i, r) for i, r in enumerate(results) if is_failure(r)), None)


async def concurrent[T](
    operations: Sequence[Thunk[T]],
    options: ConcurrentOptions = ConcurrentOptions(),
) -> list[Result[T, Exception]]:
    """
    Run zero-arg operations concurrently, one Result per operation.

    Results line up with `operations` by index, whatever the completion order.
    An element that is not callable becomes a Failure (TypeError); a plain,
    non-awaitable return value is an immediate success.

    Without `max_concurrent` (or when it covers the whole list) everything
    starts at once. Otherwise the list is split into chunks of
    `max_concurrent`; a chunk starts only after the previous one settled.

    With `stop_on_error`, the call returns `[first failure]` (first in list
    order, not in completion order) and no further chunk is started.

    Example:
        results = await concurrent(
            [lambda u=u: fetch(u) for u in urls],
            ConcurrentOptions(max_concurrent=4, timeout_ms=5000),
        )
    """

    def execute(op: Thunk[T]) -> Awaitable[Result[T, Exception]]:
        async def call() -> T:
            value = op()
            if not inspect.isawaitable(value):
                return value
            if options.timeout_ms:
                return await race_with_timeout(value, options.timeout_ms, "Operation timed out")
            return await value

        return try_catch_async(call)()

    async def run_all(ops: Sequence[Thunk[T]]) -> list[Result[T, Exception]]:
        return list(await asyncio.gather(*(execute(op) for op in ops)))

    if options.max_concurrent is None or len(operations) <= options.max_concurrent:
        everything = await run_all(operations)
        if options.stop_on_error and (found := _first_failure(everything)) is not None:
            index, failure = found
            log.debug("batch_stopped_on_error", index=index, chunk=0)
            return [failure]
        return everything

    results: list[Result[T, Exception]] = []
    for n, chunk in enumerate(itertools.batched(operations, options.max_concurrent)):
        chunk_results = await run_all(chunk)
        results.extend(chunk_results)
        if options.stop_on_error and (found := _first_failure(chunk_results)) is not None:
            index, failure = found
            log.debug(
                "batch_stopped_on_error",
                index=n * options.max_concurrent + index,
                chunk=n,
            )
            return [failure]

    return results


__all__ = ("ConcurrentOptions", "concurrent")
