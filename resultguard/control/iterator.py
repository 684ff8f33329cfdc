"""
Iterator combinators
====================

Безопасное вычитывание async итераторов: лимит элементов, предикат
продолжения, дедлайн, и aclose() ровно один раз на любом пути выхода.
"""

from __future__ import annotations

import typing
from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass

from kungfu import LazyCoroResult

from .._helpers import maybe_await, run_cleanup
from .._types import Predicate
from ..lift.up import try_catch_async
from ..time.timeout import TimeoutOptions, race_with_timeout


@dataclass(frozen=True, slots=True)
class IteratorOptions[T](TimeoutOptions):
    """
    Configuration for with_iterator.

    `on_item` is asked about every item before it is collected; a falsy
    answer stops iteration and the item is left out.
    """

    max_items: int | None = None
    on_item: Predicate[T] | None = None

    def __post_init__(self) -> None:
        TimeoutOptions.__post_init__(self)
        if self.max_items is not None and self.max_items < 1:
            raise ValueError("IteratorOptions.max_items must be >= 1")


def with_iterator[T](
    sequence: AsyncIterator[T] | AsyncIterable[T],
    options: IteratorOptions[T] = IteratorOptions(),
) -> LazyCoroResult[list[T], Exception]:
    """
    Drain an async iterator into a list.

    `sequence` is stepped directly when it has `__anext__`, otherwise it is
    turned into an iterator with `aiter()`.

    Stops on exhaustion, on `max_items`, or when `on_item` says no.
    With `timeout_ms` the whole drain is raced against a deadline
    ("Iterator timed out after <ms>ms").

    The iterator's `aclose()` (if it has one) is awaited exactly once
    whatever happens. If the producer fails, its error is reported even
    when closing fails too; closing errors are otherwise swallowed.

    Example:
        result = await with_iterator(
            read_lines(path),
            IteratorOptions(max_items=100, on_item=lambda line: line != "EOF"),
        )
    """

    async def run() -> list[T]:
        # Anything with __anext__ is stepped directly; an aclose-only object
        # that fails aiter() still gets closed.
        iterator: typing.Any = sequence
        closed = False

        async def close() -> None:
            nonlocal closed
            if closed:
                return
            closed = True
            await run_cleanup(getattr(iterator, "aclose", None), label="with_iterator")

        async def drain() -> list[T]:
            values: list[T] = []
            while True:
                try:
                    item = await anext(iterator)
                except StopAsyncIteration:
                    break
                except Exception:
                    await close()
                    raise

                if options.on_item is not None and not await maybe_await(options.on_item(item)):
                    break

                values.append(item)

                if options.max_items is not None and len(values) >= options.max_items:
                    break
            return values

        try:
            if not hasattr(sequence, "__anext__"):
                iterator = aiter(sequence)
            if options.timeout_ms:
                return await race_with_timeout(drain(), options.timeout_ms, "Iterator timed out")
            return await drain()
        finally:
            await close()

    return try_catch_async(run)


__all__ = ("IteratorOptions", "with_iterator")
