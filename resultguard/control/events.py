"""
Event combinators
=================

Комбинаторы для работы поверх event emitter'ов: операция гоняется с
error-событием источника и дедлайном, listener снимается ровно один раз.
"""

from __future__ import annotations

import asyncio
import typing
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from kungfu import LazyCoroResult

from .._errors import normalize
from .._helpers import abandon, maybe_await, reject_future, run_cleanup
from .._types import UNDEFINED, Cleanup
from ..lift.up import try_catch_async
from ..time.timeout import TimeoutOptions, race_with_timeout


@typing.runtime_checkable
class EventSource(typing.Protocol):
    """
    Anything that can register a one-shot listener and drop all listeners
    of an event. pyee's `EventEmitter` satisfies it as is.
    """

    def once(self, event: str, f: Callable[..., typing.Any]) -> typing.Any: ...

    def remove_all_listeners(self, event: str) -> typing.Any: ...


@dataclass(frozen=True, slots=True)
class EventOptions(TimeoutOptions):
    """Configuration for with_events: which event means failure, what to release."""

    error_event: str = "error"
    cleanup: Cleanup | None = None

    def __post_init__(self) -> None:
        TimeoutOptions.__post_init__(self)
        if not self.error_event:
            raise ValueError("EventOptions.error_event must be a non-empty event name")


def with_events[T](
    source: EventSource,
    operation: Callable[[], Awaitable[T]],
    options: EventOptions = EventOptions(),
) -> LazyCoroResult[T, Exception]:
    """
    Run `operation` while watching `source` for its error event.

    Contenders: the operation, the error event and (if `timeout_ms` is set)
    a deadline. The first to settle decides the Result. Afterwards, exactly
    once: all `error_event` listeners are removed from `source` and
    `options.cleanup` is called; cleanup failures are swallowed.

    Example:
        result = await with_events(
            stream,
            lambda: read_all(stream),
            EventOptions(timeout_ms=5000, cleanup=stream.close),
        )
    """

    async def run() -> T:
        loop = asyncio.get_running_loop()
        signal: asyncio.Future[typing.Never] = loop.create_future()
        settled = False

        def on_error(*args: typing.Any) -> None:
            if not signal.done():
                reject_future(signal, normalize(args[0] if args else UNDEFINED))

        async def cleanup() -> None:
            nonlocal settled
            if settled:
                return
            settled = True
            await run_cleanup(
                lambda: source.remove_all_listeners(options.error_event),
                label="remove_all_listeners",
            )
            await run_cleanup(options.cleanup, label="with_events")

        async def contest() -> T:
            task: asyncio.Future[T] = asyncio.ensure_future(_invoke(operation))
            try:
                await asyncio.wait({task, signal}, return_when=asyncio.FIRST_COMPLETED)
                if task.done():
                    return task.result()
                return signal.result()
            finally:
                if not task.done():
                    abandon(task)

        try:
            source.once(options.error_event, on_error)
            if options.timeout_ms:
                return await race_with_timeout(contest(), options.timeout_ms, "Operation timed out")
            return await contest()
        finally:
            abandon(signal)
            await cleanup()

    return try_catch_async(run)


async def _invoke[T](operation: Callable[[], Awaitable[T]]) -> T:
    # Synchronous raises from operation() surface through the task, like rejections.
    return await maybe_await(operation())


__all__ = ("EventOptions", "EventSource", "with_events")
