"""Timeout combinators

Deadlines and timeout races with guaranteed timer cancellation."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass

from kungfu import Error, LazyCoroResult, Ok, Result

from .._errors import TimeoutError
from .._helpers import abandon, consume
from .._logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TimeoutOptions:
    """Deadline in milliseconds. `None` or `0` means no deadline."""

    timeout_ms: float | None = None

    def __post_init__(self) -> None:
        if self.timeout_ms is not None and self.timeout_ms < 0:
            raise ValueError("TimeoutOptions.timeout_ms must be >= 0")


class Deadline:
    """
    A one-shot timer armed on the running loop.

    When it fires, `expired` resolves with the `TimeoutError` to report.
    The handle that cancels the timer belongs to this instance only, so
    concurrent deadlines never interfere with each other.
    """

    __slots__ = ("context", "timeout_ms", "expired", "_handle")

    def __init__(self, timeout_ms: float, context: str = "Operation timed out") -> None:
        loop = asyncio.get_running_loop()
        self.context = context
        self.timeout_ms = timeout_ms
        self.expired: asyncio.Future[TimeoutError] = loop.create_future()
        self._handle = loop.call_later(timeout_ms / 1000, self._fire)

    def _fire(self) -> None:
        if self.expired.done():
            return
        log.debug("deadline_expired", context=self.context, timeout_ms=self.timeout_ms)
        self.expired.set_result(TimeoutError(self.context, self.timeout_ms))

    @property
    def fired(self) -> bool:
        return self.expired.done() and not self.expired.cancelled()

    @property
    def active(self) -> bool:
        """True while the timer can still fire."""
        return not self.expired.done()

    def cancel(self) -> None:
        """Disarm the timer. Idempotent; a no-op once fired."""
        self._handle.cancel()
        if not self.expired.done():
            self.expired.cancel()


async def race_with_timeout[T](
    work: Awaitable[T],
    timeout_ms: float,
    message: str = "Operation timed out",
) -> T:
    """
    Race `work` against a deadline of `timeout_ms` milliseconds.

    Returns the work's value (or re-raises its exception) when it settles
    first. Otherwise the work is cancelled, awaited until it unwinds, and
    `TimeoutError("<message> after <timeout_ms>ms")` is raised.
    The deadline timer is disarmed on every exit path.
    """
    task = asyncio.ensure_future(work)
    deadline = Deadline(timeout_ms, message)
    try:
        await asyncio.wait({task, deadline.expired}, return_when=asyncio.FIRST_COMPLETED)
        if task.done():
            return task.result()

        task.cancel()
        # Let the loser unwind (closes generators, releases locks) without
        # swallowing a cancellation aimed at us.
        await asyncio.wait({task})
        consume(task)
        raise deadline.expired.result()
    finally:
        deadline.cancel()
        if not task.done():
            abandon(task)


# Sugar for LazyCoroResult
def timeout[T, E](
    interp: LazyCoroResult[T, E],
    *,
    timeout_ms: float,
    message: str = "Operation timed out",
) -> LazyCoroResult[T, E | TimeoutError]:
    """
    Fail with TimeoutError if `interp` takes longer than `timeout_ms`.

    Adds TimeoutError to the error channel.
    """

    async def run() -> Result[T, E | TimeoutError]:
        try:
            result: Result[T, E] = await race_with_timeout(interp(), timeout_ms, message)
        except TimeoutError as exc:
            return Error(exc)
        match result:
            case Ok(v):
                return Ok(v)
            case Error(e):
                return Error(e)

    return LazyCoroResult(run)


__all__ = ("Deadline", "TimeoutOptions", "race_with_timeout", "timeout")
