"""
Callback combinators
====================

Адаптер callback-style API (resolve/reject) в Result с cleanup и дедлайном.
"""

from __future__ import annotations

import asyncio
import enum
import threading
import typing
from collections.abc import Callable
from dataclasses import dataclass

from kungfu import LazyCoroResult

from .._errors import TimeoutError, normalize
from .._helpers import reject_future, run_cleanup_sync
from .._types import Cleanup
from ..lift.up import try_catch_async
from ..time.timeout import TimeoutOptions


@dataclass(frozen=True, slots=True)
class Handlers[T]:
    """The resolve/reject pair handed to a with_callbacks setup function."""

    resolve: Callable[[T], None]
    reject: Callable[[object], None]


class _State(enum.Enum):
    PENDING = "pending"
    SETTLED = "settled"


def _noop() -> None:
    return None


class _Settlement[T]:
    """
    pending -> settled, exactly once.

    Whoever settles first (resolve, reject, the timer, setup raising, or the
    awaiting task going away) decides the outcome and then runs the current
    cleanup closure, even if delivering the outcome failed. Every later
    attempt is ignored.
    """

    __slots__ = ("future", "state", "_cleanup", "_loop", "_thread")

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self.future: asyncio.Future[T] = loop.create_future()
        self.state = _State.PENDING
        self._cleanup: Cleanup = _noop
        self._loop = loop
        self._thread = threading.get_ident()

    @property
    def settled(self) -> bool:
        return self.state is _State.SETTLED

    def attach(self, cleanup: Cleanup | None) -> None:
        """Install the closure returned by setup; run it now if we already settled."""
        if cleanup is None:
            return
        if self.settled:
            run_cleanup_sync(cleanup, label="with_callbacks")
        else:
            self._cleanup = cleanup

    def chain(self, disarm: Callable[[], object]) -> None:
        """Fold `disarm` into the cleanup closure, ahead of the current one."""
        previous = self._cleanup

        def cleanup() -> None:
            disarm()
            run_cleanup_sync(previous, label="with_callbacks")

        self._cleanup = cleanup

    def _settle(self, deliver: Callable[[], None] | None = None) -> None:
        if self.settled:
            return
        self.state = _State.SETTLED
        cleanup, self._cleanup = self._cleanup, _noop
        try:
            if deliver is not None and not self.future.done():
                deliver()
        finally:
            run_cleanup_sync(cleanup, label="with_callbacks")

    def resolve(self, value: T) -> None:
        self._settle(lambda: self.future.set_result(value))

    def reject(self, error: object) -> None:
        self._settle(lambda: reject_future(self.future, normalize(error)))

    def expire(self, timeout_ms: float) -> None:
        self.reject(TimeoutError("Operation timed out", timeout_ms))

    def release(self) -> None:
        """The awaiting side is gone; release resources without an outcome."""
        self._settle()

    def handlers(self) -> Handlers[T]:
        return Handlers(
            resolve=lambda value: self._dispatch(self.resolve, value),
            reject=lambda error: self._dispatch(self.reject, error),
        )

    def _dispatch(self, fn: Callable[[typing.Any], None], arg: object) -> None:
        # Callback APIs often fire from worker threads; settle on the owning loop.
        if threading.get_ident() == self._thread:
            fn(arg)
        else:
            self._loop.call_soon_threadsafe(fn, arg)


def with_callbacks[T](
    setup: Callable[[Handlers[T]], Cleanup | None],
    options: TimeoutOptions = TimeoutOptions(),
) -> LazyCoroResult[T, Exception]:
    """
    Turn a callback-style operation into a Result.

    `setup` receives `Handlers(resolve, reject)` and may return a cleanup
    callable. The first of resolve/reject wins and runs the cleanup; later
    calls have no effect. If `setup` raises before settling, that error is
    the outcome. With `timeout_ms`, an unsettled operation is cleaned up and
    fails with "Operation timed out after <ms>ms"; settling earlier cancels
    the timer.

    Example:
        def setup(h: Handlers[bytes]) -> Cleanup:
            request = client.fetch(url, on_done=h.resolve, on_error=h.reject)
            return request.cancel

        result = await with_callbacks(setup, TimeoutOptions(timeout_ms=5000))
    """

    async def run() -> T:
        loop = asyncio.get_running_loop()
        settlement: _Settlement[T] = _Settlement(loop)

        try:
            settlement.attach(setup(settlement.handlers()))
        except Exception as exc:
            settlement.reject(exc)

        if options.timeout_ms and not settlement.settled:
            handle = loop.call_later(options.timeout_ms / 1000, settlement.expire, options.timeout_ms)
            settlement.chain(handle.cancel)

        try:
            return await settlement.future
        finally:
            settlement.release()

    return try_catch_async(run)


__all__ = ("Handlers", "with_callbacks")
