"""Internal helpers for resultguard.

Common functions used across multiple combinator modules.
These are not part of the public API."""

from __future__ import annotations

import asyncio
import inspect
import typing
from collections.abc import Awaitable

from ._logging import get_logger
from ._types import Cleanup

log = get_logger(__name__)

# Strong refs for hooks scheduled by run_cleanup_sync; the loop only keeps weak ones.
_background: set[asyncio.Future[typing.Any]] = set()


async def maybe_await[T](value: T | Awaitable[T]) -> T:
    """Await `value` if it is awaitable, otherwise return it as is."""
    if inspect.isawaitable(value):
        return await value
    return typing.cast(T, value)


async def run_cleanup(hook: Cleanup | None, *, label: str) -> None:
    """
    Run a sync or async release hook, swallowing whatever it raises.

    Cleanup failures never replace the outcome of the guarded work;
    they only show up in the debug log.
    """
    if hook is None:
        return
    try:
        await maybe_await(hook())
    except Exception as exc:
        log.debug("cleanup_failed", hook=label, error=repr(exc))


def run_cleanup_sync(hook: Cleanup | None, *, label: str) -> None:
    """Sync counterpart of `run_cleanup` for callback-driven code paths."""
    if hook is None:
        return
    try:
        outcome = hook()
    except Exception as exc:
        log.debug("cleanup_failed", hook=label, error=repr(exc))
        return
    if inspect.isawaitable(outcome):
        # Async hook called from a sync context: run it on the loop.
        future = asyncio.ensure_future(outcome)
        _background.add(future)
        future.add_done_callback(_background.discard)
        future.add_done_callback(lambda f: _log_hook_failure(f, label))


def _log_hook_failure(future: asyncio.Future[typing.Any], label: str) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        log.debug("cleanup_failed", hook=label, error=repr(exc))


def consume(future: asyncio.Future[typing.Any]) -> None:
    """
    Retrieve the outcome of a future nobody is going to await.

    Used as a done-callback on losers of a race, so asyncio never reports
    "exception was never retrieved" for them.
    """
    if not future.cancelled():
        future.exception()


def abandon(future: asyncio.Future[typing.Any]) -> None:
    """
    Give up on a contender that lost a race.

    A pending future is cancelled and its eventual outcome consumed; a
    settled one only has its outcome consumed. Never awaits.
    """
    if future.done():
        consume(future)
    else:
        future.add_done_callback(consume)
        future.cancel()


def reject_future(future: asyncio.Future[typing.Any], error: BaseException) -> None:
    """Fail `future` with `error`; StopIteration, which futures refuse, is wrapped."""
    if isinstance(error, StopIteration):
        wrapped = RuntimeError(f"rejected with {type(error).__name__}: {error}")
        wrapped.__cause__ = error
        error = wrapped
    future.set_exception(error)


__all__ = (
    "abandon",
    "consume",
    "maybe_await",
    "reject_future",
    "run_cleanup",
    "run_cleanup_sync",
)
