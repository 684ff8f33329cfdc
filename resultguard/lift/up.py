"""
Подъем значений и вычислений в Result.

Functions that turn plain values and exception-based code into Results.
This is the only place where exceptions are caught and converted; every
combinator in the library is built on top of `try_catch_async`.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Never

from kungfu import Error, LazyCoroResult, Ok, Result

from .._errors import normalize


def pure[T](value: T) -> LazyCoroResult[T, Never]:
    """
    Lift a plain value into an always-succeeding LazyCoroResult.

    Example:
        result = await pure(42)  # Ok(42)
    """
    return LazyCoroResult.pure(value)


def fail[E](error: E) -> LazyCoroResult[Never, E]:
    """
    Create an always-failing LazyCoroResult. Dual of pure().

    Example:
        result = await fail(ValueError("bad input"))  # Error(ValueError(...))
    """
    return Error(error).to_async()


def try_catch[T](thunk: Callable[[], T]) -> Result[T, Exception]:
    """
    Run a synchronous thunk and return its outcome as a Result.

    No suspension happens: the Result is available immediately.
    Whatever the thunk raises is normalized into the Error side;
    exception instances keep their identity.

    Example:
        match try_catch(lambda: json.loads(raw)):
            case Ok(doc):
                ...
            case Error(exc):
                ...

    NOTE: For thunks that return awaitables use `try_catch_async`,
          otherwise the awaitable itself ends up inside `Ok`.
    """
    try:
        return Ok(thunk())
    except Exception as exc:
        return Error(normalize(exc))


def try_catch_async[T](
    thunk: Callable[[], Awaitable[T] | T],
) -> LazyCoroResult[T, Exception]:
    """
    Asynchronous counterpart of `try_catch`.

    The thunk is called when the returned LazyCoroResult is awaited.
    A synchronous raise, a raising awaitable and a plain return value are
    all handled: the first two become `Error`, the value becomes `Ok`.

    Example:
        result = await try_catch_async(lambda: client.get(url))

    NOTE: Only `Exception` subclasses are caught, plus `asyncio.CancelledError`
          raised by awaited work that was cancelled on its own (a task the
          thunk waits on, say). Cancellation of the awaiting task itself
          keeps propagating, as do other `BaseException`s.
    """

    async def run() -> Result[T, Exception]:
        try:
            value = thunk()
            if inspect.isawaitable(value):
                value = await value
            return Ok(value)
        except asyncio.CancelledError as exc:
            current = asyncio.current_task()
            if current is None or current.cancelling():
                raise
            return Error(exc)
        except Exception as exc:
            return Error(normalize(exc))

    return LazyCoroResult(run)


__all__ = (
    "pure",
    "fail",
    "try_catch",
    "try_catch_async",
)
