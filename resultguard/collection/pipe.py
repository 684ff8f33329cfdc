"""
Pipe combinator
===============

Последовательная цепочка Result-шагов с short-circuit на первой ошибке.
"""

from __future__ import annotations

import inspect
import typing
from collections.abc import Sequence

from kungfu import Error, LazyCoroResult, Ok, Result

from .._errors import normalize
from .._types import Step


def pipe[T](
    initial: T,
    steps: Sequence[Step[typing.Any, typing.Any, typing.Any]],
) -> LazyCoroResult[typing.Any, typing.Any]:
    """
    Thread `initial` through `steps`, short-circuiting on the first Error.

    Each step gets the previous Ok payload and returns a Result, an awaitable
    of one, or a LazyCoroResult. The first Error is returned as is and later
    steps are never called. A step that raises becomes an Error holding the
    normalized exception; a step returning anything but a Result becomes an
    Error(TypeError). No steps means Ok(initial).

    Example:
        result = await pipe(
            5,
            [
                lambda x: try_catch(lambda: x * 2),
                lambda x: try_catch_async(lambda: fetch_score(x)),
            ],
        )
    """

    async def run() -> Result[typing.Any, typing.Any]:
        value: typing.Any = initial
        for position, step in enumerate(steps):
            try:
                outcome = step(value)
                if inspect.isawaitable(outcome):
                    outcome = await outcome
            except Exception as exc:
                return Error(normalize(exc))

            match outcome:
                case Ok(v):
                    value = v
                case Error(_):
                    return outcome
                case _:
                    return Error(
                        TypeError(
                            f"pipe step {position} returned {type(outcome).__name__}, expected Result"
                        )
                    )

        return Ok(value)

    return LazyCoroResult(run)


__all__ = ("pipe",)
