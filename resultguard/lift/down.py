"""
Опускание: проверка Result.

Narrowing predicates for Results. Both are pure and side-effect free.
"""

from __future__ import annotations

from typing import TypeGuard

from kungfu import Error, Ok, Result


def is_success[T, E](result: Result[T, E]) -> TypeGuard[Ok[T]]:
    """
    True if `result` is the Success variant.

    Example:
        result = try_catch(lambda: "hello")
        if is_success(result):
            print(result.unwrap().upper())
    """
    return isinstance(result, Ok)


def is_failure[T, E](result: Result[T, E]) -> TypeGuard[Error[E]]:
    """True if `result` is the Failure variant."""
    return isinstance(result, Error)


__all__ = (
    "is_success",
    "is_failure",
)
