"""
Core type definitions for resultguard.

Типы и алиасы используемые по всей библиотеке.
"""

from __future__ import annotations

import typing
from collections.abc import Awaitable, Callable

from kungfu import LazyCoroResult, Result

# ============================================================================
# Sentinels
# ============================================================================


class _Undefined:
    """Marker for "no value at all", e.g. an error event emitted without a payload."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED: typing.Final = _Undefined()

# ============================================================================
# Type aliases
# ============================================================================

# Thunk = zero-arg callable producing a value or an awaitable of it
type Thunk[T] = Callable[[], T | Awaitable[T]]

# Cleanup = release hook, sync or async; its return value is ignored
type Cleanup = Callable[[], object]

# Predicate = per-item continuation test (may be async)
type Predicate[T] = Callable[[T], bool | Awaitable[bool]]

# Step = one stage of a pipe: previous payload -> Result (or something awaitable to one)
type Step[T, R, E] = Callable[[T], Result[R, E] | Awaitable[Result[R, E]]]

# LCR = LazyCoroResult shortcut
type LCR[T, E] = LazyCoroResult[T, E]

__all__ = (
    # Sentinels
    "UNDEFINED",
    # Type aliases
    "Thunk",
    "Cleanup",
    "Predicate",
    "Step",
    # Concrete shortcuts
    "LCR",
)
