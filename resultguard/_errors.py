from __future__ import annotations

import msgspec

from ._types import UNDEFINED


class TimeoutError(Exception):
    """A deadline elapsed before the raced work settled."""

    context: str
    timeout_ms: float

    def __init__(self, context: str, timeout_ms: float) -> None:
        self.context = context
        self.timeout_ms = timeout_ms
        super().__init__(f"{context} after {format_ms(timeout_ms)}ms")


class CanonicalError(Exception):
    """Exception built from a raised or rejected value that was not an exception."""

    value: object

    def __init__(self, message: str, *, value: object) -> None:
        self.value = value
        super().__init__(message)


def format_ms(ms: float) -> str:
    """Render milliseconds without a trailing `.0` for whole numbers."""
    if isinstance(ms, float) and ms.is_integer():
        return str(int(ms))
    return str(ms)


def _describe(value: object) -> str:
    if value is None:
        return "null"
    if value is UNDEFINED:
        return "undefined"
    try:
        return msgspec.json.encode(value).decode()
    except Exception:
        # Unsupported types and recursive containers.
        return str(value)


def normalize(value: object) -> BaseException:
    """
    Turn anything that was raised, rejected or emitted as an error into an exception.

    - exception instances pass through untouched (identity and class are kept)
    - text becomes `CanonicalError(text)`
    - everything else becomes `CanonicalError("Non-error value thrown: <json>")`

    Never raises.
    """
    if isinstance(value, BaseException):
        return value
    if isinstance(value, str):
        return CanonicalError(value, value=value)
    return CanonicalError(f"Non-error value thrown: {_describe(value)}", value=value)


__all__ = ("CanonicalError", "TimeoutError", "format_ms", "normalize")
