"""Shared test doubles and Result accessors."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from kungfu import Error, Ok, Result


def data_of[T, E](result: Result[T, E]) -> T:
    """Payload of an Ok; fails the test on Error."""
    match result:
        case Ok(value):
            return value
        case Error(error):
            raise AssertionError(f"expected Ok, got Error({error!r})")
    raise AssertionError(f"not a Result: {result!r}")


def error_of[T, E](result: Result[T, E]) -> E:
    """Payload of an Error; fails the test on Ok."""
    match result:
        case Error(error):
            return error
        case Ok(value):
            raise AssertionError(f"expected Error, got Ok({value!r})")
    raise AssertionError(f"not a Result: {result!r}")


class FakeEmitter:
    """Minimal pyee-style emitter: once / remove_all_listeners / emit."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Callable[..., Any]]] = {}
        self.removed: list[str] = []

    def once(self, event: str, f: Callable[..., Any]) -> Callable[..., Any]:
        def wrapper(*args: Any) -> None:
            self._remove(event, wrapper)
            f(*args)

        self._listeners.setdefault(event, []).append(wrapper)
        return f

    def _remove(self, event: str, listener: Callable[..., Any]) -> None:
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)

    def remove_all_listeners(self, event: str) -> None:
        self.removed.append(event)
        self._listeners.pop(event, None)

    def emit(self, event: str, *args: Any) -> bool:
        listeners = list(self._listeners.get(event, []))
        for listener in listeners:
            listener(*args)
        return bool(listeners)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))


class ScriptedIterator:
    """Async iterator over fixed values that records how it was closed."""

    def __init__(
        self,
        values: list[Any],
        *,
        fail_with: BaseException | None = None,
        close_fails: bool = False,
    ) -> None:
        self._values = list(values)
        self._fail_with = fail_with
        self._close_fails = close_fails
        self.pulled = 0
        self.close_calls = 0

    def __aiter__(self) -> ScriptedIterator:
        return self

    async def __anext__(self) -> Any:
        if self._values:
            self.pulled += 1
            return self._values.pop(0)
        if self._fail_with is not None:
            raise self._fail_with
        raise StopAsyncIteration

    async def aclose(self) -> None:
        self.close_calls += 1
        if self._close_fails:
            raise RuntimeError("Failed to close iterator")
