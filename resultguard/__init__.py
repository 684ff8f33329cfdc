"""
resultguard: exception-free error handling for sync and async Python.

Every entry point returns a kungfu Result (Ok | Error) instead of raising,
and the combinators guarantee that the resources they own (event
listeners, iterator close hooks, timers) are released exactly once.

Architecture:
- lift        - try_catch / try_catch_async and Result predicates
- time        - deadlines and timeout races
- control     - resource combinators (events, iterators, callbacks)
- concurrency - bounded concurrent batches
- collection  - pipe
"""

# Core types
from ._types import LCR, UNDEFINED, Cleanup, Predicate, Step, Thunk

# Errors
from ._errors import CanonicalError, TimeoutError, normalize

# Logging
from ._logging import configure_logging, get_logger

# Lift helpers
from . import lift
from .lift import fail, is_failure, is_success, pure, try_catch, try_catch_async

# Time operations
from .time import Deadline, TimeoutOptions, race_with_timeout, timeout

# Resource combinators
from .control import (
    EventOptions,
    EventSource,
    Handlers,
    IteratorOptions,
    with_callbacks,
    with_events,
    with_iterator,
)

# Concurrency
from .concurrency import ConcurrentOptions, concurrent

# Collection operations
from .collection import pipe

__all__ = (
    # Types
    "LCR",
    "UNDEFINED",
    "Cleanup",
    "Predicate",
    "Step",
    "Thunk",
    # Errors
    "CanonicalError",
    "TimeoutError",
    "normalize",
    # Logging
    "configure_logging",
    "get_logger",
    # Lift module (namespace import)
    "lift",
    # Lift functions (direct import)
    "pure",
    "fail",
    "try_catch",
    "try_catch_async",
    "is_success",
    "is_failure",
    # Time
    "Deadline",
    "TimeoutOptions",
    "race_with_timeout",
    "timeout",
    # Control
    "EventOptions",
    "EventSource",
    "Handlers",
    "IteratorOptions",
    "with_callbacks",
    "with_events",
    "with_iterator",
    # Concurrency
    "ConcurrentOptions",
    "concurrent",
    # Collection
    "pipe",
)
