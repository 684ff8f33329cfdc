from .concurrent import ConcurrentOptions, concurrent

__all__ = (
    # Options
    "ConcurrentOptions",
    # Concurrent
    "concurrent",
)
