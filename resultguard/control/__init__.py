from .callbacks import Handlers, with_callbacks
from .events import EventOptions, EventSource, with_events
from .iterator import IteratorOptions, with_iterator

__all__ = (
    # Options
    "EventOptions",
    "IteratorOptions",
    # Protocols
    "EventSource",
    "Handlers",
    # Resource combinators
    "with_callbacks",
    "with_events",
    "with_iterator",
)
