from .timeout import Deadline, TimeoutOptions, race_with_timeout, timeout

__all__ = (
    # Options
    "TimeoutOptions",
    # Deadline
    "Deadline",
    # Timeout
    "race_with_timeout",
    "timeout",
)
