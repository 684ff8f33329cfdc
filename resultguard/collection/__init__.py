from .pipe import pipe

__all__ = (
    # Pipe
    "pipe",
)
