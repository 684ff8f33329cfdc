"""
Lift helpers with semantic namespaces.

Architecture:
- up.*    - подъем значений и вычислений в Result
- down.*  - проверка Result

Examples:
    from resultguard import lift as L

    ok = L.try_catch(lambda: int("42"))          # Ok(42)
    err = L.try_catch(lambda: int("x"))          # Error(ValueError(...))
    res = await L.try_catch_async(fetch_user)    # Ok(...) | Error(...)

    if L.is_failure(err):
        ...
"""

from __future__ import annotations

from . import down, up
from .down import is_failure, is_success
from .up import fail, pure, try_catch, try_catch_async

__all__ = (
    # Namespaces
    "up",
    "down",
    # Up
    "pure",
    "fail",
    "try_catch",
    "try_catch_async",
    # Down
    "is_success",
    "is_failure",
)
