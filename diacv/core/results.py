"""
Calculation result conventions.

Every public calculation returns either a number (or a list of numbers) or a
human readable string. Strings are the error channel: the callers are
spreadsheet-like hosts that can only display a cell value, so nothing raised
inside a calculation is allowed to escape it.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, List, Union

from .logger import get_logger

log = get_logger(__name__)

# Markers used by the calculation families
ERROR_PREFIX = "Error: "
PIPE_ERROR_PREFIX = "#ERROR: "
NOT_AVAILABLE_PREFIX = "#N/A - "

DATA_OUT_OF_RANGE = "DATA OUT OF RANGE"
NO_SOLUTION = "No solution found"

CalcResult = Union[float, List[float], List[List[float]], str]


def is_error(value: Any) -> bool:
    """True when a calculation returned a tagged (string) result."""
    return isinstance(value, str)


def returns_error_string(prefix: str = ERROR_PREFIX) -> Callable:
    """
    Convert any exception escaping the wrapped calculation into
    ``prefix + message``.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                log.warning(f"{func.__name__} failed: {exc}")
                return f"{prefix}{exc}"

        return wrapper

    return decorator
