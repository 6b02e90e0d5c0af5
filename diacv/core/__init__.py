"""
DIAC-V Core Module
==================
Shared utilities: logging and calculation result conventions.
"""

from .logger import logger, setup_logger, get_logger
from .results import is_error, returns_error_string

__all__ = ["logger", "setup_logger", "get_logger", "is_error", "returns_error_string"]
