"""
DIAC-V Logging System
=====================
Centralized logging with Loguru.

Features:
- Colored console sink tagged with the component name (``get_logger(name)``)
- Optional rotating file sink (size based, zipped, time based retention)
- Standard library, uvicorn and FastAPI records routed into the same sinks

Nothing is configured on import; the API entry point and the CLI call
``setup_logger`` with their own settings.
"""

from __future__ import annotations
import inspect
import sys
import logging
from pathlib import Path
from typing import Optional, Union
from loguru import logger

DEFAULT_LOG_DIR = Path.cwd() / "logs"
LOG_FILE_NAME = "diacv.log"

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> "
    "<level>{level: <7}</level> "
    "<magenta>[{extra[name]}]</magenta> "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} {level: <7} [{extra[name]}] {function}:{line} {message}"

# Third-party loggers that install their own handlers
ROUTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi")


class InterceptHandler(logging.Handler):
    """Forward stdlib ``logging`` records to Loguru, keeping the caller's frame."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: Union[str, int] = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.bind(name=record.name).opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _route_stdlib_logging() -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in ROUTED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False


def setup_logger(
    level: str = "INFO",
    console: bool = True,
    file: bool = False,
    log_dir: Optional[Union[str, Path]] = None,
    rotation: str = "50 MB",
    retention: str = "10 days",
) -> Optional[Path]:
    """
    Configure the centralized logging system. Safe to call again; the
    previous sinks are replaced.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console: Colored stderr output
        file: Rotating file output
        log_dir: Directory for the log file (./logs when omitted)
        rotation: Size at which the file is rotated
        retention: How long rotated files are kept

    Returns:
        Path of the log file when file logging is enabled, else None
    """
    logger.remove()
    logger.configure(extra={"name": "diacv"})

    if console:
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True, diagnose=False)

    log_file = None
    if file:
        directory = Path(log_dir) if log_dir else DEFAULT_LOG_DIR
        directory.mkdir(parents=True, exist_ok=True)
        log_file = directory / LOG_FILE_NAME
        logger.add(
            str(log_file),
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            diagnose=False,
            enqueue=True,
        )

    _route_stdlib_logging()

    logger.debug(f"Logging configured: level={level}, file={log_file or 'off'}")
    return log_file


def get_logger(name: str = "diacv"):
    """
    Logger tagged with a component name.

    Usage:
        from diacv.core.logger import get_logger
        log = get_logger(__name__)
        log.debug("Spline built")
    """
    return logger.bind(name=name)
