"""Centralized logging helpers.

Every module logs through ``logging.getLogger(__name__)``; this module owns
root configuration and the structured ``extra`` payload used by DEBUG traces.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional

from constants import Constants

_VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_HANDLER_MARK = "_wsfocus_handler"


def _resolve_level(level_name: Optional[str]) -> int:
    name = str(level_name or Constants.DEFAULT_LOG_LEVEL).upper()
    if name not in _VALID_LEVELS:
        name = Constants.DEFAULT_LOG_LEVEL
    return getattr(logging, name)


def configure_logging(log_file: Optional[str] = None) -> None:
    """Configure the root logger.

    The level comes from the ``WSFOCUS_LOG_LEVEL`` environment variable
    (the CLI exports ``--loglevel`` into it when given) and defaults to
    WARNING. Calling this more than once replaces the handlers installed by
    earlier calls.

    Args:
        log_file: Optional path of an additional log file.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root.removeHandler(handler)
            handler.close()

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
    setattr(console, _HANDLER_MARK, True)
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
        setattr(file_handler, _HANDLER_MARK, True)
        root.addHandler(file_handler)

    root.setLevel(_resolve_level(os.environ.get(Constants.ENV_LOG_LEVEL)))


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a structured log record.

    None values are dropped so formatters only see populated fields.
    """
    return {k: v for k, v in fields.items() if v is not None}


class Timer:
    """Context manager measuring wall-clock duration."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Elapsed milliseconds (so far, while still inside the block)."""
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
