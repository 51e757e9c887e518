"""Centralized logging helpers.

Provides a single place to configure the root logger from the environment and
small helpers for structured DEBUG records, so modules only need
``logging.getLogger(__name__)``.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional

from constants import Constants

_STANDARD_FIELDS = ("event", "component", "action", "outcome")


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Configure the root logger.

    Level resolution order: explicit ``level`` argument, then the
    ``PKGDESC_LOG_LEVEL`` environment variable, then ``Constants.DEFAULT_LOG_LEVEL``.

    Args:
        level: Optional level name such as "DEBUG".
        log_file: Optional path; when given a FileHandler is attached.
    """
    level_name = (level or os.environ.get(Constants.LOG_LEVEL_ENV) or Constants.DEFAULT_LOG_LEVEL).upper()
    level_value = getattr(logging, level_name, logging.INFO)
    if not isinstance(level_value, int):
        level_value = logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level_value)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        root.addHandler(file_handler)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records from ``logger`` would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` mapping for structured log records.

    None values are dropped so records only carry fields that were set.
    """
    ctx: Dict[str, Any] = {}
    for key in _STANDARD_FIELDS:
        value = fields.pop(key, None)
        if value is not None:
            ctx[key] = value
    for key, value in fields.items():
        if value is not None:
            ctx[key] = value
    return ctx


class Timer:
    """Context manager measuring wall-clock duration in milliseconds."""

    def __init__(self):
        self._start: Optional[float] = None
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Elapsed milliseconds; measured up to now while still running."""
        if self._start is None:
            return 0
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
