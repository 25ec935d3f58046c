"""Default log sink backed by the standard logging module."""

from __future__ import annotations

import logging
from typing import Any


class LoggingSink:
    """Forward core log calls to a stdlib logger.

    Debug records are dropped unless ``debug_enabled`` is set, so a caller can
    turn on per-line tracing for one call without touching global logger
    levels. Formatting and I/O failures inside handlers are reported by
    ``logging.Handler.handleError`` and never reach the caller.
    """

    def __init__(self, name: str, debug_enabled: bool = False) -> None:
        self._logger = logging.getLogger(name)
        self.debug_enabled = debug_enabled

    def debug(self, message: str, *args: Any) -> None:
        if not self.debug_enabled:
            return
        self._emit(logging.DEBUG, message, args)

    def info(self, message: str, *args: Any) -> None:
        self._emit(logging.INFO, message, args)

    def warning(self, message: str, *args: Any) -> None:
        self._emit(logging.WARNING, message, args)

    def error(self, message: str, *args: Any, exc_info: bool = False) -> None:
        self._emit(logging.ERROR, message, args, exc_info=exc_info)

    def _emit(self, level: int, message: str, args: tuple, exc_info: bool = False) -> None:
        self._logger.log(level, message, *args, exc_info=exc_info)
