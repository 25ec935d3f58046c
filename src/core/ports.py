"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for logging and embedded-content analysis
so the parser and deduplicator can be reused and tested without global state.
"""

from __future__ import annotations

from typing import Any, Protocol

from core.models import EmbeddedAnalysis, SlackMessage


class LogPort(Protocol):
    """Leveled log sink. Implementations must never raise."""

    def debug(self, message: str, *args: Any) -> None:
        ...

    def info(self, message: str, *args: Any) -> None:
        ...

    def warning(self, message: str, *args: Any) -> None:
        ...

    def error(self, message: str, *args: Any, exc_info: bool = False) -> None:
        ...


class EmbeddedContentAnalyzer(Protocol):
    """Finds link previews, quoted messages and attachments in a message."""

    def analyze(self, message: SlackMessage) -> EmbeddedAnalysis:
        ...
