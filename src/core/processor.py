"""Core transcript processing pipeline.

This module is integration-agnostic. It only relies on ports for logging and
embedded-content analysis, so the CLI, the review UI and tests all drive the
same code path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from core.config import DedupConfig
from core.dedup import ContentDeduplicationProcessor
from core.log import LoggingSink
from core.models import DeduplicationResult, SlackMessage
from core.parser import MessageBoundaryParser
from core.ports import EmbeddedContentAnalyzer, LogPort

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessedTranscript:
    """Parsed messages plus the outcome of the dedup pass (None when skipped)."""

    parsed: list[SlackMessage]
    dedup: Optional[DeduplicationResult]

    @property
    def messages(self) -> list[SlackMessage]:
        return self.dedup.messages if self.dedup is not None else self.parsed


class TranscriptProcessor:
    """Runs parse, embedded-content analysis and deduplication in order."""

    def __init__(
        self,
        analyzer: EmbeddedContentAnalyzer,
        dedup_config: Optional[DedupConfig] = None,
        log: Optional[LogPort] = None,
    ) -> None:
        self._dedup_config = dedup_config or DedupConfig()
        self._log = log or LoggingSink(__name__)
        self._parser = MessageBoundaryParser(self._log)
        self._deduplicator = ContentDeduplicationProcessor(analyzer, self._dedup_config, self._log)

    def parse(self, text: Optional[str]) -> list[SlackMessage]:
        return self._parser.parse(text)

    def deduplicate(self, messages: list[SlackMessage]) -> DeduplicationResult:
        return self._deduplicator.process(messages)

    def run(self, text: Optional[str], dedup: bool = True) -> ProcessedTranscript:
        """Process one pasted transcript end to end."""

        parsed = self.parse(text)
        # Dedup is skipped on request or when disabled in config; the parsed
        # list is then the final output.
        if not dedup or not self._dedup_config.enabled:
            LOGGER.debug("Deduplication skipped for %s messages", len(parsed))
            return ProcessedTranscript(parsed=parsed, dedup=None)
        return ProcessedTranscript(parsed=parsed, dedup=self.deduplicate(parsed))
