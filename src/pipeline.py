"""Public entry points for turning a pasted transcript into messages.

The pipeline enforces a strict order:
1) Split the paste into lines and classify each one
2) Assemble message records with the boundary parser
3) Analyze every message for embedded content (link previews, quotes, files)
4) Compare content blocks and drop near-duplicates
5) Render the surviving messages

Each step is usable on its own; the CLI and the review UI call them in order.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from adapters.embedded_detector import EmbeddedMessageDetector
from adapters.transcript_formatting import format_transcript as _format_transcript
from core.config import DedupConfig, OutputConfig
from core.dedup import ContentDeduplicationProcessor
from core.log import LoggingSink
from core.models import DeduplicationResult, SlackMessage
from core.parser import MessageBoundaryParser

LOGGER = logging.getLogger(__name__)


def parse_messages(text: Optional[str], debug: bool = False) -> list[SlackMessage]:
    """Parse a pasted transcript. Always returns a list, possibly empty."""

    parser = MessageBoundaryParser(LoggingSink("core.parser", debug_enabled=debug))
    return parser.parse(text)


def deduplicate(
    messages: list[SlackMessage],
    debug: bool = False,
    config: Optional[DedupConfig] = None,
) -> DeduplicationResult:
    """Remove near-duplicate content using the default embedded-content analyzer."""

    processor = ContentDeduplicationProcessor(
        EmbeddedMessageDetector(),
        config,
        LoggingSink("core.dedup", debug_enabled=debug),
    )
    return processor.process(messages)


def format_transcript(messages: Iterable[SlackMessage], output: Optional[OutputConfig] = None) -> str:
    output = output or OutputConfig()
    LOGGER.debug("Rendering transcript as %s", output.format)
    return _format_transcript(messages, output.format, output.callout)
