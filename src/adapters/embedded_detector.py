"""Default embedded-content analyzer.

Scans a message body line by line for content a chat client renders inline:
link previews, file attachments, quoted messages and stray reaction counts.
Detected chunks are reported to the deduplicator and removed from
``cleaned_text``.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Sequence

from core.models import EmbeddedAnalysis, EmbeddedContent, EmbeddedContentType, SlackMessage

LOGGER = logging.getLogger(__name__)

LINK_PREVIEW_RE = re.compile(r"^https?://\S+$")
FILE_LINK_RE = re.compile(
    r"^\[(.*)\]\((.*)\)$|^(.*\.(?:pdf|docx?|xlsx?|pptx?|csv|zip|png|jpe?g|gif))\s*$", re.IGNORECASE
)
FILE_LABEL_RE = re.compile(r"^(?:PDF|Doc|Zip|Google Doc|\d+ files?)$", re.IGNORECASE)
QUOTE_START_RE = re.compile(r"^[A-Za-z\s]+$|^[A-Za-z\s]+\s+\[[0-9:]+\s*(?:AM|PM)?\]")
METADATA_LINE_RE = re.compile(r"^[A-Z][a-z\s]*[a-z]$|^(?:Google Doc|PDF|Zip)$")
REACTION_CONTINUATION_RE = re.compile(r"^:[\w+-]+:\s*\d+$|^[\d\s]+$")
NEW_MESSAGE_RE = re.compile(r"^\d{1,2}:\d{2}|^[A-Z][a-z]+ [A-Z][a-z]+")

PREVIEW_LOOKAHEAD = 4
FILE_LOOKAHEAD = 10


def _looks_like_metadata(line: str) -> bool:
    return bool(METADATA_LINE_RE.match(line)) or (len(line) < 60 and line[:1].isupper())


def _looks_like_description(line: str) -> bool:
    return 20 < len(line) < 200 and "[" not in line and "http" not in line


def _looks_like_file_link(line: str) -> bool:
    return bool(FILE_LINK_RE.match(line)) or "files.slack.com" in line or "download/" in line


def _looks_like_quote_start(line: str) -> bool:
    return (
        bool(QUOTE_START_RE.match(line))
        and len(line) < 100
        and ":" not in line
        and line[:1].isupper()
    )


def _looks_like_quote_body(line: str) -> bool:
    return len(line) < 200 and "http" not in line and not NEW_MESSAGE_RE.match(line)


def _chunk(
    kind: EmbeddedContentType, lines: Sequence[str], start: int, end: int
) -> EmbeddedContent:
    return EmbeddedContent(type=kind, content=tuple(lines[start : end + 1]), start_index=start, end_index=end)


def detect_link_preview(lines: Sequence[str], start: int) -> Optional[EmbeddedContent]:
    """A bare URL followed by at least one title/description line."""

    if not LINK_PREVIEW_RE.match(lines[start].strip()):
        return None
    end = start
    for index in range(start + 1, min(len(lines), start + 1 + PREVIEW_LOOKAHEAD)):
        line = lines[index].strip()
        if line and not (_looks_like_metadata(line) or _looks_like_description(line)):
            break
        end = index
    # Trailing blanks alone do not make a preview.
    while end > start and not lines[end].strip():
        end -= 1
    if end == start:
        return None
    return _chunk(EmbeddedContentType.LINK_PREVIEW, lines, start, end)


def detect_file_attachment(lines: Sequence[str], start: int) -> Optional[EmbeddedContent]:
    """File links and file labels, possibly spread over a few lines."""

    end: Optional[int] = None
    for index in range(start, min(len(lines), start + FILE_LOOKAHEAD)):
        line = lines[index].strip()
        if not line:
            continue
        if _looks_like_file_link(line) or FILE_LABEL_RE.match(line):
            end = index
        elif end is not None or index == start:
            break
    if end is None:
        return None
    return _chunk(EmbeddedContentType.FILE_ATTACHMENT, lines, start, end)


def detect_quoted_message(lines: Sequence[str], start: int) -> Optional[EmbeddedContent]:
    """A short name-like line followed by the quoted body lines."""

    if not _looks_like_quote_start(lines[start].strip()):
        return None
    end = start
    for index in range(start + 1, min(len(lines), start + 5)):
        line = lines[index].strip()
        if line and not _looks_like_quote_body(line):
            break
        if line:
            end = index
    # A lone capitalised line is ordinary prose, not a quote.
    if end == start:
        return None
    return _chunk(EmbeddedContentType.QUOTED_MESSAGE, lines, start, end)


def detect_reaction_continuation(lines: Sequence[str], start: int) -> Optional[EmbeddedContent]:
    if not REACTION_CONTINUATION_RE.match(lines[start].strip()):
        return None
    end = start
    for index in range(start + 1, min(len(lines), start + 5)):
        line = lines[index].strip()
        if line and not REACTION_CONTINUATION_RE.match(line):
            break
        if line:
            end = index
    return _chunk(EmbeddedContentType.REACTIONS, lines, start, end)


DETECTORS = (
    detect_link_preview,
    detect_file_attachment,
    detect_quoted_message,
    detect_reaction_continuation,
)


class EmbeddedMessageDetector:
    """Implements ``EmbeddedContentAnalyzer`` with line-pattern heuristics."""

    def analyze(self, message: SlackMessage) -> EmbeddedAnalysis:
        lines = message.text.split("\n")
        found: list[EmbeddedContent] = []
        kept: list[str] = []

        index = 0
        while index < len(lines):
            if not lines[index].strip():
                kept.append(lines[index])
                index += 1
                continue
            for detector in DETECTORS:
                chunk = detector(lines, index)
                if chunk is not None:
                    found.append(chunk)
                    index = chunk.end_index + 1
                    break
            else:
                kept.append(lines[index])
                index += 1

        if found:
            LOGGER.debug(
                "Found %s embedded chunks in message from %s: %s",
                len(found),
                message.username,
                ", ".join(chunk.type.value for chunk in found),
            )
        return EmbeddedAnalysis(
            message=message,
            has_embedded=bool(found),
            cleaned_text="\n".join(kept).strip(),
            embedded_content=tuple(found),
        )
