"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any chat client or output format.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Optional

UNKNOWN_USER = "Unknown User"
CONTENT_ONLY_USER = "Unknown User (Content Only)"


@dataclass(frozen=True)
class Reaction:
    """A single emoji reaction with its count."""

    name: str
    count: int


@dataclass
class SlackMessage:
    """One message record assembled by the boundary parser.

    Mutable while the parser is building it; treated as final once it lands in
    the parser's output list.
    """

    username: str = UNKNOWN_USER
    avatar: Optional[str] = None
    timestamp: Optional[str] = None
    date: Optional[date] = None
    text: str = ""
    reactions: list[Reaction] = field(default_factory=list)
    is_thread_start: Optional[bool] = None
    is_thread_reply: Optional[bool] = None
    is_edited: Optional[bool] = None
    thread_info: Optional[Any] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "username": self.username,
            "avatar": self.avatar,
            "timestamp": self.timestamp,
            "date": self.date.isoformat() if self.date else None,
            "text": self.text,
            "reactions": [{"name": r.name, "count": r.count} for r in self.reactions],
            "is_thread_start": self.is_thread_start,
            "is_thread_reply": self.is_thread_reply,
            "is_edited": self.is_edited,
        }


class EmbeddedContentType(str, Enum):
    """Kinds of content a chat client renders inline inside a message."""

    QUOTED_MESSAGE = "quoted_message"
    FILE_ATTACHMENT = "file_attachment"
    LINK_PREVIEW = "link_preview"
    METADATA = "metadata"
    REACTIONS = "reactions"
    CONTINUATION = "continuation"

    @property
    def priority(self) -> int:
        """Rank used to decide which embedded duplicate survives (higher wins)."""

        return _EMBEDDED_PRIORITY[self]


_EMBEDDED_PRIORITY = {
    EmbeddedContentType.QUOTED_MESSAGE: 4,
    EmbeddedContentType.FILE_ATTACHMENT: 3,
    EmbeddedContentType.LINK_PREVIEW: 2,
    EmbeddedContentType.METADATA: 1,
    EmbeddedContentType.REACTIONS: 0,
    EmbeddedContentType.CONTINUATION: 0,
}


@dataclass(frozen=True)
class EmbeddedContent:
    """A chunk of embedded content found inside one message body."""

    type: EmbeddedContentType
    content: tuple[str, ...]
    start_index: int = 0
    end_index: int = 0


@dataclass(frozen=True)
class EmbeddedAnalysis:
    """Result of analyzing one message for embedded content."""

    message: SlackMessage
    has_embedded: bool
    cleaned_text: str
    embedded_content: tuple[EmbeddedContent, ...] = ()


@dataclass(frozen=True)
class ContentBlock:
    """A unit of comparable text used during one deduplication pass."""

    content: str
    message_index: int
    is_embedded: bool
    embedded_type: Optional[EmbeddedContentType] = None


@dataclass(frozen=True)
class DeduplicationResult:
    """Outcome of a deduplication pass."""

    messages: list[SlackMessage]
    removed_duplicates: int
    preserved_context: int
    processed_blocks: int
    duplicate_blocks: tuple[ContentBlock, ...] = ()
