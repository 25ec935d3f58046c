"""Username cleanup helpers (core domain)."""

from __future__ import annotations

import re

from core.line_classifier import CUSTOM_EMOJI, EMOJI_SEQUENCE
from core.models import UNKNOWN_USER

_EMOJI_IN_USERNAME_RE = re.compile(rf"(?:{CUSTOM_EMOJI}|{EMOJI_SEQUENCE})")
_TRAILING_PUNCTUATION_RE = re.compile(r"[!?,.;:]+$")
# "Amy BritoAmy Brito" and "Amy Brito Amy Brito"
_GLUED_DOUBLE_RE = re.compile(r"\b([\w-]+(?:\s+[\w-]+)*)\1\b")
_SPACED_DOUBLE_RE = re.compile(r"\b([\w-]+(?:\s+[\w-]+)*)\s+\1\b")


def cleanup_doubled_usernames(text: str) -> str:
    """Collapse names that copy-paste rendered twice.

    Chat clients often render the display name once as a link and once as
    plain text, so a paste yields ``Alex MittellAlex Mittell``.
    """

    if not text:
        return text
    cleaned = _GLUED_DOUBLE_RE.sub(r"\1", text)
    cleaned = _SPACED_DOUBLE_RE.sub(r"\1", cleaned)

    words = cleaned.split()
    kept: list[str] = []
    for word in words:
        if kept and kept[-1].lower() == word.lower():
            continue
        kept.append(word)
    return " ".join(kept)


def strip_username_emoji(text: str) -> str:
    """Remove status emoji (unicode or custom ``![:name:](url)``) from a name."""

    return _EMOJI_IN_USERNAME_RE.sub("", text).strip()


def clean_username(raw: str) -> str:
    """Return a display name fit for a message header, or the unknown sentinel."""

    name = strip_username_emoji(raw)
    name = cleanup_doubled_usernames(name)
    name = _TRAILING_PUNCTUATION_RE.sub("", name).strip()
    return name or UNKNOWN_USER
