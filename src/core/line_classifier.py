"""Line classification for pasted chat transcripts (core domain).

Every trimmed line maps to exactly one ``LineTag``. Rules are evaluated in
list order and the first hit wins, so the order in ``LINE_RULES`` is part of
the contract: metadata shapes come before the structural ones they overlap
with, and specific metadata shapes come before general ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import re
from typing import Callable

# Unicode emoji, matched by explicit codepoint ranges. Variation selectors,
# zero-width joiners and skin-tone modifiers extend a sequence.
EMOJI_SEQUENCE = (
    r"[\U0001F000-\U0001FAFF\u2300-\u23FF\u2600-\u27BF\u2B00-\u2BFF]"
    r"(?:[\uFE0F\u200D]|[\U0001F000-\U0001FAFF\u2300-\u23FF\u2600-\u27BF\u2B00-\u2BFF])*"
)
# Workspace emoji pasted as markdown images: ![:party-parrot:](https://...)
CUSTOM_EMOJI = r"!\[:[^:\]\s]+:\]\(https?://[^)\s]+\)"
COLON_EMOJI = r":[A-Za-z0-9_+\-]+:"

REACTION_PAIR = rf"({CUSTOM_EMOJI}|{EMOJI_SEQUENCE}|{COLON_EMOJI})\s*(\d+)"
REACTION_PAIR_RE = re.compile(REACTION_PAIR)

_MONTH_NAME = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|Aug(?:ust)?"
    r"|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)
_FULL_MONTH = (
    r"(?:January|February|March|April|May|June|July|August|September|October|November|December)"
)
_WEEKDAY = r"(?:Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday)"
_SLACK_AVATAR_URL = r"https?://ca\.slack-edge\.com/[^)\s]+"

LINK_PREVIEW_PROVIDERS = (
    "Google Docs",
    "Google Sheets",
    "Google Slides",
    "Google Drive",
    "YouTube",
    "GitHub",
    "Loom",
    "Figma",
    "Notion",
    "Medium",
    "LinkedIn",
    r"X \(formerly Twitter\)",
)

USER_TIMESTAMP_RE = re.compile(r"^(.+?)\s*\[([^\[\]]+)\]\((https?://[^)\s]+)\)$")
AVATAR_RE = re.compile(rf"^!\[[^\]]*\]\(({_SLACK_AVATAR_URL})\)$")
DATE_SEPARATOR_RE = re.compile(r"^--- (.+) ---$")
DATE_SEPARATOR_ALT_RE = re.compile(
    rf"^{_WEEKDAY}, {_FULL_MONTH} \d{{1,2}}(?:st|nd|rd|th)?(?:, \d{{4}})?$", re.IGNORECASE
)
TIME_ONLY_RE = re.compile(
    r"^(?:\d{1,2}:\d{2}(?:\s*[AP]M)?"
    r"|(?:Today|Yesterday) at \d{1,2}:\d{2}\s*[AP]M"
    rf"|{_MONTH_NAME}\.? \d{{1,2}}(?:st|nd|rd|th)?(?: at \d{{1,2}}:\d{{2}}\s*[AP]M)?)$",
    re.IGNORECASE,
)
REACTION_LINE_RE = re.compile(rf"^(?:{CUSTOM_EMOJI}|{EMOJI_SEQUENCE}|{COLON_EMOJI})\s*\d+(?:\s*(?:{CUSTOM_EMOJI}|{EMOJI_SEQUENCE}|{COLON_EMOJI})\s*\d+)*$")

_STATUS_EMOJI_RE = re.compile(rf"(?:{CUSTOM_EMOJI}|{EMOJI_SEQUENCE})")
_LETTER_RE = re.compile(r"[^\W\d_]")


class LineTag(Enum):
    """Closed taxonomy of line shapes found in pasted transcripts."""

    # Structural lines drive message boundaries.
    USER_TIMESTAMP_HEADER = "user_timestamp_header"
    DATE_SEPARATOR = "date_separator"
    AVATAR_ONLY = "avatar_only"
    TIME_ONLY = "time_only"
    POTENTIAL_USERNAME = "potential_username"
    BLANK = "blank"
    CONTENT = "content"

    # Metadata lines are skipped without disturbing the open message.
    HORIZONTAL_RULE = "horizontal_rule"
    REACTION_LINE = "reaction_line"
    AVATAR_LIST = "avatar_list"
    REPLY_COUNT_LINK = "reply_count_link"
    DELETED_MESSAGE = "deleted_message"
    PLUS_ONE = "plus_one"
    APP_LINK_PREVIEW = "app_link_preview"
    APP_ADDED_BY = "app_added_by"
    APP_INFO = "app_info"
    FILE_COUNT = "file_count"
    FILE_PREVIEW_START = "file_preview_start"
    FILE_PREVIEW_END = "file_preview_end"
    FILE_DOWNLOAD_LINK = "file_download_link"
    LINK_PREVIEW_TITLE = "link_preview_title"
    LINK_PREVIEW_DESCRIPTION = "link_preview_description"
    FILE_IMAGE_ONLY = "file_image_only"
    THREAD_REPLY_HEADER = "thread_reply_header"
    CONTINUATION_TIMESTAMP = "continuation_timestamp"
    THREAD_CONTEXT = "thread_context"
    IMAGE_SOURCE = "image_source"
    EDITED_MARKER = "edited_marker"

    @property
    def is_metadata(self) -> bool:
        return self not in STRUCTURAL_TAGS


STRUCTURAL_TAGS = frozenset(
    {
        LineTag.USER_TIMESTAMP_HEADER,
        LineTag.DATE_SEPARATOR,
        LineTag.AVATAR_ONLY,
        LineTag.TIME_ONLY,
        LineTag.POTENTIAL_USERNAME,
        LineTag.BLANK,
        LineTag.CONTENT,
    }
)


@dataclass(frozen=True)
class LineRule:
    """One classification rule: the first rule whose predicate hits wins."""

    tag: LineTag
    predicate: Callable[[str], object]


def _regex(pattern: str, flags: int = 0) -> Callable[[str], object]:
    return re.compile(pattern, flags).search


def _is_date_separator(line: str) -> bool:
    return bool(DATE_SEPARATOR_RE.match(line) or DATE_SEPARATOR_ALT_RE.match(line))


def looks_like_username(line: str) -> bool:
    """Heuristic for a bare display-name line (two-line header, first line)."""

    name = _STATUS_EMOJI_RE.sub("", line).strip()
    if not 2 <= len(name) <= 50:
        return False
    if not _LETTER_RE.search(name):
        return False
    lowered = name.lower()
    if "http" in lowered or "www." in lowered or "](" in name:
        return False
    if name[0] in "#>*-`|[(•" or name[-1] in ".,;:!?":
        return False
    return len(name.split()) <= 5


_I = re.IGNORECASE

LINE_RULES: tuple[LineRule, ...] = (
    LineRule(LineTag.BLANK, lambda line: not line),
    # Metadata, most specific first.
    LineRule(LineTag.HORIZONTAL_RULE, _regex(r"^-{3,}$")),
    LineRule(LineTag.REACTION_LINE, REACTION_LINE_RE.match),
    LineRule(LineTag.AVATAR_LIST, _regex(rf"^(?:!\[[^\]]*\]\({_SLACK_AVATAR_URL}\)\s*){{2,}}")),
    LineRule(
        LineTag.REPLY_COUNT_LINK,
        _regex(rf"^!\[[^\]]*\]\({_SLACK_AVATAR_URL}\).*\d+\+?\s+repl(?:y|ies)", _I),
    ),
    LineRule(
        LineTag.REPLY_COUNT_LINK,
        _regex(r"^(?:\d+\+?\s+repl(?:y|ies)|Last reply|View thread|View newer replies)", _I),
    ),
    LineRule(LineTag.DELETED_MESSAGE, _regex(r"^This message was deleted\.?$", _I)),
    LineRule(LineTag.PLUS_ONE, _regex(r"^\+1$")),
    LineRule(LineTag.APP_LINK_PREVIEW, _regex(r"^<https?://[^|>]+\|[^>]+>.*\|\s*Added by \S+", _I)),
    LineRule(LineTag.APP_ADDED_BY, _regex(r"^Added by \[[^\]]+\]\(https?://[^)]+\)$", _I)),
    LineRule(
        LineTag.APP_INFO,
        _regex(
            r"^(?:Language|TypeScript|Last updated|\d+\s+(?:minutes?|hours?|days?)\s+ago|[\w.-]+/[\w.-]+)$",
            _I,
        ),
    ),
    LineRule(LineTag.FILE_COUNT, _regex(r"^\d+\s+files?$", _I)),
    LineRule(LineTag.FILE_PREVIEW_START, _regex(r"^\[$")),
    LineRule(LineTag.FILE_PREVIEW_END, _regex(r"^\]\(https?://[^)]+\)$")),
    LineRule(LineTag.FILE_DOWNLOAD_LINK, _regex(r"^\[\]\(https?://files\.slack\.com/[^)]+\)$")),
    LineRule(
        LineTag.LINK_PREVIEW_TITLE,
        _regex(rf"^({'|'.join(LINK_PREVIEW_PROVIDERS)})\1?$", _I),
    ),
    LineRule(LineTag.LINK_PREVIEW_DESCRIPTION, _regex(r"^[\w.'&-]+(?: [\w.'&-]+){0,3} \| [^|]{3,80}$")),
    LineRule(
        LineTag.FILE_IMAGE_ONLY,
        _regex(r"^!\[[^\]]*\]\((?!https?://ca\.slack-edge\.com/)https?://[^)]+\)$"),
    ),
    LineRule(LineTag.THREAD_REPLY_HEADER, _regex(r"^replied to a thread:", _I)),
    LineRule(
        LineTag.CONTINUATION_TIMESTAMP,
        _regex(r"^\[\d{1,2}:\d{2}(?:\s*[AP]M)?\]\(https?://[^)]+\)$", _I),
    ),
    LineRule(
        LineTag.THREAD_CONTEXT,
        _regex(r"^(?:Thread|Also sent to the channel|Thread in #?[\w-]+)$", _I),
    ),
    LineRule(LineTag.IMAGE_SOURCE, _regex(r"^(?:Image from (?:iOS|Android)|Pasted image at .+)$", _I)),
    LineRule(LineTag.EDITED_MARKER, _regex(r"^\(edited\)$", _I)),
    # Structural shapes.
    LineRule(LineTag.AVATAR_ONLY, AVATAR_RE.match),
    LineRule(LineTag.USER_TIMESTAMP_HEADER, USER_TIMESTAMP_RE.match),
    LineRule(LineTag.DATE_SEPARATOR, _is_date_separator),
    LineRule(LineTag.TIME_ONLY, TIME_ONLY_RE.match),
    LineRule(LineTag.POTENTIAL_USERNAME, looks_like_username),
)


def classify(trimmed_line: str) -> LineTag:
    """Return the tag of the first matching rule, or ``CONTENT``."""

    for rule in LINE_RULES:
        if rule.predicate(trimmed_line):
            return rule.tag
    return LineTag.CONTENT
