"""Message boundary parser (core domain).

Turns a pasted transcript into ``SlackMessage`` records in one pass over the
lines. All mutable state lives in a ``ParserState`` owned by a single
``parse()`` call; the parser object itself only holds the log port and the
tag-to-handler table, so one instance can be reused freely.

Two header layouts are recognised:

* single line: ``Name [10:30 AM](https://...)``
* two lines: ``Name`` followed by a bare ``10:30 AM``

The two-line layout is ambiguous until the second line is seen, so the name is
held as ``pending_username`` and the resulting header as ``pending_header``
until a content or blank line activates it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
import re
from typing import Callable, Optional

from core.line_classifier import (
    AVATAR_RE,
    DATE_SEPARATOR_RE,
    REACTION_PAIR_RE,
    USER_TIMESTAMP_RE,
    LineTag,
    classify,
)
from core.log import LoggingSink
from core.models import CONTENT_ONLY_USER, Reaction, SlackMessage
from core.ports import LogPort
from core.timestamps import carries_date, parse_date, parse_slack_timestamp
from core.usernames import clean_username

_EDITED_SUFFIX_RE = re.compile(r"\s*\(edited\)$", re.IGNORECASE)
_CUSTOM_EMOJI_NAME_RE = re.compile(r"^!\[:([^:\]]+):\]")

Handler = Callable[["ParserState", str, str], None]


@dataclass
class ParserState:
    """Everything one parse pass carries from line to line."""

    lines: list[str]
    messages: list[SlackMessage] = field(default_factory=list)
    current_message: Optional[SlackMessage] = None
    pending_username: Optional[str] = None
    pending_avatar_url: Optional[str] = None
    pending_header: Optional[SlackMessage] = None
    date_context: Optional[date] = None
    cursor: int = 0


def _reaction_name(emoji: str) -> str:
    custom = _CUSTOM_EMOJI_NAME_RE.match(emoji)
    if custom:
        return custom.group(1)
    if emoji.startswith(":") and emoji.endswith(":") and len(emoji) > 2:
        return emoji[1:-1]
    return emoji


def parse_reactions(line: str) -> list[Reaction]:
    """Parse ``:+1: 3 🎉 2 ![:parrot:](url) 1`` into reactions, in line order."""

    return [
        Reaction(name=_reaction_name(match.group(1)), count=int(match.group(2)))
        for match in REACTION_PAIR_RE.finditer(line)
    ]


def _append_line(message: SlackMessage, line: str) -> None:
    message.text = f"{message.text}\n{line}" if message.text else line


class MessageBoundaryParser:
    """Single-pass state machine from transcript lines to message records."""

    def __init__(self, log: Optional[LogPort] = None) -> None:
        self._log = log or LoggingSink(__name__)
        self.handlers: dict[LineTag, Handler] = {
            LineTag.USER_TIMESTAMP_HEADER: self._on_user_timestamp_header,
            LineTag.DATE_SEPARATOR: self._on_date_separator,
            LineTag.AVATAR_ONLY: self._on_avatar_only,
            LineTag.TIME_ONLY: self._on_time_only,
            LineTag.POTENTIAL_USERNAME: self._on_potential_username,
            LineTag.BLANK: self._on_blank,
            LineTag.CONTENT: self._on_content,
            LineTag.REACTION_LINE: self._on_reaction_line,
            LineTag.REPLY_COUNT_LINK: self._on_reply_count,
            LineTag.THREAD_REPLY_HEADER: self._on_thread_reply_header,
            LineTag.EDITED_MARKER: self._on_edited_marker,
        }
        for tag in LineTag:
            if tag.is_metadata:
                self.handlers.setdefault(tag, self._on_metadata)

    def parse(self, text: Optional[str]) -> list[SlackMessage]:
        """Parse a whole transcript. Never raises; bad lines are logged and skipped."""

        if text is None:
            return []
        if not isinstance(text, str):
            text = str(text)

        state = ParserState(lines=text.replace("\r\n", "\n").replace("\r", "\n").split("\n"))
        self._log.info("Parsing transcript (%s lines)", len(state.lines))

        while state.cursor < len(state.lines):
            raw = state.lines[state.cursor]
            try:
                line = raw.strip()
                tag = classify(line)
                self._log.debug("line %s -> %s: %r", state.cursor + 1, tag.value, line)
                self.handlers[tag](state, line, raw)
            except Exception:
                self._log.error("Failed to process line %s", state.cursor + 1, exc_info=True)
            finally:
                # Progress is unconditional, whatever the handler did.
                state.cursor += 1

        try:
            self._finish(state)
        except Exception:
            self._log.error("Failed to finalize transcript", exc_info=True)

        self._log.info("Parsed %s messages", len(state.messages))
        return state.messages

    # -- message lifecycle -------------------------------------------------

    def _finalize_current(self, state: ParserState) -> None:
        message = state.current_message
        if message is None:
            return
        state.current_message = None

        text = message.text.strip()
        if _EDITED_SUFFIX_RE.search(text):
            text = _EDITED_SUFFIX_RE.sub("", text).strip()
            message.is_edited = True
        message.text = text

        if not text:
            self._log.debug("Dropping empty message from %s", message.username)
            return
        state.messages.append(message)

    def _start_message(self, state: ParserState, username: str) -> SlackMessage:
        self._finalize_current(state)
        message = SlackMessage(username=username, date=state.date_context)
        state.current_message = message
        return message

    def _activate_pending_header(self, state: ParserState) -> None:
        header = state.pending_header
        if header is None:
            return
        state.pending_header = None
        self._finalize_current(state)
        state.current_message = header
        self._log.debug("Activated header for %s", header.username)

    def _drop_pending_header(self, state: ParserState, reason: str) -> None:
        if state.pending_header is not None:
            self._log.debug(
                "Discarding header for %s without content (%s)", state.pending_header.username, reason
            )
            state.pending_header = None

    def _append_content(self, state: ParserState, line: str) -> None:
        self._activate_pending_header(state)
        if state.current_message is None:
            self._start_message(state, CONTENT_ONLY_USER)
        _append_line(state.current_message, line)

    def _flush_pending_username(self, state: ParserState) -> None:
        """A held name that never met its time line was body text after all."""

        pending = state.pending_username
        if pending is None:
            return
        state.pending_username = None
        self._append_content(state, pending)

    def _assign_timestamp(self, state: ParserState, message: SlackMessage, time_text: str) -> None:
        parsed = parse_slack_timestamp(time_text, state.date_context)
        if parsed is None:
            # Keep the header; only the time is degraded.
            self._log.warning("Unparsable timestamp %r for %s", time_text, message.username)
            message.timestamp = time_text
            return
        message.timestamp = parsed.isoformat()
        if carries_date(time_text):
            state.date_context = parsed.date()
            message.date = state.date_context

    def _finish(self, state: ParserState) -> None:
        self._flush_pending_username(state)
        self._drop_pending_header(state, "end of input")
        self._finalize_current(state)

    # -- structural lines --------------------------------------------------

    def _on_user_timestamp_header(self, state: ParserState, line: str, raw: str) -> None:
        match = USER_TIMESTAMP_RE.match(line)
        if match is None:
            self._on_content(state, line, raw)
            return

        self._flush_pending_username(state)
        self._drop_pending_header(state, "new header")

        message = self._start_message(state, clean_username(match.group(1)))
        message.avatar = state.pending_avatar_url
        state.pending_avatar_url = None
        self._assign_timestamp(state, message, match.group(2).strip())
        self._log.debug("Header for %s at %s", message.username, message.timestamp)

    def _on_date_separator(self, state: ParserState, line: str, raw: str) -> None:
        self._flush_pending_username(state)
        self._drop_pending_header(state, "date separator")
        self._finalize_current(state)

        bracketed = DATE_SEPARATOR_RE.match(line)
        label = bracketed.group(1) if bracketed else line
        parsed = parse_date(label)
        if parsed is None:
            self._log.warning("Unparsable date separator %r", line)
            return
        state.date_context = parsed
        self._log.debug("Date context is now %s", parsed.isoformat())

    def _on_avatar_only(self, state: ParserState, line: str, raw: str) -> None:
        self._flush_pending_username(state)
        match = AVATAR_RE.match(line)
        state.pending_avatar_url = match.group(1) if match else None

    def _on_potential_username(self, state: ParserState, line: str, raw: str) -> None:
        self._flush_pending_username(state)
        state.pending_username = line

    def _on_time_only(self, state: ParserState, line: str, raw: str) -> None:
        if state.pending_username is None:
            self._append_content(state, raw.rstrip())
            return

        self._drop_pending_header(state, "superseded")
        header = SlackMessage(username=clean_username(state.pending_username), date=state.date_context)
        state.pending_username = None
        header.avatar = state.pending_avatar_url
        state.pending_avatar_url = None
        self._assign_timestamp(state, header, line)
        state.pending_header = header
        self._log.debug("Pending header for %s at %s", header.username, header.timestamp)

    def _on_blank(self, state: ParserState, line: str, raw: str) -> None:
        self._flush_pending_username(state)
        if state.pending_header is not None:
            self._activate_pending_header(state)
        elif state.current_message is not None:
            _append_line(state.current_message, "")

    def _on_content(self, state: ParserState, line: str, raw: str) -> None:
        self._flush_pending_username(state)
        self._append_content(state, raw.rstrip())

    # -- metadata lines ----------------------------------------------------

    def _on_metadata(self, state: ParserState, line: str, raw: str) -> None:
        if (
            state.pending_username is not None
            and state.current_message is None
            and state.pending_header is None
        ):
            self._log.debug("Discarding pending username %r before metadata", state.pending_username)
            state.pending_username = None

    def _on_reaction_line(self, state: ParserState, line: str, raw: str) -> None:
        self._on_metadata(state, line, raw)
        reactions = parse_reactions(line)
        if state.current_message is None:
            self._log.warning("Dropping reactions with no active message: %r", line)
            return
        state.current_message.reactions.extend(reactions)

    def _on_reply_count(self, state: ParserState, line: str, raw: str) -> None:
        self._on_metadata(state, line, raw)
        if state.current_message is not None:
            state.current_message.is_thread_start = True

    def _on_thread_reply_header(self, state: ParserState, line: str, raw: str) -> None:
        self._on_metadata(state, line, raw)
        if state.current_message is not None:
            state.current_message.is_thread_reply = True

    def _on_edited_marker(self, state: ParserState, line: str, raw: str) -> None:
        self._on_metadata(state, line, raw)
        if state.current_message is not None:
            state.current_message.is_edited = True
