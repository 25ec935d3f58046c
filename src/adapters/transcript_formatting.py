"""Transcript rendering helpers.

Keeping formatting here prevents drift between the CLI and the review UI and
keeps output consistent regardless of where it is written.
"""

from __future__ import annotations

from datetime import datetime
import json
import re
from typing import Iterable

from core.models import Reaction, SlackMessage

_WORD_NAME_RE = re.compile(r"^[\w+-]+$")


def format_display_time(message: SlackMessage) -> str:
    """Return a readable time for a message, or the raw text when unparsed."""

    if not message.timestamp:
        return ""
    try:
        parsed = datetime.fromisoformat(message.timestamp)
    except ValueError:
        return message.timestamp
    return parsed.strftime("%Y-%m-%d %H:%M")


def format_reactions(reactions: Iterable[Reaction]) -> str:
    parts = []
    for reaction in reactions:
        # Shortcodes get their colons back; unicode emoji stay as they are.
        name = f":{reaction.name}:" if _WORD_NAME_RE.match(reaction.name) else reaction.name
        parts.append(f"{name} {reaction.count}")
    return " ".join(parts)


def _format_markdown_message(message: SlackMessage, callout: str) -> str:
    """Render one message as an Obsidian callout block."""

    lines = [f"> [!{callout}]+ Message from {message.username}"]
    display_time = format_display_time(message)
    if display_time:
        lines.append(f"> **Time:** {display_time}")
    if message.date and not display_time.startswith(message.date.isoformat()):
        lines.append(f"> **Date:** {message.date.isoformat()}")
    if message.is_thread_reply:
        lines.append("> **Thread:** reply")
    elif message.is_thread_start:
        lines.append("> **Thread:** started")
    lines.append(">")

    for line in message.text.split("\n"):
        lines.append(f"> {line}" if line.strip() else ">")
    if message.is_edited:
        lines.append("> *(edited)*")
    if message.reactions:
        lines.append(f"> {format_reactions(message.reactions)}")
    return "\n".join(lines)


def _format_markdown(messages: list[SlackMessage], callout: str) -> str:
    return "\n\n".join(_format_markdown_message(message, callout) for message in messages)


def _format_json(messages: list[SlackMessage]) -> str:
    return json.dumps([message.to_dict() for message in messages], indent=2, ensure_ascii=False)


def format_transcript(messages: Iterable[SlackMessage], mode: str, callout: str = "slack") -> str:
    """Return the transcript formatted for the requested mode."""

    messages = list(messages)
    if mode == "markdown":
        return _format_markdown(messages, callout)
    if mode == "json":
        return _format_json(messages)
    raise ValueError(f"Unsupported output format: {mode}")
