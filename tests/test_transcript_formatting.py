from __future__ import annotations

from datetime import date
import json

import pytest

from adapters.transcript_formatting import format_reactions, format_transcript
from core.models import Reaction, SlackMessage


def _message() -> SlackMessage:
    return SlackMessage(
        username="Alex",
        timestamp="2024-03-15T10:30:00",
        date=date(2024, 3, 15),
        text="First line\n\nSecond line",
        reactions=[Reaction("+1", 3), Reaction("🎉", 2)],
    )


def test_markdown_callout() -> None:
    rendered = format_transcript([_message()], "markdown")
    assert rendered.splitlines() == [
        "> [!slack]+ Message from Alex",
        "> **Time:** 2024-03-15 10:30",
        ">",
        "> First line",
        ">",
        "> Second line",
        "> :+1: 3 🎉 2",
    ]


def test_markdown_keeps_raw_timestamp_and_custom_callout() -> None:
    message = SlackMessage(username="Blair", timestamp="😄garbled", text="Hi", is_thread_reply=True)
    rendered = format_transcript([message], "markdown", callout="note")
    assert rendered.startswith("> [!note]+ Message from Blair")
    assert "> **Time:** 😄garbled" in rendered
    assert "> **Thread:** reply" in rendered


def test_messages_are_separated_by_blank_line() -> None:
    rendered = format_transcript([_message(), _message()], "markdown")
    assert rendered.count("> [!slack]+") == 2
    assert "\n\n> [!slack]+" in rendered


def test_json_output() -> None:
    payload = json.loads(format_transcript([_message()], "json"))
    assert payload[0]["username"] == "Alex"
    assert payload[0]["date"] == "2024-03-15"
    assert payload[0]["reactions"] == [{"name": "+1", "count": 3}, {"name": "🎉", "count": 2}]


def test_unknown_mode_raises() -> None:
    with pytest.raises(ValueError):
        format_transcript([_message()], "html")


def test_format_reactions() -> None:
    assert format_reactions([Reaction("party-parrot", 1)]) == ":party-parrot: 1"
    assert format_reactions([]) == ""
