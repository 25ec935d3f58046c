"""Main Textual app for reviewing a processed transcript."""

from __future__ import annotations

from typing import Any, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Center, Container, Horizontal, Vertical
from textual.widgets import ContentSwitcher, Footer, Static, Tab, Tabs

from core.models import DeduplicationResult, SlackMessage

from .constants import SLACK_AUBERGINE
from .tabs.messages import MessagesTab
from .tabs.transcript import TranscriptTab


class ReviewApp(App):
    """Read-only review of parsed messages with export actions."""

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("ctrl+c", "quit", "Quit"),
    ]

    CSS = """
    Screen {
        background: #1a1d21;
        color: #e8eef5;
    }

    #header {
        height: 7;
        padding: 1 4;
        border-bottom: solid #2a3a46;
    }

    #header-left, #header-right {
        width: 1fr;
    }

    #header-right {
        content-align: right top;
        text-align: right;
    }

    .subtle {
        color: #c6d2dd;
    }

    #tabs-bar {
        height: 5;
        padding: 0 4;
        border-bottom: solid #2a3a46;
    }

    #tabs-center {
        width: 100%;
        height: 4;
        align: center middle;
    }

    #tabs {
        width: auto;
    }

    #transcript-body {
        padding: 1 2;
    }
    """

    def __init__(
        self,
        messages: list[SlackMessage],
        rendered: str,
        source_name: str,
        dedup: Optional[DeduplicationResult] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._messages = messages
        self._rendered = rendered
        self._source_name = source_name
        self._dedup = dedup

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            with Horizontal(id="header-row"):
                with Vertical(id="header-left"):
                    yield Static(self._title_text(), id="title")
                    yield Static(f"source: {self._source_name}", classes="subtle")
                with Vertical(id="header-right"):
                    yield Static(f"messages: {len(self._messages)}", classes="subtle")
                    yield Static(self._dedup_status(), classes="subtle")

        with Container(id="tabs-bar"):
            with Center(id="tabs-center"):
                yield Tabs(
                    Tab("Messages", id="messages"),
                    Tab("Transcript", id="transcript"),
                    id="tabs",
                )

        with ContentSwitcher(id="content", initial="messages"):
            yield MessagesTab(self._messages, id="messages")
            yield TranscriptTab(self._rendered, id="transcript")
        yield Footer()

    def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        tab_id = event.tab.id or ""
        if not tab_id:
            label = event.tab.label
            if hasattr(label, "plain"):
                label = label.plain
            tab_id = str(label).strip().lower()
        self.query_one("#content", ContentSwitcher).current = tab_id

    def _dedup_status(self) -> str:
        if self._dedup is None:
            return "dedup: skipped"
        return (
            f"dedup: {self._dedup.removed_duplicates} removed / "
            f"{self._dedup.processed_blocks} blocks"
        )

    @staticmethod
    def _title_text() -> Text:
        return Text.assemble(
            ("SLACK", SLACK_AUBERGINE),
            ("PASTE > Review", "bold"),
        )
