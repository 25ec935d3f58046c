"""Messages tab for browsing and exporting processed messages."""

from __future__ import annotations

import csv
import json
from datetime import datetime
from typing import Any, Iterable

from textual import on
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, DataTable, Static

from adapters.transcript_formatting import format_display_time, format_reactions
from core.models import SlackMessage

from ..constants import EXPORTS_DIR

EXPORT_FIELDS = (
    "username",
    "timestamp",
    "date",
    "text",
    "reactions",
    "is_thread_start",
    "is_thread_reply",
    "is_edited",
    "avatar",
)


def message_rows(messages: Iterable[SlackMessage]) -> list[dict[str, Any]]:
    """Flatten messages into export rows (reactions become one string)."""

    rows = []
    for message in messages:
        row = message.to_dict()
        row["reactions"] = format_reactions(message.reactions)
        rows.append({field: row.get(field) for field in EXPORT_FIELDS})
    return rows


class MessagesTab(Container):
    """Messages tab to browse parsed messages and export to JSON/CSV."""

    def __init__(self, messages: list[SlackMessage], **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._messages = messages
        self._rows = message_rows(messages)

    def compose(self):
        with Vertical(id="messages-panel"):
            yield Static("Messages", id="messages-title")
            yield DataTable(id="messages-table", cursor_type="row")
            with Horizontal(id="messages-actions"):
                yield Button("Export JSON", id="export-json", variant="success")
                yield Button("Export CSV", id="export-csv")
            yield Static("", id="messages-output")

    def on_mount(self) -> None:
        table = self.query_one("#messages-table", DataTable)
        table.add_column("#", key="index", width=4)
        table.add_column("user", key="username", width=20)
        table.add_column("time", key="timestamp", width=17)
        table.add_column("text", key="text", width=52)
        table.add_column("reactions", key="reactions", width=16)
        table.zebra_stripes = True
        table.styles.height = "1fr"
        self.query_one("#messages-actions").styles.height = 3

        for index, message in enumerate(self._messages, start=1):
            table.add_row(
                str(index),
                message.username,
                format_display_time(message),
                self._clip_text(message.text.replace("\n", " ")),
                format_reactions(message.reactions),
                key=str(index),
            )
        self._set_output(f"loaded {len(self._messages)} messages")

    @on(Button.Pressed, "#export-json")
    def _on_export_json(self) -> None:
        self._export_rows("json")

    @on(Button.Pressed, "#export-csv")
    def _on_export_csv(self) -> None:
        self._export_rows("csv")

    def _export_rows(self, fmt: str) -> None:
        if not self._rows:
            self._set_output("No messages to export.")
            return
        EXPORTS_DIR.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        path = EXPORTS_DIR / f"messages-{timestamp}.{fmt}"
        try:
            if fmt == "json":
                path.write_text(json.dumps(self._rows, indent=2, ensure_ascii=False), encoding="utf-8")
            else:
                with path.open("w", encoding="utf-8", newline="") as handle:
                    writer = csv.DictWriter(handle, fieldnames=list(EXPORT_FIELDS))
                    writer.writeheader()
                    writer.writerows(self._rows)
            self._set_output(f"exported {len(self._rows)} messages to {path}")
        except OSError as exc:
            self._set_output(f"export failed: {exc.strerror or exc}")

    def _set_output(self, message: str) -> None:
        self.query_one("#messages-output", Static).update(message)

    @staticmethod
    def _clip_text(value: str, limit: int = 80) -> str:
        if len(value) <= limit:
            return value
        return value[: limit - 3] + "..."
