"""Transcript tab showing the rendered Markdown output."""

from __future__ import annotations

from textual.containers import VerticalScroll
from textual.widgets import Static


class TranscriptTab(VerticalScroll):
    def __init__(self, rendered: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._rendered = rendered

    def compose(self):
        # Markup off: transcripts are full of square brackets.
        yield Static(self._rendered or "*empty transcript*", markup=False, id="transcript-body")
