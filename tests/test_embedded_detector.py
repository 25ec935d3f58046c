from __future__ import annotations

from adapters.embedded_detector import EmbeddedMessageDetector
from core.models import EmbeddedContentType, SlackMessage


def _analyze(text: str):
    return EmbeddedMessageDetector().analyze(SlackMessage(username="alex", text=text))


def test_link_preview_is_detected_and_cleaned() -> None:
    analysis = _analyze(
        "Check this out\n"
        "https://example.com/launch-plan\n"
        "Launch Plan\n"
        "Everything you need to know about the launch"
    )
    assert analysis.has_embedded is True
    [chunk] = analysis.embedded_content
    assert chunk.type is EmbeddedContentType.LINK_PREVIEW
    assert chunk.content[0] == "https://example.com/launch-plan"
    assert (chunk.start_index, chunk.end_index) == (1, 3)
    assert analysis.cleaned_text == "Check this out"


def test_bare_url_is_not_a_preview() -> None:
    analysis = _analyze("see https://example.com\nhttps://example.com/page")
    assert analysis.has_embedded is False
    assert analysis.cleaned_text == "see https://example.com\nhttps://example.com/page"


def test_file_attachment_with_label() -> None:
    analysis = _analyze(
        "Here's the report\n"
        "[Q3 report.pdf](https://files.slack.com/files-pri/T01-F01/q3_report.pdf)\n"
        "PDF"
    )
    [chunk] = analysis.embedded_content
    assert chunk.type is EmbeddedContentType.FILE_ATTACHMENT
    assert len(chunk.content) == 2
    assert analysis.cleaned_text == "Here's the report"


def test_quoted_message_needs_a_body() -> None:
    analysis = _analyze("Jordan Lee\nWe moved the standup to 10am tomorrow")
    [chunk] = analysis.embedded_content
    assert chunk.type is EmbeddedContentType.QUOTED_MESSAGE
    assert analysis.cleaned_text == ""

    assert _analyze("Sounds good").has_embedded is False


def test_reaction_continuation() -> None:
    analysis = _analyze("Nice work everyone!\n:fire: 3\n12")
    [chunk] = analysis.embedded_content
    assert chunk.type is EmbeddedContentType.REACTIONS
    assert chunk.content == (":fire: 3", "12")
    assert analysis.cleaned_text == "Nice work everyone!"


def test_plain_message_has_no_embedded_content() -> None:
    analysis = _analyze("thanks, merging now.\nwill deploy after lunch.")
    assert analysis.has_embedded is False
    assert analysis.embedded_content == ()
