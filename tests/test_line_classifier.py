from __future__ import annotations

from core.line_classifier import LINE_RULES, LineTag, classify

AVATAR = "![](https://ca.slack-edge.com/T01-U01-abc123-48)"
OTHER_AVATAR = "![](https://ca.slack-edge.com/T01-U02-def456-48)"
ARCHIVE = "https://workspace.slack.com/archives/C01/p1710000000"


def test_rule_order_is_fixed() -> None:
    assert [rule.tag for rule in LINE_RULES] == [
        LineTag.BLANK,
        LineTag.HORIZONTAL_RULE,
        LineTag.REACTION_LINE,
        LineTag.AVATAR_LIST,
        LineTag.REPLY_COUNT_LINK,
        LineTag.REPLY_COUNT_LINK,
        LineTag.DELETED_MESSAGE,
        LineTag.PLUS_ONE,
        LineTag.APP_LINK_PREVIEW,
        LineTag.APP_ADDED_BY,
        LineTag.APP_INFO,
        LineTag.FILE_COUNT,
        LineTag.FILE_PREVIEW_START,
        LineTag.FILE_PREVIEW_END,
        LineTag.FILE_DOWNLOAD_LINK,
        LineTag.LINK_PREVIEW_TITLE,
        LineTag.LINK_PREVIEW_DESCRIPTION,
        LineTag.FILE_IMAGE_ONLY,
        LineTag.THREAD_REPLY_HEADER,
        LineTag.CONTINUATION_TIMESTAMP,
        LineTag.THREAD_CONTEXT,
        LineTag.IMAGE_SOURCE,
        LineTag.EDITED_MARKER,
        LineTag.AVATAR_ONLY,
        LineTag.USER_TIMESTAMP_HEADER,
        LineTag.DATE_SEPARATOR,
        LineTag.TIME_ONLY,
        LineTag.POTENTIAL_USERNAME,
    ]


def test_metadata_rules_come_before_structural_rules() -> None:
    metadata = [i for i, rule in enumerate(LINE_RULES) if rule.tag.is_metadata]
    structural = [
        i
        for i, rule in enumerate(LINE_RULES)
        if not rule.tag.is_metadata and rule.tag is not LineTag.BLANK
    ]
    assert max(metadata) < min(structural)


def test_every_tag_but_content_has_a_rule() -> None:
    covered = {rule.tag for rule in LINE_RULES}
    assert set(LineTag) - covered == {LineTag.CONTENT}


def test_structural_lines() -> None:
    assert classify("") is LineTag.BLANK
    assert classify(f"Alex Mittell [10:30 AM]({ARCHIVE})") is LineTag.USER_TIMESTAMP_HEADER
    assert classify("--- March 15, 2024 ---") is LineTag.DATE_SEPARATOR
    assert classify("Friday, March 15th, 2024") is LineTag.DATE_SEPARATOR
    assert classify(AVATAR) is LineTag.AVATAR_ONLY
    assert classify("10:30 AM") is LineTag.TIME_ONLY
    assert classify("Today at 9:15 AM") is LineTag.TIME_ONLY
    assert classify("Mar 5th at 9:00 PM") is LineTag.TIME_ONLY
    assert classify("Alex Mittell") is LineTag.POTENTIAL_USERNAME
    assert classify("Thanks for the update, merging now.") is LineTag.CONTENT
    assert classify("https://example.com/docs") is LineTag.CONTENT


def test_reaction_lines() -> None:
    assert classify(":+1: 3 :tada: 1") is LineTag.REACTION_LINE
    assert classify("🎉 2 👀 1") is LineTag.REACTION_LINE
    assert classify("👍3") is LineTag.REACTION_LINE
    custom = "![:party-parrot:](https://emoji.slack-edge.com/T01/party-parrot/abc.gif) 4"
    assert classify(custom) is LineTag.REACTION_LINE
    assert classify(":tada:") is not LineTag.REACTION_LINE


def test_avatar_shapes_do_not_shadow_each_other() -> None:
    assert classify(f"{AVATAR} {OTHER_AVATAR}") is LineTag.AVATAR_LIST
    assert classify(f"{AVATAR} 3 replies") is LineTag.REPLY_COUNT_LINK
    assert classify(AVATAR) is LineTag.AVATAR_ONLY
    image = "![image.png](https://files.slack.com/files-pri/T01-F01/image.png)"
    assert classify(image) is LineTag.FILE_IMAGE_ONLY


def test_thread_and_message_markers() -> None:
    assert classify("---") is LineTag.HORIZONTAL_RULE
    assert classify("2 replies") is LineTag.REPLY_COUNT_LINK
    assert classify("View thread") is LineTag.REPLY_COUNT_LINK
    assert classify("Last reply 2 days ago") is LineTag.REPLY_COUNT_LINK
    assert classify("This message was deleted.") is LineTag.DELETED_MESSAGE
    assert classify("+1") is LineTag.PLUS_ONE
    assert classify("replied to a thread: Deploy plan") is LineTag.THREAD_REPLY_HEADER
    assert classify(f"[10:42]({ARCHIVE})") is LineTag.CONTINUATION_TIMESTAMP
    assert classify("Also sent to the channel") is LineTag.THREAD_CONTEXT
    assert classify("Image from iOS") is LineTag.IMAGE_SOURCE
    assert classify("(edited)") is LineTag.EDITED_MARKER


def test_app_and_file_metadata() -> None:
    assert classify("Added by [GitHub](https://workspace.slack.com/apps/A01)") is LineTag.APP_ADDED_BY
    preview = "<https://github.com/org/repo|org/repo> | Added by GitHub"
    assert classify(preview) is LineTag.APP_LINK_PREVIEW
    assert classify("Language") is LineTag.APP_INFO
    assert classify("3 days ago") is LineTag.APP_INFO
    assert classify("obsidian/slack-formatter") is LineTag.APP_INFO
    assert classify("2 files") is LineTag.FILE_COUNT
    assert classify("[") is LineTag.FILE_PREVIEW_START
    assert classify("](https://files.slack.com/files-pri/T01-F01/report.pdf)") is LineTag.FILE_PREVIEW_END
    download = "[](https://files.slack.com/files-pri/T01-F01/download/report.pdf)"
    assert classify(download) is LineTag.FILE_DOWNLOAD_LINK


def test_link_preview_lines() -> None:
    assert classify("Google Docs") is LineTag.LINK_PREVIEW_TITLE
    assert classify("YouTubeYouTube") is LineTag.LINK_PREVIEW_TITLE
    assert classify("Notion | Your connected workspace") is LineTag.LINK_PREVIEW_DESCRIPTION


def test_potential_username_rejects_sentences_and_markup() -> None:
    assert classify("Sounds good!") is LineTag.CONTENT
    assert classify("- first item") is LineTag.CONTENT
    assert classify("> quoted text") is LineTag.CONTENT
    assert classify("this line has far too many words to be a name") is LineTag.CONTENT
    assert classify("42") is LineTag.CONTENT
    assert classify("Dana Scully 🚀") is LineTag.POTENTIAL_USERNAME
