"""Content deduplication (core domain).

Chat clients re-render link previews, quoted messages and attachments every
time a message is shown, so a pasted thread often carries the same text
several times. The processor flattens messages into content blocks, compares
them pairwise inside a small message window (exact matches are compared at
any distance), picks which copy of each duplicate pair to discard, and then
edits or drops the affected messages.
"""

from __future__ import annotations

from dataclasses import replace
import re
from typing import Optional, Sequence

from core.config import DedupConfig
from core.log import LoggingSink
from core.models import ContentBlock, DeduplicationResult, EmbeddedAnalysis, SlackMessage
from core.ports import EmbeddedContentAnalyzer, LogPort
from core.similarity import composite_similarity

_BLANK_RUN_RE = re.compile(r"\n\s*\n\s*\n+")


def remove_block_text(text: str, block: str) -> str:
    """Cut ``block`` out of ``text`` and collapse the blank lines left behind.

    Verbatim substring removal is tried first; when formatting drifted, every
    line whose trimmed content equals a trimmed line of the block is blanked.
    """

    if block in text:
        text = text.replace(block, "")
    else:
        block_lines = {line.strip() for line in block.split("\n") if line.strip()}
        text = "\n".join("" if line.strip() in block_lines else line for line in text.split("\n"))
    return _BLANK_RUN_RE.sub("\n\n", text).strip()


def _has_thread_marks(message: SlackMessage) -> bool:
    return bool(message.is_thread_start or message.is_thread_reply or message.thread_info)


def must_keep(message: SlackMessage) -> bool:
    """Messages with reactions, thread marks or a timestamp are never dropped."""

    return bool(message.reactions or _has_thread_marks(message) or message.timestamp)


def _covers_body(block: ContentBlock, message: SlackMessage) -> bool:
    return block.content.split() == message.text.split()


class ContentDeduplicationProcessor:
    """Find and remove near-duplicate content across a list of messages."""

    def __init__(
        self,
        analyzer: EmbeddedContentAnalyzer,
        config: Optional[DedupConfig] = None,
        log: Optional[LogPort] = None,
    ) -> None:
        self._analyzer = analyzer
        self._config = config or DedupConfig()
        self._log = log or LoggingSink(__name__)

    def process(self, messages: Sequence[SlackMessage]) -> DeduplicationResult:
        """Return the deduplicated messages plus block counts. Never raises."""

        messages = list(messages or [])
        if not self._config.enabled or not messages:
            return DeduplicationResult(
                messages=messages, removed_duplicates=0, preserved_context=0, processed_blocks=0
            )

        self._log.info("Deduplicating %s messages", len(messages))
        analyses = [self._analyze(message) for message in messages]
        blocks = self.build_blocks(messages, analyses)
        protected = self.protected_blocks(messages, blocks)

        if len(blocks) > self._config.max_blocks:
            self._log.warning(
                "%s content blocks exceed the limit of %s; comparing exact matches only",
                len(blocks),
                self._config.max_blocks,
            )
            discarded = self._find_exact_duplicates(blocks, protected)
        else:
            discarded = self._find_duplicates(blocks, protected)

        kept = self._apply_removals(messages, analyses, [blocks[i] for i in discarded])
        self._log.info(
            "Removed %s duplicate blocks of %s; %s messages remain",
            len(discarded),
            len(blocks),
            len(kept),
        )
        return DeduplicationResult(
            messages=kept,
            removed_duplicates=len(discarded),
            preserved_context=len(blocks) - len(discarded),
            processed_blocks=len(blocks),
            duplicate_blocks=tuple(blocks[i] for i in discarded),
        )

    def _analyze(self, message: SlackMessage) -> EmbeddedAnalysis:
        try:
            return self._analyzer.analyze(message)
        except Exception:
            self._log.error("Embedded content analysis failed for %s", message.username, exc_info=True)
            return EmbeddedAnalysis(message=message, has_embedded=False, cleaned_text=message.text)

    def build_blocks(
        self, messages: Sequence[SlackMessage], analyses: Sequence[EmbeddedAnalysis]
    ) -> list[ContentBlock]:
        """Flatten messages into comparable blocks, skipping short ones."""

        minimum = self._config.min_content_length
        blocks: list[ContentBlock] = []
        for index, (message, analysis) in enumerate(zip(messages, analyses)):
            main = message.text.strip()
            if len(main) >= minimum:
                blocks.append(ContentBlock(content=main, message_index=index, is_embedded=False))
            for chunk in analysis.embedded_content:
                content = "\n".join(chunk.content).strip()
                if len(content) >= minimum:
                    blocks.append(
                        ContentBlock(
                            content=content,
                            message_index=index,
                            is_embedded=True,
                            embedded_type=chunk.type,
                        )
                    )
        return blocks

    @staticmethod
    def protected_blocks(messages: Sequence[SlackMessage], blocks: Sequence[ContentBlock]) -> set[int]:
        """Blocks that are the whole body of a message that must be kept.

        Discarding one would empty a message that has to stay, so such a block
        is never picked as the losing copy of a pair.
        """

        return {
            index
            for index, block in enumerate(blocks)
            if must_keep(messages[block.message_index])
            and _covers_body(block, messages[block.message_index])
        }

    @staticmethod
    def select_discard(first: int, second: int, blocks: Sequence[ContentBlock]) -> int:
        """Return the index of the block to drop from a duplicate pair.

        Embedded copies go before main text, then the lower-ranked embedded
        type, then the copy from the later message.
        """

        a, b = blocks[first], blocks[second]
        if a.is_embedded != b.is_embedded:
            return first if a.is_embedded else second
        if a.is_embedded and a.embedded_type is not None and b.embedded_type is not None:
            if a.embedded_type.priority != b.embedded_type.priority:
                return first if a.embedded_type.priority < b.embedded_type.priority else second
        return second if b.message_index >= a.message_index else first

    def _find_duplicates(self, blocks: Sequence[ContentBlock], protected: set[int]) -> list[int]:
        threshold = self._config.similarity_threshold
        window = self._config.max_message_distance
        discarded: list[int] = []
        retired: set[int] = set()

        for i in range(len(blocks)):
            if i in retired:
                continue
            for j in range(i + 1, len(blocks)):
                if j in retired:
                    continue
                a, b = blocks[i], blocks[j]
                if a.message_index == b.message_index:
                    continue
                exact = a.content.strip() == b.content.strip()
                if not exact and abs(b.message_index - a.message_index) > window:
                    continue
                score = 1.0 if exact else composite_similarity(a.content, b.content)
                if score < threshold:
                    continue

                loser = self.select_discard(i, j, blocks)
                if loser in protected:
                    self._log.debug(
                        "Duplicate (%.3f) between messages %s and %s kept; it is the whole of message %s",
                        score,
                        a.message_index,
                        b.message_index,
                        blocks[loser].message_index,
                    )
                    continue
                retired.add(loser)
                discarded.append(loser)
                self._log.debug(
                    "Duplicate (%.3f) between messages %s and %s; dropping block from message %s",
                    score,
                    a.message_index,
                    b.message_index,
                    blocks[loser].message_index,
                )
                if loser == i:
                    break
        return sorted(discarded)

    def _find_exact_duplicates(self, blocks: Sequence[ContentBlock], protected: set[int]) -> list[int]:
        survivors: dict[str, int] = {}
        discarded: list[int] = []
        for index, block in enumerate(blocks):
            key = block.content.strip()
            anchor = survivors.get(key)
            if anchor is None:
                survivors[key] = index
                continue
            if blocks[anchor].message_index == block.message_index:
                continue
            loser = self.select_discard(anchor, index, blocks)
            if loser in protected:
                continue
            discarded.append(loser)
            if loser == anchor:
                survivors[key] = index
        return sorted(discarded)

    def _apply_removals(
        self,
        messages: Sequence[SlackMessage],
        analyses: Sequence[EmbeddedAnalysis],
        discarded: Sequence[ContentBlock],
    ) -> list[SlackMessage]:
        by_message: dict[int, list[ContentBlock]] = {}
        for block in discarded:
            by_message.setdefault(block.message_index, []).append(block)

        result: list[SlackMessage] = []
        for index, message in enumerate(messages):
            blocks = by_message.get(index)
            if not blocks:
                result.append(message)
                continue

            analysis = analyses[index]
            main_discarded = any(not block.is_embedded for block in blocks)
            if analysis.has_embedded and analysis.cleaned_text.strip() and not main_discarded:
                text = analysis.cleaned_text.strip()
            elif self._should_keep(message, blocks):
                text = message.text
                for block in blocks:
                    text = remove_block_text(text, block.content)
            else:
                self._log.debug("Dropping message %s from %s as a duplicate", index, message.username)
                continue

            if not text.strip():
                if not must_keep(message):
                    self._log.debug("Message %s from %s is empty after removal", index, message.username)
                    continue
                text = message.text
            result.append(replace(message, text=text))
        return result

    def _should_keep(self, message: SlackMessage, blocks: Sequence[ContentBlock]) -> bool:
        if must_keep(message):
            return True
        if not message.text:
            return False
        duplicated = sum(len(block.content) for block in blocks)
        return duplicated / len(message.text) < self._config.preserve_ratio
