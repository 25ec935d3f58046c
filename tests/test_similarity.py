from __future__ import annotations

import pytest

from core.similarity import (
    character_similarity,
    composite_similarity,
    edit_similarity,
    word_similarity,
)


def test_character_similarity() -> None:
    assert character_similarity("abc", "abd") == pytest.approx(0.5)
    assert character_similarity("A b C", "cba") == 1.0
    assert character_similarity("", "   ") == 0.0


def test_word_similarity_ignores_short_words() -> None:
    assert word_similarity("a an", "to be") == 1.0
    assert word_similarity("hello world", "") == 0.0
    assert word_similarity("Hello world", "hello there") == pytest.approx(1 / 3)
    assert word_similarity("is the plan ok", "the plan is ok") == 1.0


def test_edit_similarity() -> None:
    assert edit_similarity("kitten", "sitting") == pytest.approx(4 / 7)
    assert edit_similarity("", "") == 1.0
    assert edit_similarity("abc", "") == 0.0


def test_composite_similarity() -> None:
    assert composite_similarity("  same text ", "same text") == 1.0
    # char 0.5, word 1.0 (no words over two letters), edit 2/3
    assert composite_similarity("abc", "abd") == pytest.approx(0.75)


def test_whitespace_drift_scores_above_threshold() -> None:
    a = "Quarterly planning doc  for the platform team"
    b = "Quarterly planning doc for the platform team"
    assert composite_similarity(a, b) >= 0.95
