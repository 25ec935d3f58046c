"""Similarity scoring for near-duplicate detection (core domain)."""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein

CHARACTER_WEIGHT = 0.3
WORD_WEIGHT = 0.4
EDIT_WEIGHT = 0.3


def character_similarity(a: str, b: str) -> float:
    """Jaccard index of the lowercased, whitespace-free character sets."""

    chars_a = set("".join(a.lower().split()))
    chars_b = set("".join(b.lower().split()))
    union = chars_a | chars_b
    if not union:
        return 0.0
    return len(chars_a & chars_b) / len(union)


def _content_words(text: str) -> set[str]:
    # Words of two characters or fewer are mostly noise ("a", "is", "to").
    return {word for word in text.lower().split() if len(word) > 2}


def word_similarity(a: str, b: str) -> float:
    words_a = _content_words(a)
    words_b = _content_words(b)
    if not words_a and not words_b:
        return 1.0
    if not words_a or not words_b:
        return 0.0
    return len(words_a & words_b) / len(words_a | words_b)


def edit_similarity(a: str, b: str) -> float:
    """``(max_len - levenshtein) / max_len`` with unit costs."""

    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return (longest - Levenshtein.distance(a, b)) / longest


def composite_similarity(a: str, b: str) -> float:
    """Weighted blend of the three scores; exact (trimmed) matches score 1.0."""

    if a.strip() == b.strip():
        return 1.0
    return (
        CHARACTER_WEIGHT * character_similarity(a, b)
        + WORD_WEIGHT * word_similarity(a, b)
        + EDIT_WEIGHT * edit_similarity(a, b)
    )
