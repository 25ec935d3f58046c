"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DedupConfig:
    """Tunable constants for the content deduplication engine."""

    enabled: bool = True
    similarity_threshold: float = 0.95
    min_content_length: int = 15
    max_message_distance: int = 3
    preserve_ratio: float = 0.8
    # Above this many blocks only exact matches are compared.
    max_blocks: int = 2000


@dataclass(frozen=True)
class OutputConfig:
    """Rendering settings consumed by the formatting adapter."""

    format: str = "markdown"
    callout: str = "slack"
