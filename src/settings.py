"""Static configuration for slackpaste.

All user-editable settings (dedup tuning, output, logging) live in a single
JSON file for quick edits without touching Python.
"""

import json
import os

from dotenv import load_dotenv

from core.config import DedupConfig, OutputConfig

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# A .env file may point SLACKPASTE_CONFIG at another config file.
load_dotenv()
CONFIG_PATH = os.getenv("SLACKPASTE_CONFIG") or os.path.join(PROJECT_ROOT, "config.json")

OUTPUT_FORMATS = ("markdown", "json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _build_dedup_config(raw: dict) -> DedupConfig:
    defaults = DedupConfig()
    threshold = float(raw.get("similarity_threshold", defaults.similarity_threshold))
    if not 0.0 < threshold <= 1.0:
        raise ValueError(f"dedup.similarity_threshold must be in (0, 1]: {threshold}")
    return DedupConfig(
        enabled=bool(raw.get("enabled", defaults.enabled)),
        similarity_threshold=threshold,
        min_content_length=int(raw.get("min_content_length", defaults.min_content_length)),
        max_message_distance=int(raw.get("max_message_distance", defaults.max_message_distance)),
        preserve_ratio=float(raw.get("preserve_ratio", defaults.preserve_ratio)),
        max_blocks=int(raw.get("max_blocks", defaults.max_blocks)),
    )


def _build_output_config(raw: dict) -> OutputConfig:
    output_format = raw.get("format", "markdown")
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f"Unsupported output format: {output_format}")
    return OutputConfig(format=output_format, callout=str(raw.get("callout", "slack")))


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Per-line parser tracing; the CLI --debug flag overrides it.
DEBUG = bool(_CONFIG.get("debug", False))

# Dedup thresholds are empirical; they stay tunable here.
DEDUP = _build_dedup_config(_CONFIG.get("dedup", {}))

OUTPUT = _build_output_config(_CONFIG.get("output", {}))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
