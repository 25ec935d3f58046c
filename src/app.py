"""Application entry point for slackpaste."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import text2art
from rich.console import Console
from rich.table import Table

import settings
from adapters.embedded_detector import EmbeddedMessageDetector
from core.log import LoggingSink
from core.processor import ProcessedTranscript, TranscriptProcessor
from pipeline import format_transcript, parse_messages

NAME = "SLACKPASTE"
FONT = "tarty-1"

# Data goes to stdout; banner, summary and logs go to stderr.
CONSOLE = Console(stderr=True)


def _print_banner() -> None:
    CONSOLE.print(text2art(NAME, font=FONT, space=1), markup=False, highlight=False)


def _configure_logging(debug: bool = False) -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False) and not debug:
        return

    level_name = "DEBUG" if debug else str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True) or debug:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/slackpaste.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as handle:
        return handle.read()


def _build_processor(debug: bool) -> TranscriptProcessor:
    return TranscriptProcessor(
        analyzer=EmbeddedMessageDetector(),
        dedup_config=settings.DEDUP,
        log=LoggingSink("slackpaste", debug_enabled=debug),
    )


def _print_summary(result: ProcessedTranscript) -> None:
    table = Table(title="slackpaste", show_header=False, box=None)
    table.add_row("parsed messages", str(len(result.parsed)))
    if result.dedup is None:
        table.add_row("deduplication", "skipped")
    else:
        table.add_row("content blocks", str(result.dedup.processed_blocks))
        table.add_row("removed duplicates", str(result.dedup.removed_duplicates))
        table.add_row("preserved blocks", str(result.dedup.preserved_context))
    table.add_row("output messages", str(len(result.messages)))
    CONSOLE.print(table)


def _write_output(text: str, output: Optional[str]) -> None:
    if not output:
        sys.stdout.write(text + "\n")
        return
    with open(output, "w", encoding="utf-8") as handle:
        handle.write(text + "\n")
    CONSOLE.print(f"written to {output}")


def _format(args: argparse.Namespace) -> None:
    logger = logging.getLogger(__name__)
    text = _read_source(args.source)
    logger.info("Formatting %s (%s characters)", args.source, len(text))

    result = _build_processor(args.debug).run(text, dedup=not args.no_dedup)
    _write_output(format_transcript(result.messages, settings.OUTPUT), args.output)
    _print_summary(result)


def _parse(args: argparse.Namespace) -> None:
    text = _read_source(args.source)
    messages = parse_messages(text, debug=args.debug)
    payload = json.dumps([message.to_dict() for message in messages], indent=2, ensure_ascii=False)
    _write_output(payload, args.output)
    CONSOLE.print(f"parsed {len(messages)} messages")


def _review(args: argparse.Namespace) -> None:
    _print_banner()
    text = _read_source(args.source)
    result = _build_processor(args.debug).run(text, dedup=not args.no_dedup)

    from frontend.app import ReviewApp

    ReviewApp(
        messages=result.messages,
        rendered=format_transcript(result.messages, settings.OUTPUT),
        source_name=args.source,
        dedup=result.dedup,
    ).run()


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="slackpaste")
    parser.add_argument("--debug", action="store_true", help="Trace every line and dedup decision")
    subparsers = parser.add_subparsers(dest="command", required=True)

    format_parser = subparsers.add_parser("format", help="Parse, deduplicate and render a transcript")
    format_parser.add_argument("source", help="Transcript file, or - for stdin")
    format_parser.add_argument("-o", "--output", help="Write to a file instead of stdout")
    format_parser.add_argument("--no-dedup", action="store_true", help="Skip deduplication")

    parse_parser = subparsers.add_parser("parse", help="Parse a transcript into JSON messages")
    parse_parser.add_argument("source", help="Transcript file, or - for stdin")
    parse_parser.add_argument("-o", "--output", help="Write to a file instead of stdout")

    review_parser = subparsers.add_parser("review", help="Browse the processed transcript in a TUI")
    review_parser.add_argument("source", help="Transcript file")
    review_parser.add_argument("--no-dedup", action="store_true", help="Skip deduplication")

    args = parser.parse_args(argv)
    args.debug = args.debug or settings.DEBUG
    _configure_logging(args.debug)

    if args.command == "parse":
        _parse(args)
        return
    if args.command == "review":
        _review(args)
        return
    _format(args)


if __name__ == "__main__":
    main()
