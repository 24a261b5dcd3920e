#!/usr/bin/env python3
"""Render a Markdown file to sanitized HTML."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from markdown_export import DEFAULT_TITLE, render_document
from markdown_parser import MarkdownParser, ParserOptions
from markdown_sanitize import DEFAULT_ALLOWED_TAGS
from markdown_stats import content_stats
from shared import configure_logging, log_event


LOGGER = logging.getLogger("markmirror.render_markdown")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a Markdown file to sanitized HTML.")
    parser.add_argument("--input-file", required=True, help="Path to the Markdown source file.")
    parser.add_argument(
        "--output-file",
        default="",
        help="Output HTML path. Defaults to stdout.",
    )
    parser.add_argument(
        "--standalone",
        action="store_true",
        help="Wrap the fragment in a complete HTML document with embedded styles.",
    )
    parser.add_argument("--title", default=DEFAULT_TITLE, help="Document title for --standalone.")
    parser.add_argument(
        "--no-sanitize",
        action="store_true",
        help="Skip the allow-list sanitizer (trusted input only).",
    )
    parser.add_argument(
        "--allowed-tags",
        default=",".join(DEFAULT_ALLOWED_TAGS),
        help="Comma-separated tags the sanitizer keeps.",
    )
    parser.add_argument(
        "--stats-json",
        default="",
        help="Optional path for a JSON file with line/word/element counts of the source.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Structured log verbosity written to stderr.",
    )
    return parser.parse_args()


def parse_allowed_tags(raw: str) -> tuple[str, ...]:
    return tuple(tag.strip().lower() for tag in raw.split(",") if tag.strip())


def validate_args(args: argparse.Namespace) -> None:
    if not args.input_file or not args.input_file.strip():
        raise ValueError("input-file must be non-empty")
    if not parse_allowed_tags(args.allowed_tags):
        raise ValueError("allowed-tags must list at least one tag")


def build_parser(args: argparse.Namespace) -> MarkdownParser:
    options = ParserOptions(
        sanitize_html=not args.no_sanitize,
        allowed_tags=parse_allowed_tags(args.allowed_tags),
    )
    return MarkdownParser(options)


def ensure_parent_directory(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def write_text(path: Path, content: str) -> Path:
    ensure_parent_directory(path)
    path.write_text(content, encoding="utf-8")
    return path


def main() -> int:
    args = parse_args()
    configure_logging(args.log_level)

    try:
        validate_args(args)
    except ValueError as exc:
        log_event(LOGGER, logging.ERROR, "invalid_input", error=str(exc))
        return 1

    input_path = Path(args.input_file.strip())
    try:
        markdown = input_path.read_text(encoding="utf-8")
    except OSError as exc:
        log_event(LOGGER, logging.ERROR, "input_read_failed", path=str(input_path), error=str(exc))
        return 1

    rendered = build_parser(args).parse(markdown)
    if args.standalone:
        rendered = render_document(rendered, title=args.title)
    log_event(
        LOGGER,
        logging.DEBUG,
        "markdown_rendered",
        path=str(input_path),
        sanitized=not args.no_sanitize,
        standalone=args.standalone,
        html_length=len(rendered),
    )

    output_file = args.output_file.strip()
    if output_file:
        try:
            destination = write_text(Path(output_file), rendered)
        except OSError as exc:
            log_event(LOGGER, logging.ERROR, "output_write_failed", path=output_file, error=str(exc))
            return 1
        log_event(LOGGER, logging.INFO, "html_file_written", path=str(destination))
    else:
        print(rendered)

    stats_json = args.stats_json.strip()
    if stats_json:
        stats = content_stats(markdown)
        try:
            destination = write_text(Path(stats_json), json.dumps(stats.to_dict(), indent=2) + "\n")
        except OSError as exc:
            log_event(LOGGER, logging.ERROR, "stats_write_failed", path=stats_json, error=str(exc))
            return 1
        log_event(LOGGER, logging.INFO, "stats_file_written", path=str(destination), words=stats.words)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
