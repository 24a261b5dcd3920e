#!/usr/bin/env python3
"""Render Markdown documents to sanitized HTML.

Supports headers, fenced code, pipe tables, flat (task) lists, blockquotes,
horizontal rules and paragraphs, plus code/image/link/emphasis/strikethrough
spans and a handful of raw inline tags.

``parse`` never raises on document content: anything unrecognized becomes
paragraph text, and non-string input renders as "".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from markdown_blocks import normalize_lines, render_blocks
from markdown_sanitize import DEFAULT_ALLOWED_TAGS, BleachSanitizer, Sanitizer, sanitize_html
from shared import log_event


LOGGER = logging.getLogger("markmirror.markdown_parser")

DEFAULT_SANITIZER = BleachSanitizer()


@dataclass(frozen=True)
class ParserOptions:
    sanitize_html: bool = True
    allowed_tags: tuple[str, ...] = DEFAULT_ALLOWED_TAGS

    def __post_init__(self) -> None:
        if isinstance(self.allowed_tags, str):
            raise ValueError("allowed_tags must be a sequence of tag names, not a string")
        tags = tuple(self.allowed_tags)
        if not tags:
            raise ValueError("allowed_tags must be non-empty")
        for tag in tags:
            if not isinstance(tag, str) or not tag.strip():
                raise ValueError("allowed_tags must contain non-empty strings")
        object.__setattr__(self, "allowed_tags", tuple(tag.strip().lower() for tag in tags))


class MarkdownParser:
    def __init__(
        self,
        options: ParserOptions | None = None,
        *,
        sanitizer: Sanitizer | None = DEFAULT_SANITIZER,
    ) -> None:
        self.options = options or ParserOptions()
        self.sanitizer = sanitizer
        if self.options.sanitize_html and sanitizer is None:
            log_event(
                LOGGER,
                logging.WARNING,
                "sanitizer_fallback",
                detail="no sanitizer supplied; only <script> blocks will be removed",
            )

    def render_fragment(self, markdown: object) -> str:
        """Render without the sanitizer step."""
        return "\n".join(render_blocks(normalize_lines(markdown)))

    def parse(self, markdown: object) -> str:
        html = self.render_fragment(markdown)
        if not html or not self.options.sanitize_html:
            return html
        return sanitize_html(html, self.sanitizer, self.options.allowed_tags)


def parse(
    markdown: object,
    *,
    sanitize_html: bool = True,
    allowed_tags: Sequence[str] | None = None,
) -> str:
    options = ParserOptions(
        sanitize_html=sanitize_html,
        allowed_tags=allowed_tags if allowed_tags is not None else DEFAULT_ALLOWED_TAGS,
    )
    return MarkdownParser(options).parse(markdown)
