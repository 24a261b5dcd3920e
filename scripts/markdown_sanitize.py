#!/usr/bin/env python3
"""Sanitizer boundary for rendered Markdown.

The parser talks to any object with a ``sanitize(html, allowed_tags)``
method. BleachSanitizer is the real allow-list implementation.
strip_script_blocks is only a fallback for callers that opt out of one; it
removes ``<script>`` elements and nothing else, so treat it as advisory.
"""

from __future__ import annotations

import re
from typing import Mapping, Protocol, Sequence

import bleach


DEFAULT_ALLOWED_TAGS: tuple[str, ...] = (
    "p",
    "br",
    "strong",
    "em",
    "code",
    "pre",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "ul",
    "ol",
    "li",
    "blockquote",
    "a",
    "img",
    "table",
    "thead",
    "tbody",
    "tr",
    "th",
    "td",
    "details",
    "summary",
    "kbd",
    "mark",
    "del",
    "ins",
    "hr",
    "input",
)

DEFAULT_ALLOWED_ATTRIBUTES: dict[str, list[str]] = {
    "a": ["href", "title"],
    "img": ["src", "alt", "title"],
    "code": ["class"],
    "li": ["class"],
    "input": ["type", "checked", "disabled"],
    "details": ["open"],
}

DEFAULT_ALLOWED_PROTOCOLS: tuple[str, ...] = ("http", "https", "mailto")

SCRIPT_BLOCK_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)


class Sanitizer(Protocol):
    def sanitize(self, html: str, allowed_tags: Sequence[str]) -> str:
        ...


class BleachSanitizer:
    """Allow-list sanitizer backed by ``bleach.clean``.

    Disallowed tags are stripped (their text survives); attributes outside
    ``attributes`` and links outside ``protocols`` are dropped.
    """

    def __init__(
        self,
        *,
        attributes: Mapping[str, Sequence[str]] | None = None,
        protocols: Sequence[str] = DEFAULT_ALLOWED_PROTOCOLS,
    ) -> None:
        source = DEFAULT_ALLOWED_ATTRIBUTES if attributes is None else attributes
        self.attributes = {tag: list(names) for tag, names in source.items()}
        self.protocols = frozenset(protocols)

    def sanitize(self, html: str, allowed_tags: Sequence[str]) -> str:
        return bleach.clean(
            html,
            tags=frozenset(allowed_tags),
            attributes=self.attributes,
            protocols=self.protocols,
            strip=True,
        )


def strip_script_blocks(html: str) -> str:
    return SCRIPT_BLOCK_RE.sub("", html)


def sanitize_html(html: str, sanitizer: Sanitizer | None, allowed_tags: Sequence[str]) -> str:
    if sanitizer is None:
        return strip_script_blocks(html)
    return sanitizer.sanitize(html, allowed_tags)
