#!/usr/bin/env python3
"""Inline Markdown rendering and paragraph escaping.

Spans are rewritten in a fixed order: code, images, links, emphasis,
strikethrough, then a short list of raw HTML tags. Finished spans are parked
in a PlaceholderArena so later stages never see their contents.
"""

from __future__ import annotations

import html
import re
from typing import Callable, Sequence


# Token delimiters. The line normalizer strips both from user input.
PLACEHOLDER_OPEN = "\x02"
PLACEHOLDER_CLOSE = "\x03"

# Refused by the parser itself. The sanitizer's protocol list decides the rest.
SCRIPT_URL_SCHEMES = ("javascript", "vbscript")
BLOCKED_LINK_SCHEMES = (*SCRIPT_URL_SCHEMES, "data")
INLINE_HTML_TAGS = ("kbd", "mark", "details", "summary")

CODE_SPAN_RE = re.compile(r"`([^`]+)`")
IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")
LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
RAW_TAG_RE = re.compile(r"<[^>]+>")
STRONG_ASTERISK_RE = re.compile(r"\*\*([^*]+)\*\*")
STRONG_UNDERSCORE_RE = re.compile(r"(?<!\w)__([^_]+)__(?!\w)")
EM_ASTERISK_RE = re.compile(r"\*([^*]+)\*")
EM_UNDERSCORE_RE = re.compile(r"(?<!\w)_([^_]+)_(?!\w)")
STRIKETHROUGH_RE = re.compile(r"~~([^~]+)~~")
URL_NOISE_RE = re.compile(r"[\x00-\x20\x7f]+")
ESCAPED_INLINE_HTML_RES = {
    tag: re.compile(
        rf"&lt;{tag}((?:\s+[a-zA-Z][a-zA-Z-]*)*)\s*&gt;(.*?)&lt;/{tag}\s*&gt;",
        re.IGNORECASE | re.DOTALL,
    )
    for tag in INLINE_HTML_TAGS
}


class PlaceholderArena:
    """Call-local store of finished spans, addressed by opaque tokens."""

    def __init__(self) -> None:
        self._values: list[str] = []

    def __len__(self) -> int:
        return len(self._values)

    @staticmethod
    def token(index: int) -> str:
        return f"{PLACEHOLDER_OPEN}{index}{PLACEHOLDER_CLOSE}"

    def stash(self, value: str) -> str:
        token = self.token(len(self._values))
        self._values.append(value)
        return token

    def restore(self, text: str) -> str:
        # Newest first: a stashed value may embed the token of an older one.
        for index in range(len(self._values) - 1, -1, -1):
            text = text.replace(self.token(index), self._values[index])
        return text


def html_escape(text: str) -> str:
    return html.escape(text, quote=False)


def attribute_escape(value: str) -> str:
    return html.escape(value, quote=True)


def safe_link_href(url: str, blocked_schemes: Sequence[str] = BLOCKED_LINK_SCHEMES) -> str | None:
    """Return the trimmed URL unless it names a script-capable scheme.

    Relative paths and ``host:port`` forms pass through unchanged.
    """
    candidate = url.strip()
    # Browsers drop embedded whitespace and control characters, so
    # "java\tscript:" still resolves to javascript.
    compact = URL_NOISE_RE.sub("", candidate).lower()
    if compact.startswith(tuple(f"{scheme}:" for scheme in blocked_schemes)):
        return None
    return candidate


def escape_tags_in_text(text: str) -> str:
    """Escape raw ``<...>`` sequences outside code, link and image spans.

    The protected spans come back as their original Markdown source, so the
    inline renderer still sees ``[x](y)`` rather than an escaped copy of it.
    """
    arena = PlaceholderArena()

    def protect(match: re.Match[str]) -> str:
        return arena.stash(match.group(0))

    protected = CODE_SPAN_RE.sub(protect, text)
    protected = LINK_RE.sub(protect, protected)
    protected = IMAGE_RE.sub(protect, protected)
    protected = RAW_TAG_RE.sub(lambda match: html_escape(match.group(0)), protected)
    return arena.restore(protected)


def _code_span_replacer(arena: PlaceholderArena) -> Callable[[re.Match[str]], str]:
    def replace(match: re.Match[str]) -> str:
        return arena.stash(f"<code>{html_escape(match.group(1))}</code>")

    return replace


def _image_replacer(arena: PlaceholderArena) -> Callable[[re.Match[str]], str]:
    def replace(match: re.Match[str]) -> str:
        src = safe_link_href(match.group(2), SCRIPT_URL_SCHEMES)
        if src is None:
            return html_escape(match.group(1))
        alt = attribute_escape(match.group(1))
        return arena.stash(f'<img src="{attribute_escape(src)}" alt="{alt}">')

    return replace


def _link_replacer(arena: PlaceholderArena) -> Callable[[re.Match[str]], str]:
    # Only the opening tag is parked; the label stays open to emphasis.
    def replace(match: re.Match[str]) -> str:
        label = html_escape(match.group(1))
        url = match.group(2)
        href = safe_link_href(url)
        if href is None:
            return f"{label} ({html_escape(url.strip())})"
        opening_tag = f'<a href="{attribute_escape(href)}">'
        return f"{arena.stash(opening_tag)}{label}</a>"

    return replace


def render_emphasis(text: str) -> str:
    text = STRONG_ASTERISK_RE.sub(r"<strong>\1</strong>", text)
    text = STRONG_UNDERSCORE_RE.sub(r"<strong>\1</strong>", text)
    text = EM_ASTERISK_RE.sub(r"<em>\1</em>", text)
    return EM_UNDERSCORE_RE.sub(r"<em>\1</em>", text)


def render_strikethrough(text: str) -> str:
    return STRIKETHROUGH_RE.sub(r"<del>\1</del>", text)


def render_inline_html(text: str) -> str:
    # Raw pairs are already live markup. Escaped pairs (from the paragraph
    # escaping pass) are turned back into tags only when both ends exist.
    for tag, pattern in ESCAPED_INLINE_HTML_RES.items():
        text = pattern.sub(
            lambda match, tag=tag: f"<{tag}{match.group(1)}>{match.group(2)}</{tag}>",
            text,
        )
    return text


def render_inline(text: str) -> str:
    if not text:
        return ""

    arena = PlaceholderArena()
    text = CODE_SPAN_RE.sub(_code_span_replacer(arena), text)
    text = IMAGE_RE.sub(_image_replacer(arena), text)
    text = LINK_RE.sub(_link_replacer(arena), text)
    text = render_emphasis(text)
    text = render_strikethrough(text)
    text = render_inline_html(text)
    return arena.restore(text)
