#!/usr/bin/env python3
"""Count lines, words and Markdown elements in raw text.

Independent of the parser: a plain regex scan, so counts describe the
source text and may disagree with what the renderer recognizes.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any


HEADER_RE = re.compile(r"^#{1,6}\s", re.MULTILINE)
LINK_RE = re.compile(r"(?<!!)\[([^\]]+)\]\(([^)]+)\)")
IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")
CODE_BLOCK_RE = re.compile(r"```[\s\S]*?```")
INLINE_CODE_RE = re.compile(r"`[^`]+`")
LIST_ITEM_RE = re.compile(r"^\s*[-*+]\s", re.MULTILINE)
TASK_ITEM_RE = re.compile(r"^\s*[-*+]\s+\[[ x]\]\s", re.MULTILINE)
WHITESPACE_RE = re.compile(r"\s")


@dataclass(frozen=True)
class ContentStats:
    lines: int = 0
    words: int = 0
    characters: int = 0
    characters_no_spaces: int = 0
    headers: int = 0
    links: int = 0
    images: int = 0
    code_blocks: int = 0
    inline_code: int = 0
    lists: int = 0
    tasks: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def content_stats(content: object) -> ContentStats:
    if not isinstance(content, str):
        return ContentStats()

    stripped = content.strip()
    return ContentStats(
        lines=len(content.split("\n")),
        words=len(stripped.split()) if stripped else 0,
        characters=len(content),
        characters_no_spaces=len(WHITESPACE_RE.sub("", content)),
        headers=len(HEADER_RE.findall(content)),
        links=len(LINK_RE.findall(content)),
        images=len(IMAGE_RE.findall(content)),
        code_blocks=len(CODE_BLOCK_RE.findall(content)),
        inline_code=len(INLINE_CODE_RE.findall(content)),
        lists=len(LIST_ITEM_RE.findall(content)),
        tasks=len(TASK_ITEM_RE.findall(content)),
    )
