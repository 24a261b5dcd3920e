#!/usr/bin/env python3
"""Block-level Markdown recognition.

Every processor takes the document lines plus a start index and returns a
BlockResult whose next_index is past the start. The dispatcher walks
BLOCK_MATCHERS top to bottom at each index and falls back to a paragraph.

Lists render flat: per-item indentation is recorded but never nests.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Sequence

from markdown_inline import (
    PLACEHOLDER_CLOSE,
    PLACEHOLDER_OPEN,
    escape_tags_in_text,
    html_escape,
    render_inline,
)


HEADER_RE = re.compile(r"^(#{1,6})\s+(.+)$")
FENCE_OPEN_RE = re.compile(r"^```(\w+)?")
FENCE_CLOSE_RE = re.compile(r"^```\s*$")
TABLE_SEPARATOR_RE = re.compile(r"^\s*\|?[\s\-|:]+\|?\s*$")
TASK_ITEM_RE = re.compile(r"^(\s*)([-*+])\s+\[([ x])\]\s+(.+)$")
UNORDERED_ITEM_RE = re.compile(r"^(\s*)([-*+])\s+(.+)$")
ORDERED_ITEM_RE = re.compile(r"^(\s*)(\d+)\.\s+(.+)$")
BLOCKQUOTE_RE = re.compile(r"^\s*>")
BLOCKQUOTE_MARKER_RE = re.compile(r"^\s*> ?")
HORIZONTAL_RULE_RE = re.compile(r"^\s*([-*_])(?:\s*\1){2,}\s*$")

LIST_ITEM_UNORDERED = "unordered"
LIST_ITEM_ORDERED = "ordered"
LIST_ITEM_TASK = "task"


@dataclass(frozen=True)
class BlockResult:
    html: str
    next_index: int


@dataclass(frozen=True)
class ListItem:
    kind: str
    indent: int
    content: str
    checked: bool | None = None


BlockPredicate = Callable[[Sequence[str], int], bool]
BlockProcessor = Callable[[Sequence[str], int], BlockResult]


def normalize_lines(markdown: object) -> list[str]:
    if not isinstance(markdown, str) or not markdown:
        return []
    normalized = markdown.replace("\r\n", "\n").replace("\r", "\n")
    normalized = normalized.replace(PLACEHOLDER_OPEN, "").replace(PLACEHOLDER_CLOSE, "")
    return normalized.split("\n")


def is_blank(line: str) -> bool:
    return not line.strip()


def is_header(lines: Sequence[str], index: int) -> bool:
    return HEADER_RE.match(lines[index]) is not None


def process_header(lines: Sequence[str], index: int) -> BlockResult:
    match = HEADER_RE.match(lines[index])
    if match is None:
        raise ValueError(f"line {index} is not a header")
    level = len(match.group(1))
    return BlockResult(f"<h{level}>{render_inline(match.group(2))}</h{level}>", index + 1)


def is_fence_open(lines: Sequence[str], index: int) -> bool:
    return FENCE_OPEN_RE.match(lines[index]) is not None


def process_fenced_code(lines: Sequence[str], index: int) -> BlockResult:
    match = FENCE_OPEN_RE.match(lines[index])
    language = match.group(1) if match else None

    i = index + 1
    code_lines: list[str] = []
    while i < len(lines) and not FENCE_CLOSE_RE.match(lines[i]):
        code_lines.append(lines[i])
        i += 1

    # Unterminated fences swallow the rest of the document.
    next_index = i + 1 if i < len(lines) else i
    lang_class = f' class="language-{language}"' if language else ""
    code = html_escape("\n".join(code_lines))
    return BlockResult(f"<pre><code{lang_class}>{code}</code></pre>", next_index)


def is_table_row(line: str) -> bool:
    return "|" in line and not is_blank(line)


def is_table_start(lines: Sequence[str], index: int) -> bool:
    if index + 1 >= len(lines):
        return False
    separator = lines[index + 1]
    return (
        is_table_row(lines[index])
        and is_table_row(separator)
        and TABLE_SEPARATOR_RE.match(separator) is not None
    )


def split_table_row(line: str) -> list[str]:
    cells = [cell.strip() for cell in line.split("|")]
    if cells and not cells[0]:
        cells = cells[1:]
    if cells and not cells[-1]:
        cells = cells[:-1]
    return cells


def process_table(lines: Sequence[str], index: int) -> BlockResult:
    i = index
    rows: list[str] = []
    while i < len(lines) and is_table_row(lines[i]):
        rows.append(lines[i])
        i += 1

    header_cells = "".join(f"<th>{render_inline(cell)}</th>" for cell in split_table_row(rows[0]))
    body_rows = []
    for row in rows[2:]:
        cells = "".join(f"<td>{render_inline(cell)}</td>" for cell in split_table_row(row))
        body_rows.append(f"<tr>{cells}</tr>")

    html = (
        f"<table><thead><tr>{header_cells}</tr></thead>"
        f"<tbody>{''.join(body_rows)}</tbody></table>"
    )
    return BlockResult(html, i)


def parse_list_item(line: str) -> ListItem | None:
    match = TASK_ITEM_RE.match(line)
    if match:
        return ListItem(
            kind=LIST_ITEM_TASK,
            indent=len(match.group(1)),
            content=match.group(4),
            checked=match.group(3) == "x",
        )

    match = UNORDERED_ITEM_RE.match(line)
    if match:
        return ListItem(kind=LIST_ITEM_UNORDERED, indent=len(match.group(1)), content=match.group(3))

    match = ORDERED_ITEM_RE.match(line)
    if match:
        return ListItem(kind=LIST_ITEM_ORDERED, indent=len(match.group(1)), content=match.group(3))

    return None


def is_list_item(lines: Sequence[str], index: int) -> bool:
    return parse_list_item(lines[index]) is not None


def render_list_item(item: ListItem) -> str:
    content = render_inline(item.content)
    if item.kind == LIST_ITEM_TASK:
        checked = " checked" if item.checked else ""
        return f'<li class="task-list-item"><input type="checkbox"{checked} disabled> {content}</li>'
    return f"<li>{content}</li>"


def process_list(lines: Sequence[str], index: int) -> BlockResult:
    items: list[ListItem] = []
    i = index
    while i < len(lines):
        item = parse_list_item(lines[i])
        if item is None:
            break
        items.append(item)
        i += 1

    if not items:
        raise ValueError(f"line {index} is not a list item")

    # The first item picks the tag for the whole run.
    tag = "ol" if items[0].kind == LIST_ITEM_ORDERED else "ul"
    rendered = "\n".join(render_list_item(item) for item in items)
    return BlockResult(f"<{tag}>\n{rendered}\n</{tag}>", i)


def is_blockquote(lines: Sequence[str], index: int) -> bool:
    return BLOCKQUOTE_RE.match(lines[index]) is not None


def process_blockquote(lines: Sequence[str], index: int) -> BlockResult:
    quote_lines: list[str] = []
    i = index
    while i < len(lines) and BLOCKQUOTE_RE.match(lines[i]):
        quote_lines.append(BLOCKQUOTE_MARKER_RE.sub("", lines[i], count=1))
        i += 1
    content = render_inline("\n".join(quote_lines))
    return BlockResult(f"<blockquote>{content}</blockquote>", i)


def is_horizontal_rule(lines: Sequence[str], index: int) -> bool:
    return HORIZONTAL_RULE_RE.match(lines[index]) is not None


def process_horizontal_rule(lines: Sequence[str], index: int) -> BlockResult:
    return BlockResult("<hr>", index + 1)


BLOCK_MATCHERS: tuple[tuple[str, BlockPredicate, BlockProcessor], ...] = (
    ("header", is_header, process_header),
    ("fenced_code", is_fence_open, process_fenced_code),
    ("table", is_table_start, process_table),
    ("list", is_list_item, process_list),
    ("blockquote", is_blockquote, process_blockquote),
    ("horizontal_rule", is_horizontal_rule, process_horizontal_rule),
)


def match_block(lines: Sequence[str], index: int) -> BlockProcessor | None:
    for _name, predicate, processor in BLOCK_MATCHERS:
        if predicate(lines, index):
            return processor
    return None


def process_paragraph(lines: Sequence[str], index: int) -> BlockResult:
    paragraph_lines: list[str] = []
    i = index
    while i < len(lines):
        if is_blank(lines[i]) or match_block(lines, i) is not None:
            break
        paragraph_lines.append(lines[i])
        i += 1

    if not paragraph_lines:
        return BlockResult("", i + 1)

    content = escape_tags_in_text(" ".join(paragraph_lines))
    return BlockResult(f"<p>{render_inline(content)}</p>", i)


def render_blocks(lines: Sequence[str]) -> list[str]:
    rendered: list[str] = []
    index = 0
    while index < len(lines) and is_blank(lines[index]):
        index += 1

    while index < len(lines):
        processor = match_block(lines, index) or process_paragraph
        result = processor(lines, index)
        if result.next_index <= index:
            raise RuntimeError(f"block processor stalled at line {index}")
        if result.html:
            rendered.append(result.html)
        index = result.next_index

    return rendered
