from __future__ import annotations

import pytest

import markdown_blocks
from markdown_blocks import (
    BlockResult,
    match_block,
    normalize_lines,
    parse_list_item,
    process_blockquote,
    process_fenced_code,
    process_list,
    process_paragraph,
    process_table,
    render_blocks,
    split_table_row,
)


def test_normalize_lines_canonicalizes_line_endings():
    assert normalize_lines("a\r\nb\rc\nd") == ["a", "b", "c", "d"]


@pytest.mark.parametrize("value", [None, 42, b"# bytes", ""])
def test_normalize_lines_degrades_to_empty(value):
    assert normalize_lines(value) == []


def test_normalize_lines_drops_placeholder_delimiters():
    assert normalize_lines("a\x020\x03b") == ["a0b"]


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("# H1", "header"),
        ("###### H6", "header"),
        ("####### H7", None),
        ("```python", "fenced_code"),
        ("- item", "list"),
        ("12. item", "list"),
        ("* * *", "list"),
        ("> quote", "blockquote"),
        (">quote", "blockquote"),
        ("---", "horizontal_rule"),
        ("_ _ _", "horizontal_rule"),
        ("***", "horizontal_rule"),
        ("-*-", None),
        ("--", None),
        ("- ", None),
        ("plain text", None),
    ],
)
def test_match_block_priority(line, expected):
    processors = {name: processor for name, _predicate, processor in markdown_blocks.BLOCK_MATCHERS}

    processor = match_block([line], 0)

    if expected is None:
        assert processor is None
    else:
        assert processor is processors[expected]


def test_table_needs_separator_line_with_pipe():
    assert match_block(["a | b"], 0) is None
    assert match_block(["a | b", "---"], 0) is None
    assert match_block(["a | b", "c | d"], 0) is None
    assert match_block(["a | b", "---|:--:"], 0) is markdown_blocks.process_table


def test_table_is_checked_before_list():
    assert match_block(["- a | b", "--|--"], 0) is markdown_blocks.process_table


def test_fenced_code_with_language_and_closing_fence():
    lines = ["```js", "if (a < b) {}", "```", "after"]

    result = process_fenced_code(lines, 0)

    assert result == BlockResult('<pre><code class="language-js">if (a &lt; b) {}</code></pre>', 3)


def test_fenced_code_escapes_script():
    result = process_fenced_code(["```", "<script>alert(1)</script>", "```"], 0)

    assert result.html == "<pre><code>&lt;script&gt;alert(1)&lt;/script&gt;</code></pre>"


def test_fenced_code_leaves_quotes_unescaped():
    result = process_fenced_code(["```py", "print(\"hi\", 'x') & 1", "```"], 0)

    assert result.html == '<pre><code class="language-py">print("hi", \'x\') &amp; 1</code></pre>'


def test_unterminated_fence_consumes_rest_of_document():
    lines = ["```python", "x = 1", "", "# not a header"]

    result = process_fenced_code(lines, 0)

    assert result.html == '<pre><code class="language-python">x = 1\n\n# not a header</code></pre>'
    assert result.next_index == len(lines)


def test_closing_fence_allows_trailing_whitespace_only():
    lines = ["```", "```text", "```   ", "after"]

    result = process_fenced_code(lines, 0)

    assert result.html == "<pre><code>```text</code></pre>"
    assert result.next_index == 3


def test_fenced_code_is_not_inline_processed():
    result = process_fenced_code(["```", "**not bold** `x`", "```"], 0)

    assert "<strong>" not in result.html
    assert "**not bold** `x`" in result.html


def test_split_table_row_drops_outer_empty_cells_only():
    assert split_table_row("| a |  | c |") == ["a", "", "c"]
    assert split_table_row("a | b") == ["a", "b"]


def test_process_table():
    lines = ["| A | B |", "|---|:-:|", "| 1 | **2** |", "| `x` | y |", "tail"]

    result = process_table(lines, 0)

    assert result.html == (
        "<table><thead><tr><th>A</th><th>B</th></tr></thead>"
        "<tbody><tr><td>1</td><td><strong>2</strong></td></tr>"
        "<tr><td><code>x</code></td><td>y</td></tr></tbody></table>"
    )
    assert result.next_index == 4


def test_parse_list_item_kinds():
    task = parse_list_item("- [x] done")
    unordered = parse_list_item("  * thing")
    ordered = parse_list_item("3. third")

    assert task is not None and task.kind == "task" and task.checked is True
    assert unordered is not None and unordered.kind == "unordered" and unordered.indent == 2
    assert ordered is not None and ordered.kind == "ordered" and ordered.content == "third"
    assert parse_list_item("- ") is None
    assert parse_list_item("text") is None


def test_task_list_renders_disabled_checkboxes():
    result = process_list(["- [ ] Unchecked", "- [x] Checked"], 0)

    assert result.html == (
        "<ul>\n"
        '<li class="task-list-item"><input type="checkbox" disabled> Unchecked</li>\n'
        '<li class="task-list-item"><input type="checkbox" checked disabled> Checked</li>\n'
        "</ul>"
    )
    assert result.next_index == 2


def test_list_tag_is_fixed_by_first_item():
    result = process_list(["1. one", "- two", "+ three"], 0)

    assert result.html.startswith("<ol>\n")
    assert result.html.endswith("\n</ol>")
    assert "<ul>" not in result.html
    assert result.html.count("<li>") == 3


def test_indented_items_render_flat():
    # Known limitation: indentation is recorded but lists never nest.
    lines = ["- parent", "  - child", "    - grandchild"]

    result = process_list(lines, 0)

    assert result.html == "<ul>\n<li>parent</li>\n<li>child</li>\n<li>grandchild</li>\n</ul>"
    assert [parse_list_item(line).indent for line in lines] == [0, 2, 4]


def test_list_stops_at_blank_or_non_item_line():
    assert process_list(["- a", "- b", "", "- c"], 0).next_index == 2
    assert process_list(["- a", "continued"], 0).next_index == 1


def test_blockquote_strips_markers_and_joins_lines():
    result = process_blockquote(["> first **line**", ">second", "after"], 0)

    assert result == BlockResult("<blockquote>first <strong>line</strong>\nsecond</blockquote>", 2)


def test_paragraph_joins_lines_and_stops_at_next_block():
    result = process_paragraph(["line one", "line two", "# Head"], 0)

    assert result == BlockResult("<p>line one line two</p>", 2)


def test_paragraph_escapes_raw_html_but_keeps_links():
    result = process_paragraph(["<b>hi</b> [docs](https://example.com)"], 0)

    assert result.html == '<p>&lt;b&gt;hi&lt;/b&gt; <a href="https://example.com">docs</a></p>'


def test_empty_paragraph_still_advances():
    assert process_paragraph(["", "text"], 0) == BlockResult("", 1)


def test_render_blocks_skips_blank_lines():
    assert render_blocks(["", "", "# T", "", "", "para"]) == ["<h1>T</h1>", "<p>para</p>"]


@pytest.mark.parametrize(
    "lines",
    [
        ["- "],
        ["```"],
        ["|"],
        ["> "],
        ["#"],
        ["| a |", "|---|"],
        ["a | b", "   "],
        ["1.", "2. x", ""],
        ["", "", ""],
    ],
)
def test_render_blocks_always_makes_progress(lines, monkeypatch):
    steps: list[tuple[int, int]] = []

    def tracked(processor):
        def wrapper(doc, index):
            result = processor(doc, index)
            steps.append((index, result.next_index))
            return result

        return wrapper

    matchers = tuple(
        (name, predicate, tracked(processor))
        for name, predicate, processor in markdown_blocks.BLOCK_MATCHERS
    )
    monkeypatch.setattr(markdown_blocks, "BLOCK_MATCHERS", matchers)
    monkeypatch.setattr(
        markdown_blocks, "process_paragraph", tracked(markdown_blocks.process_paragraph)
    )

    rendered = render_blocks(lines)

    assert all(block for block in rendered)
    assert all(next_index > index for index, next_index in steps)
    starts = [index for index, _next_index in steps]
    assert starts == sorted(set(starts))
