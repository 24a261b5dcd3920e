#!/usr/bin/env python3
"""Wrap rendered Markdown in a standalone HTML document."""

from __future__ import annotations

import html


DEFAULT_TITLE = "MarkMirror Export"

EMBEDDED_STYLES = """\
body {
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif;
    line-height: 1.6;
    color: #24292e;
    max-width: 860px;
    margin: 0 auto;
    padding: 2rem 1rem;
}
.markdown-body pre {
    background: #f6f8fa;
    border-radius: 6px;
    padding: 1rem;
    overflow: auto;
}
.markdown-body code {
    font-family: SFMono-Regular, Consolas, 'Liberation Mono', Menlo, monospace;
    font-size: 0.9em;
}
.markdown-body blockquote {
    border-left: 4px solid #dfe2e5;
    color: #6a737d;
    margin: 0;
    padding: 0 1rem;
}
.markdown-body table {
    border-collapse: collapse;
}
.markdown-body th,
.markdown-body td {
    border: 1px solid #dfe2e5;
    padding: 6px 13px;
}
.markdown-body .task-list-item {
    list-style-type: none;
}
"""


def render_document(body_html: str, *, title: str = DEFAULT_TITLE, lang: str = "en") -> str:
    safe_title = html.escape(title.strip() or DEFAULT_TITLE, quote=True)
    safe_lang = html.escape(lang.strip() or "en", quote=True)
    return f"""<!DOCTYPE html>
<html lang="{safe_lang}">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{safe_title}</title>
    <style>
{EMBEDDED_STYLES}    </style>
</head>
<body>
    <div class="markdown-body">
{body_html}
    </div>
</body>
</html>
"""
