from __future__ import annotations

import argparse
import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Callable

import pytest

from markdown_parser import MarkdownParser, ParserOptions


REPO_ROOT = Path(__file__).resolve().parents[1]


def load_script_module(module_name: str, relative_path: str) -> ModuleType:
    module_path = REPO_ROOT / relative_path
    scripts_dir = str(module_path.parent)
    if scripts_dir not in sys.path:
        sys.path.insert(0, scripts_dir)

    spec = importlib.util.spec_from_file_location(module_name, module_path)
    if spec is None or spec.loader is None:
        raise RuntimeError(f"unable to load module from {module_path}")

    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(scope="session")
def repo_root() -> Path:
    return REPO_ROOT


@pytest.fixture
def make_namespace() -> Callable[..., argparse.Namespace]:
    def _factory(**kwargs: Any) -> argparse.Namespace:
        return argparse.Namespace(**kwargs)

    return _factory


@pytest.fixture
def raw_parser() -> MarkdownParser:
    return MarkdownParser(ParserOptions(sanitize_html=False))


class RecordingSanitizer:
    def __init__(self, result: str = "CLEAN"):
        self.result = result
        self.calls: list[tuple[str, tuple[str, ...]]] = []

    def sanitize(self, html: str, allowed_tags) -> str:
        self.calls.append((html, tuple(allowed_tags)))
        return self.result


@pytest.fixture
def recording_sanitizer_factory():
    return RecordingSanitizer


@pytest.fixture(scope="session")
def render_markdown():
    return load_script_module("markmirror_render_markdown", "scripts/render-markdown.py")
