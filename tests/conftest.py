"""Shared fixtures: small Java projects written into a temporary directory."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from typeweave.java.parser import JavaSourceParser


@pytest.fixture
def java_project(tmp_path):
    """Return a function writing ``{relative path: source}`` under a source root."""
    root = tmp_path / "src" / "main" / "java"
    root.mkdir(parents=True)

    def write(files: dict[str, str]) -> Path:
        for relative, source in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(source), encoding="utf-8")
        return root

    return write


@pytest.fixture
def parse():
    parser = JavaSourceParser()

    def parse_source(source: str):
        return parser.parse_source(textwrap.dedent(source))

    return parse_source
