"""Tests for reading project settings."""

from __future__ import annotations

import logging

import pytest

from typeweave.config import AnalyzerConfig, load_config
from typeweave.diagnostics import ConfigError


def test_defaults_without_settings_files(tmp_path):
    assert load_config(tmp_path) == AnalyzerConfig()


def test_dedicated_settings_file(tmp_path):
    (tmp_path / ".typeweave.toml").write_text(
        """
[typeweave]
exclude = ["generated/*"]
library_root = "libs"
encoding = "latin-1"
tolerate_syntax_errors = true
"""
    )
    config = load_config(tmp_path)
    assert config.exclude == ["generated/*"]
    assert config.library_root == tmp_path / "libs"
    assert config.encoding == "latin-1"
    assert config.tolerate_syntax_errors


def test_pyproject_tool_table(tmp_path):
    (tmp_path / "pyproject.toml").write_text(
        '[tool.typeweave]\nlibrary_root = "/opt/jars"\n'
    )
    config = load_config(tmp_path)
    assert config.library_root.as_posix() == "/opt/jars"
    assert config.exclude == []


def test_dedicated_file_wins_over_pyproject(tmp_path):
    (tmp_path / ".typeweave.toml").write_text('[typeweave]\nexclude = ["a/*"]\n')
    (tmp_path / "pyproject.toml").write_text('[tool.typeweave]\nexclude = ["b/*"]\n')
    assert load_config(tmp_path).exclude == ["a/*"]


def test_invalid_toml_is_ignored_with_warning(tmp_path, caplog):
    (tmp_path / ".typeweave.toml").write_text("[typeweave\n")
    (tmp_path / "pyproject.toml").write_text('[tool.typeweave]\nexclude = ["b/*"]\n')
    with caplog.at_level(logging.WARNING, logger="typeweave.config"):
        config = load_config(tmp_path)
    assert config.exclude == ["b/*"]
    assert ".typeweave.toml" in caplog.text


@pytest.mark.parametrize(
    "body",
    [
        "exclude = 'generated/*'",
        "exclude = [1, 2]",
        "library_root = 3",
        "encoding = false",
        "tolerate_syntax_errors = 'yes'",
    ],
)
def test_wrongly_typed_setting_is_rejected(tmp_path, body):
    (tmp_path / ".typeweave.toml").write_text(f"[typeweave]\n{body}\n")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_non_table_setting_is_rejected(tmp_path):
    (tmp_path / ".typeweave.toml").write_text('typeweave = "on"\n')
    with pytest.raises(ConfigError, match="must be a table"):
        load_config(tmp_path)


def test_non_table_tool_entry_is_rejected(tmp_path):
    (tmp_path / "pyproject.toml").write_text('tool = "typeweave"\n')
    with pytest.raises(ConfigError, match="'tool' must be a table"):
        load_config(tmp_path)
