"""Tests for ctxscan.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from ctxscan.config import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_FILE_SIZE,
    ConfigError,
    CtxScanConfig,
    load_config,
)


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, CtxScanConfig)
    assert config.root == tmp_path.resolve()
    assert config.scan.max_depth == DEFAULT_MAX_DEPTH
    assert config.scan.ignore_dirs == []
    assert config.scan.exclude_paths == []
    assert config.search.max_file_size == DEFAULT_MAX_FILE_SIZE
    assert config.search.respect_gitignore is True
    assert config.context.max_files == 3
    assert config.context.preview_chars == 500
    assert config.context.include_structure is True


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".ctxscan.yml"
    config_file.write_text(
        """
scan:
  max_depth: 4
  ignore_dirs: [fixtures, snapshots]
  exclude_paths:
    - "docs/generated/"
    - "*.min.js"
search:
  max_file_size: 2048
  respect_gitignore: "no"
context:
  max_files: 5
  preview_chars: 120
  include_structure: false
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.scan.max_depth == 4
    assert config.scan.ignore_dirs == ["fixtures", "snapshots"]
    assert config.scan.exclude_paths == ["docs/generated/", "*.min.js"]
    assert config.search.max_file_size == 2048
    assert config.search.respect_gitignore is False
    assert config.context.max_files == 5
    assert config.context.preview_chars == 120
    assert config.context.include_structure is False


def test_invalid_values_fall_back_to_defaults(tmp_path: Path) -> None:
    (tmp_path / ".ctxscan.yml").write_text(
        "scan:\n  max_depth: -2\n  ignore_dirs: vendor-local\nsearch:\n  max_file_size: huge\n",
        encoding="utf-8",
    )

    config = load_config(tmp_path / "anything.txt")

    assert config.scan.max_depth == DEFAULT_MAX_DEPTH
    assert config.scan.ignore_dirs == ["vendor-local"]
    assert config.search.max_file_size == DEFAULT_MAX_FILE_SIZE


def test_load_config_rejects_malformed_yaml(tmp_path: Path) -> None:
    (tmp_path / ".ctxscan.yml").write_text("scan: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".ctxscan.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)
