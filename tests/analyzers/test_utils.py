"""Tests for the manifest helpers shared by gatherers."""

from __future__ import annotations

from pathlib import Path

from ctxscan.analyzers.utils import (
    declared_packages,
    load_json,
    load_toml,
    load_yaml,
    python_call_kwarg,
    read_text,
    requirement_names,
    string_value,
    table,
)


def test_malformed_manifests_read_as_empty(tmp_path: Path) -> None:
    (tmp_path / "Cargo.toml").write_text("[package\nname = \n", encoding="utf-8")
    (tmp_path / "package.json").write_text("{not json", encoding="utf-8")
    (tmp_path / "list.json").write_text("[1, 2]", encoding="utf-8")
    (tmp_path / "x.info.yml").write_text("name: [unclosed\n", encoding="utf-8")

    assert load_toml(tmp_path / "Cargo.toml") == {}
    assert load_json(tmp_path / "package.json") == {}
    assert load_json(tmp_path / "list.json") == {}
    assert load_yaml(tmp_path / "x.info.yml") == {}
    assert load_toml(None) == {}
    assert load_json(tmp_path / "missing.json") == {}


def test_table_and_string_value() -> None:
    data = {"tool": {"poetry": {"name": "demo", "version": 2}}, "project": "oops"}

    assert table(data, "tool", "poetry") == {"name": "demo", "version": 2}
    assert table(data, "project") == {}
    assert table(data, "tool", "missing", "deeper") == {}
    assert string_value(table(data, "tool", "poetry"), "version") == "2"
    assert string_value({"name": ""}, "name") is None
    assert string_value({"flag": True}, "flag") is None


def test_declared_packages_merges_sections() -> None:
    manifest = {
        "dependencies": {"react": "^18"},
        "devDependencies": {"jest": "^29"},
        "require": {"drupal/core": "^10"},
        "scripts": {"build": "vite"},
    }

    assert declared_packages(manifest) == {"react", "jest", "drupal/core"}


def test_requirement_and_setup_helpers() -> None:
    assert requirement_names("Flask>=3\n  # dev\n-e .\nuvicorn[standard]; python_version > '3'\n") == [
        "Flask",
        "uvicorn",
    ]
    assert python_call_kwarg("setup(\n    name=\"tool\",\n)", "name") == "tool"
    assert python_call_kwarg("setup()", "version") is None


def test_read_text_respects_size_limit(tmp_path: Path) -> None:
    path = tmp_path / "big.txt"
    path.write_text("x" * 20, encoding="utf-8")

    assert read_text(path, max_bytes=10) is None
    assert read_text(path, max_bytes=None) == "x" * 20


def test_unparseable_manifests_keep_top_level_pairs(tmp_path: Path) -> None:
    (tmp_path / "Cargo.toml").write_text(
        '[package]\nname = "demo"\nversion = "0.2.0"\n\n[dependencies\nserde = "1"\n',
        encoding="utf-8",
    )
    (tmp_path / "package.json").write_text(
        '{\n  "name": "web",\n  "version": "1.0.0",\n'
        '  "dependencies": {\n    "react": "^18",\n  },\n}\n',
        encoding="utf-8",
    )
    (tmp_path / "demo.info.yml").write_text(
        "name: Demo Module\ndescription: 'Does things'\ndependencies: [unclosed\n",
        encoding="utf-8",
    )

    package = table(load_toml(tmp_path / "Cargo.toml"), "package")
    assert string_value(package, "name") == "demo"
    assert string_value(package, "version") == "0.2.0"
    assert load_json(tmp_path / "package.json") == {"name": "web", "version": "1.0.0"}
    assert load_yaml(tmp_path / "demo.info.yml") == {
        "name": "Demo Module",
        "description": "Does things",
    }
