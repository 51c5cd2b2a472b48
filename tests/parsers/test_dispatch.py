"""Tests for extension-based extractor dispatch."""

from __future__ import annotations

from pathlib import Path

import pytest

from ctxscan.models import ElementKind
from ctxscan.parsers import CodeParser, analyze_generic, extract_structure, extractor_for


@pytest.mark.parametrize(
    ("filename", "content", "expected"),
    [
        ("lib.rs", "pub fn run() {}\n", ElementKind.FUNCTION),
        ("app.py", "def main():\n    pass\n", ElementKind.FUNCTION),
        ("main.go", "package main\n", ElementKind.MODULE),
        ("App.tsx", "export class Store {}\n", ElementKind.CLASS),
        ("demo.module", "<?php\nfunction demo_hook_help() {}\n", ElementKind.HOOK),
    ],
)
def test_extract_structure_dispatches_by_extension(
    filename: str, content: str, expected: ElementKind
) -> None:
    structure = extract_structure(filename, content)

    assert structure.elements[0].kind == expected


def test_unknown_extension_yields_empty_inventory() -> None:
    assert extractor_for("md") is analyze_generic
    assert extract_structure("README.md", "# def class fn\n").elements == []
    assert extract_structure("Makefile", "build:\n\tcargo build\n").elements == []


def test_code_parser_reads_files_from_disk(tmp_path: Path) -> None:
    source = tmp_path / "service.py"
    source.write_text("class Service:\n    def run(self):\n        pass\n", encoding="utf-8")

    structure = CodeParser().analyze_file_structure(source)

    assert structure.names() == ["Service", "run"]
    assert structure.language == "python"


def test_code_parser_surfaces_decode_errors(tmp_path: Path) -> None:
    source = tmp_path / "broken.py"
    source.write_bytes(b"\xff\xfe\x00def x():\n")

    with pytest.raises(UnicodeDecodeError):
        CodeParser().analyze_file_structure(source)


@pytest.mark.parametrize(
    ("filename", "content"),
    [
        ("mod.py", "import os\x0c\ndef needle():\n    pass\n"),
        ("lib.rs", "use std::io;\x0c\npub fn needle() {}\n"),
        ("app.js", "const a = 1;\x0c\r\nfunction needle() {}\r\n"),
    ],
)
def test_line_numbers_count_newlines_only(filename: str, content: str) -> None:
    structure = extract_structure(filename, content)

    assert [(element.name, element.line) for element in structure.elements] == [("needle", 2)]
