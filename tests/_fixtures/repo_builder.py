"""Helper utilities for constructing temporary project trees in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping

from ctxscan.models import ProjectStructure
from ctxscan.project_analyzer import ProjectAnalyzer


class RepoBuilder:
    """Utility for writing files into a throwaway project and classifying it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def write_bytes(self, relative: str, data: bytes) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    def mkdir(self, relative: str) -> Path:
        path = self.root / relative
        path.mkdir(parents=True, exist_ok=True)
        return path

    def analyze(self) -> ProjectStructure:
        """Return a fresh classification of the project contents."""
        return ProjectAnalyzer().analyze_project_structure(self.root)

    def path(self) -> Path:
        """Return the project root path."""
        return self.root


__all__ = ["RepoBuilder"]
