"""Heuristic structural extraction keyed by file extension."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict

from ..logging import get_logger
from ..models import FileStructure
from ..walker import extension_of
from .go import analyze_go
from .javascript import analyze_javascript
from .php import analyze_php
from .python import analyze_python
from .rust import analyze_rust

logger = get_logger("parsers")

Extractor = Callable[[str, str], FileStructure]


def _content_only(routine: Callable[[str], FileStructure]) -> Extractor:
    def _extract(content: str, path: str) -> FileStructure:
        return routine(content)

    return _extract


def analyze_generic(content: str, path: str) -> FileStructure:
    return FileStructure()


def _php(content: str, path: str) -> FileStructure:
    return analyze_php(content, path)


_EXTRACTORS: Dict[str, Extractor] = {
    "rs": _content_only(analyze_rust),
    "py": _content_only(analyze_python),
    "pyi": _content_only(analyze_python),
    "go": _content_only(analyze_go),
    "js": _content_only(analyze_javascript),
    "jsx": _content_only(analyze_javascript),
    "mjs": _content_only(analyze_javascript),
    "cjs": _content_only(analyze_javascript),
    "ts": _content_only(analyze_javascript),
    "tsx": _content_only(analyze_javascript),
    "php": _php,
    "module": _php,
    "inc": _php,
    "install": _php,
    "theme": _php,
    "profile": _php,
}


def extractor_for(extension: str) -> Extractor:
    """Return the routine registered for an extension, falling back to generic."""
    return _EXTRACTORS.get(extension.lower(), analyze_generic)


def extract_structure(path: str | Path, content: str) -> FileStructure:
    """Return the structural inventory of already-loaded file content."""
    path_str = Path(path).as_posix()
    return extractor_for(extension_of(path_str))(content, path_str)


class CodeParser:
    """Reads files from disk and extracts their structure."""

    def analyze_file_structure(self, file_path: str | Path) -> FileStructure:
        """Read a file and return its structure.

        Raises ``OSError`` or ``UnicodeDecodeError`` when the file cannot be
        read as text; callers decide whether that is fatal.
        """
        path = Path(file_path)
        content = path.read_text(encoding="utf-8")
        structure = extract_structure(path, content)
        logger.debug("Extracted %d elements from %s", len(structure.elements), path)
        return structure


__all__ = ["CodeParser", "analyze_generic", "extract_structure", "extractor_for"]
