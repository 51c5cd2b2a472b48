"""Line-oriented structural extraction for Rust sources."""

from __future__ import annotations

import re
from typing import List

from ..models import CodeElement, ElementKind, FileStructure
from .common import DocBuffer, leading_identifier, split_lines

_QUALIFIERS = re.compile(
    r"^(?:pub(?:\([^)]*\))?\s+)?(?:(?:default|async|const|unsafe)\s+)*(?:extern\s+\"[^\"]*\"\s+)?"
)

_BLOCK_KEYWORDS = {
    "struct ": ElementKind.STRUCT,
    "enum ": ElementKind.ENUM,
    "trait ": ElementKind.TRAIT,
}


def analyze_rust(content: str) -> FileStructure:
    elements: List[CodeElement] = []
    docs = DocBuffer()

    for index, raw in enumerate(split_lines(content)):
        line = raw.strip()
        line_no = index + 1

        if line.startswith(("///", "//!")):
            docs.add(line[3:])
            continue
        if line.startswith(("#[", "#![")):
            continue

        decl = _QUALIFIERS.sub("", line, count=1)
        element = None

        if decl.startswith("mod ") and decl.endswith(";"):
            name = decl[len("mod ") : -1].strip()
            if name:
                element = (name, ElementKind.MODULE)
        elif decl.startswith("fn "):
            rest = decl[len("fn ") :]
            name = leading_identifier(rest)
            if name and "(" in rest:
                element = (name, ElementKind.FUNCTION)
        else:
            for keyword, kind in _BLOCK_KEYWORDS.items():
                if not decl.startswith(keyword):
                    continue
                rest = decl[len(keyword) :]
                name = leading_identifier(rest)
                delimiters = "{;(" if kind == ElementKind.STRUCT else "{"
                if name and any(char in rest for char in delimiters):
                    element = (name, kind)
                break

        if element is None:
            docs.clear()
            continue

        description, _ = docs.take()
        elements.append(
            CodeElement(name=element[0], kind=element[1], line=line_no, description=description)
        )

    return FileStructure(elements=elements, language="rust")


__all__ = ["analyze_rust"]
