"""Line-oriented structural extraction for Go sources."""

from __future__ import annotations

import re
from typing import List

from ..models import CodeElement, ElementKind, FileStructure
from .common import DocBuffer, leading_identifier, split_lines

_TYPE_DECL = re.compile(r"^type\s+([A-Za-z_]\w*)(?:\[[^\]]*\])?\s+(struct|interface)\b")
_METHOD_DECL = re.compile(r"^func\s*\([^)]*\)\s*([A-Za-z_]\w*)\s*(?:\[[^\]]*\])?\(")


def analyze_go(content: str) -> FileStructure:
    elements: List[CodeElement] = []
    docs = DocBuffer()

    for index, raw in enumerate(split_lines(content)):
        line = raw.strip()
        line_no = index + 1

        if line.startswith("//"):
            docs.add(line[2:])
            continue

        element = None
        if line.startswith("package "):
            name = leading_identifier(line[len("package ") :])
            if name:
                element = (name, ElementKind.MODULE)
        elif line.startswith("type "):
            match = _TYPE_DECL.match(line)
            if match:
                kind = ElementKind.STRUCT if match.group(2) == "struct" else ElementKind.INTERFACE
                element = (match.group(1), kind)
        elif line.startswith("func"):
            method = _METHOD_DECL.match(line)
            if method:
                element = (method.group(1), ElementKind.METHOD)
            elif line.startswith("func "):
                rest = line[len("func ") :]
                name = leading_identifier(rest)
                if name and "(" in rest:
                    element = (name, ElementKind.FUNCTION)

        if element is None:
            docs.clear()
            continue

        description, _ = docs.take()
        elements.append(
            CodeElement(name=element[0], kind=element[1], line=line_no, description=description)
        )

    return FileStructure(elements=elements, language="go")


__all__ = ["analyze_go"]
