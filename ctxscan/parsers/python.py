"""Line-oriented structural extraction for Python sources."""

from __future__ import annotations

from typing import List

from ..models import CodeElement, ElementKind, FileStructure
from .common import DocBuffer, leading_identifier, split_lines


def analyze_python(content: str) -> FileStructure:
    elements: List[CodeElement] = []
    docs = DocBuffer()
    class_indents: List[int] = []

    for index, raw in enumerate(split_lines(content)):
        line = raw.strip()
        if not line:
            docs.clear()
            continue

        if line.startswith("#"):
            docs.add(line.lstrip("#"))
            continue
        if line.startswith("@"):
            continue

        indent = len(raw) - len(raw.lstrip())
        while class_indents and indent <= class_indents[-1]:
            class_indents.pop()

        if line.startswith("class "):
            name = leading_identifier(line[len("class ") :])
            if name:
                description, _ = docs.take()
                elements.append(
                    CodeElement(
                        name=name,
                        kind=ElementKind.CLASS,
                        line=index + 1,
                        description=description,
                    )
                )
                class_indents.append(indent)
                continue
        elif line.startswith(("def ", "async def ")):
            rest = line.split("def ", 1)[1]
            name = leading_identifier(rest)
            if name and "(" in rest:
                description, _ = docs.take()
                kind = ElementKind.METHOD if class_indents else ElementKind.FUNCTION
                elements.append(
                    CodeElement(name=name, kind=kind, line=index + 1, description=description)
                )
                continue

        docs.clear()

    return FileStructure(elements=elements, language="python")


__all__ = ["analyze_python"]
