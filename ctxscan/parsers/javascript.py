"""Structural extraction for JavaScript and TypeScript, aware of React and Angular.

Component detection is heuristic: class components are recognised by their
base class, function components by a JSX-looking ``return`` shortly after the
declaration, and Angular artefacts by the decorator that precedes the class.
A symbol classified as a component, hook or decorated artefact is never
reported a second time as a plain class or function.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence, Set

from ..models import CodeElement, ElementKind, ElementMetadata, FileStructure
from .common import DocBuffer, split_lines, strip_prefixes

_EXPORT_PREFIXES = ("export default ", "export ", "declare ", "abstract ", "default ")

_NAME = r"[A-Za-z_$][\w$]*"
_CLASS_DECL = re.compile(rf"^class\s+({_NAME})")
_FUNCTION_DECL = re.compile(rf"^(?:async\s+)?function\s*\*?\s*({_NAME})\s*(?:<[^>]*>)?\s*\(")
_ARROW_DECL = re.compile(
    rf"^(?:const|let|var)\s+({_NAME})\s*(?::[^=]+)?=\s*(?:async\s+)?(?:function\b|.*=>)"
)
_INTERFACE_DECL = re.compile(rf"^interface\s+({_NAME})")
_DECORATOR = re.compile(r"^@(\w+)\s*\(")
_REACT_BASE = re.compile(r"\bextends\s+(?:React\.)?(?:Pure)?Component\b")
_HOOK_NAME = re.compile(r"^use[A-Z0-9]")
_JSX_INLINE = re.compile(r"(?:\breturn|=>)\s*\(?\s*<[A-Za-z>/]")

_DECORATOR_KINDS: Dict[str, ElementKind] = {
    "Component": ElementKind.COMPONENT,
    "Directive": ElementKind.COMPONENT,
    "Pipe": ElementKind.COMPONENT,
    "Injectable": ElementKind.SERVICE,
    "NgModule": ElementKind.MODULE,
}

DECORATOR_LOOKAHEAD = 10
JSX_LOOKAHEAD = 20


def analyze_javascript(content: str) -> FileStructure:
    lines = split_lines(content)
    elements: List[CodeElement] = []
    claimed: Set[str] = set()
    docs = DocBuffer()

    for index, raw in enumerate(lines):
        line = raw.strip()
        line_no = index + 1

        if line.startswith(("/**", "/*", "*", "//")):
            docs.add(line.lstrip("/*").rstrip("*/"))
            continue

        decorator = _DECORATOR.match(line)
        if decorator:
            kind = _DECORATOR_KINDS.get(decorator.group(1))
            if kind is not None:
                target = _find_decorated_class(lines, index + 1)
                if target is not None and target[0] not in claimed:
                    name, class_index = target
                    description, _ = docs.take()
                    claimed.add(name)
                    elements.append(
                        CodeElement(
                            name=name,
                            kind=kind,
                            line=class_index + 1,
                            description=description,
                            metadata=ElementMetadata(annotations=(f"@{decorator.group(1)}",)),
                        )
                    )
            continue

        decl = strip_prefixes(line, _EXPORT_PREFIXES)

        class_match = _CLASS_DECL.match(decl)
        if class_match:
            name = class_match.group(1)
            if name not in claimed:
                description, _ = docs.take()
                if _REACT_BASE.search(decl):
                    claimed.add(name)
                    kind = ElementKind.COMPONENT
                else:
                    kind = ElementKind.CLASS
                elements.append(
                    CodeElement(name=name, kind=kind, line=line_no, description=description)
                )
            docs.clear()
            continue

        interface_match = _INTERFACE_DECL.match(decl)
        if interface_match:
            description, _ = docs.take()
            elements.append(
                CodeElement(
                    name=interface_match.group(1),
                    kind=ElementKind.INTERFACE,
                    line=line_no,
                    description=description,
                )
            )
            continue

        function_match = _FUNCTION_DECL.match(decl) or _ARROW_DECL.match(decl)
        if function_match:
            name = function_match.group(1)
            if name not in claimed:
                description, _ = docs.take()
                elements.append(_function_element(name, lines, index, description, claimed))
            docs.clear()
            continue

        docs.clear()

    return FileStructure(elements=elements, language="javascript")


def _function_element(
    name: str,
    lines: Sequence[str],
    index: int,
    description: Optional[str],
    claimed: Set[str],
) -> CodeElement:
    if _HOOK_NAME.match(name):
        claimed.add(name)
        return CodeElement(
            name=name,
            kind=ElementKind.HOOK,
            line=index + 1,
            description=description,
            metadata=ElementMetadata(is_hook=True, hook_name=name),
        )
    if name[0].isupper() and returns_jsx(lines, index):
        claimed.add(name)
        return CodeElement(
            name=name, kind=ElementKind.COMPONENT, line=index + 1, description=description
        )
    return CodeElement(name=name, kind=ElementKind.FUNCTION, line=index + 1, description=description)


def _find_decorated_class(lines: Sequence[str], start: int) -> Optional[tuple[str, int]]:
    for index in range(start, min(start + DECORATOR_LOOKAHEAD, len(lines))):
        decl = strip_prefixes(lines[index].strip(), _EXPORT_PREFIXES)
        match = _CLASS_DECL.match(decl)
        if match:
            return match.group(1), index
    return None


def returns_jsx(lines: Sequence[str], start: int) -> bool:
    """Return True when a JSX-like return expression follows within the look-ahead."""
    end = min(start + JSX_LOOKAHEAD, len(lines))
    for index in range(start, end):
        line = lines[index].strip()
        if _JSX_INLINE.search(line):
            return True
        if line.endswith(("return (", "return(", "=> (", "=>(")):
            following = _next_non_blank(lines, index + 1, end)
            if following is not None and following.startswith("<"):
                return True
    return False


def _next_non_blank(lines: Sequence[str], start: int, end: int) -> Optional[str]:
    for index in range(start, end):
        stripped = lines[index].strip()
        if stripped:
            return stripped
    return None


__all__ = ["analyze_javascript", "returns_jsx"]
