"""Helpers shared by the per-language structural extractors."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

_IDENT = re.compile(r"[A-Za-z_$][\w$]*")


def leading_identifier(text: str) -> Optional[str]:
    """Return the identifier at the start of text, or None when absent."""
    match = _IDENT.match(text.strip())
    return match.group(0) if match else None


def strip_prefixes(text: str, prefixes: Sequence[str]) -> str:
    """Repeatedly remove any of the given prefixes from the start of text."""
    changed = True
    while changed:
        changed = False
        for prefix in prefixes:
            if text.startswith(prefix):
                text = text[len(prefix) :].lstrip()
                changed = True
    return text


def split_lines(text: str) -> List[str]:
    """Split on newlines only so line numbers match what editors show.

    Form feeds and other Unicode separators stay inside their line; a
    trailing carriage return is dropped.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class DocBuffer:
    """Accumulates consecutive documentation lines preceding a declaration.

    Lines starting with an ``@`` marker are treated as annotations; the
    description is everything written before the first annotation.
    """

    def __init__(self) -> None:
        self._lines: List[str] = []

    def add(self, text: str) -> None:
        text = text.strip()
        if text:
            self._lines.append(text)

    def clear(self) -> None:
        self._lines.clear()

    def __bool__(self) -> bool:
        return bool(self._lines)

    def take(self) -> Tuple[Optional[str], Tuple[str, ...]]:
        """Return ``(description, annotations)`` and reset the buffer."""
        description_parts: List[str] = []
        annotations: List[str] = []
        seen_annotation = False
        for line in self._lines:
            if line.startswith("@"):
                seen_annotation = True
                annotations.append(line)
            elif not seen_annotation:
                description_parts.append(line)
        self._lines.clear()
        description = " ".join(description_parts).strip()
        return (description or None), tuple(annotations)


__all__ = ["DocBuffer", "leading_identifier", "split_lines", "strip_prefixes"]
