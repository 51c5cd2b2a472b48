"""Summary of a Go module."""

from __future__ import annotations

import re
from typing import Optional, Set, Tuple

from ..models import GoInfo, ProjectInfo, ProjectType
from .base import GatherContext, InfoGatherer
from .utils import iter_texts, read_text

_MODULE = re.compile(r"^module\s+(\S+)", re.MULTILINE)
_GO_VERSION = re.compile(r"^go\s+(\S+)", re.MULTILINE)
_PACKAGE = re.compile(r"^package\s+(\w+)")
_STRUCT = re.compile(r"^type\s+\w+(?:\[[^\]]*\])?\s+struct\b")


class GoGatherer(InfoGatherer):
    project_types = (ProjectType.GO,)

    def gather(self, context: GatherContext) -> Optional[ProjectInfo]:
        module_path = go_version = None
        manifest = context.manifest_path("go.mod")
        text = read_text(manifest) if manifest is not None else None
        if text is not None:
            match = _MODULE.search(text)
            module_path = match.group(1) if match else None
            match = _GO_VERSION.search(text)
            go_version = match.group(1) if match else None

        packages: Set[Tuple[str, str]] = set()
        struct_count = function_count = 0
        for rel_path, source in iter_texts(context.root, context.files("go")):
            directory = rel_path.rsplit("/", 1)[0] if "/" in rel_path else ""
            for raw in source.splitlines():
                line = raw.strip()
                match = _PACKAGE.match(line)
                if match:
                    packages.add((directory, match.group(1)))
                elif _STRUCT.match(line):
                    struct_count += 1
                elif line.startswith("func "):
                    function_count += 1

        return GoInfo(
            module_path=module_path,
            go_version=go_version,
            package_count=len(packages),
            struct_count=struct_count,
            function_count=function_count,
        )


__all__ = ["GoGatherer"]
