"""Summary of a plain PHP project."""

from __future__ import annotations

import re
from typing import Optional, Set

from ..models import PhpInfo, ProjectInfo, ProjectType
from .base import GatherContext, InfoGatherer
from .features import PHP_EXTENSIONS
from .utils import iter_texts, load_json, string_value

_CLASS = re.compile(r"^(?:(?:abstract|final|readonly)\s+)*class\s+\w+")
_FUNCTION = re.compile(
    r"^(?:(?:public|protected|private|static|abstract|final)\s+)*function\s+&?\w+\s*\("
)
_NAMESPACE = re.compile(r"^namespace\s+([\w\\]+)\s*[;{]")


class PhpGatherer(InfoGatherer):
    project_types = (ProjectType.PHP,)

    def gather(self, context: GatherContext) -> Optional[ProjectInfo]:
        manifest = load_json(context.manifest_path("composer.json"))

        namespaces: Set[str] = set()
        class_count = function_count = 0
        for _, source in iter_texts(context.root, context.files(*sorted(PHP_EXTENSIONS))):
            for raw in source.splitlines():
                line = raw.strip()
                if _CLASS.match(line):
                    class_count += 1
                elif _FUNCTION.match(line):
                    function_count += 1
                else:
                    match = _NAMESPACE.match(line)
                    if match:
                        namespaces.add(match.group(1))

        return PhpInfo(
            name=string_value(manifest, "name"),
            class_count=class_count,
            function_count=function_count,
            namespaces=tuple(sorted(namespaces)),
        )


__all__ = ["PhpGatherer"]
