"""Summary of a Cargo package."""

from __future__ import annotations

import re
from typing import List, Optional

from ..models import ProjectInfo, ProjectType, RustInfo
from .base import GatherContext, InfoGatherer
from .utils import iter_texts, load_toml, string_value, table

_VISIBILITY = r"(?:pub(?:\s*\([^)]*\))?\s+)?"
_MOD = re.compile(rf"^{_VISIBILITY}mod\s+\w+")
_STRUCT = re.compile(rf"^{_VISIBILITY}struct\s+\w+")
_FN = re.compile(rf"^{_VISIBILITY}(?:(?:async|const|unsafe|extern\s+\"\w+\")\s+)*fn\s+\w+")


class RustGatherer(InfoGatherer):
    project_types = (ProjectType.RUST,)

    def gather(self, context: GatherContext) -> Optional[ProjectInfo]:
        manifest = load_toml(context.manifest_path("Cargo.toml"))
        package = table(manifest, "package")
        dependencies: List[str] = list(table(manifest, "dependencies"))

        module_count = struct_count = function_count = 0
        for _, source in iter_texts(context.root, context.files("rs")):
            for raw in source.splitlines():
                line = raw.strip()
                if _MOD.match(line):
                    module_count += 1
                elif _STRUCT.match(line):
                    struct_count += 1
                elif _FN.match(line):
                    function_count += 1

        return RustInfo(
            name=string_value(package, "name"),
            version=string_value(package, "version"),
            edition=string_value(package, "edition"),
            dependencies=tuple(dependencies),
            module_count=module_count,
            struct_count=struct_count,
            function_count=function_count,
        )


__all__ = ["RustGatherer"]
