"""Summary of a Python project."""

from __future__ import annotations

import re
from typing import Dict, List, Optional

from ..models import ProjectInfo, ProjectType, PythonInfo
from .base import GatherContext, InfoGatherer
from .utils import (
    iter_texts,
    load_toml,
    python_call_kwarg,
    read_text,
    requirement_names,
    string_value,
    table,
)

FRAMEWORKS = ("django", "flask", "fastapi")

_IMPORT = re.compile(r"^(?:from|import)\s+(\w+)")


def _manifest_mentions(texts: List[str]) -> Dict[str, bool]:
    lowered = "\n".join(texts).lower()
    return {framework: framework in lowered for framework in FRAMEWORKS}


class PythonGatherer(InfoGatherer):
    project_types = (ProjectType.PYTHON,)

    def gather(self, context: GatherContext) -> Optional[ProjectInfo]:
        root = context.root
        name = version = None
        manifests: List[str] = []

        pyproject_path = root / "pyproject.toml"
        pyproject = read_text(pyproject_path)
        if pyproject is not None:
            manifests.append(pyproject)
            data = load_toml(pyproject_path)
            for section in (("project",), ("tool", "poetry")):
                metadata = table(data, *section)
                name = name or string_value(metadata, "name")
                version = version or string_value(metadata, "version")

        setup_py = read_text(root / "setup.py")
        if setup_py is not None:
            manifests.append(setup_py)
            name = name or python_call_kwarg(setup_py, "name")
            version = version or python_call_kwarg(setup_py, "version")

        dependencies: List[str] = []
        requirements = read_text(root / "requirements.txt")
        if requirements is not None:
            manifests.append(requirements)
            dependencies = requirement_names(requirements)

        uses = _manifest_mentions(manifests)
        class_count = function_count = 0
        for _, source in iter_texts(root, context.files("py")):
            for raw in source.splitlines():
                line = raw.strip()
                if line.startswith("class "):
                    class_count += 1
                elif line.startswith(("def ", "async def ")):
                    function_count += 1
                else:
                    match = _IMPORT.match(line)
                    if match and match.group(1) in uses:
                        uses[match.group(1)] = True

        return PythonInfo(
            name=name,
            version=version,
            dependencies=tuple(dependencies),
            class_count=class_count,
            function_count=function_count,
            uses_django=uses["django"],
            uses_flask=uses["flask"],
            uses_fastapi=uses["fastapi"],
        )


__all__ = ["PythonGatherer"]
