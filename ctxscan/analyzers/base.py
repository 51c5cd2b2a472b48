"""Base classes for project info gatherers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, List, Optional, Tuple

from ..models import DrupalModuleRef, FilesByType, ProjectFeatures, ProjectInfo, ProjectType


@dataclass(frozen=True)
class GatherContext:
    """Everything a gatherer may consult for its targeted second pass."""

    root: Path
    project_type: ProjectType
    features: ProjectFeatures
    files_by_type: FilesByType
    modules: List[DrupalModuleRef] = field(default_factory=list)

    def files(self, *extensions: str) -> List[str]:
        paths: List[str] = []
        for extension in extensions:
            paths.extend(self.files_by_type.get(extension, []))
        return paths

    def manifest_path(self, filename: str) -> Optional[Path]:
        """Return the root manifest, else the shallowest one found by the scan."""
        direct = self.root / filename
        if direct.is_file():
            return direct
        extension = filename.rsplit(".", 1)[-1] if "." in filename else ""
        candidates = [
            rel_path
            for rel_path in self.files_by_type.get(extension, [])
            if rel_path.rsplit("/", 1)[-1] == filename
        ]
        if not candidates:
            return None
        shallowest = min(candidates, key=lambda rel_path: (rel_path.count("/"), rel_path))
        return self.root / shallowest


class InfoGatherer(ABC):
    """Contract for routines that summarise one family of project types."""

    project_types: ClassVar[Tuple[ProjectType, ...]] = ()

    def supports(self, project_type: ProjectType) -> bool:
        return project_type in self.project_types

    @abstractmethod
    def gather(self, context: GatherContext) -> Optional[ProjectInfo]:
        """Produce the structured summary for the classified project."""
