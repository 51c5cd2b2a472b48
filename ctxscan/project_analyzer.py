"""Project classification pipeline: feature scan, type decision, info gathering."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from .analyzers import (
    FeatureScanner,
    GatherContext,
    InfoGatherer,
    ProjectClassifier,
    discover_gatherers,
    gather_project_info,
)
from .config import CtxScanConfig, load_config
from .logging import get_logger
from .models import ProjectStructure
from .walker import resolve_root, rules_from_patterns

logger = get_logger("project")


class ProjectAnalyzer:
    """Classifies a project root and summarises it for its ecosystem."""

    def __init__(
        self,
        config: Optional[CtxScanConfig] = None,
        *,
        gatherers: Optional[Iterable[InfoGatherer]] = None,
    ) -> None:
        self._config = config
        self._gatherers = list(gatherers) if gatherers is not None else discover_gatherers()
        self._classifier = ProjectClassifier()

    def analyze_project_structure(self, root: str | Path) -> ProjectStructure:
        root_path = resolve_root(root)
        config = self._config or load_config(root_path)

        scanner = FeatureScanner(
            max_depth=config.scan.max_depth,
            extra_ignored_dirs=config.scan.ignore_dirs,
            rules=rules_from_patterns(config.scan.exclude_paths),
        )
        scan = scanner.scan(root_path)
        classification = self._classifier.classify(root_path, scan)

        context = GatherContext(
            root=root_path,
            project_type=classification.project_type,
            features=scan.features,
            files_by_type=scan.files_by_type,
            modules=classification.modules,
        )
        info = gather_project_info(context, self._gatherers)

        return ProjectStructure(
            root=str(root_path),
            directories=scan.directories,
            files_by_type=scan.files_by_type,
            project_type=classification.project_type,
            features=scan.features,
            info=info,
            drupal_modules=classification.modules,
        )


__all__ = ["ProjectAnalyzer"]
