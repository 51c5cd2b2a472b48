"""Project type selection as an ordered decision table."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Tuple

from ..logging import get_logger
from ..models import DrupalModuleRef, FilesByType, ProjectFeatures, ProjectType
from .drupal import discover_modules, resolve_drupal_type
from .features import PHP_EXTENSIONS, FeatureScan, count_with_extensions, files_with_extensions

logger = get_logger("classifier")

Predicate = Callable[[ProjectFeatures, FilesByType], bool]

JAVASCRIPT_EXTENSIONS = ("js", "jsx", "mjs", "cjs")
TYPESCRIPT_EXTENSIONS = ("ts", "tsx")
COMPONENT_EXTENSIONS = ("jsx", "tsx")
REACT_PATH_HINTS = ("react",)


def _is_drupal(features: ProjectFeatures, files_by_type: FilesByType) -> bool:
    if features.has_drupal_core or features.has_drupal_modules_dir:
        return True
    return features.has_info_yml and (
        features.has_info_sentinel or features.has_drupal_signature
    )


def _is_rust(features: ProjectFeatures, files_by_type: FilesByType) -> bool:
    return features.has_cargo_toml


def _is_angular(features: ProjectFeatures, files_by_type: FilesByType) -> bool:
    return features.has_angular_json and features.has_package_json


def _is_react(features: ProjectFeatures, files_by_type: FilesByType) -> bool:
    if not features.has_package_json:
        return False
    if count_with_extensions(files_by_type, COMPONENT_EXTENSIONS):
        return True
    return any(
        hint in rel_path.lower()
        for rel_path in files_with_extensions(files_by_type, JAVASCRIPT_EXTENSIONS)
        for hint in REACT_PATH_HINTS
    )


def _is_python(features: ProjectFeatures, files_by_type: FilesByType) -> bool:
    return features.has_pyproject or features.has_requirements_txt or features.has_setup_py


def _is_go(features: ProjectFeatures, files_by_type: FilesByType) -> bool:
    return features.has_go_mod or bool(files_by_type.get("go"))


def _is_typescript(features: ProjectFeatures, files_by_type: FilesByType) -> bool:
    typescript = count_with_extensions(files_by_type, TYPESCRIPT_EXTENSIONS)
    javascript = count_with_extensions(files_by_type, ("js", "jsx"))
    return typescript > 0 and typescript >= javascript


def _is_javascript(features: ProjectFeatures, files_by_type: FilesByType) -> bool:
    return count_with_extensions(files_by_type, JAVASCRIPT_EXTENSIONS + TYPESCRIPT_EXTENSIONS) > 0


def _is_php(features: ProjectFeatures, files_by_type: FilesByType) -> bool:
    return count_with_extensions(files_by_type, sorted(PHP_EXTENSIONS)) > 0


# Drupal resolves to module or site after module discovery.
DECISION_TABLE: List[Tuple[Predicate, ProjectType]] = [
    (_is_drupal, ProjectType.DRUPAL_SITE),
    (_is_rust, ProjectType.RUST),
    (_is_angular, ProjectType.ANGULAR),
    (_is_react, ProjectType.REACT),
    (_is_python, ProjectType.PYTHON),
    (_is_go, ProjectType.GO),
    (_is_typescript, ProjectType.TYPESCRIPT),
    (_is_javascript, ProjectType.JAVASCRIPT),
    (_is_php, ProjectType.PHP),
]


def select_project_type(features: ProjectFeatures, files_by_type: FilesByType) -> ProjectType:
    """Return the first outcome whose predicate holds, else ``GENERIC``."""
    for predicate, outcome in DECISION_TABLE:
        if predicate(features, files_by_type):
            return outcome
    return ProjectType.GENERIC


@dataclass(frozen=True)
class Classification:
    project_type: ProjectType
    modules: List[DrupalModuleRef] = field(default_factory=list)


class ProjectClassifier:
    """Combines the decision table with Drupal module discovery."""

    def classify(self, root: Path, scan: FeatureScan) -> Classification:
        project_type = select_project_type(scan.features, scan.files_by_type)
        modules: List[DrupalModuleRef] = []
        if project_type.is_drupal:
            modules = discover_modules(root)
            project_type = resolve_drupal_type(root, modules)
            logger.debug("Discovered %d Drupal modules under %s", len(modules), root)
        logger.info("Classified %s as %s", root, project_type.value)
        return Classification(project_type=project_type, modules=modules)


__all__ = [
    "Classification",
    "DECISION_TABLE",
    "ProjectClassifier",
    "select_project_type",
]
