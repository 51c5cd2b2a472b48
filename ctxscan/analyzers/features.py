"""Single-pass project feature scanner."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from ..config import DEFAULT_MAX_DEPTH
from ..logging import get_logger
from ..models import FilesByType, ProjectFeatures
from ..parsers.php import has_drupal_signature
from ..walker import IgnoreRule, TreeWalker, extension_of
from .utils import read_text

logger = get_logger("features")

MANIFEST_FLAGS: Dict[str, str] = {
    "Cargo.toml": "has_cargo_toml",
    "package.json": "has_package_json",
    "angular.json": "has_angular_json",
    ".angular-cli.json": "has_angular_json",
    "tsconfig.json": "has_tsconfig",
    "pyproject.toml": "has_pyproject",
    "requirements.txt": "has_requirements_txt",
    "setup.py": "has_setup_py",
    "go.mod": "has_go_mod",
    "composer.json": "has_composer_json",
}

SITE_LAYOUTS = ("", "web/", "docroot/")
DRUPAL_CORE_DIRS = frozenset(f"{layout}core/lib/Drupal" for layout in SITE_LAYOUTS)
DRUPAL_MODULE_PARENTS = tuple(
    f"{layout}modules/{kind}" for layout in SITE_LAYOUTS for kind in ("custom", "contrib")
) + ("sites/all/modules",)

INFO_SENTINELS = (
    "core_version_requirement",
    "type: module",
    "type: theme",
    "type: profile",
    "core:",
)
PHP_EXTENSIONS = frozenset({"php", "module", "inc", "install", "theme", "profile"})

MAX_MARKER_BYTES = 64 * 1024
MAX_SIGNATURE_BYTES = 256 * 1024


@dataclass(frozen=True)
class FeatureScan:
    """Output of one scanner pass over a project root."""

    features: ProjectFeatures
    files_by_type: FilesByType
    directories: List[str] = field(default_factory=list)


def info_has_sentinel(text: str) -> bool:
    lowered = text.lower()
    for sentinel in INFO_SENTINELS:
        if sentinel == "core:":
            if any(line.startswith("core:") for line in lowered.splitlines()):
                return True
        elif sentinel in lowered:
            return True
    return False


class FeatureScanner:
    """Walks a project tree once and accumulates its feature vector."""

    def __init__(
        self,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        extra_ignored_dirs: Iterable[str] = (),
        rules: Sequence[IgnoreRule] = (),
    ) -> None:
        self._walker = TreeWalker(
            max_depth=max_depth,
            extra_ignored_dirs=extra_ignored_dirs,
            rules=rules,
        )

    def scan(self, root: Path) -> FeatureScan:
        flags: Dict[str, bool] = {}
        files_by_type: FilesByType = {}
        directories: List[str] = []
        file_count = 0

        for entry in self._walker.walk(root):
            if entry.is_dir:
                directories.append(entry.rel_path)
                if entry.rel_path in DRUPAL_CORE_DIRS:
                    flags["has_drupal_core"] = True
                if entry.rel_path in DRUPAL_MODULE_PARENTS:
                    flags["has_drupal_modules_dir"] = True
                continue

            file_count += 1
            name = entry.path.name
            extension = extension_of(name)
            if extension:
                files_by_type.setdefault(extension, []).append(entry.rel_path)

            flag = MANIFEST_FLAGS.get(name)
            if flag is not None:
                flags[flag] = True

            if extension == "module":
                flags["has_module_file"] = True

            if name.endswith(".info.yml") and "/" not in entry.rel_path:
                flags["has_info_yml"] = True
                if not flags.get("has_info_sentinel"):
                    text = read_text(entry.path, MAX_MARKER_BYTES)
                    if text is not None and info_has_sentinel(text):
                        flags["has_info_sentinel"] = True

            if extension in PHP_EXTENSIONS and not flags.get("has_drupal_signature"):
                text = read_text(entry.path, MAX_SIGNATURE_BYTES)
                if text is not None and has_drupal_signature(text):
                    logger.debug("Drupal signature found in %s", entry.rel_path)
                    flags["has_drupal_signature"] = True

        features = ProjectFeatures(
            **flags,
            file_count=file_count,
            directory_count=len(directories),
        )
        logger.debug(
            "Scanned %s: %d files, %d directories", root, file_count, len(directories)
        )
        return FeatureScan(features=features, files_by_type=files_by_type, directories=directories)


def files_with_extensions(files_by_type: FilesByType, extensions: Iterable[str]) -> List[str]:
    result: List[str] = []
    for extension in extensions:
        result.extend(files_by_type.get(extension, []))
    return result


def count_with_extensions(files_by_type: FilesByType, extensions: Iterable[str]) -> int:
    return sum(len(files_by_type.get(extension, [])) for extension in extensions)


def first_root_file(root: Path, suffix: str) -> Optional[Path]:
    """Return the first file directly under root whose name ends with suffix."""
    try:
        candidates = sorted(path for path in root.iterdir() if path.name.endswith(suffix))
    except OSError:
        return None
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


__all__ = [
    "DRUPAL_CORE_DIRS",
    "DRUPAL_MODULE_PARENTS",
    "FeatureScan",
    "FeatureScanner",
    "MANIFEST_FLAGS",
    "PHP_EXTENSIONS",
    "SITE_LAYOUTS",
    "count_with_extensions",
    "files_with_extensions",
    "first_root_file",
    "info_has_sentinel",
]
