"""Drupal module discovery, hook detection and module/site summaries."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

from ..logging import get_logger
from ..models import DrupalModuleInfo, DrupalModuleRef, DrupalSiteInfo, ProjectInfo, ProjectType
from ..parsers.php import canonical_hook_name, hook_from_function_name
from .base import GatherContext, InfoGatherer
from .features import DRUPAL_MODULE_PARENTS, PHP_EXTENSIONS, SITE_LAYOUTS
from .utils import declared_packages, iter_texts, load_json, load_yaml, read_text, string_value

logger = get_logger("drupal")

STRUCTURAL_DIRECTORIES: Dict[str, str] = {
    "Plugin": "Plugin implementations discovered by annotation or attribute",
    "Form": "Form classes for configuration and user input",
    "Entity": "Content and configuration entity types",
    "Controller": "Route controllers returning responses or render arrays",
    "EventSubscriber": "Subscribers reacting to Symfony and Drupal events",
    "Access": "Custom access checks for routes and entities",
    "Element": "Render and form element types",
}

PLUGIN_TYPE_DESCRIPTIONS: Dict[str, str] = {
    "Action": "Actions executable on entities",
    "Block": "Placeable blocks",
    "CKEditor5Plugin": "CKEditor 5 editor plugins",
    "Condition": "Reusable visibility conditions",
    "Derivative": "Derivers generating plugin variants",
    "EntityReferenceSelection": "Entity reference selection handlers",
    "Field": "Field types, widgets and formatters",
    "Filter": "Text format filters",
    "ImageEffect": "Image style effects",
    "Mail": "Mail backends",
    "QueueWorker": "Queue workers run on cron",
    "Validation": "Validation constraints",
    "migrate": "Migration source, process and destination plugins",
    "rest": "REST resources",
    "views": "Views handlers and display plugins",
}

# Hooks commonly implemented as ``<module>_<hook>`` without a docblock.
KNOWN_HOOKS = frozenset(
    {
        "cron",
        "entity_access",
        "entity_delete",
        "entity_insert",
        "entity_presave",
        "entity_update",
        "form_alter",
        "help",
        "install",
        "mail",
        "menu_links_discovered_alter",
        "page_attachments",
        "preprocess",
        "schema",
        "theme",
        "theme_suggestions_alter",
        "token_info",
        "tokens",
        "uninstall",
        "update_n",
        "views_data",
    }
)

_FUNCTION_NAME = re.compile(r"^\s*function\s+&?(\w+)\s*\(", re.MULTILINE)
_IMPLEMENTS_ANNOTATION = re.compile(r"@Implements\s+(\w+)", re.IGNORECASE)
_IMPLEMENTS_DOC = re.compile(r"\*\s*Implements\s+(hook_\w+)\(\)")
_HOOK_ATTRIBUTE = re.compile(r"#\[Hook\(\s*['\"](\w+)['\"]")
_CORE_VERSION = re.compile(r"const\s+VERSION\s*=\s*['\"]([^'\"]+)['\"]")
_MODULE_PATH_SEGMENT = re.compile(r"(?:^|/)(?:modules/(?:custom|contrib)|sites/all/modules)/[^/]+")


def is_site_root(directory: Path) -> bool:
    """A Drupal site root holds a core directory next to its composer.json."""
    has_core = any((directory / f"{layout}core").is_dir() for layout in SITE_LAYOUTS)
    return has_core and (directory / "composer.json").is_file()


def find_info_file(directory: Path) -> Optional[Path]:
    preferred = directory / f"{directory.name}.info.yml"
    if preferred.is_file():
        return preferred
    try:
        candidates = sorted(directory.glob("*.info.yml"))
    except OSError:
        return None
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def machine_name(directory: Path) -> str:
    info = find_info_file(directory)
    if info is not None:
        return info.name[: -len(".info.yml")]
    return directory.name


def is_drupal_module(directory: Path, rel_path: str) -> bool:
    """Return True when a directory independently qualifies as a Drupal module."""
    if is_site_root(directory):
        return False
    if _MODULE_PATH_SEGMENT.search(rel_path.strip("/")):
        return True

    info = find_info_file(directory)
    if info is None:
        return False
    stem = info.name[: -len(".info.yml")]
    if (directory / f"{stem}.module").is_file():
        return True
    if (directory / "src" / "Plugin").is_dir():
        return True
    return "drupal/core" in declared_packages(load_json(directory / "composer.json"))


def discover_modules(root: Path) -> List[DrupalModuleRef]:
    """Enumerate modules in the standard locations and the root itself."""
    found: List[DrupalModuleRef] = []
    seen: Set[DrupalModuleRef] = set()

    def _add(directory: Path, rel_path: str) -> None:
        if not is_drupal_module(directory, "" if rel_path == "." else rel_path):
            return
        ref = DrupalModuleRef(name=machine_name(directory), path=rel_path)
        if ref not in seen:
            seen.add(ref)
            found.append(ref)

    _add(root, ".")
    for parent in DRUPAL_MODULE_PARENTS:
        parent_dir = root / parent
        if not parent_dir.is_dir():
            continue
        try:
            children = sorted(child for child in parent_dir.iterdir() if child.is_dir())
        except OSError:
            logger.debug("Unreadable module directory %s", parent_dir)
            continue
        for child in children:
            if child.name.startswith("."):
                continue
            _add(child, f"{parent}/{child.name}")

    return sorted(found, key=lambda ref: ref.path)


def resolve_drupal_type(root: Path, modules: List[DrupalModuleRef]) -> ProjectType:
    if not modules:
        return ProjectType.DRUPAL_SITE
    if any(module.path == "." for module in modules):
        return ProjectType.DRUPAL_MODULE
    if is_site_root(root):
        return ProjectType.DRUPAL_SITE
    return ProjectType.DRUPAL_MODULE


def hooks_from_names(text: str, module_name: Optional[str] = None) -> List[str]:
    """Detect hooks through the function-naming convention."""
    hooks: List[str] = []
    for name in _FUNCTION_NAME.findall(text):
        hook = hook_from_function_name(name)
        if hook is None and module_name and name.startswith(f"{module_name}_"):
            remainder = name[len(module_name) + 1 :]
            if remainder in KNOWN_HOOKS:
                hook = f"hook_{remainder}"
        if hook is not None:
            hooks.append(hook)
    return hooks


def hooks_from_annotations(text: str) -> List[str]:
    """Detect hooks through ``@Implements``, docblocks and ``#[Hook]`` attributes."""
    hooks: List[str] = []
    for pattern in (_IMPLEMENTS_ANNOTATION, _IMPLEMENTS_DOC, _HOOK_ATTRIBUTE):
        for value in pattern.findall(text):
            hook = canonical_hook_name(value)
            if hook is not None:
                hooks.append(hook)
    return hooks


def merge_unique(*groups: Iterable[str]) -> List[str]:
    merged: List[str] = []
    seen: Set[str] = set()
    for group in groups:
        for item in group:
            if item not in seen:
                seen.add(item)
                merged.append(item)
    return merged


def collect_hooks(root: Path, rel_paths: Iterable[str], module_name: Optional[str] = None) -> List[str]:
    by_name: List[str] = []
    by_annotation: List[str] = []
    for _, text in iter_texts(root, rel_paths):
        by_name.extend(hooks_from_names(text, module_name))
        by_annotation.extend(hooks_from_annotations(text))
    return merge_unique(by_name, by_annotation)


def _module_files(context: GatherContext, prefix: str) -> List[str]:
    return [
        rel_path
        for rel_path in context.files(*sorted(PHP_EXTENSIONS))
        if rel_path.startswith(prefix)
    ]


def gather_module_info(context: GatherContext, module: DrupalModuleRef) -> DrupalModuleInfo:
    root = context.root
    module_dir = root if module.path == "." else root / module.path
    prefix = "" if module.path == "." else f"{module.path}/"
    name = module.name

    info = load_yaml(module_dir / f"{name}.info.yml")

    module_file = f"{prefix}{name}.module"
    if not (root / module_file).is_file():
        module_file = None

    schema_prefix = f"{prefix}config/schema/"
    config_schema_files = tuple(
        sorted(rel for rel in context.files("yml") if rel.startswith(schema_prefix))
    )

    directories: Dict[str, str] = {}
    for directory, purpose in STRUCTURAL_DIRECTORIES.items():
        if (module_dir / "src" / directory).is_dir():
            directories[f"src/{directory}"] = purpose

    plugin_types: Dict[str, str] = {}
    plugin_dir = module_dir / "src" / "Plugin"
    if plugin_dir.is_dir():
        try:
            children = sorted(child for child in plugin_dir.iterdir() if child.is_dir())
        except OSError:
            children = []
        for child in children:
            plugin_types[child.name] = PLUGIN_TYPE_DESCRIPTIONS.get(child.name, "Custom plugin type")

    hooks = collect_hooks(root, _module_files(context, prefix), name)

    return DrupalModuleInfo(
        machine_name=name,
        name=string_value(info, "name"),
        description=string_value(info, "description"),
        module_file=module_file,
        config_schema_files=config_schema_files,
        has_plugins=plugin_dir.is_dir(),
        has_services=(module_dir / f"{name}.services.yml").is_file(),
        hooks=tuple(hooks),
        directories=directories,
        plugin_types=plugin_types,
    )


def read_core_version(root: Path) -> Optional[str]:
    for layout in SITE_LAYOUTS:
        text = read_text(root / f"{layout}core" / "lib" / "Drupal.php")
        if text is None:
            continue
        match = _CORE_VERSION.search(text)
        if match:
            return match.group(1)
    return None


class DrupalModuleGatherer(InfoGatherer):
    project_types = (ProjectType.DRUPAL_MODULE,)

    def gather(self, context: GatherContext) -> Optional[ProjectInfo]:
        if not context.modules:
            return None
        primary = next(
            (module for module in context.modules if module.path == "."),
            context.modules[0],
        )
        return gather_module_info(context, primary)


class DrupalSiteGatherer(InfoGatherer):
    project_types = (ProjectType.DRUPAL_SITE,)

    def gather(self, context: GatherContext) -> Optional[ProjectInfo]:
        modules = tuple(context.modules)
        return DrupalSiteInfo(
            core_version=read_core_version(context.root),
            modules=modules,
            custom_module_count=sum(1 for module in modules if "/custom/" in f"/{module.path}"),
            contrib_module_count=sum(1 for module in modules if "/contrib/" in f"/{module.path}"),
        )


__all__ = [
    "DrupalModuleGatherer",
    "DrupalSiteGatherer",
    "KNOWN_HOOKS",
    "PLUGIN_TYPE_DESCRIPTIONS",
    "STRUCTURAL_DIRECTORIES",
    "collect_hooks",
    "discover_modules",
    "gather_module_info",
    "hooks_from_annotations",
    "hooks_from_names",
    "is_drupal_module",
    "is_site_root",
    "merge_unique",
    "resolve_drupal_type",
]
