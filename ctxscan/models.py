"""Core data models shared across ctxscan components."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union


class ElementKind(str, Enum):
    """Tag set for structural elements found by the extractor."""

    MODULE = "module"
    STRUCT = "struct"
    ENUM = "enum"
    TRAIT = "trait"
    CLASS = "class"
    INTERFACE = "interface"
    FUNCTION = "function"
    METHOD = "method"
    PLUGIN = "plugin"
    SERVICE = "service"
    HOOK = "hook"
    COMPONENT = "component"


@dataclass(frozen=True)
class ElementMetadata:
    """Framework-specific annotations attached to a code element."""

    is_plugin: bool = False
    plugin_type: Optional[str] = None
    is_service: bool = False
    service_tags: Tuple[str, ...] = ()
    is_hook: bool = False
    hook_name: Optional[str] = None
    annotations: Tuple[str, ...] = ()
    namespace: Optional[str] = None


@dataclass(frozen=True)
class CodeElement:
    """One named declaration discovered in a file."""

    name: str
    kind: ElementKind
    line: int
    description: Optional[str] = None
    metadata: Optional[ElementMetadata] = None


@dataclass
class FileStructure:
    """Ordered inventory of code elements for a single file."""

    elements: List[CodeElement] = field(default_factory=list)
    is_drupal: bool = False
    language: Optional[str] = None

    def of_kind(self, kind: ElementKind) -> List[CodeElement]:
        return [element for element in self.elements if element.kind == kind]

    def names(self) -> List[str]:
        return [element.name for element in self.elements]


class ProjectType(str, Enum):
    """Closed set of ecosystems a project root can be classified as."""

    DRUPAL_MODULE = "drupal_module"
    DRUPAL_SITE = "drupal_site"
    RUST = "rust"
    PYTHON = "python"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    GO = "go"
    PHP = "php"
    ANGULAR = "angular"
    REACT = "react"
    GENERIC = "generic"

    @property
    def is_drupal(self) -> bool:
        return self in (ProjectType.DRUPAL_MODULE, ProjectType.DRUPAL_SITE)


@dataclass(frozen=True)
class ProjectFeatures:
    """Feature vector gathered during a single walk of the project tree."""

    has_cargo_toml: bool = False
    has_package_json: bool = False
    has_angular_json: bool = False
    has_tsconfig: bool = False
    has_pyproject: bool = False
    has_requirements_txt: bool = False
    has_setup_py: bool = False
    has_go_mod: bool = False
    has_composer_json: bool = False
    has_info_yml: bool = False
    has_info_sentinel: bool = False
    has_module_file: bool = False
    has_drupal_core: bool = False
    has_drupal_modules_dir: bool = False
    has_drupal_signature: bool = False
    file_count: int = 0
    directory_count: int = 0


FilesByType = Dict[str, List[str]]


@dataclass(frozen=True)
class DrupalModuleRef:
    """A discovered Drupal module: machine name and root-relative path."""

    name: str
    path: str


@dataclass(frozen=True)
class RustInfo:
    project_type: ClassVar[ProjectType] = ProjectType.RUST

    name: Optional[str] = None
    version: Optional[str] = None
    edition: Optional[str] = None
    dependencies: Tuple[str, ...] = ()
    module_count: int = 0
    struct_count: int = 0
    function_count: int = 0


@dataclass(frozen=True)
class PythonInfo:
    project_type: ClassVar[ProjectType] = ProjectType.PYTHON

    name: Optional[str] = None
    version: Optional[str] = None
    dependencies: Tuple[str, ...] = ()
    class_count: int = 0
    function_count: int = 0
    uses_django: bool = False
    uses_flask: bool = False
    uses_fastapi: bool = False


@dataclass(frozen=True)
class JavaScriptInfo:
    project_type: ClassVar[ProjectType] = ProjectType.JAVASCRIPT

    name: Optional[str] = None
    version: Optional[str] = None
    file_count: int = 0
    uses_node_server: bool = False


@dataclass(frozen=True)
class TypeScriptInfo(JavaScriptInfo):
    project_type: ClassVar[ProjectType] = ProjectType.TYPESCRIPT

    has_tsconfig: bool = False


@dataclass(frozen=True)
class AngularInfo:
    project_type: ClassVar[ProjectType] = ProjectType.ANGULAR

    name: Optional[str] = None
    version: Optional[str] = None
    component_count: int = 0
    service_count: int = 0
    module_count: int = 0
    uses_ngrx: bool = False


@dataclass(frozen=True)
class ReactInfo:
    project_type: ClassVar[ProjectType] = ProjectType.REACT

    name: Optional[str] = None
    version: Optional[str] = None
    component_count: int = 0
    hook_count: int = 0
    uses_redux: bool = False
    uses_typescript: bool = False


@dataclass(frozen=True)
class GoInfo:
    project_type: ClassVar[ProjectType] = ProjectType.GO

    module_path: Optional[str] = None
    go_version: Optional[str] = None
    package_count: int = 0
    struct_count: int = 0
    function_count: int = 0


@dataclass(frozen=True)
class PhpInfo:
    project_type: ClassVar[ProjectType] = ProjectType.PHP

    name: Optional[str] = None
    class_count: int = 0
    function_count: int = 0
    namespaces: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DrupalModuleInfo:
    project_type: ClassVar[ProjectType] = ProjectType.DRUPAL_MODULE

    machine_name: str = ""
    name: Optional[str] = None
    description: Optional[str] = None
    module_file: Optional[str] = None
    config_schema_files: Tuple[str, ...] = ()
    has_plugins: bool = False
    has_services: bool = False
    hooks: Tuple[str, ...] = ()
    directories: Dict[str, str] = field(default_factory=dict)
    plugin_types: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DrupalSiteInfo:
    project_type: ClassVar[ProjectType] = ProjectType.DRUPAL_SITE

    core_version: Optional[str] = None
    modules: Tuple[DrupalModuleRef, ...] = ()
    custom_module_count: int = 0
    contrib_module_count: int = 0


ProjectInfo = Union[
    RustInfo,
    PythonInfo,
    JavaScriptInfo,
    TypeScriptInfo,
    AngularInfo,
    ReactInfo,
    GoInfo,
    PhpInfo,
    DrupalModuleInfo,
    DrupalSiteInfo,
]


@dataclass(frozen=True)
class ProjectStructure:
    """Aggregate classification result for one project root."""

    root: str
    directories: List[str]
    files_by_type: FilesByType
    project_type: ProjectType
    features: ProjectFeatures
    info: Optional[ProjectInfo] = None
    drupal_modules: List[DrupalModuleRef] = field(default_factory=list)


@dataclass(frozen=True)
class SearchResult:
    """A single line matched by a grep-style search."""

    file_path: Path
    line_number: int
    line_content: str


@dataclass(frozen=True)
class RankedFile:
    """A file paired with its relevance score."""

    path: Path
    score: int


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return value.as_posix()
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


def structure_as_dict(structure: ProjectStructure) -> Dict[str, Any]:
    """Return a JSON-serialisable view of a classification result."""
    payload = _jsonable(asdict(structure))
    if structure.info is not None:
        payload["info"]["project_type"] = structure.info.project_type.value
    return payload


__all__ = [
    "CodeElement",
    "DrupalModuleInfo",
    "DrupalModuleRef",
    "DrupalSiteInfo",
    "ElementKind",
    "ElementMetadata",
    "FileStructure",
    "FilesByType",
    "GoInfo",
    "JavaScriptInfo",
    "PhpInfo",
    "ProjectFeatures",
    "ProjectInfo",
    "ProjectStructure",
    "ProjectType",
    "PythonInfo",
    "RankedFile",
    "ReactInfo",
    "RustInfo",
    "SearchResult",
    "TypeScriptInfo",
    "AngularInfo",
    "structure_as_dict",
]
