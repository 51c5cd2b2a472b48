"""Structural extraction for PHP with awareness of Drupal conventions.

Besides plain classes and functions, Drupal code is tagged with framework
metadata: classes become plugins (by annotation, base class or ``\\Plugin\\``
namespace) or services, and procedural functions become hook implementations
when their name or docblock says so.
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

from ..models import CodeElement, ElementKind, ElementMetadata, FileStructure
from .common import DocBuffer, leading_identifier, split_lines, strip_prefixes

DRUPAL_EXTENSIONS = frozenset({"module", "install", "theme", "profile", "inc"})

PLUGIN_ANNOTATIONS = frozenset(
    {
        "Action",
        "Block",
        "CKEditor5Plugin",
        "Condition",
        "ConfigEntityType",
        "Constraint",
        "ContentEntityType",
        "DataType",
        "EntityType",
        "FieldFormatter",
        "FieldType",
        "FieldWidget",
        "Filter",
        "ImageEffect",
        "Mail",
        "MigrateDestination",
        "MigrateProcessPlugin",
        "MigrateSource",
        "QueueWorker",
        "RestResource",
        "ViewsArgument",
        "ViewsField",
        "ViewsFilter",
        "ViewsRow",
        "ViewsStyle",
    }
)

PLUGIN_BASE_CLASSES = frozenset(
    {
        "ActionBase",
        "BlockBase",
        "ConditionPluginBase",
        "ConfigurableActionBase",
        "DestinationBase",
        "FieldItemBase",
        "FieldPluginBase",
        "FilterBase",
        "FormatterBase",
        "ImageEffectBase",
        "PluginBase",
        "ProcessPluginBase",
        "QueueWorkerBase",
        "ResourceBase",
        "SourcePluginBase",
        "StylePluginBase",
        "WidgetBase",
    }
)

_DRUPAL_CONTENT_MARKERS = (
    "namespace drupal\\",
    "use drupal\\",
    "\\drupal::",
    "drupal::service(",
    "@implements hook_",
    "implements hook_",
    "\\plugin\\",
)
_DRUPAL_PATH_MARKERS = ("modules/custom/", "modules/contrib/", "core/modules/", "profiles/")
_HOOK_FUNCTION = re.compile(r"function\s+\w+_hook_\w+\s*\(")
_ANNOTATION_NAME = re.compile(r"^(?:@|#\[)\\?(?:[\w\\]*\\)?(\w+)")
_IMPLEMENTS_TEXT = re.compile(r"^Implements\s+(hook_\w+)", re.IGNORECASE)
_EXTENDS = re.compile(r"\bextends\s+\\?([\w\\]+)")
_IMPLEMENTS = re.compile(r"\bimplements\s+([\w\\,\s]+)")
_SERVICE_WORD = re.compile(r"\bservice\b", re.IGNORECASE)

_CLASS_MODIFIERS = ("abstract ", "final ", "readonly ")
_MEMBER_MODIFIERS = (
    "public ",
    "protected ",
    "private ",
    "static ",
    "abstract ",
    "final ",
)

INHERITANCE_LOOKAHEAD = 5


def has_drupal_signature(content: str) -> bool:
    """Return True when PHP content carries a Drupal textual signature."""
    lowered = content.lower()
    if any(marker in lowered for marker in _DRUPAL_CONTENT_MARKERS):
        return True
    if _HOOK_FUNCTION.search(content):
        return True
    for line in split_lines(content):
        stripped = line.strip().lstrip("*").strip()
        match = _ANNOTATION_NAME.match(stripped)
        if match and match.group(1) in PLUGIN_ANNOTATIONS:
            return True
    return False


def is_drupal_file(path: str, content: str) -> bool:
    """Return True when a PHP-family file looks like part of a Drupal module."""
    normalised = path.replace("\\", "/").lower()
    extension = normalised.rsplit(".", 1)[-1] if "." in normalised else ""
    if extension in DRUPAL_EXTENSIONS:
        return True
    if any(marker in f"/{normalised}" for marker in _DRUPAL_PATH_MARKERS):
        return True
    return has_drupal_signature(content)


def canonical_hook_name(value: str) -> Optional[str]:
    """Normalise ``hook_foo()``, ``foo`` or ``hook_foo.`` to ``hook_foo``."""
    name = value.strip().split()[0] if value.strip() else ""
    name = name.rstrip(".;,").removesuffix("()")
    if not name or not re.fullmatch(r"\w+", name):
        return None
    return name if name.startswith("hook_") else f"hook_{name}"


def hook_from_function_name(name: str) -> Optional[str]:
    """Resolve ``prefix_hook_suffix`` to ``hook_suffix``."""
    if "_hook_" not in name:
        return None
    suffix = name.split("_hook_", 1)[1]
    return f"hook_{suffix}" if suffix else None


def hook_from_annotations(
    annotations: Sequence[str], description: Optional[str]
) -> Optional[str]:
    for annotation in annotations:
        if annotation.lower().startswith("@implements"):
            hook = canonical_hook_name(annotation[len("@implements") :])
            if hook:
                return hook
    if description:
        match = _IMPLEMENTS_TEXT.match(description)
        if match:
            return canonical_hook_name(match.group(1))
    return None


def analyze_php(content: str, path: str = "") -> FileStructure:
    lines = split_lines(content)
    is_drupal = is_drupal_file(path, content)
    elements: List[CodeElement] = []
    docs = DocBuffer()
    attributes: List[str] = []
    namespace: Optional[str] = None
    depth = 0
    class_depth: Optional[int] = None
    in_attribute = False

    for index, raw in enumerate(lines):
        line = raw.strip()
        line_no = index + 1

        if in_attribute:
            in_attribute = not line.endswith("]")
            continue
        if line.startswith(("/**", "/*", "*")):
            docs.add(line.lstrip("/*").rstrip("*/").strip())
            continue
        if line.startswith("#["):
            attributes.append(line)
            in_attribute = not line.endswith("]")
            continue
        if line.startswith(("//", "#")):
            docs.add(line.lstrip("/#"))
            continue

        opening = depth
        depth += line.count("{") - line.count("}")
        if class_depth is not None and depth <= class_depth and "}" in line:
            class_depth = None

        element: Optional[CodeElement] = None
        if line.startswith("namespace "):
            name = line[len("namespace ") :].rstrip(";{ ").strip()
            if name:
                namespace = name
                element = CodeElement(name=name, kind=ElementKind.MODULE, line=line_no)
        else:
            decl = strip_prefixes(line, _CLASS_MODIFIERS)
            if decl.startswith(("class ", "interface ", "trait ")):
                keyword, rest = decl.split(" ", 1)
                name = leading_identifier(rest)
                if name:
                    description, annotations = docs.take()
                    annotations = annotations + tuple(attributes)
                    if keyword == "class":
                        element = _class_element(
                            name, lines, index, line_no, description, annotations, namespace
                        )
                    else:
                        kind = ElementKind.INTERFACE if keyword == "interface" else ElementKind.TRAIT
                        element = CodeElement(
                            name=name,
                            kind=kind,
                            line=line_no,
                            description=description,
                            metadata=_namespace_metadata(namespace, annotations),
                        )
                    # A body opened and closed on the declaration line leaves no scope.
                    closed_inline = "{" in line and depth <= opening
                    class_depth = None if closed_inline else opening
            else:
                member = strip_prefixes(line, _MEMBER_MODIFIERS)
                if member.startswith("function "):
                    rest = member[len("function ") :].lstrip("&")
                    name = leading_identifier(rest)
                    if name and "(" in rest:
                        description, annotations = docs.take()
                        annotations = annotations + tuple(attributes)
                        is_member = member != line or class_depth is not None
                        element = _function_element(
                            name,
                            line_no,
                            description,
                            annotations,
                            namespace,
                            is_member=is_member,
                            is_drupal=is_drupal,
                        )

        if element is not None:
            elements.append(element)
        docs.clear()
        attributes.clear()

    return FileStructure(elements=elements, is_drupal=is_drupal, language="php")


def _class_element(
    name: str,
    lines: Sequence[str],
    index: int,
    line_no: int,
    description: Optional[str],
    annotations: Tuple[str, ...],
    namespace: Optional[str],
) -> CodeElement:
    window = " ".join(
        line.strip() for line in lines[index : index + INHERITANCE_LOOKAHEAD]
    )
    window = window.split("{", 1)[0]
    plugin_type = _plugin_type(annotations, window, namespace)
    if plugin_type is not None:
        return CodeElement(
            name=name,
            kind=ElementKind.PLUGIN,
            line=line_no,
            description=description,
            metadata=ElementMetadata(
                is_plugin=True,
                plugin_type=plugin_type or None,
                annotations=annotations,
                namespace=namespace,
            ),
        )

    service_tags = _service_tags(annotations, description, window)
    if service_tags is not None:
        return CodeElement(
            name=name,
            kind=ElementKind.SERVICE,
            line=line_no,
            description=description,
            metadata=ElementMetadata(
                is_service=True,
                service_tags=service_tags,
                annotations=annotations,
                namespace=namespace,
            ),
        )

    return CodeElement(
        name=name,
        kind=ElementKind.CLASS,
        line=line_no,
        description=description,
        metadata=_namespace_metadata(namespace, annotations),
    )


def _plugin_type(
    annotations: Sequence[str], window: str, namespace: Optional[str]
) -> Optional[str]:
    """Return the plugin type, an empty string for an untyped plugin, or None."""
    for annotation in annotations:
        match = _ANNOTATION_NAME.match(annotation)
        if match and match.group(1) in PLUGIN_ANNOTATIONS:
            return match.group(1)

    namespace_type = None
    if namespace and "\\Plugin\\" in f"{namespace}\\":
        namespace_type = f"{namespace}\\".split("\\Plugin\\", 1)[1].strip("\\")

    extends = _EXTENDS.search(window)
    if extends:
        base = extends.group(1).rsplit("\\", 1)[-1]
        if base in PLUGIN_BASE_CLASSES or base.endswith("PluginBase"):
            derived = base.removesuffix("PluginBase").removesuffix("Base")
            return derived or namespace_type or ""

    return namespace_type


def _service_tags(
    annotations: Sequence[str], description: Optional[str], window: str
) -> Optional[Tuple[str, ...]]:
    tags: List[str] = []
    marked = False
    for annotation in annotations:
        if annotation.lower().startswith("@service"):
            marked = True
            value = annotation[len("@service") :].strip()
            if value:
                tags.append(value)
    implements = _IMPLEMENTS.search(window)
    if implements and "EventSubscriberInterface" in implements.group(1):
        marked = True
        tags.append("event_subscriber")
    if description and _SERVICE_WORD.search(description):
        marked = True
    return tuple(tags) if marked else None


def _function_element(
    name: str,
    line_no: int,
    description: Optional[str],
    annotations: Tuple[str, ...],
    namespace: Optional[str],
    *,
    is_member: bool,
    is_drupal: bool,
) -> CodeElement:
    if is_member:
        return CodeElement(
            name=name,
            kind=ElementKind.METHOD,
            line=line_no,
            description=description,
            metadata=_namespace_metadata(namespace, annotations),
        )

    hook = hook_from_annotations(annotations, description) or hook_from_function_name(name)
    if hook is not None:
        return CodeElement(
            name=name,
            kind=ElementKind.HOOK,
            line=line_no,
            description=description,
            metadata=ElementMetadata(
                is_hook=True,
                hook_name=hook,
                annotations=annotations,
                namespace=namespace,
            ),
        )

    metadata = None
    if is_drupal or namespace or annotations:
        metadata = ElementMetadata(annotations=annotations, namespace=namespace)
    return CodeElement(
        name=name,
        kind=ElementKind.FUNCTION,
        line=line_no,
        description=description,
        metadata=metadata,
    )


def _namespace_metadata(
    namespace: Optional[str], annotations: Tuple[str, ...]
) -> Optional[ElementMetadata]:
    if namespace is None and not annotations:
        return None
    return ElementMetadata(annotations=annotations, namespace=namespace)


__all__ = [
    "DRUPAL_EXTENSIONS",
    "PLUGIN_ANNOTATIONS",
    "PLUGIN_BASE_CLASSES",
    "analyze_php",
    "canonical_hook_name",
    "has_drupal_signature",
    "hook_from_annotations",
    "hook_from_function_name",
    "is_drupal_file",
]
