"""Assembles the context payload forwarded to a language model."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from jinja2 import Environment, FileSystemLoader

from .config import CtxScanConfig, load_config
from .logging import get_logger
from .models import CodeElement, ProjectStructure
from .parsers import extract_structure
from .project_analyzer import ProjectAnalyzer
from .search import CodeSearch
from .walker import resolve_root

logger = get_logger("context")

TRUNCATION_MARKER = "... (truncated)"
MIN_KEYWORD_LENGTH = 4


def extract_keywords(query: str) -> List[str]:
    """Split a query on whitespace and keep lowercased words longer than three characters."""
    return [word.lower() for word in query.split() if len(word) >= MIN_KEYWORD_LENGTH]


def preview_text(content: str, limit: int) -> str:
    if len(content) > limit:
        return f"{content[:limit]}{TRUNCATION_MARKER}"
    return content


def _format_value(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, dict):
        return "; ".join(f"{key}: {item}" for key, item in value.items()) or None
    if isinstance(value, (list, tuple)):
        items = [
            item.name if is_dataclass(item) and hasattr(item, "name") else str(item)
            for item in value
        ]
        return ", ".join(items) or None
    text = str(value)
    return text or None


def describe_project(structure: ProjectStructure) -> Dict[str, Any]:
    """Flatten a ProjectStructure into template-friendly values."""
    details: List[Tuple[str, str]] = []
    if structure.info is not None:
        for info_field in fields(structure.info):
            formatted = _format_value(getattr(structure.info, info_field.name))
            if formatted is not None:
                details.append((info_field.name.replace("_", " ").capitalize(), formatted))

    extensions = sorted(
        ((extension, len(paths)) for extension, paths in structure.files_by_type.items()),
        key=lambda item: (-item[1], item[0]),
    )
    return {
        "type": structure.project_type.value,
        "file_count": structure.features.file_count,
        "directory_count": structure.features.directory_count,
        "extensions": extensions,
        "details": details,
        "modules": structure.drupal_modules,
    }


@dataclass
class ContextFile:
    path: str
    preview: str
    elements: List[CodeElement] = field(default_factory=list)


def _create_env(templates_dir: Optional[Path]) -> Environment:
    directories: List[str] = []
    if templates_dir:
        directories.append(str(templates_dir))
    default_dir = str(Path(__file__).with_name("templates"))
    if default_dir not in directories:
        directories.append(default_dir)
    return Environment(
        loader=FileSystemLoader(directories),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_project_description(
    structure: ProjectStructure, templates_dir: Optional[Path] = None
) -> str:
    template = _create_env(templates_dir).get_template("project.j2")
    return template.render(project=describe_project(structure)).strip() + "\n"


class ContextBuilder:
    """Combines project classification and relevance search into one text payload."""

    def __init__(
        self,
        config: Optional[CtxScanConfig] = None,
        *,
        analyzer: Optional[ProjectAnalyzer] = None,
        search: Optional[CodeSearch] = None,
        templates_dir: Optional[Path] = None,
    ) -> None:
        self._config = config
        self._analyzer = analyzer
        self._search = search
        self._env = _create_env(templates_dir)

    def collect_files(self, root: Path, keywords: List[str], config: CtxScanConfig) -> List[ContextFile]:
        search = self._search or CodeSearch(config)
        collected: List[ContextFile] = []
        for path in search.find_relevant_files(root, keywords)[: config.context.max_files]:
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                logger.debug("Skipping unreadable context file %s", path)
                continue
            rel_path = path.relative_to(root).as_posix()
            elements: List[CodeElement] = []
            if config.context.include_structure:
                elements = extract_structure(rel_path, content).elements
            collected.append(
                ContextFile(
                    path=rel_path,
                    preview=preview_text(content, config.context.preview_chars),
                    elements=elements,
                )
            )
        return collected

    def gather_context(self, root: str | Path, query: str) -> str:
        """Render the working directory, project description and top-ranked files."""
        root_path = resolve_root(root)
        config = self._config or load_config(root_path)
        analyzer = self._analyzer or ProjectAnalyzer(config)

        keywords = extract_keywords(query)
        structure = analyzer.analyze_project_structure(root_path)
        files = self.collect_files(root_path, keywords, config)
        logger.debug("Context for %r uses %d files", query, len(files))

        template = self._env.get_template("context.j2")
        return template.render(
            working_directory=str(root_path),
            keywords=keywords,
            project=describe_project(structure),
            files=files,
        )


__all__ = [
    "ContextBuilder",
    "ContextFile",
    "describe_project",
    "extract_keywords",
    "preview_text",
    "render_project_description",
]
