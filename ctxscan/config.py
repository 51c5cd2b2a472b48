"""Configuration loading for ctxscan (.ctxscan.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".ctxscan.yml"

DEFAULT_MAX_DEPTH = 10
DEFAULT_MAX_FILE_SIZE = 1024 * 1024
DEFAULT_MAX_FILES = 3
DEFAULT_PREVIEW_CHARS = 500


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ScanConfig:
    """Tree walk settings shared by the feature scanner and search engine."""

    max_depth: int = DEFAULT_MAX_DEPTH
    ignore_dirs: List[str] = field(default_factory=list)
    exclude_paths: List[str] = field(default_factory=list)


@dataclass
class SearchConfig:
    """Relevance search settings."""

    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    respect_gitignore: bool = True


@dataclass
class ContextConfig:
    """How much of the ranked output is forwarded as context."""

    max_files: int = DEFAULT_MAX_FILES
    preview_chars: int = DEFAULT_PREVIEW_CHARS
    include_structure: bool = True


@dataclass
class CtxScanConfig:
    """Represents the high-level settings defined in .ctxscan.yml."""

    root: Path
    scan: ScanConfig = field(default_factory=ScanConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    context: ContextConfig = field(default_factory=ContextConfig)


def load_config(config_path: Path) -> CtxScanConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return CtxScanConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    scan = ScanConfig()
    scan_data = _as_dict(data.get("scan"))
    if scan_data:
        scan.max_depth = _as_positive_int(scan_data.get("max_depth")) or DEFAULT_MAX_DEPTH
        scan.ignore_dirs = _as_str_list(scan_data.get("ignore_dirs"))
        scan.exclude_paths = _as_str_list(scan_data.get("exclude_paths"))

    search = SearchConfig()
    search_data = _as_dict(data.get("search"))
    if search_data:
        search.max_file_size = (
            _as_positive_int(search_data.get("max_file_size")) or DEFAULT_MAX_FILE_SIZE
        )
        respect = _as_bool(search_data.get("respect_gitignore"))
        if respect is not None:
            search.respect_gitignore = respect

    context = ContextConfig()
    context_data = _as_dict(data.get("context"))
    if context_data:
        context.max_files = _as_positive_int(context_data.get("max_files")) or DEFAULT_MAX_FILES
        context.preview_chars = (
            _as_positive_int(context_data.get("preview_chars")) or DEFAULT_PREVIEW_CHARS
        )
        include = _as_bool(context_data.get("include_structure"))
        if include is not None:
            context.include_structure = include

    return CtxScanConfig(root=root, scan=scan, search=search, context=context)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_positive_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str):
        try:
            parsed = int(value)
        except ValueError:
            return None
        return parsed if parsed > 0 else None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ContextConfig",
    "CtxScanConfig",
    "ScanConfig",
    "SearchConfig",
    "load_config",
]
