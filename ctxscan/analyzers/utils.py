"""Shared helper utilities for project info gatherers."""

from __future__ import annotations

import json
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set, Tuple

import yaml

from ..logging import get_logger
from ..parsers.common import split_lines

logger = get_logger("analyzers")

MAX_SOURCE_BYTES = 1024 * 1024

DEPENDENCY_SECTIONS = (
    "dependencies",
    "devDependencies",
    "peerDependencies",
    "require",
    "require-dev",
)


def read_text(path: Path, max_bytes: Optional[int] = MAX_SOURCE_BYTES) -> Optional[str]:
    """Return the UTF-8 text of a file, or None when missing, too large or undecodable."""
    try:
        if max_bytes is not None and path.stat().st_size > max_bytes:
            logger.debug("Skipping large file %s", path)
            return None
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        logger.debug("Skipping unreadable file %s", path)
        return None


def iter_texts(root: Path, rel_paths: Iterable[str]) -> Iterator[Tuple[str, str]]:
    for rel_path in rel_paths:
        text = read_text(root / rel_path)
        if text is not None:
            yield rel_path, text


# Manifests. A missing manifest reads as an empty mapping; one that fails to
# parse keeps whatever quoted top-level pairs a line scan can recover.

_TOML_SECTION = re.compile(r"^\[([^\[\]]+)\]\s*(?:#.*)?$")
_TOML_PAIR = re.compile(r'^([A-Za-z0-9_-]+)\s*=\s*"([^"]*)"')
_JSON_PAIR = re.compile(r'^"([^"]+)"\s*:\s*"([^"]*)"')
_YAML_PAIR = re.compile(r"^([A-Za-z0-9_-]+):\s*([^\s\[{].*?)\s*$")


def scan_toml_pairs(text: str) -> Dict[str, Any]:
    """Collect ``key = "value"`` lines, nested under their ``[section]``."""
    data: Dict[str, Any] = {}
    current = data
    for raw in split_lines(text):
        line = raw.strip()
        section = _TOML_SECTION.match(line)
        if section:
            current = data
            for part in section.group(1).split("."):
                child = current.get(part.strip())
                if not isinstance(child, dict):
                    child = current[part.strip()] = {}
                current = child
            continue
        pair = _TOML_PAIR.match(line)
        if pair:
            current.setdefault(pair.group(1), pair.group(2))
    return data


def scan_json_pairs(text: str) -> Dict[str, Any]:
    """Collect ``"key": "value"`` lines sitting directly in the outer object."""
    data: Dict[str, Any] = {}
    depth = 0
    for raw in split_lines(text):
        line = raw.strip()
        pair = _JSON_PAIR.match(line)
        if pair and depth == 1:
            data.setdefault(pair.group(1), pair.group(2))
        depth += line.count("{") - line.count("}")
    return data


def scan_yaml_pairs(text: str) -> Dict[str, Any]:
    """Collect unindented ``key: value`` lines, unquoting the value."""
    data: Dict[str, Any] = {}
    for line in split_lines(text):
        pair = _YAML_PAIR.match(line)
        if pair:
            data.setdefault(pair.group(1), pair.group(2).strip("'\""))
    return data


def load_toml(path: Optional[Path]) -> Dict[str, Any]:
    text = read_text(path) if path is not None else None
    if text is None:
        return {}
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError:
        logger.debug("Invalid TOML in %s, scanning lines instead", path)
        return scan_toml_pairs(text)


def load_json(path: Optional[Path]) -> Dict[str, Any]:
    text = read_text(path) if path is not None else None
    if text is None:
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        logger.debug("Invalid JSON in %s, scanning lines instead", path)
        return scan_json_pairs(text)
    return data if isinstance(data, dict) else {}


def load_yaml(path: Optional[Path]) -> Dict[str, Any]:
    text = read_text(path) if path is not None else None
    if text is None:
        return {}
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError:
        logger.debug("Invalid YAML in %s, scanning lines instead", path)
        return scan_yaml_pairs(text)
    return data if isinstance(data, dict) else {}


def table(data: Dict[str, Any], *keys: str) -> Dict[str, Any]:
    """Descend into nested mappings, yielding an empty mapping on any miss."""
    current: Any = data
    for key in keys:
        current = current.get(key) if isinstance(current, dict) else None
    return current if isinstance(current, dict) else {}


def string_value(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value if isinstance(value, str) and value else None


def declared_packages(manifest: Dict[str, Any]) -> Set[str]:
    """Package names from the dependency sections of package.json or composer.json."""
    packages: Set[str] = set()
    for section in DEPENDENCY_SECTIONS:
        packages.update(table(manifest, section))
    return packages


# requirements.txt / setup.py


def requirement_names(text: str) -> List[str]:
    packages: List[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(("#", "-")):
            continue
        name = re.split(r"[<>=!~;\[\s]", stripped, maxsplit=1)[0].strip()
        if name:
            packages.append(name)
    return packages


def python_call_kwarg(text: str, key: str) -> Optional[str]:
    """Return ``key="value"`` from a setup() call."""
    match = re.search(rf"\b{re.escape(key)}\s*=\s*['\"]([^'\"]+)['\"]", text)
    return match.group(1) if match else None


__all__ = [
    "MAX_SOURCE_BYTES",
    "declared_packages",
    "iter_texts",
    "load_json",
    "load_toml",
    "load_yaml",
    "python_call_kwarg",
    "read_text",
    "requirement_names",
    "scan_json_pairs",
    "scan_toml_pairs",
    "scan_yaml_pairs",
    "string_value",
    "table",
]
