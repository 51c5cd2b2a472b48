"""Directory walking with ignore rules shared by the scanner and search engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

from .logging import get_logger

logger = get_logger("walker")

IGNORED_DIRS = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        "node_modules",
        "vendor",
        "target",
        "build",
        "dist",
        "venv",
        "__pycache__",
        ".idea",
        ".vscode",
    }
)

# Compiled or object artifacts that never carry structure.
NOISE_EXTENSIONS = frozenset({"pyc", "exe", "dll", "so", "o", "obj", "class"})

BINARY_EXTENSIONS = frozenset(
    {
        "exe",
        "dll",
        "obj",
        "bin",
        "so",
        "dylib",
        "a",
        "o",
        "class",
        "pyc",
        "pyd",
        "jpg",
        "jpeg",
        "png",
        "gif",
        "bmp",
        "ico",
        "svg",
        "pdf",
        "zip",
        "tar",
        "gz",
        "tgz",
        "rar",
        "7z",
        "jar",
        "war",
    }
)


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or .ctxscan.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        target = rel_path
        if self.anchored or self.has_slash:
            if fnmatchcase(target, self.pattern):
                return True
            if self.directory_only and target.startswith(f"{self.pattern}/"):
                return True
            return False

        for part in target.split("/"):
            if fnmatchcase(part, self.pattern):
                return True
        return False


def build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    has_slash = "/" in pattern
    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash=has_slash,
    )


def parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.is_file():
        return []

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        logger.debug("Unreadable ignore file %s", path)
        return []

    rules: List[IgnoreRule] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def rules_from_patterns(patterns: Iterable[str]) -> List[IgnoreRule]:
    rules: List[IgnoreRule] = []
    for pattern in patterns:
        rule = build_ignore_rule(pattern)
        if rule is not None:
            rules.append(rule)
    return rules


def should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def extension_of(name: str) -> str:
    """Return the final extension without the dot, or an empty string."""
    suffix = Path(name).suffix
    return suffix[1:] if suffix else ""


def is_ignored_dir_name(name: str, extra: Iterable[str] = ()) -> bool:
    return name in IGNORED_DIRS or name.startswith(".") or name in extra


@dataclass(frozen=True)
class WalkEntry:
    """A file or directory reached by the walk."""

    path: Path
    rel_path: str
    is_dir: bool


class TreeWalker:
    """Walks a project tree once, pruning noise and tolerating unreadable entries."""

    def __init__(
        self,
        *,
        max_depth: Optional[int] = None,
        extra_ignored_dirs: Iterable[str] = (),
        rules: Sequence[IgnoreRule] = (),
        ignored_extensions: Iterable[str] = NOISE_EXTENSIONS,
    ) -> None:
        self.max_depth = max_depth
        self.extra_ignored_dirs = frozenset(extra_ignored_dirs)
        self.rules = list(rules)
        self.ignored_extensions = frozenset(ignored_extensions)

    def walk(self, root: Path) -> Iterator[WalkEntry]:
        """Yield directories and files under root in discovery order."""

        def _on_error(error: OSError) -> None:
            logger.debug("Skipping unreadable entry %s: %s", error.filename, error.strerror)

        for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""
            depth = rel_dir.count("/") + 1 if rel_dir else 0
            if self.max_depth is not None and depth + 1 > self.max_depth:
                dirnames[:] = []
                continue

            kept_dirs: List[str] = []
            for name in sorted(dirnames):
                if is_ignored_dir_name(name, self.extra_ignored_dirs):
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if should_ignore(rel_path, True, self.rules):
                    continue
                kept_dirs.append(name)

            dirnames[:] = kept_dirs

            for name in kept_dirs:
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                yield WalkEntry(path=current_dir / name, rel_path=rel_path, is_dir=True)

            for filename in sorted(filenames):
                if extension_of(filename) in self.ignored_extensions:
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if should_ignore(rel_path, False, self.rules):
                    continue
                path = current_dir / filename
                if not path.is_file():
                    logger.debug("Skipping non-regular file %s", rel_path)
                    continue
                yield WalkEntry(path=path, rel_path=rel_path, is_dir=False)

    def iter_files(self, root: Path) -> Iterator[WalkEntry]:
        for entry in self.walk(root):
            if not entry.is_dir:
                yield entry


def resolve_root(root: str | Path) -> Path:
    """Normalise a user supplied root and reject paths that are not directories."""
    root_path = Path(root).expanduser().resolve()
    if not root_path.exists():
        raise FileNotFoundError(f"Project path not found: {root}")
    if not root_path.is_dir():
        raise NotADirectoryError(f"Project path is not a directory: {root}")
    return root_path


__all__ = [
    "BINARY_EXTENSIONS",
    "IGNORED_DIRS",
    "NOISE_EXTENSIONS",
    "IgnoreRule",
    "TreeWalker",
    "WalkEntry",
    "build_ignore_rule",
    "extension_of",
    "parse_gitignore",
    "resolve_root",
    "rules_from_patterns",
    "should_ignore",
]
