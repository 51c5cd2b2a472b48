"""Relevance ranking and grep over a project tree."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from ..config import CtxScanConfig, ScanConfig, SearchConfig
from ..logging import get_logger
from ..models import RankedFile, SearchResult
from ..parsers.common import split_lines
from ..walker import (
    BINARY_EXTENSIONS,
    IgnoreRule,
    TreeWalker,
    parse_gitignore,
    resolve_root,
    rules_from_patterns,
)
from .scoring import calculate_relevance

logger = get_logger("search")


class InvalidPatternError(ValueError):
    """Raised when a grep pattern is not a valid regular expression."""


class CodeSearch:
    """Walks a tree once per call and scores or greps every eligible file."""

    def __init__(self, config: Optional[CtxScanConfig] = None) -> None:
        self._scan = config.scan if config is not None else ScanConfig()
        self._search = config.search if config is not None else SearchConfig()

    def _rules(self, root: Path) -> List[IgnoreRule]:
        rules: List[IgnoreRule] = []
        if self._search.respect_gitignore:
            rules.extend(parse_gitignore(root / ".gitignore"))
        rules.extend(rules_from_patterns(self._scan.exclude_paths))
        return rules

    def iter_texts(self, root: Path) -> Iterator[Tuple[Path, str, str]]:
        """Yield ``(path, rel_path, text)`` for every eligible file under root."""
        walker = TreeWalker(
            max_depth=self._scan.max_depth,
            extra_ignored_dirs=self._scan.ignore_dirs,
            rules=self._rules(root),
            ignored_extensions=BINARY_EXTENSIONS,
        )
        for entry in walker.iter_files(root):
            try:
                size = entry.path.stat().st_size
            except OSError:
                logger.debug("Skipping unreadable file %s", entry.rel_path)
                continue
            if size > self._search.max_file_size:
                logger.debug("Skipping large file %s (%d bytes)", entry.rel_path, size)
                continue
            try:
                text = entry.path.read_bytes().decode("utf-8")
            except (OSError, UnicodeDecodeError):
                logger.debug("Skipping undecodable file %s", entry.rel_path)
                continue
            yield entry.path, entry.rel_path, text

    def rank_files(self, root: str | Path, keywords: Sequence[str]) -> List[RankedFile]:
        """Score every eligible file once and return non-zero scores, best first."""
        root_path = resolve_root(root)
        if not keywords:
            return []

        ranked: List[RankedFile] = []
        for path, rel_path, text in self.iter_texts(root_path):
            score = calculate_relevance(text, keywords, rel_path)
            if score > 0:
                ranked.append(RankedFile(path=path, score=score))
        ranked.sort(key=lambda item: item.score, reverse=True)
        logger.debug("Ranked %d files for %s", len(ranked), list(keywords))
        return ranked

    def find_relevant_files(self, root: str | Path, keywords: Sequence[str]) -> List[Path]:
        """Return files ordered by descending relevance to the keywords."""
        return [item.path for item in self.rank_files(root, keywords)]

    def search_in_files(self, root: str | Path, pattern: str) -> List[SearchResult]:
        """Return every line matching ``pattern`` in file-then-line order."""
        try:
            regex = re.compile(pattern)
        except re.error as exc:
            raise InvalidPatternError(f"Invalid search pattern {pattern!r}: {exc}") from exc

        root_path = resolve_root(root)
        results: List[SearchResult] = []
        for path, _, text in self.iter_texts(root_path):
            for line_number, line in enumerate(split_lines(text), start=1):
                if regex.search(line):
                    results.append(
                        SearchResult(file_path=path, line_number=line_number, line_content=line)
                    )
        return results


__all__ = ["CodeSearch", "InvalidPatternError"]
