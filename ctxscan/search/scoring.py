"""Keyword relevance scoring with language-aware boosts and penalties.

A file's score is the sum of its keyword occurrence counts, each multiplied
by a boost when the keyword correlates with one of the file's signatures.
The keyword list as a whole is then mapped to a *search language*; files
whose signatures match it receive a flat bonus. Drupal-targeted searches
additionally reward component namespaces and halve the score of plain
JavaScript files that never mention Drupal.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, List, Sequence, Tuple

from .signatures import LanguageSignatures

DRUPAL_COMPONENT_TERMS = ("plugin", "block", "field", "form", "controller", "entity")
DRUPAL_COMPONENT_SEGMENTS = ("plugin", "form", "entity")

DRUPAL_COMPONENT_BONUS = 40


class SearchLanguage(str, Enum):
    RUST = "rust"
    PYTHON = "python"
    JAVASCRIPT = "javascript"
    PHP = "php"
    DRUPAL = "drupal"
    GO = "go"
    GENERIC = "generic"


def _contains_any(keyword: str, needles: Sequence[str]) -> bool:
    return any(needle in keyword for needle in needles)


# First matching row wins: (signature test, keyword test, multiplier).
_BOOSTS: List[Tuple[Callable[[LanguageSignatures], bool], Callable[[str], bool], int]] = [
    (
        lambda sig: sig.is_rust,
        lambda kw: kw == "rust" or _contains_any(kw, ("fn ", "struct ", "impl ")),
        3,
    ),
    (
        lambda sig: sig.is_python,
        lambda kw: kw == "python" or _contains_any(kw, ("def ", "import ", "class ")),
        3,
    ),
    (lambda sig: sig.is_php, lambda kw: "php" in kw, 3),
    (lambda sig: sig.is_drupal, lambda kw: _contains_any(kw, ("drupal", "module")), 4),
    (lambda sig: sig.is_drupal_info, lambda kw: _contains_any(kw, ("info", "configuration")), 5),
    (lambda sig: sig.is_drupal_services, lambda kw: _contains_any(kw, ("service", "dependency")), 5),
    (lambda sig: sig.is_drupal_template, lambda kw: _contains_any(kw, ("template", "twig")), 5),
    (lambda sig: sig.is_javascript, lambda kw: _contains_any(kw, ("js", "javascript")), 3),
    (
        lambda sig: sig.is_angular,
        lambda kw: _contains_any(kw, ("angular", "component", "service")),
        4,
    ),
    (lambda sig: sig.is_react, lambda kw: _contains_any(kw, ("react", "component", "jsx")), 4),
    (
        lambda sig: sig.is_go,
        lambda kw: kw == "go" or _contains_any(kw, ("golang", "func ")),
        3,
    ),
]

# Keyword vocabulary per search language; tie order favours the specific framework.
_LANGUAGE_TERMS: List[Tuple[SearchLanguage, Tuple[str, ...]]] = [
    (
        SearchLanguage.DRUPAL,
        ("drupal", "hook_", "module", "block", "entity", "field", "form", "plugin", "token"),
    ),
    (SearchLanguage.RUST, ("rust", "cargo", "crate", "fn ")),
    (SearchLanguage.PYTHON, ("python", "django", "flask", "def ")),
    (
        SearchLanguage.JAVASCRIPT,
        ("js", "javascript", "angular", "react", "node", "component", "directive"),
    ),
    (SearchLanguage.PHP, ("php",)),
    (SearchLanguage.GO, ("go", "golang", "func ")),
]


def language_boost(keyword: str, signatures: LanguageSignatures) -> int:
    """Return the multiplier applied to a lowercased keyword's occurrence count."""
    for applies, matches, multiplier in _BOOSTS:
        if applies(signatures) and matches(keyword):
            return multiplier
    return 1


def detect_search_language(keywords: Sequence[str]) -> SearchLanguage:
    counts = {language: 0 for language, _ in _LANGUAGE_TERMS}
    for keyword in keywords:
        lowered = keyword.lower()
        for language, terms in _LANGUAGE_TERMS:
            if _contains_any(lowered, terms):
                counts[language] += 1

    best = max(counts.values(), default=0)
    if best == 0:
        return SearchLanguage.GENERIC
    for language, _ in _LANGUAGE_TERMS:
        if counts[language] == best:
            return language
    return SearchLanguage.GENERIC


def language_bonus(
    language: SearchLanguage,
    signatures: LanguageSignatures,
    content: str,
    keywords: Sequence[str],
    path: str = "",
) -> int:
    """Flat bonus for files whose signatures match the search language."""
    if language is SearchLanguage.RUST:
        return 25 if signatures.is_rust else 0
    if language is SearchLanguage.PYTHON:
        return 25 if signatures.is_python else 0
    if language is SearchLanguage.PHP:
        return 25 if signatures.is_php else 0
    if language is SearchLanguage.GO:
        return 25 if signatures.is_go else 0
    if language is SearchLanguage.JAVASCRIPT:
        bonus = 20 if signatures.is_javascript else 0
        bonus += 25 if signatures.is_angular else 0
        bonus += 25 if signatures.is_react else 0
        return bonus
    if language is SearchLanguage.DRUPAL:
        bonus = 30 if signatures.is_drupal else 0
        bonus += 35 if signatures.is_drupal_info else 0
        bonus += 35 if signatures.is_drupal_services else 0
        bonus += 25 if signatures.is_drupal_template else 0
        if any(_contains_any(keyword.lower(), DRUPAL_COMPONENT_TERMS) for keyword in keywords):
            lowered_path = f"/{path.lower()}"
            for segment in DRUPAL_COMPONENT_SEGMENTS:
                if f"\\{segment}\\" in content or f"/{segment}/" in lowered_path:
                    bonus += DRUPAL_COMPONENT_BONUS
        return bonus
    return 0


def calculate_relevance(content: str, keywords: Sequence[str], path: str = "") -> int:
    """Score one file's content against a keyword list."""
    lowered = content.lower()
    signatures = LanguageSignatures.detect(lowered)

    score = 0
    for keyword in keywords:
        keyword_lower = keyword.lower()
        if not keyword_lower:
            continue
        count = lowered.count(keyword_lower)
        score += count * language_boost(keyword_lower, signatures)

    language = detect_search_language(keywords)
    score += language_bonus(language, signatures, lowered, keywords, path)

    if (
        language is SearchLanguage.DRUPAL
        and signatures.is_javascript
        and "drupal" not in lowered
    ):
        score //= 2
    return score


__all__ = [
    "SearchLanguage",
    "calculate_relevance",
    "detect_search_language",
    "language_bonus",
    "language_boost",
]
