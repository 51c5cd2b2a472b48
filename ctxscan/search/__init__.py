"""Relevance search over project trees."""

from .engine import CodeSearch, InvalidPatternError
from .scoring import SearchLanguage, calculate_relevance, detect_search_language
from .signatures import LanguageSignatures

__all__ = [
    "CodeSearch",
    "InvalidPatternError",
    "LanguageSignatures",
    "SearchLanguage",
    "calculate_relevance",
    "detect_search_language",
]
