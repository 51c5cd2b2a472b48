"""Tests for keyword relevance scoring."""

from __future__ import annotations

import pytest

from ctxscan.search.scoring import (
    SearchLanguage,
    calculate_relevance,
    detect_search_language,
    language_boost,
)
from ctxscan.search.signatures import LanguageSignatures


def test_python_file_outranks_keyword_free_file() -> None:
    keywords = ["python", "django"]
    python_file = "import django\ndef view():\n"
    plain_file = "hello there\nnothing here\n"

    # one "django" hit plus the Python bonus, applied once
    assert calculate_relevance(python_file, keywords) == 1 + 25
    assert calculate_relevance(plain_file, keywords) == 0


def test_boosted_keyword_and_language_bonus() -> None:
    content = "pub fn run() {}\nstruct rust_thing;\n"

    assert calculate_relevance(content, ["rust"]) == 1 * 3 + 25


def test_bonus_applies_without_keyword_hits() -> None:
    content = "package main\n\nfunc main() {}\n"

    assert calculate_relevance(content, ["golang"]) == 25


def test_drupal_search_halves_plain_javascript() -> None:
    script = "const x = function() { return 'form'; };\n"
    drupal_script = "// drupal behaviour\n" + script

    assert calculate_relevance(script, ["form"]) == 0
    assert calculate_relevance(drupal_script, ["form"]) == 1 + 30


def test_drupal_component_namespace_bonus() -> None:
    content = "<?php\nnamespace Drupal\\demo\\Plugin\\Block;\nclass X {}\n"

    score = calculate_relevance(content, ["block"], "src/Plugin/Block/X.php")

    assert score == 1 + 30 + 40


def test_component_bonus_from_path_segment() -> None:
    content = "<?php\n// drupal form handling\n"

    with_segment = calculate_relevance(content, ["form"], "modules/demo/src/Form/Settings.php")
    without_segment = calculate_relevance(content, ["form"], "modules/demo/src/Settings.php")

    assert with_segment - without_segment == 40


def test_more_occurrences_never_lower_the_score() -> None:
    keywords = ["widget"]
    once = "widget\n"
    twice = "widget widget\n"

    assert calculate_relevance(twice, keywords) > calculate_relevance(once, keywords)


def test_empty_keyword_contributes_nothing() -> None:
    assert calculate_relevance("anything at all\n", ["", "absent"]) == 0


@pytest.mark.parametrize(
    ("keywords", "expected"),
    [
        (["hook_form_alter"], SearchLanguage.DRUPAL),
        (["cargo", "workspace"], SearchLanguage.RUST),
        (["flask", "routes"], SearchLanguage.PYTHON),
        (["react", "component"], SearchLanguage.JAVASCRIPT),
        (["php"], SearchLanguage.PHP),
        (["golang"], SearchLanguage.GO),
        (["drupal", "rust"], SearchLanguage.DRUPAL),
        (["readme", "license"], SearchLanguage.GENERIC),
        ([], SearchLanguage.GENERIC),
    ],
)
def test_detect_search_language(keywords, expected) -> None:
    assert detect_search_language(keywords) == expected


def test_language_boost_first_matching_row_wins() -> None:
    both = LanguageSignatures(is_rust=True, is_python=True)
    assert language_boost("python", both) == 3
    assert language_boost("rust", both) == 3

    drupal_angular = LanguageSignatures(is_drupal=True, is_angular=True)
    assert language_boost("module", drupal_angular) == 4

    info = LanguageSignatures(is_drupal_info=True)
    assert language_boost("configuration", info) == 5

    assert language_boost("widget", LanguageSignatures()) == 1


def test_signature_detection() -> None:
    php = LanguageSignatures.detect("<?php\nuse drupal\\core\\form\\formbase;\n")
    assert php.is_php is True
    assert php.is_drupal is True
    assert php.is_javascript is False

    go = LanguageSignatures.detect("package api\n\ntype server struct {\n}\n")
    assert go.is_go is True

    services = LanguageSignatures.detect("services:\n  demo.x:\n    class: drupal\\demo\\x\n")
    assert services.is_drupal_services is True
