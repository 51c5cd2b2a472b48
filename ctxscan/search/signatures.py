"""Textual language and framework signatures used by relevance scoring."""

from __future__ import annotations

from dataclasses import dataclass


def _any(content: str, *needles: str) -> bool:
    return any(needle in content for needle in needles)


@dataclass(frozen=True)
class LanguageSignatures:
    """Conjunctive substring tests over lowercased file content."""

    is_rust: bool = False
    is_python: bool = False
    is_php: bool = False
    is_javascript: bool = False
    is_go: bool = False
    is_angular: bool = False
    is_react: bool = False
    is_drupal: bool = False
    is_drupal_info: bool = False
    is_drupal_services: bool = False
    is_drupal_template: bool = False

    @classmethod
    def detect(cls, content: str) -> "LanguageSignatures":
        """Detect signatures; ``content`` must already be lowercased."""
        return cls(
            is_rust="fn " in content
            and _any(content, "struct ", "impl ", "pub ", "use std::", "mod "),
            is_python="def " in content
            and _any(content, "import ", "class ", "if __name__ == ", "self."),
            is_php="<?php" in content
            or ("namespace" in content and ";" in content)
            or ("use " in content and "\\" in content and ";" in content),
            is_javascript="function" in content
            and _any(content, "var ", "let ", "const ", "import ", "export "),
            is_go="package " in content
            and (
                _any(content, "func ", "import (")
                or ("type " in content and "struct {" in content)
            ),
            is_angular=_any(content, "@component", "@injectable", "@ngmodule"),
            is_react="react" in content and _any(content, "component", "render", "jsx", "</>"),
            is_drupal=_any(
                content,
                "drupal",
                "hook_",
                "module_implements",
                "@plugin",
                "pluginbase",
                "\\plugin\\",
                "\\form\\",
                "\\entity\\",
                "drupalconsole",
                "@implements",
            ),
            is_drupal_info=_any(content, "type: module", "core_version_requirement", "core: "),
            is_drupal_services="services:" in content and "class:" in content,
            is_drupal_template=_any(
                content, "{{ content }}", "{{ attach_library", "{{ 'drupal"
            ),
        )


__all__ = ["LanguageSignatures"]
