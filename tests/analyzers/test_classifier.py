"""Tests for project type selection."""

from __future__ import annotations

import pytest

from ctxscan.analyzers.classifier import select_project_type
from ctxscan.models import ProjectFeatures, ProjectType
from tests._fixtures.repo_builder import RepoBuilder


@pytest.mark.parametrize(
    ("features", "files_by_type", "expected"),
    [
        (
            ProjectFeatures(has_drupal_core=True, has_cargo_toml=True),
            {},
            ProjectType.DRUPAL_SITE,
        ),
        (
            ProjectFeatures(has_cargo_toml=True, has_package_json=True, has_angular_json=True),
            {"rs": ["src/main.rs"]},
            ProjectType.RUST,
        ),
        (
            ProjectFeatures(has_package_json=True, has_angular_json=True, has_pyproject=True),
            {"ts": ["src/app.ts"]},
            ProjectType.ANGULAR,
        ),
        (
            ProjectFeatures(has_package_json=True, has_requirements_txt=True),
            {"jsx": ["src/App.jsx"]},
            ProjectType.REACT,
        ),
        (
            ProjectFeatures(has_setup_py=True),
            {"go": ["main.go"]},
            ProjectType.PYTHON,
        ),
        (ProjectFeatures(), {"go": ["cmd/main.go"]}, ProjectType.GO),
        (ProjectFeatures(), {"ts": ["a.ts"], "js": ["b.js"]}, ProjectType.TYPESCRIPT),
        (ProjectFeatures(), {"ts": ["a.ts"], "js": ["b.js", "c.js"]}, ProjectType.JAVASCRIPT),
        (ProjectFeatures(), {"inc": ["lib.inc"]}, ProjectType.PHP),
        (ProjectFeatures(), {"md": ["README.md"]}, ProjectType.GENERIC),
    ],
)
def test_decision_table_priority(features, files_by_type, expected) -> None:
    assert select_project_type(features, files_by_type) == expected


def test_react_detected_through_path_hint() -> None:
    features = ProjectFeatures(has_package_json=True)

    assert select_project_type(features, {"js": ["src/react-app/index.js"]}) == ProjectType.REACT
    assert select_project_type(features, {"js": ["src/index.js"]}) == ProjectType.JAVASCRIPT


def test_info_yml_alone_is_not_drupal() -> None:
    features = ProjectFeatures(has_info_yml=True)

    assert select_project_type(features, {"yml": ["x.info.yml"]}) == ProjectType.GENERIC


def test_rust_with_nested_drupal_fixture(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "Cargo.toml": """
            [package]
            name = "scanner"
            version = "0.2.0"
            """,
            "src/main.rs": "fn main() {}\n",
            "tests/fixtures/site/modules/custom/foo/foo.info.yml": "type: module\n",
            "tests/fixtures/site/modules/custom/foo/foo.module": "<?php\n",
        }
    )

    structure = repo_builder.analyze()

    assert structure.project_type == ProjectType.RUST
    assert structure.drupal_modules == []


def test_empty_directory_is_generic(repo_builder: RepoBuilder) -> None:
    structure = repo_builder.analyze()

    assert structure.project_type == ProjectType.GENERIC
    assert structure.info is None
    assert structure.files_by_type == {}
