"""End-to-end tests for ProjectAnalyzer."""

from __future__ import annotations

import pytest

from ctxscan.analyzers import discover_gatherers
from ctxscan.config import CtxScanConfig, ScanConfig
from ctxscan.models import ProjectType, RustInfo, structure_as_dict
from ctxscan.project_analyzer import ProjectAnalyzer
from tests._fixtures.repo_builder import RepoBuilder


def _rust_repo(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "Cargo.toml": '[package]\nname = "demo"\n',
            "src/main.rs": "mod cli;\n\nstruct Args;\nstruct Config {\n}\n\nfn main() {}\n",
        }
    )


def test_rust_scenario(repo_builder: RepoBuilder) -> None:
    _rust_repo(repo_builder)

    structure = repo_builder.analyze()

    assert structure.project_type == ProjectType.RUST
    assert isinstance(structure.info, RustInfo)
    assert structure.info.name == "demo"
    assert structure.info.struct_count == 2
    assert structure.info.module_count == 1
    assert structure.root == str(repo_builder.path().resolve())


def test_classification_is_idempotent(repo_builder: RepoBuilder) -> None:
    _rust_repo(repo_builder)

    first = structure_as_dict(repo_builder.analyze())
    second = structure_as_dict(repo_builder.analyze())

    assert first == second


def test_config_file_shapes_the_scan(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            ".ctxscan.yml": "scan:\n  ignore_dirs: [examples]\n",
            "examples/demo/Cargo.toml": '[package]\nname = "example"\n',
            "app.py": "print('hi')\n",
            "setup.py": "from setuptools import setup\nsetup(name='tool', version='0.1')\n",
        }
    )

    structure = repo_builder.analyze()

    assert structure.project_type == ProjectType.PYTHON
    assert "examples" not in structure.directories
    assert structure.info.name == "tool"
    assert structure.info.version == "0.1"


def test_explicit_config_and_gatherers(repo_builder: RepoBuilder) -> None:
    _rust_repo(repo_builder)
    config = CtxScanConfig(root=repo_builder.path(), scan=ScanConfig(exclude_paths=["src/"]))

    analyzer = ProjectAnalyzer(config, gatherers=discover_gatherers(["python"]))
    structure = analyzer.analyze_project_structure(repo_builder.path())

    assert structure.project_type == ProjectType.RUST
    assert structure.info is None
    assert "rs" not in structure.files_by_type


def test_missing_root_raises(repo_builder: RepoBuilder) -> None:
    with pytest.raises(FileNotFoundError):
        ProjectAnalyzer().analyze_project_structure(repo_builder.path() / "missing")
