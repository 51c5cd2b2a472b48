"""Summaries for JavaScript, TypeScript, Angular and React projects."""

from __future__ import annotations

from typing import Iterable, Optional, Set, Tuple

from ..models import (
    AngularInfo,
    ElementKind,
    JavaScriptInfo,
    ProjectInfo,
    ProjectType,
    ReactInfo,
    TypeScriptInfo,
)
from ..parsers import extract_structure
from .base import GatherContext, InfoGatherer
from .utils import declared_packages, iter_texts, load_json, string_value

NODE_SERVER_PACKAGES = ("express", "koa", "fastify", "@hapi/hapi", "@nestjs/core")
NGRX_PACKAGES = ("@ngrx/store", "@ngrx/effects")
REDUX_PACKAGES = ("redux", "react-redux", "@reduxjs/toolkit")
REDUX_PATH_HINTS = ("redux", "reducer", "slice", "/store/", "store.")


def _package_manifest(context: GatherContext) -> Tuple[Optional[str], Optional[str], Set[str]]:
    manifest = load_json(context.manifest_path("package.json"))
    return (
        string_value(manifest, "name"),
        string_value(manifest, "version"),
        declared_packages(manifest),
    )


def _any_path_contains(paths: Iterable[str], hints: Iterable[str]) -> bool:
    hints = tuple(hints)
    return any(hint in f"/{path.lower()}" for path in paths for hint in hints)


class JavaScriptGatherer(InfoGatherer):
    project_types = (ProjectType.JAVASCRIPT, ProjectType.TYPESCRIPT)

    def gather(self, context: GatherContext) -> Optional[ProjectInfo]:
        name, version, packages = _package_manifest(context)
        uses_node_server = not packages.isdisjoint(NODE_SERVER_PACKAGES)
        if context.project_type is ProjectType.TYPESCRIPT:
            return TypeScriptInfo(
                name=name,
                version=version,
                file_count=len(context.files("ts", "tsx")),
                uses_node_server=uses_node_server,
                has_tsconfig=context.features.has_tsconfig,
            )
        return JavaScriptInfo(
            name=name,
            version=version,
            file_count=len(context.files("js", "jsx", "mjs", "cjs")),
            uses_node_server=uses_node_server,
        )


class AngularGatherer(InfoGatherer):
    """Counts Angular building blocks by filename suffix or decorator."""

    project_types = (ProjectType.ANGULAR,)

    def gather(self, context: GatherContext) -> Optional[ProjectInfo]:
        name, version, packages = _package_manifest(context)
        components = services = modules = 0
        sources = context.files("ts")
        for rel_path, text in iter_texts(context.root, sources):
            if rel_path.endswith(".component.ts") or "@Component(" in text:
                components += 1
            if rel_path.endswith(".service.ts") or "@Injectable(" in text:
                services += 1
            if rel_path.endswith(".module.ts") or "@NgModule(" in text:
                modules += 1

        uses_ngrx = not packages.isdisjoint(NGRX_PACKAGES) or _any_path_contains(
            sources, (".reducer.", ".effects.", ".actions.")
        )
        return AngularInfo(
            name=name,
            version=version,
            component_count=components,
            service_count=services,
            module_count=modules,
            uses_ngrx=uses_ngrx,
        )


class ReactGatherer(InfoGatherer):
    """Counts components and hooks through the structural extractor."""

    project_types = (ProjectType.REACT,)

    def gather(self, context: GatherContext) -> Optional[ProjectInfo]:
        name, version, packages = _package_manifest(context)
        sources = context.files("js", "jsx", "ts", "tsx")
        components = hooks = 0
        for rel_path, text in iter_texts(context.root, sources):
            structure = extract_structure(rel_path, text)
            components += len(structure.of_kind(ElementKind.COMPONENT))
            hooks += len(structure.of_kind(ElementKind.HOOK))

        uses_redux = not packages.isdisjoint(REDUX_PACKAGES) or _any_path_contains(
            sources, REDUX_PATH_HINTS
        )
        uses_typescript = context.features.has_tsconfig or bool(context.files("ts", "tsx"))
        return ReactInfo(
            name=name,
            version=version,
            component_count=components,
            hook_count=hooks,
            uses_redux=uses_redux,
            uses_typescript=uses_typescript,
        )


__all__ = ["AngularGatherer", "JavaScriptGatherer", "ReactGatherer"]
