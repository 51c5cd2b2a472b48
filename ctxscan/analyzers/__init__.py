"""Info gatherer implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Iterable, List, Optional, Sequence, Set

from ..logging import get_logger
from ..models import ProjectInfo
from .base import GatherContext, InfoGatherer
from .classifier import Classification, ProjectClassifier, select_project_type
from .drupal import DrupalModuleGatherer, DrupalSiteGatherer
from .features import FeatureScan, FeatureScanner
from .frontend import AngularGatherer, JavaScriptGatherer, ReactGatherer
from .go import GoGatherer
from .php import PhpGatherer
from .python import PythonGatherer
from .rust import RustGatherer

_ENTRY_POINT_GROUP = "ctxscan.gatherers"

logger = get_logger("analyzers")

_BUILTIN_FACTORIES: dict[str, Callable[[], InfoGatherer]] = {
    "drupal_module": DrupalModuleGatherer,
    "drupal_site": DrupalSiteGatherer,
    "rust": RustGatherer,
    "angular": AngularGatherer,
    "react": ReactGatherer,
    "python": PythonGatherer,
    "go": GoGatherer,
    "javascript": JavaScriptGatherer,
    "php": PhpGatherer,
}


def discover_gatherers(enabled: Sequence[str] | None = None) -> List[InfoGatherer]:
    """Return instantiated gatherers, honoring optional enabled names.

    Built-ins come first; third-party gatherers registered under the
    ``ctxscan.gatherers`` entry point group follow in discovery order.
    """

    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}

    gatherers: List[InfoGatherer] = []
    seen: Set[str] = set()

    def _add(name: str, factory: Callable[[], InfoGatherer]) -> None:
        key = name.lower()
        if enabled_set is not None and key not in enabled_set:
            return
        if key in seen:
            return
        instance = factory()
        if not isinstance(instance, InfoGatherer):
            raise TypeError(f"Gatherer factory for '{name}' did not return an InfoGatherer")
        gatherers.append(instance)
        seen.add(key)

    for name, factory in _BUILTIN_FACTORIES.items():
        _add(name, factory)

    for entry in _iter_entry_points():
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - depends on installed plugins
            raise RuntimeError(f"Failed to load gatherer entry point '{entry.name}': {exc}") from exc

        def _factory(obj: object = loaded) -> InfoGatherer:
            return _coerce_gatherer(obj)

        _add(entry.name, _factory)

    if enabled_set is not None:
        missing = enabled_set - seen
        if missing:
            raise ValueError(f"Unknown gatherers requested: {', '.join(sorted(missing))}")

    return gatherers


def _coerce_gatherer(obj: object) -> InfoGatherer:
    if isinstance(obj, InfoGatherer):
        return obj
    if isinstance(obj, type) and issubclass(obj, InfoGatherer):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, InfoGatherer):
            return instance
    raise TypeError("Gatherer entry point must be an InfoGatherer subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


def gather_project_info(
    context: GatherContext, gatherers: Optional[Iterable[InfoGatherer]] = None
) -> Optional[ProjectInfo]:
    """Run the first gatherer that supports the classified project type."""

    for gatherer in gatherers if gatherers is not None else discover_gatherers():
        if gatherer.supports(context.project_type):
            info = gatherer.gather(context)
            logger.debug("%s produced %s", type(gatherer).__name__, type(info).__name__)
            return info
    return None


__all__ = [
    "Classification",
    "FeatureScan",
    "FeatureScanner",
    "GatherContext",
    "InfoGatherer",
    "ProjectClassifier",
    "discover_gatherers",
    "gather_project_info",
    "select_project_type",
]
