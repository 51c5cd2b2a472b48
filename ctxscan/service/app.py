"""FastAPI application exposing ctxscan over HTTP."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import ConfigError, load_config
from ..context import extract_keywords
from ..models import structure_as_dict
from ..project_analyzer import ProjectAnalyzer
from ..search import CodeSearch, InvalidPatternError
from ..walker import resolve_root

T = TypeVar("T")


class HealthResponse(BaseModel):
    status: str


class ClassifyRequest(BaseModel):
    path: str


class ModuleModel(BaseModel):
    name: str
    path: str


class ClassifyResponse(BaseModel):
    root: str
    project_type: str
    directories: List[str]
    files_by_type: Dict[str, List[str]]
    features: Dict[str, Any]
    info: Optional[Dict[str, Any]] = None
    drupal_modules: List[ModuleModel] = Field(default_factory=list)


class RelevantRequest(BaseModel):
    path: str
    keywords: List[str] = Field(default_factory=list)
    query: Optional[str] = None
    limit: Optional[int] = Field(default=None, ge=0)


class RankedFileModel(BaseModel):
    path: str
    score: int


class RelevantResponse(BaseModel):
    keywords: List[str]
    files: List[RankedFileModel]


class GrepRequest(BaseModel):
    path: str
    pattern: str


class MatchModel(BaseModel):
    path: str
    line: int
    text: str


class GrepResponse(BaseModel):
    matches: List[MatchModel]


def _default_analyzer(root: Path) -> ProjectAnalyzer:
    return ProjectAnalyzer(load_config(root))


def _default_search(root: Path) -> CodeSearch:
    return CodeSearch(load_config(root))


async def _run_blocking(func: Callable[[], T]) -> T:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def _relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def create_app(
    analyzer_factory: Callable[[Path], ProjectAnalyzer] = _default_analyzer,
    search_factory: Callable[[Path], CodeSearch] = _default_search,
) -> FastAPI:
    """Create the FastAPI application exposing ctxscan operations."""

    app = FastAPI(title="ctxscan Service", version="1.0.0")

    async def get_analyzer_factory() -> Callable[[Path], ProjectAnalyzer]:
        return analyzer_factory

    async def get_search_factory() -> Callable[[Path], CodeSearch]:
        return search_factory

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/classify", response_model=ClassifyResponse)
    async def classify(
        payload: ClassifyRequest,
        factory: Callable[[Path], ProjectAnalyzer] = Depends(get_analyzer_factory),
    ) -> ClassifyResponse:
        root = resolve_root(payload.path)
        structure = await _run_blocking(lambda: factory(root).analyze_project_structure(root))
        return ClassifyResponse(**structure_as_dict(structure))

    @app.post("/relevant", response_model=RelevantResponse)
    async def relevant(
        payload: RelevantRequest,
        factory: Callable[[Path], CodeSearch] = Depends(get_search_factory),
    ) -> RelevantResponse:
        root = resolve_root(payload.path)
        keywords = list(payload.keywords)
        if payload.query:
            keywords.extend(extract_keywords(payload.query))
        ranked = await _run_blocking(lambda: factory(root).rank_files(root, keywords))
        if payload.limit is not None:
            ranked = ranked[: payload.limit]
        return RelevantResponse(
            keywords=keywords,
            files=[
                RankedFileModel(path=_relative(item.path, root), score=item.score)
                for item in ranked
            ],
        )

    @app.post("/grep", response_model=GrepResponse)
    async def grep(
        payload: GrepRequest,
        factory: Callable[[Path], CodeSearch] = Depends(get_search_factory),
    ) -> GrepResponse:
        root = resolve_root(payload.path)
        results = await _run_blocking(lambda: factory(root).search_in_files(root, payload.pattern))
        return GrepResponse(
            matches=[
                MatchModel(
                    path=_relative(result.file_path, root),
                    line=result.line_number,
                    text=result.line_content,
                )
                for result in results
            ]
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(_: Any, exc: NotADirectoryError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(InvalidPatternError)
    async def invalid_pattern_handler(_: Any, exc: InvalidPatternError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    uvicorn.run(create_app(), host=host, port=port)


__all__ = ["create_app", "run_service"]
