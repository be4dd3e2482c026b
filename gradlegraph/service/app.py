"""FastAPI application entrypoint for gradlegraph service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import GradleGraphConfig, load_config
from ..errors import ErrorKind, GradleGraphError
from ..github import RateLimitTracker
from ..models import GraphResult
from ..orchestrator import AnalysisOrchestrator

_STATUS_BY_KIND = {
    ErrorKind.REPO_UNAVAILABLE: 404,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.NO_BUILD_FILES: 422,
}


class AnalyzeRequest(BaseModel):
    owner: str
    repo: str
    ref: Optional[str] = None


class NodeModel(BaseModel):
    project_path: str
    display_name: str


class EdgeModel(BaseModel):
    from_project_path: str
    to_project_path: str
    source_file_path: str


class RepositoryModel(BaseModel):
    owner: str
    repo: str
    normalized_owner: str
    normalized_repo: str
    normalized_ref: Optional[str] = None


class GraphResponse(BaseModel):
    repository: RepositoryModel
    commit_sha: str
    nodes: List[NodeModel]
    edges: List[EdgeModel]
    warnings: List[str]
    files_analyzed: int
    run_id: str


class RateLimitResponse(BaseModel):
    remaining: Optional[int] = None
    limit: Optional[int] = None
    reset: Optional[int] = None


class HealthResponse(BaseModel):
    status: str


def create_app(
    orchestrator_factory: Callable[[], AnalysisOrchestrator] | None = None,
    *,
    config: GradleGraphConfig | None = None,
) -> FastAPI:
    """Create the FastAPI application exposing gradlegraph analysis."""

    if orchestrator_factory is None:
        effective_config = config or load_config()
        # Concurrent requests share one observed quota.
        shared_tracker = RateLimitTracker()

        def _default_factory() -> AnalysisOrchestrator:
            return AnalysisOrchestrator(effective_config, tracker=shared_tracker)

        orchestrator_factory = _default_factory

    factory = orchestrator_factory
    app = FastAPI(title="Gradle Graph Service", version="1.0.0")

    async def get_orchestrator() -> AnalysisOrchestrator:
        return factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/rate-limit", response_model=RateLimitResponse)
    async def rate_limit(
        orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
    ) -> RateLimitResponse:
        snapshot = orchestrator.rate_limit()
        return RateLimitResponse(
            remaining=snapshot.remaining, limit=snapshot.limit, reset=snapshot.reset
        )

    @app.post("/analyze", response_model=GraphResponse)
    async def analyze(
        payload: AnalyzeRequest,
        orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
    ) -> GraphResponse:
        def _run() -> GraphResult:
            return orchestrator.run(payload.owner, payload.repo, payload.ref or None)

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run)
        return GraphResponse(**result.to_dict())

    @app.exception_handler(GradleGraphError)
    async def analysis_error_handler(_: Any, exc: GradleGraphError) -> JSONResponse:
        status = _STATUS_BY_KIND.get(exc.kind, 502)
        return JSONResponse(status_code=status, content=exc.to_dict())

    return app


def run_service(
    host: str = "127.0.0.1",
    port: int = 8000,
    *,
    config: GradleGraphConfig | None = None,
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(config=config)
    uvicorn.run(app, host=host, port=port)
