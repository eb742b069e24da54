"""FastAPI application entrypoint for spacecompiler service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, FastAPI, Request
from pydantic import BaseModel, Field

from ..models import CompilationResult
from ..orchestrator import Orchestrator
from ..serialization import result_to_dict


class CompileFileRequest(BaseModel):
    content: str
    file_name: str = Field(alias="fileName")
    content_type: Optional[str] = Field(default=None, alias="contentType")


class CompileFilesRequest(BaseModel):
    files: Dict[str, str]


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing the three compilation operations."""

    app = FastAPI(title="Space Compiler Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        # A fresh orchestrator per request keeps calls isolated from each other.
        return orchestrator_factory()

    async def _run(func: Callable[[], CompilationResult]) -> Dict[str, Any]:
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, func)
        return result_to_dict(result)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/compile/file")
    async def compile_file(
        payload: CompileFileRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> Dict[str, Any]:
        return await _run(
            lambda: orchestrator.compile_file(
                payload.content, payload.file_name, payload.content_type
            )
        )

    @app.post("/compile/files")
    async def compile_files(
        payload: CompileFilesRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> Dict[str, Any]:
        return await _run(lambda: orchestrator.compile_files(payload.files))

    @app.post("/compile/project")
    async def compile_project(
        request: Request,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> Dict[str, Any]:
        archive = await request.body()
        return await _run(lambda: orchestrator.compile_project(archive))

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)
