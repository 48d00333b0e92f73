"""FastAPI application entrypoint for apidoc service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional

try:  # pragma: no cover - optional dependency
    from fastapi import Depends, FastAPI
    from fastapi.responses import JSONResponse
    from pydantic import BaseModel

    _FASTAPI_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - service mode optional
    FastAPI = None  # type: ignore[assignment]
    Depends = None  # type: ignore[assignment]
    JSONResponse = None  # type: ignore[assignment]
    BaseModel = object  # type: ignore[assignment]
    _FASTAPI_AVAILABLE = False

from ..endpoints import ApiDocument
from ..orchestrator import Orchestrator


class DocsRequest(BaseModel):
    root: str
    controller: str
    method: Optional[str] = None


class DocumentModel(BaseModel):
    name: str
    content: str


class DocsResponse(BaseModel):
    documents: List[DocumentModel]


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing apidoc generation."""

    if not _FASTAPI_AVAILABLE:  # pragma: no cover - validated via unit tests
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install fastapi uvicorn`."
        )

    app = FastAPI(title="apidoc Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        # One orchestrator per request.
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/docs", response_model=DocsResponse)
    async def generate_docs(
        payload: DocsRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> DocsResponse:
        def _run_generate() -> List[ApiDocument]:
            return orchestrator.run_generate(payload.root, payload.controller, payload.method)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:  # pragma: no cover - fallback path when not in async context
            documents = _run_generate()
        else:
            documents = await loop.run_in_executor(None, _run_generate)
        return DocsResponse(
            documents=[DocumentModel(name=doc.name, content=doc.content) for doc in documents]
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(LookupError)
    async def lookup_error_handler(_: Any, exc: LookupError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": exc.args[0] if exc.args else str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "0.0.0.0", port: int = 8000
) -> None:  # pragma: no cover - integration path
    if not _FASTAPI_AVAILABLE:
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install fastapi uvicorn`."
        )

    try:
        import uvicorn
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "uvicorn is required to run the service. Install it with `pip install uvicorn`."
        ) from exc

    app = create_app()
    uvicorn.run(app, host=host, port=port)
