"""FastAPI integration helpers for PyRecurMail."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict

try:
    from fastapi import APIRouter, Body, Depends, FastAPI, Request
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import JSONResponse
except ImportError as exc:  # pragma: no cover - optional dependency
    raise ImportError(
        "FastAPI integration requires 'fastapi'. Install with `uv add fastapi`."
    ) from exc

from pyrecurmail.client import ApiResult, Client
from pyrecurmail.server.scheduler import JobScheduler


def get_pyrecurmail_client(request: Request) -> Client:
    return request.app.state.pyrecurmail_client


def _to_response(result: ApiResult) -> JSONResponse:
    return JSONResponse(content=result.body, status_code=result.status_code)


def build_router() -> APIRouter:
    router = APIRouter(prefix="/api")

    @router.post("/start-email")
    async def start_email(
        data: Dict[str, Any] = Body(...),
        client: Client = Depends(get_pyrecurmail_client),
    ) -> JSONResponse:
        return _to_response(await client.start_job(data))

    @router.post("/stop-email")
    async def stop_email(
        data: Dict[str, Any] = Body(...),
        client: Client = Depends(get_pyrecurmail_client),
    ) -> JSONResponse:
        return _to_response(await client.stop_job(data))

    @router.get("/active-jobs")
    async def active_jobs(client: Client = Depends(get_pyrecurmail_client)) -> JSONResponse:
        return _to_response(client.list_active_jobs())

    @router.get("/health")
    async def health(client: Client = Depends(get_pyrecurmail_client)) -> JSONResponse:
        return _to_response(client.health_status())

    return router


class PyRecurMailFastAPIPlugin:
    def __init__(self, app: FastAPI, scheduler: JobScheduler):
        self.app = app
        self.scheduler = scheduler
        self.client = Client(scheduler)

        app.state.pyrecurmail_client = self.client
        app.include_router(build_router())

    def get_client(self) -> Client:
        return self.client


def add_pyrecurmail_to_fastapi(
    app: FastAPI, scheduler: JobScheduler
) -> PyRecurMailFastAPIPlugin:
    return PyRecurMailFastAPIPlugin(app, scheduler)


def create_fastapi_app(scheduler: JobScheduler) -> FastAPI:
    """Builds a standalone FastAPI app whose lifespan shuts the scheduler down."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await scheduler.shutdown()

    app = FastAPI(title="PyRecurMail", lifespan=lifespan)
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    add_pyrecurmail_to_fastapi(app, scheduler)
    return app
