from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Callable, List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool

from users_api import __version__
from users_api.domain.models import AgeDistribution, UserRecord
from users_api.ingest.importer import Importer
from users_api.service.queries import QueryService
from users_api.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api")


def get_query_service(request: Request) -> QueryService:
    return request.app.state.query_service


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc)})


@router.get("/users", response_model=List[UserRecord])
def list_users(service: QueryService = Depends(get_query_service)):
    try:
        return service.list_users()
    except Exception as exc:
        logger.exception("list_users failed")
        return _error(exc)


@router.get("/age-distribution", response_model=AgeDistribution)
def age_distribution(service: QueryService = Depends(get_query_service)):
    try:
        return service.age_distribution()
    except Exception as exc:
        logger.exception("age_distribution failed")
        return _error(exc)


def create_app(
    query_service: QueryService,
    importer: Optional[Importer] = None,
    static_dir: Path | str | None = None,
    on_shutdown: Optional[Callable[[], None]] = None,
) -> FastAPI:
    """
    Build the FastAPI app around an already wired `QueryService`.

    When `importer` is given it runs to completion during startup, before
    the first request is served. Import failures are logged by the importer
    and do not prevent startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if importer is not None:
            app.state.import_result = await run_in_threadpool(importer.run)
        try:
            yield
        finally:
            if on_shutdown is not None:
                on_shutdown()

    app = FastAPI(title="Users API", version=__version__, lifespan=lifespan)
    app.state.query_service = query_service
    app.state.import_result = None
    app.include_router(router)

    if static_dir is not None and Path(static_dir).is_dir():
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")
        logger.info("Serving static files", extra={"static_dir": str(static_dir)})

    return app


__all__ = ["create_app", "get_query_service", "router"]
