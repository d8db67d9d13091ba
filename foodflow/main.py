# foodflow/main.py
"""
FoodFlow API entrypoint.

``create_app`` builds the FastAPI app.  The datastore adapter is created
in the lifespan (or injected by the caller) and kept on ``app.state``;
handlers reach it through ``deps.get_repo``.  Run with::

    uvicorn foodflow.main:app --reload
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import Settings, get_settings
from .core.errors import FoodFlowError, InternalError
from .core.logging_config import setup_logging
from .deps import build_repo
from .middleware.request_log import RequestLogMiddleware
from .repos.base import ListingRepo
from .routers import claims as claims_router
from .routers import donations as donations_router
from .routers import stats as stats_router
from .schemas import utcnow

log = logging.getLogger(__name__)


def _fail(status_code: int, error: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse({"success": False, "error": error}, status_code=status_code, headers=headers)


def _describe(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())[1:]) or "body"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts) or "Invalid request"


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(FoodFlowError)
    async def _foodflow_error(request: Request, exc: FoodFlowError):
        if exc.status_code >= 500:
            log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return _fail(exc.status_code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        return _fail(400, _describe(exc))

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            return _fail(404, "Route not found")
        return _fail(exc.status_code, str(exc.detail))

    @app.exception_handler(PyMongoError)
    async def _datastore_error(request: Request, exc: PyMongoError):
        log.exception("datastore failure on %s %s", request.method, request.url.path)
        err = InternalError("Internal datastore error")
        return _fail(err.status_code, err.message)


def create_app(settings: Optional[Settings] = None, repo: Optional[ListingRepo] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = repo if repo is not None else build_repo(settings)
        app.state.repo = store
        await store.ensure_indexes()
        log.info("%s started (storage=%s)", settings.project_name, settings.storage if repo is None else type(repo).__name__)
        yield
        if repo is None:
            await store.close()

    app = FastAPI(lifespan=lifespan, title=settings.project_name)
    app.state.settings = settings

    app.add_middleware(RequestLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _install_error_handlers(app)

    app.include_router(donations_router.router)   # /donations
    app.include_router(claims_router.router)      # /claims
    app.include_router(stats_router.router)       # /stats

    @app.get("/health")
    def health():
        return {
            "success": True,
            "message": "Food Donation API is running",
            "timestamp": utcnow().isoformat(),
        }

    return app


app = create_app()
