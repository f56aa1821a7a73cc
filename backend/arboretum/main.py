"""FastAPI application entrypoint."""
from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from arboretum.api import api_router
from arboretum.core.config import get_settings
from arboretum.core.errors import ArboretumError, InternalError, ServiceUnavailableError
from arboretum.core.sessions import SessionStore
from arboretum.db.base import Base
from arboretum.db.session import STORAGE_UNAVAILABLE_ERRORS, commit, engine, get_session
from arboretum.middleware.https_redirect import HTTPSRedirectMiddleware
from arboretum.schemas.common import HealthResponse
from arboretum.services.users import ensure_admin

settings = get_settings()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

SESSION_PURGE_INTERVAL_SECONDS = 60 * 60


async def _purge_sessions(sessions: SessionStore) -> None:
    while True:
        await asyncio.sleep(SESSION_PURGE_INTERVAL_SECONDS)
        purged = await sessions.purge_expired()
        if purged:
            logger.info("Purged %d expired session(s)", purged)


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    settings.avatar_dir.mkdir(parents=True, exist_ok=True)

    app.state.sessions = SessionStore(ttl_seconds=settings.session_ttl_seconds)

    if settings.admin_username and settings.admin_email and settings.admin_password:
        async with get_session() as session:
            admin = await ensure_admin(
                session, settings.admin_username, settings.admin_email, settings.admin_password
            )
            await commit(session)
        if admin is not None:
            logger.info("Created admin account %s", admin.username)

    purge_task = asyncio.create_task(_purge_sessions(app.state.sessions))
    logger.info("%s started", settings.app_name)
    try:
        yield
    finally:
        purge_task.cancel()
        await engine.dispose()


app = FastAPI(title=settings.app_name, lifespan=lifespan)

# Only active when SSL is enabled
if settings.ssl_enabled:
    app.add_middleware(HTTPSRedirectMiddleware, https_port=settings.https_port)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info("%s %s %d %.1fms", request.method, request.url.path, response.status_code, ms)
    return response


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(ArboretumError)
async def arboretum_error_handler(request: Request, exc: ArboretumError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return _error(exc.status_code, exc.message)


async def storage_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Storage unavailable on %s %s: %s", request.method, request.url.path, type(exc).__name__)
    return _error(ServiceUnavailableError.status_code, "Database unavailable")


for _exc_class in STORAGE_UNAVAILABLE_ERRORS:
    app.add_exception_handler(_exc_class, storage_unavailable_handler)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if not errors:
        return _error(400, "Invalid request")
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return _error(400, f"{location}: {message}" if location else message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unexpected failures are logged in full; the client only sees a generic message."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(InternalError.status_code, InternalError.default_message)


@app.get("/api/health", response_model=HealthResponse, tags=["health"])
async def health() -> HealthResponse:
    return HealthResponse()


app.include_router(api_router)

# Avatars are written below upload_dir/avatars and referenced as /uploads/avatars/<file>.
app.mount(
    settings.avatar_url_prefix,
    StaticFiles(directory=str(settings.upload_dir), check_dir=False),
    name="uploads",
)
