from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from blog_api.core.config import Settings, get_settings
from blog_api.core.log_setup import configure_logging
from blog_api.core.middleware import AccessLogMiddleware
from blog_api.domain.errors import PersistenceError
from blog_api.repositories.json_storage import SnapshotWriter
from blog_api.routers import comments as comments_router
from blog_api.routers import posts as posts_router
from blog_api.routers import profile as profile_router
from blog_api.services.store import Store

logger = logging.getLogger("blog_api")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application with its own Store. Compatible with ``uvicorn --factory``."""
    settings = settings or get_settings()
    configure_logging(settings)

    store = Store(
        SnapshotWriter(settings.data_file),
        cascade_post_delete=settings.cascade_post_delete,
        strict_persistence=settings.strict_persistence,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.restore_on_start and store.reload():
            logger.info("Loaded snapshot from %s", settings.data_file)
        logger.info("Server start with port %s (env=%s)", settings.port, settings.app_env)
        yield
        logger.info("Shutting down server...")
        try:
            store.flush()
        except PersistenceError:
            logger.exception("Final snapshot failed")
        logger.info("Server has been shut down")

    app = FastAPI(title="Blog API", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.add_middleware(AccessLogMiddleware)

    @app.exception_handler(RequestValidationError)
    async def malformed_request(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

    @app.exception_handler(PersistenceError)
    async def persistence_failed(request: Request, exc: PersistenceError):
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    app.include_router(posts_router.router)
    app.include_router(comments_router.router)
    app.include_router(profile_router.router)
    return app
