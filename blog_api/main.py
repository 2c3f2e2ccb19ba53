from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from blog_api.auth.middleware import auth_gate
from blog_api.core import db
from blog_api.core.config import Settings, configure_logging, load_settings
from blog_api.core.cors import cors_filter
from blog_api.core.error_handlers import add_exception_handlers, fallback_errors
from blog_api.gql import router as gql_router
from blog_api.uploads import router as uploads_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    # Connect the DB pool once per process, before serving traffic.
    if settings.database_url:
        await db.init_pool(settings.database_url)
        logger.info("database_connected")
    else:
        logger.warning("database_disabled reason=DATABASE_URL not set")
    try:
        yield
    finally:
        await db.close_pool()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    settings.upload_dir.mkdir(parents=True, exist_ok=True)

    app = FastAPI(title="blog-api", lifespan=lifespan)
    app.state.settings = settings

    add_exception_handlers(app)

    # Last registered runs first: CORS -> fallback errors -> auth gate -> route.
    app.middleware("http")(auth_gate)
    app.middleware("http")(fallback_errors)
    app.middleware("http")(cors_filter)

    app.mount("/images", StaticFiles(directory=settings.upload_dir), name="images")
    app.include_router(uploads_router.router, tags=["uploads"])
    app.include_router(gql_router.build_router(settings), prefix="/graphql", tags=["graphql"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


def run() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    logger.info("server_starting host=%s port=%s", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
