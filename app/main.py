"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.api import api_router, health_router
from app.core.config import Settings, get_settings
from app.core.database import Database
from app.core.error_handlers import register_exception_handlers
from app.core.logging import configure_logging

APP_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the Database on startup unless one was injected; dispose the one we opened on shutdown."""
    owned = app.state.database is None
    if owned:
        settings: Settings = app.state.settings
        app.state.database = Database(settings.DATABASE_URL, echo=settings.DEBUG)
        logger.info("Database engine created")
    try:
        yield
    finally:
        if owned:
            app.state.database.dispose()
            app.state.database = None
            logger.info("Database engine disposed")


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Build the application. Tests pass their own settings and an in-memory Database."""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Users API",
        version=APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "dev" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    register_exception_handlers(app)

    app.include_router(api_router, prefix=settings.API_PREFIX)
    app.include_router(health_router)

    @app.get("/")
    def root() -> dict[str, object]:
        """Root route; minimal payload for discovery."""
        return {
            "success": True,
            "message": "Users API",
            "version": APP_VERSION,
            "endpoints": {
                "users": f"{settings.API_PREFIX}/users",
                "health": "/health",
            },
        }

    return app


app = create_app()
