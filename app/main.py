"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1 import router as v1_router
from app.core.cache import Cache
from app.core.config import Settings, get_settings
from app.core.database import Database
from app.core.errors import (
    ApiError,
    api_error_handler,
    http_exception_handler,
    request_validation_handler,
    unhandled_exception_handler,
)
from app.core.logging import configure_logging
from app.core.middleware import (
    FixedWindowRateLimiter,
    body_size_limit_middleware,
    rate_limit_middleware,
    request_logging_middleware,
)
from app.core.security import TokenIssuer

logger = logging.getLogger(__name__)

API_TITLE = "OrçamentosOnline API"
API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open store/cache connections at startup; drain them at shutdown (SIGTERM/SIGINT)."""
    settings: Settings = app.state.settings
    if app.state.database is None:
        app.state.database = Database(settings.DATABASE_URL, echo=settings.DEBUG)
    if app.state.cache is None and settings.REDIS_URL:
        password = settings.REDIS_PASSWORD.get_secret_value() if settings.REDIS_PASSWORD else None
        app.state.cache = Cache(settings.REDIS_URL, password=password)
    if settings.DB_CREATE_TABLES:
        app.state.database.create_all()
    app.state.started_at = time.monotonic()
    logger.info(
        "API started",
        extra={"environment": settings.APP_ENV, "cache_configured": app.state.cache is not None},
    )

    yield

    logger.info("Shutting down, closing store and cache connections")
    if app.state.cache is not None:
        app.state.cache.close()
    app.state.database.dispose()


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
    cache: Cache | None = None,
) -> FastAPI:
    """
    Build the application. database and cache may be injected (tests);
    otherwise they are created from settings during startup.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=API_TITLE,
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.cache = cache
    app.state.token_issuer = TokenIssuer.from_settings(settings)
    app.state.started_at = time.monotonic()

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Middleware added last runs first: CORS, then logging, body limit, rate limit.
    limiter = FixedWindowRateLimiter(settings.RATE_LIMIT_MAX, settings.rate_limit_window_seconds)
    app.middleware("http")(rate_limit_middleware(limiter))
    app.middleware("http")(body_size_limit_middleware(settings.MAX_BODY_BYTES))
    app.middleware("http")(request_logging_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )

    app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": API_TITLE, "docs": settings.API_V1_PREFIX}

    return app


app = create_app()
