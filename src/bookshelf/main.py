"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bookshelf.api import get_api_router
from bookshelf.config import settings
from bookshelf.core.auth import ActorContextMiddleware, RequestIdMiddleware
from bookshelf.core.database import async_engine, async_session_factory
from bookshelf.core.errors import register_exception_handlers
from bookshelf.core.logging import RequestLoggingMiddleware, configure_logging
from bookshelf.core.permissions import AuthorizationEngine


configure_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Builds the authorization engine from the permission catalog before the
    first request is served. Restart the service (or call
    ``app.state.authorization_engine.initialize()``) after permissions are
    added or removed.
    """
    logger.info(
        "application_startup",
        app_name=settings.app_name,
        environment=settings.environment,
    )

    authorization_engine = AuthorizationEngine(async_session_factory)
    await authorization_engine.initialize()
    app.state.authorization_engine = authorization_engine

    yield

    logger.info("application_shutdown")

    await async_engine.dispose()
    logger.info("database_engine_disposed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title=settings.app_name,
        description="Book catalog API with JWT authentication and role-based permissions",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
        # Disable docs in production
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
    )

    cors_origins = settings.cors_origins
    if settings.is_development and not cors_origins:
        cors_origins = ["http://localhost:3000", "http://localhost:5173"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )

    # Middleware added last runs first: request id, then actor, then logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(ActorContextMiddleware)
    app.add_middleware(RequestIdMiddleware)

    # Register exception handlers for RFC 7807 error responses
    register_exception_handlers(app)

    app.include_router(get_api_router())

    return app
