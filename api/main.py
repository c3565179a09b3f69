"""
FastAPI application initialization and configuration.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import health
from api.routes.v1 import applications, jobs
from core.config import Settings, get_settings
from core.context import AppContext, build_context
from core.middleware import RequestLoggingMiddleware, setup_error_handlers, setup_logging

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    context: Optional[AppContext] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to use; read from the environment when omitted
        context: Prebuilt context, e.g. one pointing at a test database
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info(f"Starting {settings.app_name} in {settings.app_env} environment")
        await app.state.context.db.create_all()

        yield

        # Shutdown
        logger.info(f"Shutting down {settings.app_name}")
        await app.state.context.close()

    app = FastAPI(
        title=settings.app_name,
        description="Job role capacity and application lifecycle API",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.context = context or build_context(settings)

    # Setup error handlers (before middleware)
    setup_error_handlers(app)

    # Add middleware (order matters - they execute in reverse order)
    app.add_middleware(
        RequestLoggingMiddleware,
        log_request_body=settings.log_request_body,
        max_body_size=settings.log_max_body_size,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check routes
    app.include_router(health.router, tags=["Health"])

    # API v1 routes
    app.include_router(
        jobs.router,
        prefix=f"{settings.api_v1_prefix}/jobs",
        tags=["Jobs"],
    )
    app.include_router(
        applications.router,
        prefix=f"{settings.api_v1_prefix}/applications",
        tags=["Applications"],
    )

    return app


def get_app() -> FastAPI:
    """Factory for ``uvicorn --factory api.main:get_app``."""
    settings = get_settings()
    setup_logging(log_level=settings.log_level, json_logs=settings.json_logs)
    return create_app(settings)


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "api.main:get_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
