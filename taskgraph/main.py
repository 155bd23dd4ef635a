"""FastAPI application entry point.

This module defines the main FastAPI application with CORS middleware,
lifespan logging, and API routing configuration.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskgraph import __version__
from taskgraph.api import router as api_router
from taskgraph.core.config import settings
from taskgraph.core.logging import get_logger, setup_logging

# Initialize logging system
setup_logging(
    log_level=settings.LOG_LEVEL,
    log_file=settings.LOG_FILE,
    service_name=settings.PROJECT_NAME,
    enable_json=settings.LOG_JSON_FORMAT,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:  # noqa: ARG001 - Required by FastAPI lifespan interface
    """Log application startup and shutdown."""
    logger.info(
        f"Starting {settings.PROJECT_NAME}",
        extra={
            "context": {
                "action": "application_startup",
                "version": __version__,
                "debug": settings.DEBUG,
                "rules_dir": settings.RULES_DIR,
            }
        },
    )

    yield

    logger.info(
        f"Shutting down {settings.PROJECT_NAME}",
        extra={"context": {"action": "application_shutdown"}},
    )


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Dependency rule validation and execution ordering",
    version=__version__,
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint.

    Returns basic API information.
    """
    return {
        "name": settings.PROJECT_NAME,
        "version": __version__,
        "docs": "/docs",
    }
