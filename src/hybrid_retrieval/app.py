"""
Hybrid Retrieval Engine - Application Factory
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from hybrid_retrieval import __version__
from hybrid_retrieval.core.config import settings
from hybrid_retrieval.core.logging import get_logger, setup_logging
from hybrid_retrieval.api.routes import documents, health, search
from hybrid_retrieval.api.middleware.error_handler import error_handler_middleware
from hybrid_retrieval.api.middleware.logging import logging_middleware
from hybrid_retrieval.ingestion.samples import seed_sample_documents
from hybrid_retrieval.retrieval.engine import RetrievalEngine

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan handler for startup and shutdown events."""
    # Startup
    setup_logging()
    logger.info("Starting Hybrid Retrieval Engine", env=settings.RETRIEVAL_ENV)

    engine: RetrievalEngine = app.state.engine
    if settings.SEED_SAMPLE_DOCUMENTS and engine.stats().document_count == 0:
        await seed_sample_documents(engine)
        logger.info("Sample documents loaded", document_count=engine.stats().document_count)

    yield

    # Shutdown
    logger.info("Shutting down Hybrid Retrieval Engine")


def create_app(engine: Optional[RetrievalEngine] = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Hybrid Retrieval Engine",
        description="Lexical + semantic document search API",
        version=__version__,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    app.state.engine = engine or RetrievalEngine.from_settings()

    # Last added runs first: logging -> error_handler
    app.middleware("http")(error_handler_middleware)
    app.middleware("http")(logging_middleware)

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(documents.router, prefix="/api/v1", tags=["Documents"])
    app.include_router(search.router, prefix="/api/v1", tags=["Search"])

    return app
