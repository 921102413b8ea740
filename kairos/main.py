"""FastAPI application factory.

Run with ``uvicorn kairos.main:create_app --factory``.
"""
from __future__ import annotations

import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI
from fastapi.templating import Jinja2Templates
from loguru import logger

from kairos.api.deps import AppContext
from kairos.api.endpoints import review
from kairos.config import Settings, get_settings
from kairos.core.srs.scheduler import FSRSAlgorithm, SchedulingAlgorithm
from kairos.db.session import build_engine, build_session_factory


tags_metadata: List[dict[str, str]] = [
    {"name": "review", "description": "Select, reveal and grade due flashcards."},
    {"name": "health", "description": "Liveness probe."},
]


def configure_logging(level: str) -> None:
    """Send loguru output to stderr at ``level``."""

    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def build_context(
    settings: Settings, algorithm: Optional[SchedulingAlgorithm] = None
) -> AppContext:
    """Build every process-wide resource up front."""

    engine = build_engine(settings)
    return AppContext(
        settings=settings,
        engine=engine,
        session_factory=build_session_factory(engine),
        templates=Jinja2Templates(directory=str(settings.TEMPLATES_DIR)),
        algorithm=algorithm or FSRSAlgorithm.from_settings(settings),
    )


def create_app(
    settings: Optional[Settings] = None,
    algorithm: Optional[SchedulingAlgorithm] = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Raises ``ConfigurationError`` when required settings are missing, so a
    misconfigured process never starts serving.
    """

    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)
    context = build_context(settings, algorithm)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        context.engine.dispose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Spaced-repetition review of vocabulary flashcards.",
        version="0.1.0",
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )
    app.state.context = context

    app.include_router(review.router)
    logger.info(f"{settings.PROJECT_NAME} ready")
    return app
