"""Shared API dependencies."""
from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.templating import Jinja2Templates
from loguru import logger
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from kairos.config import Settings
from kairos.core.srs.scheduler import SchedulerAdapter, SchedulingAlgorithm
from kairos.services.card_store import CardStore
from kairos.services.review import ReviewService


@dataclass(frozen=True)
class AppContext:
    """Process-wide resources built once by ``create_app``."""

    settings: Settings
    engine: Engine
    session_factory: sessionmaker[Session]
    templates: Jinja2Templates
    algorithm: SchedulingAlgorithm


def get_context(request: Request) -> AppContext:
    """Return the application context attached at startup."""

    return request.app.state.context


def get_db(context: AppContext = Depends(get_context)) -> Generator[Session, None, None]:
    """Yield a database session for request lifetime."""

    db = context.session_factory()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database session error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def get_templates(context: AppContext = Depends(get_context)) -> Jinja2Templates:
    return context.templates


def get_algorithm(context: AppContext = Depends(get_context)) -> SchedulingAlgorithm:
    return context.algorithm


def get_review_service(
    db: Session = Depends(get_db),
    algorithm: SchedulingAlgorithm = Depends(get_algorithm),
) -> ReviewService:
    """Assemble the review workflow with request-scoped dependencies."""

    return ReviewService(CardStore(db), SchedulerAdapter(algorithm))
