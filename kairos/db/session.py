"""Database session and engine management."""
from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool
from loguru import logger

from kairos.config import Settings


def build_engine(settings: Settings) -> Engine:
    """Create the process-wide engine and connection pool."""

    url = make_url(settings.resolve_database_url())
    connect_args = {}
    if url.get_backend_name() == "postgresql":
        connect_args["connect_timeout"] = settings.DB_CONNECT_TIMEOUT_SECONDS
        if settings.DB_STATEMENT_TIMEOUT_MS:
            connect_args["options"] = f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}"

    logger.info(f"Connecting to {url.render_as_string(hide_password=True)}")
    return create_engine(
        url,
        pool_pre_ping=True,
        poolclass=QueuePool,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT_SECONDS,
        pool_recycle=3600,  # Recycle connections after 1 hour
        connect_args=connect_args,
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Return a session factory bound to ``engine``."""

    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        expire_on_commit=False,  # Keep objects usable after commit
    )
