"""
Engine construction and schema creation.

SQLite (the default, in memory) gets a static pool so every session sees the
same database; server databases get the pooled, pre-pinged engine.
"""

import logging

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from workshop.core.config import settings

from . import models  # noqa: F401  registers the tables on SQLModel.metadata

logger = logging.getLogger(__name__)


def get_engine(database_url: str | None = None) -> Engine:
    """
    Create an engine for ``database_url`` (default: ``settings.DATABASE_URL``).

    Args:
        database_url: SQLAlchemy URL

    Returns:
        Configured engine
    """
    url = database_url or settings.DATABASE_URL
    if url.startswith("sqlite"):
        engine_kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs = {
            "pool_pre_ping": True,  # Verify connections before use
            "pool_recycle": 3600,  # Recycle connections every hour
            "pool_size": 10,
            "max_overflow": 20,
        }
    return create_engine(url, echo=settings.LOG_SQL, **engine_kwargs)


def create_db_and_tables(engine: Engine) -> None:
    """Create every table that does not exist yet."""
    SQLModel.metadata.create_all(engine)
    logger.info("Database schema ready on %s", engine.url.render_as_string())
