# wildtrack/database.py
"""
Engine and session management for the record store.
SQLite (file or in-memory) for development and tests, any SQLAlchemy URL in production.
"""
import logging
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from wildtrack.config import settings

logger = logging.getLogger(__name__)

_is_sqlite = settings.DATABASE_URL.startswith("sqlite")

if _is_sqlite:
    _engine_kwargs = {"connect_args": {"check_same_thread": False}}
    # A bare "sqlite://" URL is in-memory: every session must share one connection
    if settings.DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        _engine_kwargs["poolclass"] = StaticPool
    engine = create_engine(settings.DATABASE_URL, **_engine_kwargs)
else:
    engine = create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,
        pool_recycle=1800,
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """One session per request, closed once the response is produced."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    # Models must be imported so their tables are registered on Base.metadata
    from wildtrack import models  # noqa: F401

    logger.info("Initializing database schema...")
    Base.metadata.create_all(bind=engine)
