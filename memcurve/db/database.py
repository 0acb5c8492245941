from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from typing import Optional

from loguru import logger
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from config import get_settings
from memcurve.db.models import Base

_engines: dict[str, Engine] = {}


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across threads."""
    if _is_memory_sqlite(url):
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, echo=echo, pool_pre_ping=True)


def get_engine(url: Optional[str] = None) -> Engine:
    """Get the (cached) engine for a URL, defaulting to the configured one."""
    settings = get_settings()
    url = url or settings.database_url
    if url not in _engines:
        _engines[url] = create_db_engine(url, echo=settings.log_level == "DEBUG")
    return _engines[url]


def init_db(engine: Optional[Engine] = None) -> None:
    """Initialize database tables."""
    engine = engine or get_engine()
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables initialized")


@contextmanager
def session_scope(engine: Optional[Engine] = None) -> Generator[Session, None, None]:
    """Provide a transactional scope around a series of operations."""
    factory = sessionmaker(bind=engine or get_engine(), autocommit=False, autoflush=False)
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:  # Intentionally broad - rollback on any error before re-raising
        session.rollback()
        raise
    finally:
        session.close()
