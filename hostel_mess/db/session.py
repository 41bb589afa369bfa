"""Database session management."""
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from hostel_mess.config.settings import settings


def build_engine(url: str = None, **overrides) -> Engine:
    """
    Create an engine for the configured database.

    SQLite connections are shared across FastAPI worker threads, so the
    same-thread check is disabled there; pool sizing only applies to
    server databases.
    """
    url = url or settings.DATABASE_URL
    kwargs = {
        "pool_pre_ping": True,
        "echo": settings.DB_ECHO,
    }
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_size"] = settings.DB_POOL_SIZE
        kwargs["max_overflow"] = settings.DB_POOL_OVERFLOW
    kwargs.update(overrides)
    return create_engine(url, **kwargs)


engine = build_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session; services commit or roll back, this only closes."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
