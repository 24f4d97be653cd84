"""Database session factory and configuration.

Provides database connectivity and session management for the backend.
The engine is created on first use from Settings.DATABASE_URL.
"""

from functools import lru_cache
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .config import get_settings


@lru_cache()
def get_engine() -> Engine:
    """Create the SQLAlchemy engine (cached).

    Pool settings only apply to server databases (not SQLite).
    """
    database_url = get_settings().DATABASE_URL

    engine_kwargs = {
        "pool_pre_ping": True,  # Verify connections before using
        "echo": False,
    }
    if not database_url.startswith("sqlite"):
        engine_kwargs["pool_size"] = 5
        engine_kwargs["max_overflow"] = 10

    return create_engine(database_url, **engine_kwargs)


@lru_cache()
def get_sessionmaker() -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


def get_db() -> Generator[Session, None, None]:
    """Dependency for FastAPI endpoints.

    Usage:
        @router.get("/tickets")
        def list_tickets(db: Session = Depends(get_db)):
            return db.query(Ticket).all()
    """
    db = get_sessionmaker()()
    try:
        yield db
    finally:
        db.close()
