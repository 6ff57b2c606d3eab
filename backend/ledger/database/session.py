"""
Database Connection and Session Management
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from contextlib import contextmanager
from typing import Generator
import logging

from ledger.database.models import Base

logger = logging.getLogger(__name__)

# Engine and session factory, created by init_db at application startup
engine = None
SessionLocal = None


def _engine_options(database_url: str) -> dict:
    options = {"pool_pre_ping": True}  # Verify connections before using them
    if not database_url.startswith("sqlite"):
        return options

    options["connect_args"] = {"check_same_thread": False}
    if database_url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in database_url:
        # In-memory SQLite lives on a single connection
        options["poolclass"] = StaticPool
    return options


def init_db(database_url: str):
    """
    Initialize the database connection and create tables.

    Args:
        database_url: SQLAlchemy connection URL
    """
    global engine, SessionLocal

    logger.info("Initializing database connection...")

    engine = create_engine(
        database_url,
        echo=False,  # Set to True for SQL query logging
        **_engine_options(database_url),
    )

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database initialized successfully")


def _require_session_factory():
    if SessionLocal is None:
        raise RuntimeError("Database is not initialized; call init_db() first")
    return SessionLocal


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for FastAPI to get database session.

    Yields:
        Database session
    """
    db = _require_session_factory()()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context():
    """
    Context manager for database sessions outside of FastAPI.

    Usage:
        with get_db_context() as db:
            rows = get_db_service(db).find("transactions")

    Yields:
        Database session
    """
    db = _require_session_factory()()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def close_db():
    """Close database connection."""
    global engine, SessionLocal
    if engine:
        engine.dispose()
        logger.info("Database connection closed")
    engine = None
    SessionLocal = None
