"""Database initialization and session management.

Provides engine setup, session helpers and schema verification for the
SQLite task store.
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy import event, func
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine, select

from .config import get_database_url, get_settings
from .schemas.database import AppSetting, Comment, Task


logger = logging.getLogger(__name__)


def enable_foreign_keys(engine: Engine) -> Engine:
    """Turn on SQLite foreign key enforcement for every new connection."""

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Get the cached engine for the configured database."""
    settings = get_settings()
    engine = create_engine(get_database_url(), echo=settings.database.echo_sql)
    return enable_foreign_keys(engine)


def create_db_and_tables(engine: Engine | None = None) -> None:
    """Create database and all tables.

    Safe to call multiple times - only creates tables that don't exist.
    """
    engine = engine or get_engine()
    SQLModel.metadata.create_all(engine)
    logger.info(f"Database initialized at: {engine.url}")


def get_sync_session(engine: Engine | None = None) -> Session:
    """Get a synchronous database session.

    Returns:
        SQLModel Session for database operations

    """
    return Session(engine or get_engine())


@contextmanager
def get_session_context(engine: Engine | None = None) -> Generator[Session, None, None]:
    """Context manager for database sessions with automatic cleanup.

    Usage:
        with get_session_context() as session:
            # Use session here
            pass

    """
    session = Session(engine or get_engine())
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_database(engine: Engine | None = None) -> int:
    """Initialize the database with tables and return the current task count."""
    create_db_and_tables(engine)

    with get_session_context(engine) as session:
        task_count = session.exec(select(func.count()).select_from(Task)).one()

    logger.info(f"Database ready. Current task count: {task_count}")
    return task_count


def verify_database(engine: Engine | None = None) -> bool:
    """Verify database integrity and schema.

    Returns:
        True if database is healthy, False otherwise

    """
    try:
        with get_session_context(engine) as session:
            counts = {
                model.__tablename__: session.exec(
                    select(func.count()).select_from(model)
                ).one()
                for model in (Task, Comment, AppSetting)
            }
    except Exception as e:
        logger.error(f"Database verification failed: {e}")
        return False

    logger.info(f"Database verification successful: {counts}")
    return True


__all__ = [
    "create_db_and_tables",
    "enable_foreign_keys",
    "get_engine",
    "get_session_context",
    "get_sync_session",
    "init_database",
    "verify_database",
]
