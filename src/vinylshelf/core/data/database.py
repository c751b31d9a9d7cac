"""Database connection and session management for vinylshelf."""

import os
import threading
from collections.abc import Generator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path

from loguru import logger
from sqlalchemy import create_engine, event
from sqlalchemy.engine.base import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from vinylshelf.core.utils.path_helper import get_app_data_path


class Base(DeclarativeBase):
    """Declarative base for all models."""


# Global engine instance shared by every repository
_ENGINE: Engine | None = None
_ENGINE_LOCK = threading.RLock()

# Global session factory
_SESSION_FACTORY: sessionmaker[Session] | None = None


def get_db_path() -> Path:
    """Get the default SQLite database path.

    Returns:
        Path: The database file path
    """
    return get_app_data_path() / "vinylshelf.db"


def get_database_url(db_path: Path | str | None = None) -> str:
    """Resolve the database URL.

    ``DATABASE_URL`` wins when set; otherwise a SQLite file is used.

    Args:
        db_path: Path to a SQLite database file (default: app data directory)

    Returns:
        SQLAlchemy database URL
    """
    if db_path is None:
        env_url = os.getenv("DATABASE_URL")
        if env_url:
            return env_url
        db_path = get_db_path()

    db_path = str(db_path)
    if "://" in db_path:
        return db_path
    if db_path == ":memory:":
        return "sqlite://"

    # Create the directory if it doesn't exist
    os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)
    return f"sqlite:///{db_path}"


def create_database_engine(db_url: str) -> Engine:
    """Create an engine for the given URL with SQLite-specific settings applied.

    Args:
        db_url: SQLAlchemy database URL

    Returns:
        SQLAlchemy engine
    """
    if not db_url.startswith("sqlite"):
        return create_engine(db_url, echo=False, pool_pre_ping=True)

    if db_url in ("sqlite://", "sqlite:///:memory:"):
        # In-memory databases live on a single connection
        engine = create_engine(
            db_url,
            echo=False,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_engine(
            db_url,
            echo=False,
            poolclass=NullPool,  # Disable connection pooling for SQLite - prevents lock issues
            connect_args={"check_same_thread": False, "timeout": 120.0},
        )

    event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


def _set_sqlite_pragmas(dbapi_connection, _connection_record) -> None:  # noqa: ANN001
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode = WAL")
    cursor.execute("PRAGMA busy_timeout = 120000")
    cursor.execute("PRAGMA synchronous = NORMAL")
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def get_engine(db_path: Path | str | None = None) -> Engine:
    """Create or return the shared SQLAlchemy engine.

    Args:
        db_path: Path to the database file (default: ``DATABASE_URL`` or app data directory)

    Returns:
        SQLAlchemy engine
    """
    global _ENGINE

    # Use thread lock to ensure thread safety when initializing the engine
    with _ENGINE_LOCK:
        if _ENGINE is None:
            db_url = get_database_url(db_path)
            _ENGINE = create_database_engine(db_url)
            logger.debug(f"Created database engine for {_ENGINE.url!r}")

    return _ENGINE


def get_session_factory(engine: Engine | None = None) -> sessionmaker[Session]:
    """Create or return the shared session factory bound to the given engine.

    Args:
        engine: SQLAlchemy engine (will use the global engine if None)

    Returns:
        Session factory
    """
    global _SESSION_FACTORY

    with _ENGINE_LOCK:
        if _SESSION_FACTORY is None:
            if engine is None:
                engine = get_engine()

            _SESSION_FACTORY = sessionmaker(
                bind=engine,
                expire_on_commit=False,  # Prevents additional queries after commit
                autoflush=False,  # Only flush when explicitly called or on commit
            )

    return _SESSION_FACTORY


def get_session(engine: Engine | None = None) -> Session:
    """Create and return a new database session.

    NOTE: It's recommended to use session_scope() instead of this function
    to ensure proper session cleanup.

    Args:
        engine: SQLAlchemy engine (will use the global engine if None)

    Returns:
        SQLAlchemy session
    """
    return get_session_factory(engine)()


def reset_engine() -> None:
    """Dispose the shared engine and session factory."""
    global _ENGINE, _SESSION_FACTORY

    with _ENGINE_LOCK:
        if _ENGINE is not None:
            _ENGINE.dispose()
        _ENGINE = None
        _SESSION_FACTORY = None


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Provide a transactional scope around a series of operations.

    Yields:
        SQLAlchemy session for database operations

    Example:
        with session_scope() as session:
            session.add(some_object)
            # No need to call commit - it happens automatically if no exceptions
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception as e:
        logger.exception(f"Session error: {e}")
        session.rollback()
        raise
    finally:
        session.close()


def init_database(db_path: Path | str | None = None) -> Engine:
    """Initialize the database schema.

    Args:
        db_path: Path to the database file (default: app data directory)

    Returns:
        The engine the schema was created on
    """
    engine = get_engine(db_path)

    # Import models here to avoid circular imports
    from vinylshelf.core.data import models  # noqa: F401

    logger.info(f"Creating database schema at {engine.url!r}")
    Base.metadata.create_all(engine)
    logger.info("Database schema created")
    return engine


def utc_now() -> datetime:
    """Return current datetime in UTC.

    Returns:
        Current UTC datetime
    """
    return datetime.now(UTC)
