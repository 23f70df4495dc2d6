"""Database session factory and configuration.

Provides database connectivity and transactional session scopes for the
document lifecycle engine. Every lifecycle operation runs inside exactly one
``session_scope()`` so the document row and its history rows are committed
together or not at all.
"""

from contextlib import contextmanager
from functools import lru_cache
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .config import get_settings


def create_db_engine(database_url: str, echo: bool = False, **engine_options) -> Engine:
    """Create an engine with settings appropriate for the dialect.

    Pool settings only apply to server databases (not SQLite). SQLite
    connections get foreign key enforcement switched on so history rows
    cascade with their document, and a Unicode-aware lower() so title
    search folds non-ASCII letters. Extra keyword arguments are passed to
    create_engine unchanged (tests use them for an in-memory StaticPool).
    """
    engine_kwargs = {
        "pool_pre_ping": True,  # Verify connections before using
        "echo": echo,
    }

    if not database_url.startswith("sqlite"):
        engine_kwargs["pool_size"] = 5
        engine_kwargs["max_overflow"] = 10

    engine_kwargs.update(engine_options)

    engine = create_engine(database_url, **engine_kwargs)

    if database_url.startswith("sqlite"):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        event.listen(engine, "connect", _register_unicode_lower)

    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _unicode_lower(value):
    if value is None:
        return None
    return str(value).lower()


def _register_unicode_lower(dbapi_connection, connection_record):
    # SQLite's built-in lower() only folds ASCII letters
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


@lru_cache()
def get_engine() -> Engine:
    """Engine for the configured DATABASE_URL (created on first use)."""
    settings = get_settings()
    return create_db_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


@lru_cache()
def get_session_factory() -> sessionmaker:
    return make_session_factory(get_engine())


@contextmanager
def session_scope(session_factory: Optional[sessionmaker] = None) -> Generator[Session, None, None]:
    """Context manager for one unit of work.

    Usage:
        with session_scope() as session:
            session.query(Document).all()

    Automatically commits on success, rolls back on exception.
    """
    factory = session_factory or get_session_factory()
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
