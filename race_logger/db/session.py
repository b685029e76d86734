from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from race_logger.config.settings import settings
from race_logger.db.models import Base


def _is_postgresql(url: str) -> bool:
    return url.lower().startswith(("postgresql", "postgres"))


def _require_psycopg2() -> None:
    """Fail early with an install hint when psycopg2 is missing.

    The import has to be real (find_spec is not enough): create_engine()
    imports the driver lazily and the resulting error is much less helpful.
    """
    try:
        import psycopg2  # noqa: F401
    except ImportError as e:
        logger.error("DATABASE_URL points at PostgreSQL but psycopg2 is not installed (pip install psycopg2-binary)")
        raise ImportError("psycopg2 is required for PostgreSQL; install psycopg2-binary") from e


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """Turn on FK enforcement (and ON DELETE CASCADE) for SQLite connections."""

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(database_url: str, **kwargs) -> Engine:
    """Create an engine with the connection settings used for this project."""
    is_sqlite = database_url.lower().startswith("sqlite")
    connect_args = {}
    if is_sqlite:
        connect_args = {"check_same_thread": False}
    elif _is_postgresql(database_url):
        _require_psycopg2()
        connect_args = {"connect_timeout": 10, "application_name": "race-logger"}

    engine = create_engine(
        database_url,
        connect_args=connect_args,
        pool_pre_ping=True,
        **kwargs,
    )
    if is_sqlite:
        enable_sqlite_foreign_keys(engine)
    return engine


# Created on first use so importing the package never opens a connection
_engine: Engine | None = None
_SessionLocal: sessionmaker[Session] | None = None


def _get_engine() -> Engine:
    global _engine
    if _engine is None:
        url = settings.database_url
        if _is_postgresql(url):
            _engine = build_engine(url, pool_recycle=3600)
        else:
            _engine = build_engine(url)
        logger.bind(dialect=_engine.dialect.name).info("Database engine ready")
    return _engine


def get_engine() -> Engine:
    return _get_engine()


def _get_session_local() -> sessionmaker[Session]:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autoflush=False, expire_on_commit=False, bind=_get_engine())
    return _SessionLocal


def check_database_connection() -> None:
    """Round-trip ``SELECT 1``; raises whatever the driver raised."""
    url = settings.database_url
    try:
        with _get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.bind(database_url=url).error(f"Database unreachable: {e}")
        raise
    logger.bind(database_url=url).info("Database reachable")


def create_schema(engine: Engine | None = None) -> None:
    """Create all tables (development and tests; production uses migrations)."""
    target = engine or _get_engine()
    Base.metadata.create_all(bind=target)
    logger.info(f"Database schema created ({len(Base.metadata.tables)} tables)")


def _commit_leftovers(session: Session) -> None:
    """Commit ORM changes a caller made outside the repositories."""
    pending = len(session.new) + len(session.dirty) + len(session.deleted)
    if not pending:
        return
    session.commit()
    logger.debug(f"Committed {pending} pending ORM changes on session exit")


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Session scoped to a ``with`` block.

    Repositories commit their own writes; anything else left pending is
    committed on exit, and any exception rolls the session back.
    """
    session = _get_session_local()()
    try:
        yield session
        _commit_leftovers(session)
    except Exception as e:
        logger.bind(error_type=type(e).__name__).error(f"Rolling back database session: {e}")
        session.rollback()
        raise
    finally:
        session.close()
