"""Database session management.

Provides engine and session factories for SQLite database access.
Each session opens its own connection and releases it on close, so no
connection is shared between requests or ingestion runs.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from vodcatalog.config import DEFAULT_DB_PATH
from vodcatalog.db.schema import Base

# Module-level engine cache, keyed by resolved db path
_engine_cache: dict[str, Engine] = {}

# Module-level session factory cache
_session_factory_cache: dict[str, sessionmaker] = {}


def enable_sqlite_savepoints(engine: Engine) -> Engine:
    """Let SQLAlchemy own transaction boundaries on a pysqlite engine.

    pysqlite issues its own BEGIN lazily and breaks SAVEPOINT handling.
    Turning off its implicit transactions and emitting BEGIN ourselves
    makes ``Session.begin_nested()`` behave as documented.

    Args:
        engine: Engine created with the sqlite+pysqlite dialect.

    Returns:
        The same engine, for chaining.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")

    return engine


def create_sqlite_engine(url: str, **kwargs: Any) -> Engine:
    """Create a SQLite engine with savepoint support enabled.

    Args:
        url: SQLAlchemy database URL.
        **kwargs: Extra arguments for ``create_engine``.

    Returns:
        Configured engine.
    """
    kwargs.setdefault("connect_args", {"check_same_thread": False})
    engine = create_engine(url, echo=False, **kwargs)
    return enable_sqlite_savepoints(engine)


def get_engine(db_path: Path | None = None) -> Engine:
    """Get SQLAlchemy engine for the database.

    Engines are cached by resolved db_path. The engine uses NullPool, so
    the cache holds configuration only, never an open connection.

    Args:
        db_path: Path to SQLite database file. Defaults to data/vod.db.

    Returns:
        SQLAlchemy engine instance (cached).
    """
    if db_path is None:
        db_path = DEFAULT_DB_PATH

    db_path = Path(db_path)
    cache_key = str(db_path.resolve())

    if cache_key in _engine_cache:
        return _engine_cache[cache_key]

    # Create parent directories only when creating a new engine
    db_path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_sqlite_engine(f"sqlite:///{db_path}", poolclass=NullPool)
    _engine_cache[cache_key] = engine

    return engine


def get_session_factory(db_path: Path | None = None) -> sessionmaker:
    """Get cached session factory for the database.

    Args:
        db_path: Path to SQLite database file.

    Returns:
        Cached sessionmaker instance.
    """
    if db_path is None:
        db_path = DEFAULT_DB_PATH

    db_path = Path(db_path)
    cache_key = str(db_path.resolve())

    if cache_key in _session_factory_cache:
        return _session_factory_cache[cache_key]

    engine = get_engine(db_path)
    factory = sessionmaker(bind=engine)
    _session_factory_cache[cache_key] = factory

    return factory


def init_db(db_path: Path | None = None) -> None:
    """Initialize database schema.

    Called once during application startup to create tables.

    Args:
        db_path: Path to SQLite database file.
    """
    engine = get_engine(db_path)
    Base.metadata.create_all(engine)
