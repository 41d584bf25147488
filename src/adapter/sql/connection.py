import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from adapter.sql.tables import Base

logger = logging.getLogger(__name__)

# Engine-level SQL echo is too noisy for structured logs
logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

_engine_cache: dict[str, Engine] = {}


def _is_sqlite(url: str) -> bool:
    return url.startswith('sqlite')


def _is_memory(url: str) -> bool:
    return url in ('sqlite://', 'sqlite:///:memory:') or ':memory:' in url


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(database_url: str) -> Engine:
    """Create an engine for database_url.

    SQLite connections are shared across the request threadpool, and an
    in-memory database is pinned to a single connection so every session
    sees the same data.
    """
    kwargs = {}
    if _is_sqlite(database_url):
        kwargs['connect_args'] = {'check_same_thread': False}
        if _is_memory(database_url):
            kwargs['poolclass'] = StaticPool

    engine = create_engine(database_url, **kwargs)
    if _is_sqlite(database_url):
        event.listen(engine, 'connect', _enable_sqlite_foreign_keys)
    return engine


def reset_engines():
    for engine in _engine_cache.values():
        engine.dispose()
    _engine_cache.clear()


def ping(engine: Engine) -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text('SELECT 1'))
        return True
    except SQLAlchemyError as e:
        logger.error("[DB] Ping failed", extra={"error": str(e)[:200]})
        return False


def get_engine(database_url: str) -> Engine | None:
    """Get a cached engine for database_url.

    Returns:
        Engine, or None if the database cannot be reached
    """
    engine = _engine_cache.get(database_url)
    if engine is not None:
        return engine

    try:
        engine = create_db_engine(database_url)
    except (SQLAlchemyError, ValueError) as e:
        logger.error(f"[DB] Invalid database configuration: {str(e)[:200]}")
        return None

    if not ping(engine):
        engine.dispose()
        return None

    _engine_cache[database_url] = engine
    logger.info("[DB] Connected successfully", extra={"dialect": engine.dialect.name})
    return engine


def ensure_schema(engine: Engine) -> bool:
    """Create tables and indexes that do not exist yet."""
    try:
        Base.metadata.create_all(engine)
        return True
    except SQLAlchemyError as e:
        logger.error("Failed to create database schema", extra={"error": str(e)})
        return False
