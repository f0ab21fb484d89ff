"""Async engine, session factory and schema bootstrap."""

from pathlib import Path
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from jobarchive.config import Config
from jobarchive.infrastructure.persistence.tables import metadata


def _resolve_sqlite_file(url: str) -> str:
    """Absolute-ize a SQLite file path and create its directory."""
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite" or _is_memory(url):
        return url

    db_file = Path(parsed.database).expanduser().resolve()
    db_file.parent.mkdir(parents=True, exist_ok=True)
    return parsed.set(database=str(db_file)).render_as_string(hide_password=False)


def _is_memory(url: str) -> bool:
    return make_url(url).database in (None, "", ":memory:")


def _sqlite_options(config: Config, url: str) -> dict[str, Any]:
    if _is_memory(url):
        # the database lives in its one connection, so every session must share it
        return {
            "echo": config.database.echo,
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    # a connection per session; writers wait up to busy_timeout for the file lock
    return {
        "echo": config.database.echo,
        "poolclass": NullPool,
        "connect_args": {"timeout": config.database.busy_timeout},
    }


def _server_options(config: Config) -> dict[str, Any]:
    return {
        "echo": config.database.echo,
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
    }


def create_db_engine(config: Config) -> AsyncEngine:
    url = _resolve_sqlite_file(config.database.url)
    is_sqlite = make_url(url).get_backend_name() == "sqlite"

    options = _sqlite_options(config, url) if is_sqlite else _server_options(config)
    engine = create_async_engine(url, **options)
    if is_sqlite:
        _emit_sqlite_begin(engine, immediate=not _is_memory(url))
    return engine


def _emit_sqlite_begin(engine: AsyncEngine, immediate: bool) -> None:
    """SQLAlchemy issues BEGIN itself so SAVEPOINTs nest inside the session transaction.

    File databases begin IMMEDIATE: the write lock is taken up front, so two
    sessions that both read before writing queue on busy_timeout instead of
    one failing with "database is locked".
    """
    begin = "BEGIN IMMEDIATE" if immediate else "BEGIN"

    @event.listens_for(engine.sync_engine, "connect")
    def _driver_autocommit(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql(begin)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
