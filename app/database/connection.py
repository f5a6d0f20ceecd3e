from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg_pool import ConnectionPool

from app.config.settings import Settings
from app.logging.logger import Log

_pool: ConnectionPool | None = None

MIN_POOL_SIZE = 1
DEFAULT_MAX_POOL_SIZE = 10


def build_conninfo(settings: Settings) -> str:
    """libpq connection string for the documents database."""
    return make_conninfo(
        host=settings.db_host,
        port=settings.db_port,
        dbname=settings.db_database,
        user=settings.db_username,
        password=settings.db_password,
    )


def init_pool(settings: Settings) -> None:
    """Initialize the global connection pool from settings.

    Every worker thread holds at most two connections at once (queue claim
    and document update), so the pool grows with WORKER_CONCURRENCY.
    """
    global _pool  # noqa: PLW0603
    max_size = max(DEFAULT_MAX_POOL_SIZE, settings.worker_concurrency * 2)
    _pool = ConnectionPool(
        build_conninfo(settings),
        min_size=MIN_POOL_SIZE,
        max_size=max_size,
        open=True,
    )
    Log.info(f"Database pool opened for {settings.db_host}:{settings.db_port} (max {max_size})")


def close_pool() -> None:
    """Close the global connection pool."""
    global _pool  # noqa: PLW0603
    if _pool is not None:
        _pool.close()
        _pool = None


@contextmanager
def get_connection() -> Generator[psycopg.Connection[Any], None, None]:
    """Yield a connection from the pool. Caller manages commit/rollback."""
    if _pool is None:
        raise RuntimeError("Connection pool not initialized. Call init_pool() first.")
    with _pool.connection() as conn:
        yield conn
