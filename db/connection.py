"""
db/connection.py
----------------
Connection providers handed to repositories at construction time.

A provider hands out one connection per repository operation and takes
it back afterwards:
    - PostgresConnectionPool wraps psycopg2's ThreadedConnectionPool.
    - SqliteConnectionProvider opens a fresh sqlite3 connection per call.
"""

import sqlite3
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Protocol

import psycopg2
from psycopg2 import pool

from config import (
    DATABASE_URL,
    DB_BACKEND,
    DB_POOL_MAX_CONN,
    DB_POOL_MIN_CONN,
    SQLITE_PATH,
)
from db.dialect import Dialect, get_dialect
from db.errors import StoreError
from utils.logger import get_logger

logger = get_logger(__name__)


class ConnectionProvider(Protocol):
    """Anything that can lend out and take back a DB-API connection."""

    def acquire(self) -> Any:
        ...

    def release(self, conn: Any) -> None:
        ...


class _ProviderMixin:
    @contextmanager
    def connection(self) -> Iterator[Any]:
        """Acquire a connection for the duration of a ``with`` block."""
        conn = self.acquire()
        try:
            yield conn
        finally:
            self.release(conn)


class PostgresConnectionPool(_ProviderMixin):
    """
    Thread-safe PostgreSQL connection pool.

    Repositories may be shared between threads, so the threaded pool
    is used rather than SimpleConnectionPool.
    """

    def __init__(self, dsn: str = DATABASE_URL,
                 min_conn: int = DB_POOL_MIN_CONN,
                 max_conn: int = DB_POOL_MAX_CONN):
        """
        Open the pool.

        Args:
            dsn: libpq connection string or URL.
            min_conn: Minimum number of connections to keep open.
            max_conn: Maximum number of connections allowed.

        Raises:
            psycopg2.OperationalError: If the database is unreachable.
        """
        try:
            self._pool: pool.ThreadedConnectionPool | None = (
                pool.ThreadedConnectionPool(min_conn, max_conn, dsn)
            )
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise
        logger.info("Database connection pool initialized successfully.")

    def acquire(self):
        """
        Get a connection from the pool.

        Raises:
            RuntimeError: If the pool has already been closed.
        """
        if self._pool is None:
            raise RuntimeError("Database pool is closed.")
        return self._pool.getconn()

    def release(self, conn) -> None:
        """Return a connection back to the pool, discarding it if it has died."""
        if self._pool is not None:
            self._pool.putconn(conn, close=bool(conn.closed))

    def close(self) -> None:
        """Close all connections in the pool."""
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
            logger.info("Database connection pool closed.")


class SqliteConnectionProvider(_ProviderMixin):
    """Opens a new sqlite3 connection for every acquire() and closes it on release()."""

    def __init__(self, path: str = SQLITE_PATH):
        self.path = str(path)
        self.open_connections = 0
        self._lock = threading.Lock()

    def acquire(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path)
        with self._lock:
            self.open_connections += 1
        return conn

    def release(self, conn: sqlite3.Connection) -> None:
        conn.close()
        with self._lock:
            self.open_connections -= 1

    def close(self) -> None:
        """Nothing is pooled; present so both providers shut down the same way."""


def build_provider(backend: str = DB_BACKEND) -> tuple[ConnectionProvider, Dialect]:
    """
    Create the provider and dialect for the configured backend.

    Args:
        backend: 'postgres' or 'sqlite'.

    Returns:
        (provider, dialect) tuple ready to pass to a repository.

    Raises:
        StoreError: If the PostgreSQL pool cannot be opened.
    """
    dialect = get_dialect(backend)
    if dialect.name == "sqlite":
        logger.info(f"Using SQLite database at {SQLITE_PATH}")
        return SqliteConnectionProvider(SQLITE_PATH), dialect
    try:
        return PostgresConnectionPool(), dialect
    except psycopg2.Error as e:
        raise StoreError("Cannot open the PostgreSQL connection pool", e) from e
