"""
Database handle for the users API.

Wraps a psycopg ConnectionPool in an explicit, injectable `Database` object
instead of a module-level connection. The importer, the query service and the
HTTP app all receive the same handle at construction time, which lets tests
substitute a double.

Startup connectivity checks retry transient failures using tenacity.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Generator, Optional

import psycopg
from psycopg import Connection
from psycopg_pool import ConnectionPool
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from users_api.config import Settings, get_settings
from users_api.utils.logging import get_logger

log = get_logger(__name__)

CONNECT_TIMEOUT_SECONDS = 5


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a DSN string from settings."""
    return (settings or get_settings()).dsn


class Database:
    """
    Lazily opened connection pool shared by every component of one process.

    Connections handed out by `connection()` run in autocommit mode: each
    statement commits on its own unless the caller opens `conn.transaction()`.
    """

    def __init__(self, dsn: str, min_size: int = 1, max_size: int = 10) -> None:
        self._dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self._pool: Optional[ConnectionPool] = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Database":
        settings = settings or get_settings()
        return cls(
            settings.dsn,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    def _get_pool(self) -> ConnectionPool:
        with self._lock:
            if self._pool is None:
                self._pool = ConnectionPool(
                    conninfo=self._dsn,
                    min_size=self.min_size,
                    max_size=self.max_size,
                    kwargs={"autocommit": True},
                    open=True,
                )
            return self._pool

    @contextmanager
    def connection(self) -> Generator[Connection, None, None]:
        """
        Context manager for obtaining a connection from the pool.

        Example
        -------
            database = Database.from_settings()
            with database.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT 1")
        """
        pool = self._get_pool()
        with pool.connection() as conn:
            yield conn

    def ping(self) -> None:
        """
        Open a dedicated connection and run `SELECT 1`.

        Bypasses the pool so an unreachable server fails fast with
        psycopg.OperationalError instead of a pool timeout.
        """
        with psycopg.connect(self._dsn, connect_timeout=CONNECT_TIMEOUT_SECONDS) as conn:
            conn.execute("SELECT 1")

    def close(self) -> None:
        """Close the pool, if it was ever opened."""
        with self._lock:
            if self._pool is not None:
                try:
                    self._pool.close()
                finally:
                    self._pool = None


def wait_for_database(database: Database, attempts: int = 3) -> None:
    """
    Ping the database, retrying with exponential backoff.

    Raises
    ------
    psycopg.OperationalError
        If the server is still unreachable after `attempts` tries.
    """
    retryer = Retrying(
        stop=stop_after_attempt(max(attempts, 1)),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
        before_sleep=lambda state: log.warning(
            "Database not reachable, retrying",
            extra={"attempt": state.attempt_number},
        ),
        reraise=True,
    )
    retryer(database.ping)
    log.info("DB connected successfully")


__all__ = [
    "Database",
    "build_dsn",
    "wait_for_database",
]
