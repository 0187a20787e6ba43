"""
PostgreSQL connection helper.
Provides a pooled `Database` whose `transaction()` is used by every repository.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
from psycopg2.extras import DictCursor
from psycopg2.pool import PoolError, ThreadedConnectionPool

from event_system.config import Config
from event_system.errors import ServiceUnavailableError


class Database:
    """
    Thin wrapper around a psycopg2 thread-safe connection pool.

    The pool is created on first use so that building the application does
    not require a reachable database.

    Usage:
        with db.transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(...)
    """

    def __init__(self, config: Config) -> None:
        self.config = config
        self._pool: Optional[ThreadedConnectionPool] = None
        self._lock = threading.Lock()

    def _get_pool(self) -> ThreadedConnectionPool:
        if self._pool is None:
            with self._lock:
                if self._pool is None:
                    try:
                        self._pool = ThreadedConnectionPool(
                            self.config.db_pool_min,
                            self.config.db_pool_max,
                            dsn=self.config.dsn,
                            cursor_factory=DictCursor,
                        )
                    except psycopg2.Error as e:
                        logging.error(f"Error connecting to database: {e}")
                        # Re-raise so the caller knows the connection failed
                        raise
                    logging.info("Successfully connected to database")
        return self._pool

    @contextmanager
    def transaction(self) -> Iterator["psycopg2.extensions.connection"]:
        """
        Borrow a pooled connection for the duration of one transaction.

        Commits when the block exits normally, rolls back when it raises, and
        always hands the connection back to the pool.

        Yields:
            psycopg2.extensions.connection: A connection with DictCursor rows.

        Raises:
            ServiceUnavailableError: Every pooled connection is in use.
            psycopg2.Error: If connecting or committing fails.
        """
        pool = self._get_pool()
        try:
            conn = pool.getconn()
        except PoolError:
            # getconn does not wait for a free connection
            logging.warning(f"Connection pool exhausted (DB_POOL_MAX={self.config.db_pool_max})")
            raise ServiceUnavailableError("database is busy, try again later")
        try:
            with conn:
                yield conn
        finally:
            pool.putconn(conn)

    def close(self) -> None:
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
