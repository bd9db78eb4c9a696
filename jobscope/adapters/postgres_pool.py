"""
adapters/postgres_pool.py
──────────────────────────────────────────────────────────────────────────────
Thread-safe PostgreSQL access shared by the psycopg2 adapters.

The FastAPI threadpool and the ingestion scheduler thread issue queries at
the same time, so every statement borrows its own connection from a
psycopg2 ThreadedConnectionPool and hands it back when done.

Connection management:
  - The pool is created lazily on the first statement.
  - Connections run in autocommit mode; each statement is its own
    transaction.
  - On OperationalError the connection is discarded (putconn close=True)
    and one retry is attempted on a fresh one.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Optional

import psycopg2
import psycopg2.extras
from psycopg2.pool import PoolError, ThreadedConnectionPool

from jobscope.config.settings import Settings
from jobscope.domain.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class PostgresPool:
    """Lazily created ThreadedConnectionPool with a statement helper.

    One instance is shared by PostgresJobStore and PostgresUserStore via
    services/container.py.
    """

    def __init__(self, settings: Settings) -> None:
        self._dsn = settings.db_dsn
        self._minconn = max(settings.db_pool_min, 0)
        self._maxconn = max(settings.db_pool_max, self._minconn, 1)
        self._pool: Optional[ThreadedConnectionPool] = None
        self._lock = threading.Lock()

    def execute(self, sql: str, params: Any) -> list[dict]:
        """Execute a statement and return rows as dicts, with one auto-reconnect.

        Raises:
            DatabaseError:  If the database is unreachable or the pool is
                            exhausted.
            psycopg2.Error: Any other statement failure, for the caller to
                            translate.
        """
        for attempt in (1, 2):
            pool = self._get_pool()
            conn = self._borrow(pool)
            broken = False
            try:
                conn.autocommit = True
                with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                    cur.execute(sql, params)
                    if cur.description is None:
                        return []
                    return list(cur.fetchall())
            except psycopg2.OperationalError as exc:
                broken = True
                if attempt == 2:
                    raise DatabaseError(f"DB query failed after reconnect: {exc}") from exc
                logger.warning("DB OperationalError — reconnecting: %s", exc)
            finally:
                pool.putconn(conn, close=broken)
        return []  # unreachable

    def close(self) -> None:
        with self._lock:
            if self._pool is not None and not self._pool.closed:
                self._pool.closeall()
                logger.debug("PostgresPool: all connections closed")
            self._pool = None

    # ── Internals ──────────────────────────────────────────────────────────

    def _get_pool(self) -> ThreadedConnectionPool:
        with self._lock:
            if self._pool is None or self._pool.closed:
                try:
                    self._pool = ThreadedConnectionPool(self._minconn, self._maxconn, self._dsn)
                except psycopg2.Error as exc:
                    raise DatabaseError(f"Cannot connect to database: {exc}") from exc
                logger.debug(
                    "PostgresPool: pool opened | min=%d max=%d", self._minconn, self._maxconn
                )
            return self._pool

    @staticmethod
    def _borrow(pool: ThreadedConnectionPool) -> Any:
        try:
            return pool.getconn()
        except PoolError as exc:
            raise DatabaseError(f"No database connection available: {exc}") from exc
        except psycopg2.Error as exc:
            raise DatabaseError(f"Cannot connect to database: {exc}") from exc
