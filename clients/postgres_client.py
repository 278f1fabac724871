"""
PostgreSQL client with connection pooling.

Uses psycopg2 with ThreadedConnectionPool. Checkout reads run anonymously.
Admin catalog edits run inside utils.user_context, and the acting admin is
exposed to the database as app.current_user_id so triggers and policies can
attribute the change.

Numeric columns come back as Decimal (psycopg2's default for NUMERIC), which
is what the pricing code expects. Never cast prices to float in SQL.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, List, Tuple
from uuid import UUID

import psycopg2
import psycopg2.extras
import psycopg2.pool

from utils.user_context import peek_current_user_id

logger = logging.getLogger(__name__)

_jsonb_registered = False


class PostgresClient:
    """
    PostgreSQL client that carries the acting admin into each connection.

    Usage:
        db = PostgresClient(database_url)

        # Anonymous checkout read
        rows = db.execute("SELECT * FROM package_durations WHERE package_id = %s", (pid,))

        # Attributed admin write
        with user_context(admin_id):
            db.execute_returning("UPDATE package_add_ons SET ... RETURNING *", params)
    """

    # Pools are shared by every client for the same database URL
    _connection_pools: Dict[str, psycopg2.pool.ThreadedConnectionPool] = {}
    _pools_lock = threading.RLock()

    def __init__(self, database_url: str, minconn: int = 1, maxconn: int = 10):
        self._database_url = database_url
        self._minconn = minconn
        self._maxconn = maxconn
        self._ensure_connection_pool()

    def _ensure_connection_pool(self) -> None:
        with self._pools_lock:
            if self._database_url in self._connection_pools:
                return

            pool = psycopg2.pool.ThreadedConnectionPool(
                minconn=self._minconn,
                maxconn=self._maxconn,
                dsn=self._database_url,
                connect_timeout=10,
            )

            global _jsonb_registered
            if not _jsonb_registered:
                psycopg2.extras.register_default_jsonb(globally=True)
                _jsonb_registered = True

            self._connection_pools[self._database_url] = pool
            logger.info(f"Connection pool created (max {self._maxconn} connections)")

    @contextmanager
    def get_connection(self):
        """Borrow a pooled connection tagged with the acting admin, if any."""
        self._ensure_connection_pool()
        pool = self._connection_pools[self._database_url]
        conn = pool.getconn()
        if conn is None:
            raise RuntimeError("Could not get connection from pool")

        try:
            user_id = peek_current_user_id()
            with conn.cursor() as cur:
                # Pooled connections keep session settings, so always overwrite
                cur.execute(
                    "SELECT set_config('app.current_user_id', %s, false)",
                    (str(user_id) if user_id is not None else "",)
                )
            yield conn
        except Exception:
            conn.rollback()
            raise
        finally:
            pool.putconn(conn)

    def _convert_params(self, params: Tuple | Dict | None) -> Tuple | Dict | None:
        """UUIDs become strings; containers are converted recursively."""
        if params is None:
            return None

        def convert(value: Any) -> Any:
            if isinstance(value, UUID):
                return str(value)
            if isinstance(value, (list, tuple)):
                return type(value)(convert(v) for v in value)
            if isinstance(value, dict):
                return {k: convert(v) for k, v in value.items()}
            return value

        return convert(params)

    def execute(self, query: str, params: Tuple | Dict | None = None) -> List[Dict[str, Any]]:
        """Run a query and return its rows as dicts. Statements without rows commit and return []."""
        params = self._convert_params(params)
        with self.get_connection() as conn:
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                cur.execute(query, params)
                if cur.description:
                    rows = [dict(row) for row in cur.fetchall()]
                    conn.commit()
                    return rows
                conn.commit()
                return []

    def execute_single(self, query: str, params: Tuple | Dict | None = None) -> Dict[str, Any] | None:
        """First row or None."""
        results = self.execute(query, params)
        return results[0] if results else None

    def execute_returning(self, query: str, params: Tuple | Dict | None = None) -> List[Dict[str, Any]]:
        """Run an INSERT/UPDATE ... RETURNING, commit, and return the rows."""
        params = self._convert_params(params)
        with self.get_connection() as conn:
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                cur.execute(query, params)
                rows = [dict(row) for row in cur.fetchall()]
                conn.commit()
                return rows

    def close(self) -> None:
        """Close this client's connection pool."""
        with self._pools_lock:
            pool = self._connection_pools.pop(self._database_url, None)
            if pool is not None:
                pool.closeall()

    @classmethod
    def close_all_pools(cls) -> None:
        with cls._pools_lock:
            for pool in cls._connection_pools.values():
                pool.closeall()
            cls._connection_pools.clear()
