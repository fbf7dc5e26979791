"""
Name: PostgreSQL Connection Pool

Responsibilities:
  - Own the process-wide psycopg ConnectionPool (init, get, close)
  - Apply per-connection session settings (statement_timeout, application_name)
  - Answer readiness probes

Collaborators:
  - psycopg_pool.ConnectionPool
  - config: pool sizes and timeout
  - main.py: opens the pool in lifespan when STORAGE_BACKEND=postgres

Constraints:
  - One pool per process, guarded by a lock
  - Must init before use, close on shutdown
"""

from typing import Optional
import threading

from psycopg_pool import ConnectionPool

from ...logger import logger

APPLICATION_NAME = "backoffice"

_pool: Optional[ConnectionPool] = None
_pool_lock = threading.Lock()


def _configure_connection(conn) -> None:
    """R: Session settings for each new pooled connection."""
    from ...config import get_settings

    timeout_ms = get_settings().db_statement_timeout_ms
    conn.execute("SELECT set_config('application_name', %s, false)", (APPLICATION_NAME,))
    if timeout_ms > 0:
        conn.execute(
            "SELECT set_config('statement_timeout', %s, false)", (str(timeout_ms),)
        )
    conn.commit()


def init_pool(database_url: str, min_size: int, max_size: int) -> ConnectionPool:
    """
    R: Open the pool.

    Raises:
        RuntimeError: If pool already initialized
    """
    global _pool

    with _pool_lock:
        if _pool is not None:
            raise RuntimeError("Connection pool already initialized")

        _pool = ConnectionPool(
            conninfo=database_url,
            min_size=min_size,
            max_size=max_size,
            configure=_configure_connection,
            open=True,
        )
        logger.info(
            "Connection pool initialized",
            extra={"min_size": min_size, "max_size": max_size},
        )
        return _pool


def get_pool() -> ConnectionPool:
    if _pool is None:
        raise RuntimeError("Connection pool not initialized. Call init_pool() first.")
    return _pool


def close_pool() -> None:
    """R: Close the pool. Safe to call when it was never opened."""
    global _pool

    with _pool_lock:
        if _pool is not None:
            _pool.close()
            _pool = None
            logger.info("Connection pool closed")


def ping() -> bool:
    """R: True when a pooled connection answers SELECT 1."""
    if _pool is None:
        return False
    with _pool.connection() as conn:
        return conn.execute("SELECT 1").fetchone() == (1,)
