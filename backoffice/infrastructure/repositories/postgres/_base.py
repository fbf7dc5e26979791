"""
Name: PostgreSQL Repository Base

Responsibilities:
  - Resolve the pool (injected or process singleton)
  - Run queries with uniform DatabaseError wrapping and structured logs
  - Fetch a count and its page from one snapshot
"""

from __future__ import annotations

from typing import Iterable, Optional

from psycopg_pool import ConnectionPool

from ....exceptions import DatabaseError
from ....logger import logger


class PostgresRepository:
    """R: Shared query helpers. Subclasses keep SQL and mapping."""

    def __init__(self, pool: Optional[ConnectionPool] = None):
        # R: Injectable for tests; production uses the process pool
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    def _fail(self, context_msg: str, exc: Exception, extra: dict) -> DatabaseError:
        logger.exception(context_msg, extra={**extra, "error": str(exc)})
        return DatabaseError(f"{context_msg}: {exc}")

    def _fetchall(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> list[tuple]:
        try:
            with self._get_pool().connection() as conn:
                return conn.execute(query, tuple(params)).fetchall()
        except Exception as exc:
            raise self._fail(context_msg, exc, extra) from exc

    def _fetchone(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> tuple | None:
        try:
            with self._get_pool().connection() as conn:
                return conn.execute(query, tuple(params)).fetchone()
        except Exception as exc:
            raise self._fail(context_msg, exc, extra) from exc

    def _fetch_page(
        self,
        *,
        count_query: str,
        page_query: str,
        params: list[object],
        limit: int,
        offset: int,
        context_msg: str,
        extra: dict,
    ) -> tuple[int, list[tuple]]:
        """
        R: Run COUNT and the page SELECT on one connection and one snapshot.

        REPEATABLE READ keeps the total consistent with the rows even while
        other sessions write.
        """
        try:
            with self._get_pool().connection() as conn:
                with conn.transaction():
                    conn.execute(
                        "SET TRANSACTION ISOLATION LEVEL REPEATABLE READ READ ONLY"
                    )
                    count_row = conn.execute(count_query, tuple(params)).fetchone()
                    rows = conn.execute(
                        page_query, (*params, limit, offset)
                    ).fetchall()
        except Exception as exc:
            raise self._fail(context_msg, exc, extra) from exc
        return (count_row[0] if count_row else 0), rows
