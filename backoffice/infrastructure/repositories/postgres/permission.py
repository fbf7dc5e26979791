"""
Name: PostgreSQL Permission Repository

Responsibilities:
  - Read the permission catalogue (table: permissions)
  - Insert missing catalogue entries at startup
"""

from typing import Sequence
from uuid import UUID

from ....domain.entities import Permission
from ._base import PostgresRepository


class PostgresPermissionRepository(PostgresRepository):
    def find_all(self) -> list[Permission]:
        rows = self._fetchall(
            query="SELECT id, name FROM permissions ORDER BY name ASC",
            params=[],
            context_msg="PostgresPermissionRepository: Failed to list permissions",
            extra={},
        )
        return [Permission(id=pid, name=name) for pid, name in rows]

    def find_all_by_ids(self, permission_ids: Sequence[UUID]) -> list[Permission]:
        if not permission_ids:
            return []
        rows = self._fetchall(
            query="SELECT id, name FROM permissions WHERE id = ANY(%s) ORDER BY name ASC",
            params=[list(permission_ids)],
            context_msg="PostgresPermissionRepository: Failed to get permissions",
            extra={"requested": len(permission_ids)},
        )
        return [Permission(id=pid, name=name) for pid, name in rows]

    def save_all(self, permissions: Sequence[Permission]) -> None:
        try:
            with self._get_pool().connection() as conn:
                with conn.transaction():
                    with conn.cursor() as cur:
                        cur.executemany(
                            """
                            INSERT INTO permissions (id, name) VALUES (%s, %s)
                            ON CONFLICT (name) DO NOTHING
                            """,
                            [(p.id, p.name) for p in permissions],
                        )
        except Exception as exc:
            raise self._fail(
                "PostgresPermissionRepository: Failed to save permissions",
                exc,
                {"count": len(permissions)},
            ) from exc
