"""
Name: PostgreSQL Role Repository

Responsibilities:
  - Filtered, paged role listing (count + page query on one snapshot)
  - Scoped lookups and name uniqueness checks
  - Upsert roles together with their permission links

Collaborators:
  - postgres._sql: WHERE / ORDER BY rendering
  - Tables: roles, role_permissions, permissions

Constraints:
  - Queries always parameterized
  - save() replaces the permission links in one transaction
"""

from __future__ import annotations

from collections import defaultdict
from typing import Optional
from uuid import UUID

from ....domain.entities import Permission, Role, RoleStatus
from ....domain.filters import RoleFilter
from ....pagination import Page, Pageable, StoragePage
from ._base import PostgresRepository
from ._sql import render_order_by, render_where

FILTER_COLUMNS = {
    "institution_id": "institution_id",
    "name": "name",
    "status": "status",
}

SORT_COLUMNS = {
    "name": "name",
    "status": "status",
    "created_at": "created_at",
}


class PostgresRoleRepository(PostgresRepository):
    """R: PostgreSQL implementation of RoleRepository."""

    _SELECT_COLUMNS = "id, institution_id, name, status, created_at"

    # =========================================================
    # Mapping
    # =========================================================
    def _load_permissions(self, role_ids: list[UUID]) -> dict[UUID, list[Permission]]:
        if not role_ids:
            return {}
        rows = self._fetchall(
            query="""
                SELECT rp.role_id, p.id, p.name
                FROM role_permissions rp
                JOIN permissions p ON p.id = rp.permission_id
                WHERE rp.role_id = ANY(%s)
            """,
            params=[role_ids],
            context_msg="PostgresRoleRepository: Failed to load role permissions",
            extra={"role_count": len(role_ids)},
        )
        grouped: dict[UUID, list[Permission]] = defaultdict(list)
        for role_id, permission_id, name in rows:
            grouped[role_id].append(Permission(id=permission_id, name=name))
        return grouped

    def _rows_to_roles(self, rows: list[tuple]) -> list[Role]:
        permissions = self._load_permissions([row[0] for row in rows])
        return [
            Role(
                id=role_id,
                institution_id=institution_id,
                name=name,
                status=RoleStatus(status),
                permissions=frozenset(permissions.get(role_id, ())),
                created_at=created_at,
            )
            for role_id, institution_id, name, status, created_at in rows
        ]

    # =========================================================
    # Public API
    # =========================================================
    def find_all(self, pageable: Pageable, query_filter: RoleFilter) -> Page[Role]:
        where_sql, params = render_where(query_filter.criteria(), FILTER_COLUMNS)
        order_sql = render_order_by(pageable.orders, SORT_COLUMNS)

        total, rows = self._fetch_page(
            count_query=f"SELECT COUNT(*) FROM roles {where_sql}",
            page_query=f"""
                SELECT {self._SELECT_COLUMNS}
                FROM roles
                {where_sql}
                {order_sql}
                LIMIT %s OFFSET %s
            """,
            params=params,
            limit=pageable.page_size,
            offset=pageable.offset,
            context_msg="PostgresRoleRepository: Failed to list roles",
            extra={"where_sql": where_sql, "page_number": pageable.page_number},
        )

        raw_page = StoragePage(
            content=rows,
            page_number=pageable.page_number,
            page_size=pageable.page_size,
            total_element_count=total,
            orders=pageable.orders,
        )
        return Page.of_filtered(query_filter, raw_page, self._rows_to_roles(rows))

    def find_all_by_institution_id(self, institution_id: UUID) -> list[Role]:
        rows = self._fetchall(
            query=f"""
                SELECT {self._SELECT_COLUMNS}
                FROM roles
                WHERE institution_id = %s
                ORDER BY name ASC
            """,
            params=[institution_id],
            context_msg="PostgresRoleRepository: Failed to list institution roles",
            extra={"institution_id": str(institution_id)},
        )
        return self._rows_to_roles(rows)

    def find_by_id_and_institution_id(
        self, role_id: UUID, institution_id: UUID
    ) -> Optional[Role]:
        row = self._fetchone(
            query=f"""
                SELECT {self._SELECT_COLUMNS}
                FROM roles
                WHERE id = %s AND institution_id = %s
            """,
            params=[role_id, institution_id],
            context_msg="PostgresRoleRepository: Failed to get role",
            extra={"role_id": str(role_id)},
        )
        if not row:
            return None
        return self._rows_to_roles([row])[0]

    def exists_by_name_and_institution_id(self, name: str, institution_id: UUID) -> bool:
        row = self._fetchone(
            query="""
                SELECT EXISTS (
                    SELECT 1 FROM roles
                    WHERE lower(name) = lower(%s) AND institution_id = %s
                )
            """,
            params=[name.strip(), institution_id],
            context_msg="PostgresRoleRepository: Failed to check role name",
            extra={"institution_id": str(institution_id)},
        )
        return bool(row and row[0])

    def save(self, role: Role) -> None:
        try:
            with self._get_pool().connection() as conn:
                with conn.transaction():
                    conn.execute(
                        """
                        INSERT INTO roles (id, institution_id, name, status, created_at)
                        VALUES (%s, %s, %s, %s, COALESCE(%s, now()))
                        ON CONFLICT (id) DO UPDATE
                        SET name = EXCLUDED.name,
                            status = EXCLUDED.status,
                            updated_at = now()
                        """,
                        (
                            role.id,
                            role.institution_id,
                            role.name,
                            role.status.value,
                            role.created_at,
                        ),
                    )
                    conn.execute(
                        "DELETE FROM role_permissions WHERE role_id = %s", (role.id,)
                    )
                    with conn.cursor() as cur:
                        cur.executemany(
                            """
                            INSERT INTO role_permissions (role_id, permission_id)
                            VALUES (%s, %s)
                            """,
                            [(role.id, p.id) for p in role.permissions],
                        )
        except Exception as exc:
            raise self._fail(
                "PostgresRoleRepository: Failed to save role",
                exc,
                {"role_id": str(role.id)},
            ) from exc
