"""
Name: PostgreSQL Assignment Repository

Responsibilities:
  - Filtered, paged assignment listing (statuses, phone number, institution)
  - Scoped lookup by id

Collaborators:
  - postgres._sql
  - Table: assignments
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from ....domain.entities import Assignment, AssignmentStatus, PhoneNumber, Point
from ....domain.filters import AssignmentFilter
from ....pagination import Page, Pageable, StoragePage
from ._base import PostgresRepository
from ._sql import render_order_by, render_where

FILTER_COLUMNS = {
    "institution_id": "institution_id",
    "status": "status",
    "phone_number": ("phone_country_code", "phone_line_number"),
}

SORT_COLUMNS = {
    "created_at": "created_at",
    "status": "status",
    "first_name": "first_name",
    "last_name": "last_name",
    "description": "description",
}


class PostgresAssignmentRepository(PostgresRepository):
    """R: PostgreSQL implementation of AssignmentRepository."""

    _SELECT_COLUMNS = """
        id, institution_id, user_id, description, first_name, last_name,
        phone_country_code, phone_line_number, latitude, longitude,
        status, created_at
    """

    def _row_to_assignment(self, row: tuple) -> Assignment:
        (
            assignment_id,
            institution_id,
            user_id,
            description,
            first_name,
            last_name,
            country_code,
            line_number,
            latitude,
            longitude,
            status,
            created_at,
        ) = row
        return Assignment(
            id=assignment_id,
            institution_id=institution_id,
            user_id=user_id,
            description=description,
            first_name=first_name,
            last_name=last_name,
            phone_number=PhoneNumber(country_code=country_code, line_number=line_number),
            point=Point(latitude=float(latitude), longitude=float(longitude)),
            status=AssignmentStatus(status),
            created_at=created_at,
        )

    def find_all(
        self, pageable: Pageable, query_filter: AssignmentFilter
    ) -> Page[Assignment]:
        where_sql, params = render_where(query_filter.criteria(), FILTER_COLUMNS)
        order_sql = render_order_by(pageable.orders, SORT_COLUMNS)

        total, rows = self._fetch_page(
            count_query=f"SELECT COUNT(*) FROM assignments {where_sql}",
            page_query=f"""
                SELECT {self._SELECT_COLUMNS}
                FROM assignments
                {where_sql}
                {order_sql}
                LIMIT %s OFFSET %s
            """,
            params=params,
            limit=pageable.page_size,
            offset=pageable.offset,
            context_msg="PostgresAssignmentRepository: Failed to list assignments",
            extra={"where_sql": where_sql, "page_number": pageable.page_number},
        )

        raw_page = StoragePage(
            content=rows,
            page_number=pageable.page_number,
            page_size=pageable.page_size,
            total_element_count=total,
            orders=pageable.orders,
        )
        return Page.of_filtered(
            query_filter, raw_page, [self._row_to_assignment(r) for r in rows]
        )

    def find_by_id_and_institution_id(
        self, assignment_id: UUID, institution_id: UUID
    ) -> Optional[Assignment]:
        row = self._fetchone(
            query=f"""
                SELECT {self._SELECT_COLUMNS}
                FROM assignments
                WHERE id = %s AND institution_id = %s
            """,
            params=[assignment_id, institution_id],
            context_msg="PostgresAssignmentRepository: Failed to get assignment",
            extra={"assignment_id": str(assignment_id)},
        )
        return self._row_to_assignment(row) if row else None
