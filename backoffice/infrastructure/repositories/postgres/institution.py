"""
Name: PostgreSQL Institution Repository

Responsibilities:
  - Read institution references (table: institutions)
"""

from typing import Optional
from uuid import UUID

from ....domain.entities import Institution, InstitutionStatus
from ._base import PostgresRepository


class PostgresInstitutionRepository(PostgresRepository):
    def find_all_by_status_order_by_name_asc(
        self, status: InstitutionStatus
    ) -> list[Institution]:
        rows = self._fetchall(
            query="""
                SELECT id, name, status
                FROM institutions
                WHERE status = %s
                ORDER BY name ASC
            """,
            params=[status.value],
            context_msg="PostgresInstitutionRepository: Failed to list institutions",
            extra={"status": status.value},
        )
        return [
            Institution(id=iid, name=name, status=InstitutionStatus(st))
            for iid, name, st in rows
        ]

    def find_by_id(self, institution_id: UUID) -> Optional[Institution]:
        row = self._fetchone(
            query="SELECT id, name, status FROM institutions WHERE id = %s",
            params=[institution_id],
            context_msg="PostgresInstitutionRepository: Failed to get institution",
            extra={"institution_id": str(institution_id)},
        )
        if not row:
            return None
        iid, name, st = row
        return Institution(id=iid, name=name, status=InstitutionStatus(st))
