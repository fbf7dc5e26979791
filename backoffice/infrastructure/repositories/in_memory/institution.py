"""
Name: In-Memory Institution Repository

Responsibilities:
  - Read-only institution references for tests / local dev
"""

from threading import Lock
from typing import Dict, Iterable, Optional
from uuid import UUID

from ....domain.entities import Institution, InstitutionStatus


class InMemoryInstitutionRepository:
    def __init__(self, institutions: Iterable[Institution] = ()) -> None:
        self._lock = Lock()
        self._institutions: Dict[UUID, Institution] = {i.id: i for i in institutions}

    def add(self, institution: Institution) -> None:
        with self._lock:
            self._institutions[institution.id] = institution

    def find_all_by_status_order_by_name_asc(
        self, status: InstitutionStatus
    ) -> list[Institution]:
        with self._lock:
            matching = [i for i in self._institutions.values() if i.status == status]
        return sorted(matching, key=lambda i: i.name)

    def find_by_id(self, institution_id: UUID) -> Optional[Institution]:
        with self._lock:
            return self._institutions.get(institution_id)
