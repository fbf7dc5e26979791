"""
Name: In-Memory Assignment Repository

Responsibilities:
  - Store assignments in memory (tests / local dev)
  - Filter by institution, statuses and phone number; sort and page

Constraints:
  - Thread-safe: access guarded by Lock
"""

from __future__ import annotations

from threading import Lock
from typing import Dict, Iterable, Optional
from uuid import UUID

from ....domain.entities import Assignment
from ....domain.filters import AssignmentFilter
from ....pagination import Page, Pageable, paginate
from ._query import key_resolver, matches

SORTABLE_PROPERTIES = frozenset(
    {"created_at", "status", "first_name", "last_name", "description"}
)


class InMemoryAssignmentRepository:
    def __init__(self, assignments: Iterable[Assignment] = ()) -> None:
        self._lock = Lock()
        self._assignments: Dict[UUID, Assignment] = {a.id: a for a in assignments}
        self._key_of = key_resolver(SORTABLE_PROPERTIES)

    def add(self, assignment: Assignment) -> None:
        with self._lock:
            self._assignments[assignment.id] = assignment

    def find_all(
        self, pageable: Pageable, query_filter: AssignmentFilter
    ) -> Page[Assignment]:
        criteria = query_filter.criteria()
        with self._lock:
            candidates = [
                a for a in self._assignments.values() if matches(a, criteria)
            ]
        raw_page = paginate(candidates, pageable, self._key_of)
        return Page.of_filtered(query_filter, raw_page, list(raw_page.content))

    def find_by_id_and_institution_id(
        self, assignment_id: UUID, institution_id: UUID
    ) -> Optional[Assignment]:
        with self._lock:
            assignment = self._assignments.get(assignment_id)
        if assignment is None or assignment.institution_id != institution_id:
            return None
        return assignment
