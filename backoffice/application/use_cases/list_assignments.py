"""
Name: List Assignments Use Case

Responsibilities:
  - Paged assignment listing filtered by statuses and/or phone number
  - Pin every listing to the caller's institution

Collaborators:
  - domain.repositories.AssignmentRepository
"""

from uuid import UUID

from ...domain.entities import Assignment
from ...domain.filters import AssignmentFilter
from ...domain.repositories import AssignmentRepository
from ...pagination import Page, Pageable


class ListAssignmentsUseCase:
    """R: List assignments of one institution."""

    def __init__(self, repository: AssignmentRepository):
        self.repository = repository

    def execute(
        self,
        *,
        pageable: Pageable,
        query_filter: AssignmentFilter | None,
        institution_id: UUID,
    ) -> Page[Assignment]:
        scoped = (query_filter or AssignmentFilter()).scoped_to(institution_id)
        return self.repository.find_all(pageable, scoped)
