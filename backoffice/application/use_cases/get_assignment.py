"""
Name: Get Assignment Use Case

Responsibilities:
  - Fetch an assignment by id within the caller's institution

Collaborators:
  - domain.repositories.AssignmentRepository
"""

from uuid import UUID

from ...domain.entities import Assignment
from ...domain.repositories import AssignmentRepository
from ...exceptions import AssignmentNotExistError


class GetAssignmentUseCase:
    def __init__(self, repository: AssignmentRepository):
        self.repository = repository

    def execute(self, assignment_id: UUID, institution_id: UUID) -> Assignment:
        assignment = self.repository.find_by_id_and_institution_id(
            assignment_id, institution_id
        )
        if assignment is None:
            raise AssignmentNotExistError(assignment_id)
        return assignment
