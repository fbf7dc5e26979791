"""
Name: Get Role Use Case

Responsibilities:
  - Fetch a role by id within the caller's institution

Collaborators:
  - domain.repositories.RoleRepository
"""

from uuid import UUID

from ...domain.entities import Role
from ...domain.repositories import RoleRepository
from ...exceptions import RoleNotExistError


class GetRoleUseCase:
    """R: Fetch role. Another institution's role reads as a miss."""

    def __init__(self, repository: RoleRepository):
        self.repository = repository

    def execute(self, role_id: UUID, institution_id: UUID) -> Role:
        role = self.repository.find_by_id_and_institution_id(role_id, institution_id)
        if role is None:
            raise RoleNotExistError(role_id)
        return role
