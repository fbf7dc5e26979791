"""
Name: List Roles Summary Use Case

Responsibilities:
  - Unpaged list of the institution's ACTIVE roles (selection lists)

Collaborators:
  - domain.repositories.RoleRepository
"""

from uuid import UUID

from ...domain.entities import Role
from ...domain.repositories import RoleRepository


class ListRolesSummaryUseCase:
    def __init__(self, repository: RoleRepository):
        self.repository = repository

    def execute(self, institution_id: UUID) -> list[Role]:
        roles = self.repository.find_all_by_institution_id(institution_id)
        return [role for role in roles if role.is_active]
