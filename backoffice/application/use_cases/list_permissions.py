"""
Name: List Permissions Use Case

Responsibilities:
  - Return the full permission catalogue, ordered by name
"""

from ...domain.entities import Permission
from ...domain.repositories import PermissionRepository


class ListPermissionsUseCase:
    def __init__(self, repository: PermissionRepository):
        self.repository = repository

    def execute(self) -> list[Permission]:
        return sorted(self.repository.find_all(), key=lambda p: p.name)
