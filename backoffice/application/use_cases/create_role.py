"""
Name: Create Role Use Case

Responsibilities:
  - Create an ACTIVE role inside the caller's institution
  - Enforce name uniqueness per institution
  - Resolve permission ids against the permission catalogue

Collaborators:
  - domain.repositories.RoleRepository
  - domain.repositories.PermissionRepository
"""

from dataclasses import dataclass, field
from uuid import UUID

from ...domain.entities import Role
from ...domain.repositories import PermissionRepository, RoleRepository
from ...exceptions import (
    PermissionNotExistError,
    RoleAlreadyExistsByNameError,
)
from ...logger import logger


@dataclass
class CreateRoleInput:
    name: str
    institution_id: UUID
    permission_ids: list[UUID] = field(default_factory=list)


class CreateRoleUseCase:
    """R: Create role. Returns nothing; the caller re-reads if it needs the role."""

    def __init__(
        self,
        role_repository: RoleRepository,
        permission_repository: PermissionRepository,
    ):
        self.role_repository = role_repository
        self.permission_repository = permission_repository

    def execute(self, input_data: CreateRoleInput) -> None:
        name = input_data.name.strip()
        if self.role_repository.exists_by_name_and_institution_id(
            name, input_data.institution_id
        ):
            raise RoleAlreadyExistsByNameError(name)

        requested_ids = list(dict.fromkeys(input_data.permission_ids))
        if not requested_ids:
            raise PermissionNotExistError([])

        permissions = self.permission_repository.find_all_by_ids(requested_ids)
        found_ids = {permission.id for permission in permissions}
        missing = [pid for pid in requested_ids if pid not in found_ids]
        if missing:
            raise PermissionNotExistError(missing)

        role = Role.create(
            name=name,
            institution_id=input_data.institution_id,
            permissions=permissions,
        )
        self.role_repository.save(role)
        logger.info(
            "Role created",
            extra={
                "role_id": str(role.id),
                "permission_count": len(role.permissions),
            },
        )
