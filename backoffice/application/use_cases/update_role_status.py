"""
Name: Update Role Status Use Case

Responsibilities:
  - Activate, passivate or delete a role of the caller's institution
  - Reject no-op transitions and any transition out of DELETED

Collaborators:
  - domain.repositories.RoleRepository

Notes:
  - ACTIVE <-> PASSIVE is free; DELETED is terminal
"""

from uuid import UUID

from ...domain.entities import Role, RoleStatus
from ...domain.repositories import RoleRepository
from ...exceptions import (
    RoleAlreadyActiveError,
    RoleAlreadyDeletedError,
    RoleAlreadyPassiveError,
    RoleNotExistError,
)
from ...logger import logger


class UpdateRoleStatusUseCase:
    """R: Move a role to a target status."""

    def __init__(self, repository: RoleRepository):
        self.repository = repository

    def execute(
        self, role_id: UUID, institution_id: UUID, target: RoleStatus
    ) -> Role:
        role = self.repository.find_by_id_and_institution_id(role_id, institution_id)
        if role is None:
            raise RoleNotExistError(role_id)

        if role.is_deleted:
            raise RoleAlreadyDeletedError(role_id)

        if target == RoleStatus.ACTIVE:
            if role.is_active:
                raise RoleAlreadyActiveError(role_id)
            updated = role.activate()
        elif target == RoleStatus.PASSIVE:
            if role.is_passive:
                raise RoleAlreadyPassiveError(role_id)
            updated = role.passivate()
        else:
            updated = role.delete()

        self.repository.save(updated)
        logger.info(
            "Role status changed",
            extra={
                "role_id": str(role_id),
                "from_status": role.status.value,
                "to_status": updated.status.value,
            },
        )
        return updated
