"""
Name: Update User Status Use Case

Responsibilities:
  - Activate, passivate or delete a user of the caller's institution
  - Gate transitions the entity itself allows unconditionally

Collaborators:
  - domain.repositories.UserRepository

Constraints:
  - A DELETED user is never reactivated or passivated
  - Repeating the current status is a conflict, not a no-op
"""

from uuid import UUID

from ...domain.entities import User, UserStatus
from ...domain.repositories import UserRepository
from ...exceptions import (
    UserAlreadyActiveError,
    UserAlreadyDeletedError,
    UserAlreadyPassiveError,
    UserNotExistError,
)
from ...logger import logger


class UpdateUserStatusUseCase:
    """R: Move a user to a target status."""

    def __init__(self, repository: UserRepository):
        self.repository = repository

    def execute(
        self, user_id: UUID, institution_id: UUID, target: UserStatus
    ) -> User:
        user = self.repository.find_by_id_and_institution_id(user_id, institution_id)
        if user is None:
            raise UserNotExistError(user_id)

        if user.is_deleted():
            raise UserAlreadyDeletedError(user_id)

        if target == UserStatus.ACTIVE:
            if user.is_active():
                raise UserAlreadyActiveError(user_id)
            updated = user.activate()
        elif target == UserStatus.PASSIVE:
            if user.is_passive():
                raise UserAlreadyPassiveError(user_id)
            updated = user.passivate()
        elif target == UserStatus.DELETED:
            updated = user.delete()
        else:
            raise ValueError(f"unsupported target status: {target}")

        self.repository.save(updated)
        logger.info(
            "User status changed",
            extra={
                "user_id": str(user_id),
                "from_status": user.status.value,
                "to_status": updated.status.value,
            },
        )
        return updated
