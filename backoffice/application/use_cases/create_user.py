"""
Name: Create User Use Case

Responsibilities:
  - Create a NOT_VERIFIED user inside the caller's institution
  - Enforce email uniqueness across every institution
  - Resolve role ids against the caller's ACTIVE roles

Collaborators:
  - domain.repositories.UserRepository
  - domain.repositories.RoleRepository
  - domain.repositories.InstitutionRepository

Constraints:
  - The user starts without a password and cannot authenticate yet
  - Roles of another institution are reported as missing, never as foreign
"""

from dataclasses import dataclass, field
from uuid import UUID

from ...domain.entities import PhoneNumber, Role, User
from ...domain.repositories import (
    InstitutionRepository,
    RoleRepository,
    UserRepository,
)
from ...exceptions import (
    InstitutionNotExistError,
    RoleNotExistError,
    UserAlreadyExistsByEmailError,
)
from ...logger import logger


@dataclass
class CreateUserInput:
    email_address: str
    first_name: str
    last_name: str
    institution_id: UUID
    role_ids: list[UUID] = field(default_factory=list)
    phone_number: PhoneNumber | None = None
    city: str | None = None


class CreateUserUseCase:
    """R: Create user. Returns the stored user."""

    def __init__(
        self,
        user_repository: UserRepository,
        role_repository: RoleRepository,
        institution_repository: InstitutionRepository,
    ):
        self.user_repository = user_repository
        self.role_repository = role_repository
        self.institution_repository = institution_repository

    def _resolve_roles(self, role_ids: list[UUID], institution_id: UUID) -> list[Role]:
        roles = []
        for role_id in dict.fromkeys(role_ids):
            role = self.role_repository.find_by_id_and_institution_id(
                role_id, institution_id
            )
            if role is None or not role.is_active:
                raise RoleNotExistError(role_id)
            roles.append(role)
        return roles

    def execute(self, input_data: CreateUserInput) -> User:
        email = input_data.email_address.strip().lower()
        if self.user_repository.exists_by_email_address(email):
            raise UserAlreadyExistsByEmailError(email)

        institution = self.institution_repository.find_by_id(input_data.institution_id)
        if institution is None:
            raise InstitutionNotExistError(input_data.institution_id)

        roles = self._resolve_roles(input_data.role_ids, institution.id)

        user = User.create(
            email_address=email,
            first_name=input_data.first_name,
            last_name=input_data.last_name,
            institution=institution,
            roles=roles,
            phone_number=input_data.phone_number,
            city=input_data.city,
        )
        self.user_repository.save(user)
        logger.info(
            "User created",
            extra={"user_id": str(user.id), "role_count": len(roles)},
        )
        return user
