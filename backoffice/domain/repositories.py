"""
Name: Domain Repository Interfaces

Responsibilities:
  - Define the generic filtered-listing port (ListPort)
  - Define per-resource persistence contracts (roles, permissions, users,
    assignments, institutions)

Collaborators:
  - domain.entities, domain.filters, pagination
  - Implementations in infrastructure.repositories.{in_memory,postgres}

Constraints:
  - Pure interfaces (Protocol), no implementation
  - Storage-agnostic; must not leak SQL or driver types
  - Lookups return None on miss; use cases decide which NotExist error to raise

Notes:
  - Using typing.Protocol for structural subtyping (duck typing)
  - Enables testing with Mock(spec=...) repositories
"""

from typing import Optional, Protocol, Sequence, TypeVar
from uuid import UUID

from ..pagination import Page, Pageable
from .entities import (
    Assignment,
    Institution,
    InstitutionStatus,
    Permission,
    Role,
    User,
)
from .filters import AssignmentFilter, RoleFilter

T_co = TypeVar("T_co", covariant=True)
F_contra = TypeVar("F_contra", contravariant=True)


class ListPort(Protocol[T_co, F_contra]):
    """
    R: Filtered, paged listing over one resource.

    Every non-null filter field is AND-ed. Page metadata reflects the
    filtered total, not the size of the returned content.
    """

    def find_all(self, pageable: Pageable, query_filter: F_contra) -> Page[T_co]:
        ...


class RoleRepository(ListPort[Role, RoleFilter], Protocol):
    """R: Roles, always addressed within one institution."""

    def find_all_by_institution_id(self, institution_id: UUID) -> list[Role]:
        """R: Every role of the institution, unpaged, ordered by name."""
        ...

    def find_by_id_and_institution_id(
        self, role_id: UUID, institution_id: UUID
    ) -> Optional[Role]:
        ...

    def exists_by_name_and_institution_id(
        self, name: str, institution_id: UUID
    ) -> bool:
        """R: Case-insensitive name match within the institution."""
        ...

    def save(self, role: Role) -> None:
        """R: Insert or replace the role (permissions included)."""
        ...


class PermissionRepository(Protocol):
    """R: Global permission catalogue (not institution scoped)."""

    def find_all(self) -> list[Permission]:
        ...

    def find_all_by_ids(self, permission_ids: Sequence[UUID]) -> list[Permission]:
        """R: Permissions whose id is in permission_ids; unknown ids are skipped."""
        ...

    def save_all(self, permissions: Sequence[Permission]) -> None:
        """R: Insert missing catalogue entries; existing names are left untouched."""
        ...


class UserRepository(Protocol):
    def find_by_email_address(self, email_address: str) -> Optional[User]:
        ...

    def exists_by_email_address(self, email_address: str) -> bool:
        """R: Case-insensitive match across every institution."""
        ...

    def find_by_id_and_institution_id(
        self, user_id: UUID, institution_id: UUID
    ) -> Optional[User]:
        ...

    def save(self, user: User) -> None:
        """
        R: Insert a new user or persist status, role and login attempt changes.

        Raises:
            UserAlreadyExistsByEmailError: a concurrent insert took the email
        """
        ...


class AssignmentRepository(ListPort[Assignment, AssignmentFilter], Protocol):
    def find_by_id_and_institution_id(
        self, assignment_id: UUID, institution_id: UUID
    ) -> Optional[Assignment]:
        ...


class InstitutionRepository(Protocol):
    def find_all_by_status_order_by_name_asc(
        self, status: InstitutionStatus
    ) -> list[Institution]:
        ...

    def find_by_id(self, institution_id: UUID) -> Optional[Institution]:
        ...
