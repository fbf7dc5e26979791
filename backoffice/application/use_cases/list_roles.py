"""
Name: List Roles Use Case

Responsibilities:
  - Paged, filtered role listing pinned to the caller's institution

Collaborators:
  - domain.repositories.RoleRepository
"""

from uuid import UUID

from ...domain.entities import Role
from ...domain.filters import RoleFilter
from ...domain.repositories import RoleRepository
from ...pagination import Page, Pageable


class ListRolesUseCase:
    """R: List roles of one institution."""

    def __init__(self, repository: RoleRepository):
        self.repository = repository

    def execute(
        self,
        *,
        pageable: Pageable,
        query_filter: RoleFilter | None,
        institution_id: UUID,
    ) -> Page[Role]:
        # R: Raises AuthorizationDeniedError before touching storage
        scoped = (query_filter or RoleFilter()).scoped_to(institution_id)
        return self.repository.find_all(pageable, scoped)
