"""
Name: List Active Institutions Use Case

Responsibilities:
  - Return ACTIVE institutions ordered by name (public summary list)

Collaborators:
  - domain.repositories.InstitutionRepository
"""

from ...domain.entities import Institution, InstitutionStatus
from ...domain.repositories import InstitutionRepository


class ListActiveInstitutionsUseCase:
    """R: Active institutions, name ASC."""

    def __init__(self, repository: InstitutionRepository):
        self.repository = repository

    def execute(self) -> list[Institution]:
        return self.repository.find_all_by_status_order_by_name_asc(
            InstitutionStatus.ACTIVE
        )
