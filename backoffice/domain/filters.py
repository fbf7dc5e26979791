"""
Name: Listing Filters

Responsibilities:
  - Describe per-resource listing filters as optional-field values
  - Translate a filter into storage-neutral criteria (AND-ed)
  - Pin a filter to the caller's institution

Collaborators:
  - infrastructure.repositories.in_memory: evaluates criteria in Python
  - infrastructure.repositories.postgres: renders criteria to parameterized SQL
  - application.use_cases: calls scoped_to before any repository call

Constraints:
  - Absent (None) fields contribute no criterion
  - Field names in criteria are entity attribute names, not column names
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any
from uuid import UUID

from ..exceptions import AuthorizationDeniedError
from .entities import AssignmentStatus, PhoneNumber, RoleStatus


class Operator(str, Enum):
    EQ = "EQ"
    IN = "IN"
    CONTAINS = "CONTAINS"


@dataclass(frozen=True, slots=True)
class Criterion:
    """R: One predicate `field <operator> value`."""

    field: str
    operator: Operator
    value: Any


def _check_scope(current: UUID | None, institution_id: UUID) -> None:
    if current is not None and current != institution_id:
        raise AuthorizationDeniedError(
            f"filter institution is outside the caller scope! institutionId:{current}"
        )


@dataclass(frozen=True, slots=True)
class RoleFilter:
    """R: Role listing filter. name matches as a case-insensitive substring."""

    name: str | None = None
    statuses: frozenset[RoleStatus] | None = None
    institution_id: UUID | None = None

    def criteria(self) -> list[Criterion]:
        result: list[Criterion] = []
        if self.institution_id is not None:
            result.append(Criterion("institution_id", Operator.EQ, self.institution_id))
        if self.name:
            result.append(Criterion("name", Operator.CONTAINS, self.name))
        if self.statuses:
            result.append(Criterion("status", Operator.IN, frozenset(self.statuses)))
        return result

    def scoped_to(self, institution_id: UUID) -> RoleFilter:
        """
        R: Return a copy pinned to institution_id.

        Raises:
            AuthorizationDeniedError: the filter already names another institution
        """
        _check_scope(self.institution_id, institution_id)
        return replace(self, institution_id=institution_id)


@dataclass(frozen=True, slots=True)
class AssignmentFilter:
    """R: Assignment listing filter: statuses and/or exact phone number."""

    statuses: frozenset[AssignmentStatus] | None = None
    phone_number: PhoneNumber | None = None
    institution_id: UUID | None = None

    def criteria(self) -> list[Criterion]:
        result: list[Criterion] = []
        if self.institution_id is not None:
            result.append(Criterion("institution_id", Operator.EQ, self.institution_id))
        if self.statuses:
            result.append(Criterion("status", Operator.IN, frozenset(self.statuses)))
        if self.phone_number is not None:
            result.append(Criterion("phone_number", Operator.EQ, self.phone_number))
        return result

    def scoped_to(self, institution_id: UUID) -> AssignmentFilter:
        _check_scope(self.institution_id, institution_id)
        return replace(self, institution_id=institution_id)
