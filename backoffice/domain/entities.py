"""
Name: Domain Entities

Responsibilities:
  - Define the RBAC model (Permission, Role, User and its owned parts)
  - Define tenant and listed resources (Institution, Assignment)
  - Expose lifecycle transitions as named methods

Collaborators:
  - domain.base.IdentifiedById: equality by id
  - domain.claims: reads User to build session claims

Constraints:
  - No dependencies on infrastructure or frameworks
  - Frozen dataclasses: transitions return an updated copy, there are no setters
  - Invariants are validated at construction time

Notes:
  - User lifecycle transitions are permissive (any status to any
    status); business gating lives in application.use_cases
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable
from uuid import UUID, uuid4

from .base import IdentifiedById


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Status enums
# ---------------------------------------------------------------------------


class RoleStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PASSIVE = "PASSIVE"
    DELETED = "DELETED"


class UserStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PASSIVE = "PASSIVE"
    DELETED = "DELETED"
    NOT_VERIFIED = "NOT_VERIFIED"


class InstitutionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PASSIVE = "PASSIVE"
    DELETED = "DELETED"


class AssignmentStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    RESERVED = "RESERVED"
    ASSIGNED = "ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PhoneNumber:
    """R: Phone number split into country code and line number."""

    country_code: str
    line_number: str

    def __post_init__(self) -> None:
        if not self.country_code.isdigit() or not self.line_number.isdigit():
            raise ValueError("phone number parts must contain digits only")

    def __str__(self) -> str:
        return f"+{self.country_code}{self.line_number}"


@dataclass(frozen=True, slots=True)
class Point:
    """R: Geographic point (WGS84)."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")


@dataclass(frozen=True, slots=True)
class Permission:
    """R: A named capability (e.g. "role:create"). Value equality."""

    id: UUID
    name: str

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("permission name must not be blank")


# ---------------------------------------------------------------------------
# Role
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, eq=False)
class Role(IdentifiedById):
    """
    R: A named set of permissions scoped to one institution.

    Invariants:
      - an ACTIVE role always has at least one permission
      - status only moves through activate/passivate/delete
    """

    id: UUID
    name: str
    institution_id: UUID
    status: RoleStatus = RoleStatus.ACTIVE
    permissions: frozenset[Permission] = field(default_factory=frozenset)
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("role name must not be blank")
        if self.status == RoleStatus.ACTIVE and not self.permissions:
            raise ValueError("an active role must grant at least one permission")

    @classmethod
    def create(
        cls,
        *,
        name: str,
        institution_id: UUID,
        permissions: Iterable[Permission],
    ) -> Role:
        """R: New ACTIVE role with a generated id."""
        return cls(
            id=uuid4(),
            name=name.strip(),
            institution_id=institution_id,
            status=RoleStatus.ACTIVE,
            permissions=frozenset(permissions),
            created_at=_utcnow(),
        )

    @property
    def is_active(self) -> bool:
        return self.status == RoleStatus.ACTIVE

    @property
    def is_passive(self) -> bool:
        return self.status == RoleStatus.PASSIVE

    @property
    def is_deleted(self) -> bool:
        return self.status == RoleStatus.DELETED

    @property
    def permission_names(self) -> frozenset[str]:
        return frozenset(p.name for p in self.permissions)

    def activate(self) -> Role:
        return replace(self, status=RoleStatus.ACTIVE)

    def passivate(self) -> Role:
        return replace(self, status=RoleStatus.PASSIVE)

    def delete(self) -> Role:
        return replace(self, status=RoleStatus.DELETED)


# ---------------------------------------------------------------------------
# Institution
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, eq=False)
class Institution(IdentifiedById):
    """R: Tenant reference. Users hold it read-only."""

    id: UUID
    name: str
    status: InstitutionStatus = InstitutionStatus.ACTIVE


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, eq=False)
class Password(IdentifiedById):
    """R: Credential owned 1:1 by a User. The hash is kept out of repr."""

    id: UUID
    hashed_value: str = field(repr=False)


@dataclass(frozen=True, slots=True, eq=False)
class LoginAttempt(IdentifiedById):
    """R: Last successful login, owned 1:1 by a User."""

    id: UUID
    last_login_at: datetime | None = None

    @classmethod
    def new(cls) -> LoginAttempt:
        return cls(id=uuid4(), last_login_at=None)

    def success(self) -> LoginAttempt:
        """Stamp the current instant. Repeated calls advance the timestamp."""
        return replace(self, last_login_at=_utcnow())


@dataclass(frozen=True, slots=True, eq=False)
class User(IdentifiedById):
    """
    R: Back-office user.

    Exactly one UserStatus holds at any time. Status changes go through
    activate/passivate/delete/not_verify, which do not check the prior state.
    """

    id: UUID
    email_address: str
    first_name: str
    last_name: str
    status: UserStatus = UserStatus.NOT_VERIFIED
    phone_number: PhoneNumber | None = None
    city: str | None = None
    password: Password | None = None
    login_attempt: LoginAttempt | None = None
    roles: frozenset[Role] = field(default_factory=frozenset)
    institution: Institution | None = None
    created_at: datetime | None = None

    @classmethod
    def create(
        cls,
        *,
        email_address: str,
        first_name: str,
        last_name: str,
        institution: Institution,
        roles: Iterable[Role],
        phone_number: PhoneNumber | None = None,
        city: str | None = None,
    ) -> User:
        """R: New NOT_VERIFIED user without a password; the password is set later."""
        return cls(
            id=uuid4(),
            email_address=email_address.strip().lower(),
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            status=UserStatus.NOT_VERIFIED,
            phone_number=phone_number,
            city=city,
            login_attempt=LoginAttempt.new(),
            roles=frozenset(roles),
            institution=institution,
            created_at=_utcnow(),
        )

    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    def is_passive(self) -> bool:
        return self.status == UserStatus.PASSIVE

    def is_deleted(self) -> bool:
        return self.status == UserStatus.DELETED

    def is_not_verified(self) -> bool:
        return self.status == UserStatus.NOT_VERIFIED

    def activate(self) -> User:
        return replace(self, status=UserStatus.ACTIVE)

    def passivate(self) -> User:
        return replace(self, status=UserStatus.PASSIVE)

    def delete(self) -> User:
        return replace(self, status=UserStatus.DELETED)

    def not_verify(self) -> User:
        return replace(self, status=UserStatus.NOT_VERIFIED)

    def record_successful_login(self) -> User:
        """R: Advance (or create) the login attempt to now."""
        attempt = self.login_attempt or LoginAttempt.new()
        return replace(self, login_attempt=attempt.success())

    def permission_names(self) -> frozenset[str]:
        """R: Union of every role's permission names, deduplicated by name."""
        return frozenset(
            permission.name for role in self.roles for permission in role.permissions
        )

    @property
    def institution_id(self) -> UUID | None:
        return self.institution.id if self.institution else None


# ---------------------------------------------------------------------------
# Assignment
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, eq=False)
class Assignment(IdentifiedById):
    """R: A field task owned by an institution, optionally taken by a user."""

    id: UUID
    institution_id: UUID
    description: str
    first_name: str
    last_name: str
    phone_number: PhoneNumber
    point: Point
    status: AssignmentStatus = AssignmentStatus.AVAILABLE
    user_id: UUID | None = None
    created_at: datetime | None = None
