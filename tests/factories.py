"""
Name: Test Data Factories

Responsibilities:
  - Build valid domain objects with overridable fields
"""

from datetime import datetime
from uuid import UUID, uuid4

from backoffice.domain.entities import (
    Assignment,
    AssignmentStatus,
    Institution,
    LoginAttempt,
    Password,
    Permission,
    PhoneNumber,
    Point,
    Role,
    RoleStatus,
    User,
    UserStatus,
)


def make_permission(name: str) -> Permission:
    return Permission(id=uuid4(), name=name)


def make_institution(name: str = "Volunteer Foundation") -> Institution:
    return Institution(id=uuid4(), name=name)


def make_role(
    *,
    institution_id: UUID,
    name: str = "Operator",
    status: RoleStatus = RoleStatus.ACTIVE,
    permissions: tuple[Permission, ...] | None = None,
    created_at: datetime | None = None,
) -> Role:
    return Role(
        id=uuid4(),
        name=name,
        institution_id=institution_id,
        status=status,
        permissions=frozenset(
            permissions if permissions is not None else (make_permission("role:list"),)
        ),
        created_at=created_at,
    )


def make_user(
    *,
    institution: Institution | None,
    status: UserStatus = UserStatus.ACTIVE,
    roles: tuple[Role, ...] = (),
    hashed_password: str = "hashed",
    last_login_at: datetime | None = None,
    email_address: str = "ada@example.org",
) -> User:
    return User(
        id=uuid4(),
        email_address=email_address,
        first_name="Ada",
        last_name="Lovelace",
        status=status,
        phone_number=PhoneNumber(country_code="90", line_number="5551234567"),
        city="Ankara",
        password=Password(id=uuid4(), hashed_value=hashed_password),
        login_attempt=LoginAttempt(id=uuid4(), last_login_at=last_login_at),
        roles=frozenset(roles),
        institution=institution,
    )


def make_assignment(
    *,
    institution_id: UUID,
    status: AssignmentStatus = AssignmentStatus.AVAILABLE,
    phone_number: PhoneNumber | None = None,
    first_name: str = "Grace",
    created_at: datetime | None = None,
) -> Assignment:
    return Assignment(
        id=uuid4(),
        institution_id=institution_id,
        description="Deliver water",
        first_name=first_name,
        last_name="Hopper",
        phone_number=phone_number
        or PhoneNumber(country_code="90", line_number="5550000000"),
        point=Point(latitude=39.93, longitude=32.86),
        status=status,
        created_at=created_at,
    )
